"""Service for user-based collaborative filtering recommendations."""
from typing import Dict, List, NamedTuple, Optional
import logging

import pandas as pd

from tvbingefriend_collaborative_service.config import RecommenderConfig, get_recommender_config
from tvbingefriend_collaborative_service.ml.neighbor_ranker import NeighborRanker, SimilarityPair
from tvbingefriend_collaborative_service.ml.normalizer import Normalizer
from tvbingefriend_collaborative_service.ml.rating_store import RatingStore
from tvbingefriend_collaborative_service.ml.similarity_computer import SimilarityComputer
from tvbingefriend_collaborative_service.repos import RatingRepository
from tvbingefriend_collaborative_service.services.rating_loader_service import ratings_from_dataframe

logger = logging.getLogger(__name__)


class Recommendation(NamedTuple):
    """Recommended items with predicted ratings, aligned by index."""

    items: List[int]
    predicted: List[float]


class CollaborativeRecommendationService:
    """
    Service for user-based collaborative filtering.

    Holds the rating store and recommends items that enough of a user's most
    similar neighbors liked.
    """

    def __init__(
            self,
            store: Optional[RatingStore] = None,
            config: Optional[RecommenderConfig] = None,
            similarity_computer: Optional[SimilarityComputer] = None
    ):
        """
        Initialize the recommendation service.

        Args:
            store: Rating store to serve from (empty store if omitted)
            config: Support and like thresholds (read from config if omitted)
            similarity_computer: Similarity implementation used for neighbor ranking
        """
        self.store = store if store is not None else RatingStore()
        self.config = config or get_recommender_config()
        self.similarity_computer = similarity_computer or SimilarityComputer()
        self.normalizer = Normalizer()
        self.ranker = NeighborRanker(self.store, self.similarity_computer)
        self._normalized = False

        logger.info("Initialized CollaborativeRecommendationService")
        logger.info(f"Support: {self.config.support}, like threshold: {self.config.like_threshold}")

    def add_rating(self, user: int, item: int, rating: float) -> None:
        """Insert or overwrite a rating."""
        self.store.add_rating(user, item, rating)

    def load_ratings(self, df: pd.DataFrame) -> int:
        """
        Add ratings from a DataFrame with user_id, item_id and rating columns.

        Returns:
            Number of users in the store after loading
        """
        ratings_from_dataframe(df, store=self.store)
        return len(self.store)

    def load_ratings_from_db(self) -> int:
        """
        Add every rating stored in the database.

        Returns:
            Number of ratings loaded
        """
        from tvbingefriend_collaborative_service.models.database import SessionLocal

        db = SessionLocal()
        try:
            repo = RatingRepository(db)
            return repo.load_into_store(self.store)
        finally:
            db.close()

    def normalize_all_users(self) -> int:
        """
        Rescale every user's ratings into [-1, 1].

        Call once, after all raw ratings are loaded.

        Returns:
            Number of user rows rescaled
        """
        if self._normalized:
            logger.warning("Ratings were already normalized; normalizing again")

        count = self.normalizer.normalize_all_users(self.store)
        self._normalized = True
        return count

    def similar_users(self, user: int, n: int = 10) -> List[SimilarityPair]:
        """Get the `n` users most similar to `user`."""
        return self.ranker.top_neighbors(user, n)

    def recommend(self, user: int, count: int) -> Optional[Recommendation]:
        """
        Recommend `count` items the user has not rated.

        Neighbors are walked from most to least similar, each neighbor's items in
        ascending item order. Every neighbor rating at or above the like threshold
        is a vote for that item. An item is recommended the moment it collects
        exactly `support` votes, with the mean of those votes as its predicted
        rating; later votes never change it. Results come back in the order items
        reached support.

        Args:
            user: Target user ID
            count: Exact number of items wanted

        Returns:
            Recommendation with exactly `count` items, or None if fewer qualify
        """
        if count <= 0:
            return None

        if user not in self.store:
            logger.warning(f"User {user} has no ratings; neighbors are ranked by user ID only")

        support = self.config.support
        like_threshold = self.config.like_threshold
        user_row = self.store.get_row(user)

        vote_counts: Dict[int, int] = {}
        vote_sums: Dict[int, float] = {}
        items: List[int] = []
        predicted: List[float] = []

        for neighbor in self.ranker.ranked_neighbors(user):
            neighbor_row = self.store.get_row(neighbor.user)
            for item in sorted(neighbor_row):
                if item in user_row:
                    continue  # Already rated, can't recommend

                rating = neighbor_row[item]
                if rating < like_threshold:
                    continue

                vote_counts[item] = vote_counts.get(item, 0) + 1
                vote_sums[item] = vote_sums.get(item, 0.0) + rating

                if vote_counts[item] == support:
                    items.append(item)
                    predicted.append(vote_sums[item] / support)

                    if len(items) == count:
                        logger.debug(f"Recommended {items} to user {user}")
                        return Recommendation(items=items, predicted=predicted)

        logger.debug(f"Only {len(items)} of {count} items reached support {support} for user {user}")
        return None

    def render_user_ratings(self, user: int) -> str:
        """Diagnostic text rendering of a user's ratings."""
        return self.store.render_row(user)

    def get_stats(self) -> Dict:
        """Get statistics about the rating data and user similarity."""
        similarity_matrix, _ = self.similarity_computer.compute_similarity_matrix(self.store)

        return {
            'users': len(self.store),
            'items': len(self.store.items()),
            'ratings': self.store.num_ratings(),
            'normalized': self._normalized,
            'similarity_stats': self.similarity_computer.get_similarity_statistics(similarity_matrix),
            'thresholds': {
                'support': self.config.support,
                'like_threshold': self.config.like_threshold
            }
        }
