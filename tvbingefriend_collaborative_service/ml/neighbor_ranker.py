"""Rank other users by similarity to a target user."""
from typing import List, NamedTuple, Optional
import logging

from tvbingefriend_collaborative_service.ml.rating_store import RatingStore
from tvbingefriend_collaborative_service.ml.similarity_computer import SimilarityComputer

logger = logging.getLogger(__name__)


class SimilarityPair(NamedTuple):
    """A user and its similarity to some implicit target user."""

    user: int
    similarity: float

    def __str__(self):
        return f"{{similarity={self.similarity:.1f} user={self.user}}}"


class NeighborRanker:
    """Order every other user by descending similarity to a target."""

    def __init__(self, store: RatingStore, similarity_computer: Optional[SimilarityComputer] = None):
        self.store = store
        self.similarity_computer = similarity_computer or SimilarityComputer()

    def ranked_neighbors(self, user: int) -> List[SimilarityPair]:
        """
        Rank all other known users by similarity to `user`.

        Ties are broken by ascending user ID.

        Args:
            user: Target user ID

        Returns:
            SimilarityPairs sorted by descending similarity
        """
        neighbors = [
            SimilarityPair(other, self.similarity_computer.cosine_similarity(self.store, user, other))
            for other in self.store.users()
            if other != user
        ]
        neighbors.sort(key=lambda pair: (-pair.similarity, pair.user))

        logger.debug(f"Ranked {len(neighbors)} neighbors for user {user}")
        return neighbors

    def top_neighbors(self, user: int, n: int = 10) -> List[SimilarityPair]:
        """Get the `n` most similar users."""
        return self.ranked_neighbors(user)[:n]
