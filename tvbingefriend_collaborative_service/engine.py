"""Function-style entry points over a bare rating store.

Hosts that only need the core (populate, normalize once, recommend) can use
these without constructing a service.
"""
from typing import Optional

from tvbingefriend_collaborative_service.config import RecommenderConfig
from tvbingefriend_collaborative_service.ml.normalizer import Normalizer
from tvbingefriend_collaborative_service.ml.rating_store import RatingStore
from tvbingefriend_collaborative_service.services.collaborative_service import (
    CollaborativeRecommendationService,
    Recommendation,
)


def new_rating_store() -> RatingStore:
    return RatingStore()


def add_rating(store: RatingStore, user: int, item: int, rating: float) -> None:
    store.add_rating(user, item, rating)


def normalize_all_users(store: RatingStore) -> int:
    return Normalizer().normalize_all_users(store)


def recommend(
        store: RatingStore,
        user: int,
        count: int,
        config: Optional[RecommenderConfig] = None
) -> Optional[Recommendation]:
    """
    Recommend exactly `count` unrated items for `user`, or None.

    Uses default thresholds (support 5, like threshold 0.1) unless a config is given.
    """
    service = CollaborativeRecommendationService(store=store, config=config or RecommenderConfig())
    return service.recommend(user, count)
