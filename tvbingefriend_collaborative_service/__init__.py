"""User-based collaborative filtering for TV Binge Friend"""

from tvbingefriend_collaborative_service.config import RecommenderConfig
from tvbingefriend_collaborative_service.engine import (
    add_rating,
    new_rating_store,
    normalize_all_users,
    recommend,
)
from tvbingefriend_collaborative_service.ml.rating_store import RatingStore, format_row
from tvbingefriend_collaborative_service.services.collaborative_service import Recommendation

__all__ = [
    "RatingStore",
    "RecommenderConfig",
    "Recommendation",
    "add_rating",
    "format_row",
    "new_rating_store",
    "normalize_all_users",
    "recommend",
]
