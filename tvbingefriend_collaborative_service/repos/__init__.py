"""Repository classes"""

from tvbingefriend_collaborative_service.repos.rating_repository import RatingRepository

__all__ = [
    "RatingRepository",
]
