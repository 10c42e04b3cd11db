"""SQLAlchemy models"""

from tvbingefriend_collaborative_service.models.base import Base
from tvbingefriend_collaborative_service.models.user_rating import UserRating

__all__ = [
    "Base",
    "UserRating",
]
