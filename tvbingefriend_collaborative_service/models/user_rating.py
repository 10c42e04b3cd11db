"""Raw user ratings as reported by the rating service."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Float, Index, Integer

from tvbingefriend_collaborative_service.models.base import Base


class UserRating(Base):
    """One user's rating of one item.

    Ratings are stored on the caller's raw scale. Normalization happens in
    memory after loading, never in the table.
    """

    __tablename__ = "user_ratings"

    # Composite primary key
    user_id = Column(Integer, primary_key=True)
    item_id = Column(Integer, primary_key=True)

    rating = Column(Float, nullable=False)

    rated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Index for fast per-user lookups
    __table_args__ = (Index("idx_user_id", "user_id"),)

    def __repr__(self):
        return f"<UserRating(user_id={self.user_id}, item_id={self.item_id}, rating={self.rating:.1f})>"
