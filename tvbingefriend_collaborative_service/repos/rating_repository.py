"""Repository for managing raw user ratings in the database."""

import logging
from datetime import UTC, datetime
from typing import Dict, List

from sqlalchemy.orm import Session

from tvbingefriend_collaborative_service.ml.rating_store import RatingStore
from tvbingefriend_collaborative_service.models import UserRating

logger = logging.getLogger(__name__)


class RatingRepository:
    """
    Repository for managing raw user ratings in the database.
    """

    def __init__(self, db: Session):
        self.db = db

    def store_rating(self, user_id: int, item_id: int, rating: float) -> UserRating:
        """
        Store or overwrite a single rating.

        Args:
            user_id: User ID
            item_id: Item ID
            rating: Raw rating value

        Returns:
            UserRating object
        """
        existing = (
            self.db.query(UserRating)
            .filter(UserRating.user_id == user_id, UserRating.item_id == item_id)
            .first()
        )

        if existing:
            # Last write wins
            existing.rating = rating  # type: ignore[assignment]
            existing.rated_at = datetime.now(UTC)  # type: ignore[assignment]
            record = existing
        else:
            record = UserRating(
                user_id=user_id,
                item_id=item_id,
                rating=rating,
                rated_at=datetime.now(UTC),
            )
            self.db.add(record)

        self.db.commit()
        self.db.refresh(record)

        return record

    def bulk_store_ratings(
            self,
            ratings: List[Dict],
            batch_size: int = 1000,
            clear_existing: bool = True
    ) -> int:
        """
        Store many ratings in bulk.

        Duplicate (user_id, item_id) pairs in the input keep the last value.

        Args:
            ratings: List of dicts with keys user_id, item_id, rating
            batch_size: Number of records to insert per batch
            clear_existing: Whether to clear existing ratings before inserting

        Returns:
            Number of ratings stored
        """
        if clear_existing:
            logger.info("Clearing existing ratings...")
            self.db.query(UserRating).delete()
            self.db.commit()

        latest: Dict[tuple, float] = {}
        for item in ratings:
            latest[(int(item['user_id']), int(item['item_id']))] = float(item['rating'])

        records = [
            UserRating(user_id=user_id, item_id=item_id, rating=rating, rated_at=datetime.now(UTC))
            for (user_id, item_id), rating in latest.items()
        ]

        total_count = 0
        logger.info(f"Inserting {len(records)} rating records...")

        for i in range(0, len(records), batch_size):
            batch = records[i:i + batch_size]
            self.db.bulk_save_objects(batch)
            self.db.commit()
            total_count += len(batch)

            if (i + batch_size) % 10000 == 0:
                logger.info(f"  Inserted {total_count}/{len(records)} records...")

        logger.info(f"✓ Stored {total_count} ratings")
        return total_count

    def get_user_ratings(self, user_id: int) -> Dict[int, float]:
        """Get a user's ratings as item ID -> rating."""
        rows = (
            self.db.query(UserRating.item_id, UserRating.rating)
            .filter(UserRating.user_id == user_id)
            .all()
        )
        return {item_id: rating for item_id, rating in rows}

    # noinspection PyTypeChecker
    def get_all_ratings(self) -> List[UserRating]:
        """Get every stored rating ordered by user then item."""
        return (
            self.db.query(UserRating)
            .order_by(UserRating.user_id, UserRating.item_id)
            .all()
        )

    def load_into_store(self, store: RatingStore) -> int:
        """
        Copy every stored rating into an in-memory rating store.

        Args:
            store: Rating store to populate

        Returns:
            Number of ratings loaded
        """
        count = 0
        for record in self.get_all_ratings():
            store.add_rating(record.user_id, record.item_id, record.rating)
            count += 1

        logger.info(f"✓ Loaded {count} ratings for {len(store)} users from database")
        return count

    def count_ratings(self, user_id: int | None = None) -> int:
        """
        Count rating records.

        Args:
            user_id: If provided, count for specific user. Otherwise count all.

        Returns:
            Number of rating records
        """
        query = self.db.query(UserRating)

        if user_id is not None:
            query = query.filter(UserRating.user_id == user_id)

        return query.count()

    def delete_user_ratings(self, user_id: int) -> int:
        """
        Delete all ratings for a user.

        Args:
            user_id: User ID to delete ratings for

        Returns:
            Number of deleted records
        """
        count = (
            self.db.query(UserRating)
            .filter(UserRating.user_id == user_id)
            .delete()
        )
        self.db.commit()

        logger.info(f"Deleted {count} ratings for user {user_id}")
        return count
