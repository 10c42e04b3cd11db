"""Per-user min-max rescaling of ratings into [-1, 1]."""
import numpy as np
import logging

from tvbingefriend_collaborative_service.ml.rating_store import RatingStore

logger = logging.getLogger(__name__)


def scale(min_rating: float, max_rating: float, value: float) -> float:
    """
    Map a value from [min_rating, max_rating] onto [-1.0, 1.0].

    Returns 0.0 when min_rating == max_rating.
    """
    range_size = max_rating - min_rating
    if range_size == 0:
        return 0.0
    return -1.0 + 2.0 * (value - min_rating) / range_size


# noinspection PyMethodMayBeStatic
class Normalizer:
    """Rescale each user's ratings independently into [-1, 1]."""

    def normalize_all_users(self, store: RatingStore) -> int:
        """
        Normalize every user row in place.

        Each row's minimum maps to -1.0 and its maximum to 1.0. A row holding a
        single distinct value maps every rating to 0.0; empty rows are left alone.
        Not meant to be called twice on the same data.

        Args:
            store: Rating store to rewrite

        Returns:
            Number of user rows rescaled
        """
        logger.info(f"Normalizing ratings for {len(store)} users...")

        normalized = 0
        for user, row in store.iter_rows():
            if not row:
                continue

            items = list(row.keys())
            values = np.fromiter((row[item] for item in items), dtype=np.float64, count=len(items))
            min_rating = float(values.min())
            max_rating = float(values.max())

            for item, value in zip(items, values):
                store.add_rating(user, item, scale(min_rating, max_rating, float(value)))
            normalized += 1

        logger.info(f"✓ Normalized {normalized} user rows")
        return normalized
