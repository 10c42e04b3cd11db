"""Load raw ratings from CSV files, DataFrames or the rating microservice"""
from pathlib import Path
from typing import List, Dict, Optional
import time
import logging

import pandas as pd
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from tvbingefriend_collaborative_service.config import get_service_url
from tvbingefriend_collaborative_service.ml.rating_store import RatingStore

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("user_id", "item_id", "rating")


def ratings_from_dataframe(df: pd.DataFrame, store: Optional[RatingStore] = None) -> RatingStore:
    """
    Populate a rating store from a DataFrame.

    Rows with missing values are dropped. Later rows overwrite earlier rows for
    the same (user_id, item_id).

    Args:
        df: DataFrame with user_id, item_id and rating columns
        store: Store to add to (a new one is created if omitted)

    Returns:
        The populated rating store
    """
    missing = set(REQUIRED_COLUMNS) - set(df.columns)
    if missing:
        raise ValueError(f"ratings missing required columns: {sorted(missing)}")

    if store is None:
        store = RatingStore()

    clean = df[list(REQUIRED_COLUMNS)].dropna()
    dropped = len(df) - len(clean)
    if dropped:
        logger.warning(f"Dropped {dropped} ratings with missing values")

    for user_id, item_id, rating in clean.itertuples(index=False, name=None):
        store.add_rating(int(user_id), int(item_id), float(rating))

    logger.info(f"✓ Loaded {len(clean)} ratings for {len(store)} users")
    return store


def load_ratings_csv(path: Path, store: Optional[RatingStore] = None) -> RatingStore:
    """
    Load ratings from a CSV file with user_id, item_id and rating columns.

    Args:
        path: CSV file path
        store: Store to add to (a new one is created if omitted)

    Returns:
        The populated rating store
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Ratings file not found: {path}")

    logger.info(f"Loading ratings from {path}...")
    df = pd.read_csv(path)
    return ratings_from_dataframe(df, store=store)


class RatingDataLoader:
    """Client for the rating microservice."""

    def __init__(self, rating_service_url: Optional[str] = None):
        # Default to localhost for development
        self.rating_service_url = rating_service_url or get_service_url('rating', 7074)

        # Configure session with retries
        self.session = requests.Session()
        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        # noinspection HttpUrlsUsage
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def get_user_ratings(self, user_id: int) -> List[Dict]:
        """Fetch all ratings made by one user"""
        url = f"{self.rating_service_url}/users/{user_id}/ratings"
        response = self.session.get(url, timeout=10)
        response.raise_for_status()
        return response.json()

    def get_all_ratings_bulk(self, offset: int = 0, limit: int = 1000) -> Dict:
        """
        Fetch ratings using the bulk endpoint with pagination.

        Returns:
            {
                "ratings": [{"user_id": 1, "item_id": 2, "rating": 4.5}, ...],
                "total": 12345,
                "offset": 0,
                "limit": 1000
            }
        """
        url = f"{self.rating_service_url}/get_ratings_bulk"
        params = {'offset': offset, 'limit': limit}
        response = self.session.get(url, params=params, timeout=10)
        response.raise_for_status()
        return response.json()

    def get_all_ratings(self, batch_size: int = 1000, max_ratings: Optional[int] = None) -> List[Dict]:
        """
        Fetch all ratings using pagination.

        Args:
            batch_size: Number of ratings per request
            max_ratings: Optional limit on total ratings to fetch (for testing)

        Returns:
            List of rating dictionaries
        """
        all_ratings: List[Dict] = []
        offset = 0

        logger.info(f"Fetching all ratings (batch size: {batch_size})...")

        while True:
            if max_ratings and len(all_ratings) >= max_ratings:
                logger.info(f"Reached max_ratings limit: {max_ratings}")
                break

            result = self.get_all_ratings_bulk(offset=offset, limit=batch_size)
            ratings = result.get('ratings', [])

            if not ratings:
                break

            all_ratings.extend(ratings)
            logger.info(f"  Loaded {len(all_ratings)} ratings...")

            # Fewer ratings than requested means we're at the end
            if len(ratings) < batch_size:
                break

            offset += batch_size
            time.sleep(0.1)  # Rate limiting

        if max_ratings:
            all_ratings = all_ratings[:max_ratings]

        logger.info(f"✓ Loaded {len(all_ratings)} total ratings")
        return all_ratings

    def load_into_store(self, store: Optional[RatingStore] = None, batch_size: int = 1000) -> RatingStore:
        """
        Fetch every rating from the service into a rating store.

        Args:
            store: Store to add to (a new one is created if omitted)
            batch_size: Number of ratings per request

        Returns:
            The populated rating store
        """
        ratings = self.get_all_ratings(batch_size=batch_size)
        return ratings_from_dataframe(
            pd.DataFrame(ratings, columns=list(REQUIRED_COLUMNS)),
            store=store
        )
