"""Shared test fixtures and configuration for pytest."""
import pytest
import pandas as pd
from pathlib import Path
from typing import Dict, List
import tempfile
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from tvbingefriend_collaborative_service.config import RecommenderConfig
from tvbingefriend_collaborative_service.ml.rating_store import RatingStore
from tvbingefriend_collaborative_service.models.base import Base
from tvbingefriend_collaborative_service.models.user_rating import UserRating


# ===== Database Fixtures =====

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    """Create a database session for testing."""
    SessionLocal = sessionmaker(bind=test_db_engine)
    session = SessionLocal()
    yield session
    session.close()


# ===== Sample Data Fixtures =====

@pytest.fixture
def sample_ratings_list() -> List[Dict]:
    """Raw ratings on a 1-5 scale for three users."""
    return [
        {'user_id': 1, 'item_id': 10, 'rating': 5.0},
        {'user_id': 1, 'item_id': 20, 'rating': 3.0},
        {'user_id': 1, 'item_id': 30, 'rating': 1.0},
        {'user_id': 2, 'item_id': 10, 'rating': 4.0},
        {'user_id': 2, 'item_id': 20, 'rating': 2.0},
        {'user_id': 3, 'item_id': 40, 'rating': 3.5},
    ]


@pytest.fixture
def sample_ratings_df(sample_ratings_list) -> pd.DataFrame:
    """Sample ratings DataFrame for testing."""
    return pd.DataFrame(sample_ratings_list)


@pytest.fixture
def sample_store(sample_ratings_list) -> RatingStore:
    """Rating store populated with the raw sample ratings."""
    store = RatingStore()
    for rating in sample_ratings_list:
        store.add_rating(rating['user_id'], rating['item_id'], rating['rating'])
    return store


def _build_neighbor_store(item_100_voters: int) -> RatingStore:
    """
    Users 2-6 share user 1's taste on items 1-3; the first `item_100_voters`
    of them also like item 100, the rest rate it below the like threshold.
    User 7 shares nothing with user 1.
    """
    store = RatingStore()
    shared = {1: 0.5, 2: -0.5, 3: 1.0}

    for item, rating in shared.items():
        store.add_rating(1, item, rating)

    for idx, user in enumerate(range(2, 7)):
        for item, rating in shared.items():
            store.add_rating(user, item, rating)
        store.add_rating(user, 100, 0.8 if idx < item_100_voters else 0.05)

    store.add_rating(7, 50, 1.0)
    return store


@pytest.fixture
def neighbor_store() -> RatingStore:
    """Five close neighbors of user 1 all like item 100 at 0.8."""
    return _build_neighbor_store(item_100_voters=5)


@pytest.fixture
def weak_neighbor_store() -> RatingStore:
    """Only four close neighbors of user 1 like item 100."""
    return _build_neighbor_store(item_100_voters=4)


@pytest.fixture
def default_config() -> RecommenderConfig:
    """Default recommender thresholds."""
    return RecommenderConfig()


# ===== Temporary Directory Fixtures =====

@pytest.fixture
def temp_data_dir():
    """Create a temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def ratings_csv(temp_data_dir, sample_ratings_df) -> Path:
    """Write the sample ratings to a CSV file."""
    path = temp_data_dir / 'ratings.csv'
    sample_ratings_df.to_csv(path, index=False)
    return path


# ===== Configuration Fixtures =====

@pytest.fixture
def mock_config(monkeypatch):
    """Mock configuration values."""
    monkeypatch.setenv('DATABASE_URL', 'sqlite:///:memory:')
    monkeypatch.setenv('RATING_SERVICE_URL', 'http://localhost:7074/api')
    monkeypatch.setenv('CF_SUPPORT', '5')
    monkeypatch.setenv('CF_LIKE_THRESHOLD', '0.1')


# ===== Repository Fixtures =====

@pytest.fixture
def rating_repository(test_db_session):
    """Create RatingRepository with test database session."""
    from tvbingefriend_collaborative_service.repos import RatingRepository
    return RatingRepository(test_db_session)


@pytest.fixture
def sample_rating_records(test_db_session, sample_ratings_list) -> List[UserRating]:
    """Create sample UserRating records in the test database."""
    records = [UserRating(**rating) for rating in sample_ratings_list]

    for record in records:
        test_db_session.add(record)
    test_db_session.commit()

    return records
