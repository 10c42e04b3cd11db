"""Service classes"""

from .collaborative_service import CollaborativeRecommendationService, Recommendation
from .rating_loader_service import RatingDataLoader, load_ratings_csv, ratings_from_dataframe

__all__ = [
    "CollaborativeRecommendationService",
    "Recommendation",
    "RatingDataLoader",
    "load_ratings_csv",
    "ratings_from_dataframe",
]
