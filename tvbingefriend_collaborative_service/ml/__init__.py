"""Collaborative filtering algorithms"""

from tvbingefriend_collaborative_service.ml.rating_store import RatingStore, format_row
from tvbingefriend_collaborative_service.ml.normalizer import Normalizer
from tvbingefriend_collaborative_service.ml.similarity_computer import SimilarityComputer
from tvbingefriend_collaborative_service.ml.neighbor_ranker import NeighborRanker, SimilarityPair

__all__ = [
    "RatingStore",
    "format_row",
    "Normalizer",
    "SimilarityComputer",
    "NeighborRanker",
    "SimilarityPair",
]
