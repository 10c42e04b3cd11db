"""Compute user-user similarity from rating vectors."""
import math
import numpy as np
from typing import Dict, List, Tuple
from sklearn.metrics.pairwise import cosine_similarity
from scipy.sparse import csr_matrix
import logging

from tvbingefriend_collaborative_service.ml.rating_store import RatingStore

logger = logging.getLogger(__name__)


# noinspection PyMethodMayBeStatic
class SimilarityComputer:
    """
    Cosine similarity between users' rating vectors.

    Scores are reported as the absolute value of the cosine: a strongly
    anti-correlated user counts as a neighbor just as much as a strongly
    correlated one.
    """

    def cosine_similarity(self, store: RatingStore, user_a: int, user_b: int) -> float:
        """
        Compute |cos| between two users' rating vectors.

        Items missing from a row count as 0: only co-rated items contribute to
        the dot product, while every rated item contributes to its own user's norm.

        Args:
            store: Rating store to read
            user_a: First user ID
            user_b: Second user ID

        Returns:
            Similarity in [0, 1]; 0.0 if either user has zero norm
        """
        # Lower ID first so (a, b) and (b, a) sum in the same order
        if user_b < user_a:
            user_a, user_b = user_b, user_a

        row_a = store.get_row(user_a)
        row_b = store.get_row(user_b)

        numerator = 0.0
        sum_squares_a = 0.0
        for item in sorted(row_a):
            rating_a = row_a[item]
            rating_b = row_b.get(item)
            if rating_b is not None:
                numerator += rating_a * rating_b
            sum_squares_a += rating_a * rating_a

        sum_squares_b = 0.0
        for item in sorted(row_b):
            rating_b = row_b[item]
            sum_squares_b += rating_b * rating_b

        denominator = math.sqrt(sum_squares_a) * math.sqrt(sum_squares_b)
        if denominator == 0:
            return 0.0

        return min(1.0, abs(numerator / denominator))

    def build_rating_matrix(self, store: RatingStore) -> Tuple[csr_matrix, List[int], List[int]]:
        """
        Build a sparse user x item matrix from the store.

        Args:
            store: Rating store to read

        Returns:
            (matrix, user_ids, item_ids) with rows/columns in ascending ID order
        """
        user_ids = store.users()
        item_ids = store.items()
        item_index = {item: idx for idx, item in enumerate(item_ids)}

        rows: List[int] = []
        cols: List[int] = []
        data: List[float] = []
        for row_idx, (_, row) in enumerate(store.iter_rows()):
            for item, rating in row.items():
                rows.append(row_idx)
                cols.append(item_index[item])
                data.append(rating)

        matrix = csr_matrix(
            (np.array(data, dtype=np.float64), (np.array(rows, dtype=np.int64), np.array(cols, dtype=np.int64))),
            shape=(len(user_ids), len(item_ids))
        )
        return matrix, user_ids, item_ids

    def compute_similarity_matrix(self, store: RatingStore) -> Tuple[np.ndarray, List[int]]:
        """
        Compute absolute cosine similarity between every pair of users.

        Users with no ratings get similarity 0 to everyone, including themselves.

        Args:
            store: Rating store to read

        Returns:
            (similarity matrix (n_users x n_users), user_ids in row order)
        """
        logger.info("Computing user similarity matrix...")

        matrix, user_ids, _ = self.build_rating_matrix(store)
        if matrix.shape[0] == 0 or matrix.shape[1] == 0:
            logger.info(" Empty rating matrix, nothing to compare")
            return np.zeros((len(user_ids), len(user_ids))), user_ids

        similarity = np.clip(np.abs(cosine_similarity(matrix)), 0.0, 1.0)
        logger.info(f" User similarity: {similarity.shape}, range [{similarity.min():.3f}, {similarity.max():.3f}]")
        return similarity, user_ids

    def get_similarity_statistics(
        self,
        similarity_matrix: np.ndarray
    ) -> Dict[str, float]:
        """
        Compute statistics for a similarity matrix.

        Args:
            similarity_matrix: Similarity matrix

        Returns:
            Dictionary with statistics (all 0.0 for fewer than two users)
        """
        # Get upper triangle (exclude diagonal and duplicates)
        upper_triangle = similarity_matrix[np.triu_indices_from(similarity_matrix, k=1)]
        if upper_triangle.size == 0:
            return {'mean': 0.0, 'std': 0.0, 'min': 0.0, 'max': 0.0, 'median': 0.0}

        return {
            'mean': float(upper_triangle.mean()),
            'std': float(upper_triangle.std()),
            'min': float(upper_triangle.min()),
            'max': float(upper_triangle.max()),
            'median': float(np.median(upper_triangle))
        }
