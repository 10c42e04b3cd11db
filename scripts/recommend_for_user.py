"""
Recommend items for one user from a ratings CSV or the ratings database.
Loads raw ratings, normalizes them once, and prints the recommendation.
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import argparse
import logging

from tvbingefriend_collaborative_service.config import RecommenderConfig, get_like_threshold, get_support
from tvbingefriend_collaborative_service.services.collaborative_service import (
    CollaborativeRecommendationService,
    Recommendation,
)
from tvbingefriend_collaborative_service.services.rating_loader_service import load_ratings_csv

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def build_service(
    ratings_csv: Path | None,
    from_db: bool,
    support: int,
    like_threshold: float,
    normalize: bool = True,
) -> CollaborativeRecommendationService:
    """
    Load ratings and prepare a recommendation service.

    Args:
        ratings_csv: CSV with user_id, item_id, rating columns
        from_db: Load ratings from the database instead of a CSV
        support: Votes needed before an item is recommended
        like_threshold: Minimum normalized rating counted as a vote
        normalize: Rescale each user's ratings into [-1, 1] after loading

    Returns:
        Service ready to recommend
    """
    logger.info("=" * 70)
    logger.info("LOADING RATINGS")
    logger.info("=" * 70)

    service = CollaborativeRecommendationService(
        config=RecommenderConfig(support=support, like_threshold=like_threshold)
    )

    if from_db:
        service.load_ratings_from_db()
    elif ratings_csv is not None:
        load_ratings_csv(ratings_csv, store=service.store)
    else:
        raise ValueError("Either a ratings CSV or --from-db is required")

    if normalize:
        service.normalize_all_users()

    return service


def format_recommendation(user_id: int, recommendation: Recommendation | None) -> str:
    """Format a recommendation result for printing."""
    if recommendation is None:
        return f"No recommendations for user {user_id}"

    lines = [f"Recommendations for user {user_id}:"]
    for rank, (item, predicted) in enumerate(zip(recommendation.items, recommendation.predicted), start=1):
        lines.append(f"  {rank}. item {item} (predicted {predicted:.3f})")
    return "\n".join(lines)


def main(argv: list[str] | None = None):
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description="Recommend items for a user with user-based collaborative filtering"
    )
    parser.add_argument("--user-id", type=int, required=True, help="User to recommend for")
    parser.add_argument(
        "--count", type=int, default=10, help="Number of items to recommend (default: 10)"
    )
    parser.add_argument(
        "--ratings-csv",
        type=str,
        default=None,
        help="CSV file with user_id, item_id, rating columns",
    )
    parser.add_argument(
        "--from-db", action="store_true", help="Load ratings from the database instead of a CSV"
    )
    parser.add_argument(
        "--support",
        type=int,
        default=None,
        help="Neighbor votes needed to recommend an item (default: CF_SUPPORT or 5)",
    )
    parser.add_argument(
        "--like-threshold",
        type=float,
        default=None,
        help="Minimum normalized rating counted as a vote (default: CF_LIKE_THRESHOLD or 0.1)",
    )
    parser.add_argument(
        "--no-normalize", action="store_true", help="Use ratings as loaded, without rescaling"
    )
    parser.add_argument(
        "--show-row", action="store_true", help="Print the user's (normalized) ratings as well"
    )

    args = parser.parse_args(argv)

    if args.ratings_csv is None and not args.from_db:
        logger.error("Error: pass --ratings-csv or --from-db")
        sys.exit(1)

    support = args.support if args.support is not None else get_support()
    like_threshold = args.like_threshold if args.like_threshold is not None else get_like_threshold()

    try:
        ratings_csv = Path(args.ratings_csv) if args.ratings_csv else None
        service = build_service(
            ratings_csv=ratings_csv,
            from_db=args.from_db,
            support=support,
            like_threshold=like_threshold,
            normalize=not args.no_normalize,
        )

        if args.show_row:
            print(service.render_user_ratings(args.user_id), end="")

        recommendation = service.recommend(args.user_id, args.count)
        print(format_recommendation(args.user_id, recommendation))

        return recommendation

    except Exception as e:
        logger.error(f"Error during recommendation: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
