"""Sparse in-memory store of user ratings."""
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Tuple
import logging

logger = logging.getLogger(__name__)

RatingRow = Dict[int, float]

_EMPTY_ROW: Mapping[int, float] = MappingProxyType({})


def format_row(row: Mapping[int, float]) -> str:
    """
    Render a rating row for debugging, one item per line in ascending item order.

    Args:
        row: Mapping of item ID to rating

    Returns:
        Text of the form "{\\n<item>: <rating>,\\n...}\\n" with ratings to 1 decimal
    """
    lines = ["{\n"]
    for item in sorted(row):
        lines.append(f"{item}: {row[item]:.1f},\n")
    lines.append("}\n")
    return "".join(lines)


class RatingStore:
    """
    Sparse mapping of user -> (item -> rating).

    Rows are created on first rating and never deleted. Writing a rating for an
    existing (user, item) pair overwrites it.
    """

    def __init__(self):
        self._rows: Dict[int, RatingRow] = {}

    def add_rating(self, user: int, item: int, rating: float) -> None:
        """Insert or overwrite the rating for (user, item)."""
        row = self._rows.get(user)
        if row is None:
            row = {}
            self._rows[user] = row
        row[item] = float(rating)

    def get_row(self, user: int) -> Mapping[int, float]:
        """
        Get a read-only view of a user's ratings.

        Args:
            user: User ID

        Returns:
            Read-only mapping of item ID to rating (empty if user is unknown)
        """
        row = self._rows.get(user)
        if row is None:
            return _EMPTY_ROW
        return MappingProxyType(row)

    def users(self) -> List[int]:
        """Get all known user IDs in ascending order."""
        return sorted(self._rows)

    def items(self) -> List[int]:
        """Get every rated item ID in ascending order."""
        all_items = set()
        for row in self._rows.values():
            all_items.update(row)
        return sorted(all_items)

    def iter_rows(self) -> Iterator[Tuple[int, Mapping[int, float]]]:
        """Iterate (user, row) pairs in ascending user order."""
        for user in self.users():
            yield user, MappingProxyType(self._rows[user])

    def num_ratings(self) -> int:
        """Count ratings across all users."""
        return sum(len(row) for row in self._rows.values())

    def render_row(self, user: int) -> str:
        """Diagnostic text rendering of a user's ratings."""
        return format_row(self.get_row(user))

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, user: object) -> bool:
        return user in self._rows

    def __repr__(self):
        return f"<RatingStore(users={len(self._rows)}, ratings={self.num_ratings()})>"
