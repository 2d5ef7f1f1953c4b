"""
Prefix range search over the sorted record table.

The table is a variable-depth quadtree flattened into one sorted array:
a key field is either a full geohash or a shorter prefix padded with the
sentinel, and the sentinel sorts below every geohash symbol. A single
comparison-based binary search therefore finds the record covering a
query at whatever depth the tree was cut, and a short scan around that
anchor collects the other records of a border run (one cell belonging to
several zones).
"""

from typing import List, Optional, Tuple

from .records import GeohashKey
from .store import RecordStore


class PrefixRangeSearch:
    """Resolve a full-precision geohash to zone references."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.config = store.config

    def compare(self, key: GeohashKey, geocode: str) -> int:
        """
        Compare a stored key with a query geohash.

        Args:
            key: Stored key, possibly shorter than the precision
            geocode: Query geohash at full precision

        Returns:
            0 if the key covers the query (exactly, or as an ancestor
            cell), 1 if it sorts after the query, -1 if it sorts before it
        """
        if key.covers(geocode):
            return 0
        # A short key sorts before its descendants, so only its own
        # characters decide the order
        return 1 if key.prefix > geocode[:key.length] else -1

    def find_anchor(self, geocode: str) -> Optional[int]:
        """
        Binary search for any line whose key covers the query.

        The bounds are inclusive, so the last surviving index is still
        compared once before the search gives up.

        Args:
            geocode: Query geohash at full precision

        Returns:
            1-based line number of the anchor, or None if nothing covers it
        """
        if len(geocode) != self.config.precision:
            raise ValueError(
                f"Query {geocode!r} must be {self.config.precision} characters long"
            )

        low, high = 1, self.store.line_count()
        while low <= high:
            mid = (low + high) // 2
            relation = self.compare(self.store.geohash_key(mid), geocode)
            if relation == 0:
                return mid
            if relation > 0:
                high = mid - 1
            else:
                low = mid + 1
        return None

    def expand(self, anchor: int) -> Tuple[int, int]:
        """
        Grow the match around an anchor to its whole border run.

        Args:
            anchor: Line number returned by find_anchor

        Returns:
            Inclusive (first, last) line numbers of the run
        """
        canonical = self.store.key(anchor)
        count = self.store.line_count()

        first = anchor
        while first > 1 and self.store.key(first - 1) == canonical:
            first -= 1

        last = anchor
        while last < count and self.store.key(last + 1) == canonical:
            last += 1

        return first, last

    def find(self, geocode: str) -> List[int]:
        """
        Find every zone reference whose record covers the query.

        Args:
            geocode: Query geohash at full precision

        Returns:
            Distinct references in ascending order (empty when no record
            covers the query)
        """
        anchor = self.find_anchor(geocode)
        if anchor is None:
            return []

        first, last = self.expand(anchor)
        return sorted({self.store.reference(i) for i in range(first, last + 1)})
