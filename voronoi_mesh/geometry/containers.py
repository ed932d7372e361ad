"""
Append-Only Storage for Voronoi Diagram Geometry

This module provides the sequences that a diagram is assembled from:

- PointStore: vertex coordinates keyed by a dense integer id
- SeedTable: the fixed list of seed coordinates for one build cycle
- LineList: bisector lines as unordered pairs of seed ids
- EdgeList: edge records referencing vertices, seeds and a line

Ids are always the length of the sequence before the append, so they are
contiguous and 0-based. Clearing a sequence restarts numbering at 0.
Reads are bounds-checked and raise OutOfRangeError instead of returning
a default.

Complexity:
- append: O(1) amortized
- random access: O(1)
- clear: O(1)
"""

from typing import Generic, Iterator, List, Optional, Tuple, TypeVar
import numpy as np

from ..data_models import EdgeInfo, VoronoiEdge
from ..errors import OutOfRangeError

T = TypeVar("T")


def as_point(p) -> np.ndarray:
    """Convert any (x, y) sequence to a float64 array of shape (2,)."""
    point = np.asarray(p, dtype=np.float64).reshape(-1)
    if point.shape != (2,):
        raise ValueError(f"Expected a 2D point, got shape {np.shape(p)}")
    return point


class PointStore:
    """
    Growable array of 2D vertex coordinates.

    Storage is a single float64 array that doubles in capacity when full,
    so ``as_array`` is a cheap slice copy.

    Example:
        >>> store = PointStore()
        >>> store.append([1.0, 2.0])
        0
        >>> store.get(0)
        array([1., 2.])
    """

    def __init__(self, initial_capacity: int = 16):
        self._data = np.zeros((max(1, initial_capacity), 2), dtype=np.float64)
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def append(self, p) -> int:
        point = as_point(p)
        if self._size == len(self._data):
            grown = np.zeros((2 * len(self._data), 2), dtype=np.float64)
            grown[:self._size] = self._data[:self._size]
            self._data = grown

        point_id = self._size
        self._data[point_id] = point
        self._size += 1
        return point_id

    def get(self, point_id: int, accessor: str = "get_vertex") -> np.ndarray:
        if not 0 <= point_id < self._size:
            raise OutOfRangeError(accessor, point_id, self._size)
        return self._data[point_id].copy()

    def clear(self) -> None:
        self._size = 0

    def as_array(self) -> np.ndarray:
        return self._data[:self._size].copy()

    def items(self) -> Iterator[Tuple[int, np.ndarray]]:
        for point_id in range(self._size):
            yield point_id, self._data[point_id].copy()


class SeedTable:
    """
    Ordered seed coordinates, replaced as a whole once per build cycle.
    """

    def __init__(self):
        self._seeds = np.zeros((0, 2), dtype=np.float64)

    def __len__(self) -> int:
        return len(self._seeds)

    def set(self, num: int, source) -> None:
        """
        Copy the first ``num`` points of ``source``.

        Args:
            num: Number of seeds
            source: Iterable of (x, y) points holding at least ``num`` items

        Raises:
            ValueError: If num is not positive or source is too short
        """
        if num < 1:
            raise ValueError(f"At least one seed is required, got {num}")

        points = []
        for p in source:
            if len(points) == num:
                break
            points.append(as_point(p))

        if len(points) < num:
            raise ValueError(
                f"Expected {num} seeds, source provided only {len(points)}"
            )

        self._seeds = np.array(points, dtype=np.float64).reshape(num, 2)

    def get(self, seed_id: int, accessor: str = "get_seed") -> np.ndarray:
        if not 0 <= seed_id < len(self._seeds):
            raise OutOfRangeError(accessor, seed_id, len(self._seeds))
        return self._seeds[seed_id].copy()

    def check(self, seed_id: int, accessor: str) -> int:
        """Validate a seed id without copying the point."""
        if not 0 <= seed_id < len(self._seeds):
            raise OutOfRangeError(accessor, seed_id, len(self._seeds))
        return seed_id

    def as_array(self) -> np.ndarray:
        return self._seeds.copy()


class _AppendOnlyList(Generic[T]):
    """Shared behaviour of LineList and EdgeList."""

    getter = "get"

    def __init__(self):
        self._items: List[T] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def append(self, item: T) -> int:
        item_id = len(self._items)
        self._items.append(item)
        return item_id

    def get(self, item_id: int, accessor: Optional[str] = None) -> T:
        if not 0 <= item_id < len(self._items):
            raise OutOfRangeError(accessor or self.getter, item_id, len(self._items))
        return self._items[item_id]

    def clear(self) -> None:
        self._items.clear()


class LineList(_AppendOnlyList[EdgeInfo]):
    """Bisector lines, each an unordered pair of seed ids."""

    getter = "get_line"


class EdgeList(_AppendOnlyList[VoronoiEdge]):
    """
    Edge records in append order.

    Two edges may share a line id when one bisector is split into several
    clipped segments. Rejecting duplicate unsplit edges is the builder's job.
    """

    getter = "get_edge"
