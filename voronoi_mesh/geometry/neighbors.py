"""
Seed Adjacency for the Voronoi Diagram

The neighbor graph maps every seed id to the ids of the seeds whose
regions share an edge with it. It is filled one pair at a time while the
diagram is built; each insertion updates both endpoints, so the graph is
symmetric by construction and never needs a separate check.

Duplicate pairs are not filtered. A builder that reports the same pair
twice (for instance once per clipped piece of a bisector) will see the
neighbor listed twice.
"""

from typing import Iterator, List, Sequence, Tuple

from ..data_models import EdgeInfo
from ..errors import DegeneratePairError, OutOfRangeError


class NeighborGraph:
    """
    Adjacency lists indexed by seed id.

    Example:
        >>> graph = NeighborGraph(3)
        >>> graph.add(EdgeInfo(0, 2))
        >>> list(graph.neighbor_ids(2))
        [0]
    """

    def __init__(self, num_seeds: int = 0):
        self._lists: List[List[int]] = [[] for _ in range(num_seeds)]

    def __len__(self) -> int:
        return len(self._lists)

    def resize(self, num_seeds: int) -> None:
        """Drop all adjacency and allocate ``num_seeds`` empty lists."""
        self._lists = [[] for _ in range(num_seeds)]

    def clear(self) -> None:
        for neighbors in self._lists:
            neighbors.clear()

    def _check(self, seed_id: int, accessor: str) -> None:
        if not 0 <= seed_id < len(self._lists):
            raise OutOfRangeError(accessor, seed_id, len(self._lists))

    def add(self, pair: Sequence[int], accessor: str = "add_cell_neighbor") -> None:
        a, b = int(pair[0]), int(pair[1])
        self._check(a, accessor)
        self._check(b, accessor)
        if a == b:
            raise DegeneratePairError(accessor, a)

        self._lists[a].append(b)
        self._lists[b].append(a)

    def neighbor_ids(self, seed_id: int, accessor: str = "neighbor_ids") -> Iterator[int]:
        """
        Iterate over the current neighbors of a seed.

        Each call returns a fresh iterator. An iterator taken before a later
        ``add`` on the same seed is no longer valid.
        """
        self._check(seed_id, accessor)
        return iter(self._lists[seed_id])

    def degree(self, seed_id: int) -> int:
        self._check(seed_id, "degree")
        return len(self._lists[seed_id])

    def pairs(self) -> Iterator[Tuple[int, int]]:
        """Yield every stored pair once, smaller id first."""
        for a, neighbors in enumerate(self._lists):
            for b in neighbors:
                if a < b:
                    yield a, b
