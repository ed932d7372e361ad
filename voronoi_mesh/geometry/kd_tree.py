"""
KD-Tree for Nearest-Seed Search

A point of the plane lies in the Voronoi region of its nearest seed, so
locating the region that contains a point is a nearest-neighbor query over
the seeds. This module provides a 2D KD-tree for that query and a
brute-force baseline used to check it.

Complexity Analysis:
- Build: O(n log n) average
- Nearest Neighbor Query: O(log n) average, O(n) worst case
- Space: O(n)

Reference:
    Bentley, J. L. (1975). Multidimensional binary search trees used for
    associative searching. Communications of the ACM, 18(9), 509-517.
"""

from dataclasses import dataclass
from typing import List, Tuple, Optional
import numpy as np


@dataclass
class KDNode:
    """
    A node in the KD-tree.

    Attributes:
        point: Seed coordinates stored at this node
        index: Seed id of the point
        split_dim: Dimension used for splitting (0 for x, 1 for y)
        left: Subtree with smaller split coordinate
        right: Subtree with larger or equal split coordinate
    """
    point: np.ndarray
    index: int
    split_dim: int
    left: Optional['KDNode'] = None
    right: Optional['KDNode'] = None


class KDTree:
    """
    KD-Tree over a fixed set of 2D seeds.

    Example:
        >>> seeds = np.array([[0, 0], [10, 0], [0, 10], [10, 10]])
        >>> tree = KDTree(seeds)
        >>> tree.nearest_neighbor([9, 2])
        (1, 2.23606797749979)
    """

    def __init__(self, points: np.ndarray):
        self.points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        self.n_points = len(self.points)

        if self.n_points == 0:
            self.root = None
        else:
            self.root = self._build(list(range(self.n_points)), depth=0)

    def _build(self, indices: List[int], depth: int) -> Optional[KDNode]:
        """Split on the median of alternating axes."""
        if not indices:
            return None

        split_dim = depth % 2
        indices.sort(key=lambda i: self.points[i, split_dim])
        median_pos = len(indices) // 2
        median_idx = indices[median_pos]

        node = KDNode(
            point=self.points[median_idx],
            index=median_idx,
            split_dim=split_dim
        )
        node.left = self._build(indices[:median_pos], depth + 1)
        node.right = self._build(indices[median_pos + 1:], depth + 1)
        return node

    def nearest_neighbor(self, query) -> Tuple[int, float]:
        """
        Find the seed nearest to a query point.

        Ties between equidistant seeds go to the one visited first.

        Returns:
            Tuple of (seed id, distance)

        Raises:
            ValueError: If the tree is empty
        """
        query = np.asarray(query, dtype=np.float64)

        if self.root is None:
            raise ValueError("Cannot query empty tree")

        best = [-1, float('inf')]
        self._nn_search(self.root, query, best)
        return best[0], best[1]

    def _nn_search(self, node: Optional[KDNode], query: np.ndarray, best: list) -> None:
        if node is None:
            return

        dist = float(np.hypot(*(node.point - query)))
        if dist < best[1]:
            best[0], best[1] = node.index, dist

        diff = query[node.split_dim] - node.point[node.split_dim]
        near_child, far_child = (node.left, node.right) if diff < 0 else (node.right, node.left)

        self._nn_search(near_child, query, best)
        # The far side can only help if the splitting line is within reach
        if abs(diff) < best[1]:
            self._nn_search(far_child, query, best)

    def query_batch(self, queries: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Nearest seed for every row of ``queries``.

        Returns:
            Tuple of (seed ids, distances), both of shape (m,)
        """
        queries = np.asarray(queries, dtype=np.float64).reshape(-1, 2)
        indices = np.zeros(len(queries), dtype=np.int64)
        distances = np.zeros(len(queries), dtype=np.float64)

        for i, query in enumerate(queries):
            indices[i], distances[i] = self.nearest_neighbor(query)

        return indices, distances


def brute_force_nearest_neighbor(points: np.ndarray, query) -> Tuple[int, float]:
    """
    Nearest point by checking every distance.

    Baseline for testing and benchmarking the KD-tree.

    Complexity: O(n)
    """
    points = np.asarray(points, dtype=np.float64)
    query = np.asarray(query, dtype=np.float64)

    distances = np.sqrt(np.sum((points - query) ** 2, axis=1))
    nearest_idx = int(np.argmin(distances))
    return nearest_idx, float(distances[nearest_idx])
