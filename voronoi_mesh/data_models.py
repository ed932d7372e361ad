"""
Data Models for the Voronoi Diagram Mesh

This module defines the value types that flow between the diagram, its
generator and consumer code. All of them are immutable so that consumers
can hold them without affecting the diagram.

Data Flow:
    Seeds → BoundingWindow → (Generator) → EdgeInfo / VoronoiEdge → MeshCell
"""

from dataclasses import dataclass
from typing import Tuple, NamedTuple
from enum import Enum
import numpy as np


class BuildState(Enum):
    """Stages of one diagram build cycle, in the order they are reached."""
    EMPTY = "empty"               # Nothing set yet
    SEEDS_SET = "seeds_set"       # Seeds copied, regions allocated
    CONFIGURED = "configured"     # Clip window fixed
    FILLED = "filled"             # Generator has started appending geometry
    BUILT = "built"               # Every region polygon finalized
    QUERYABLE = "queryable"       # Regions registered in the generic mesh


class CellKind(Enum):
    """Tag for the closed set of cell shapes stored in the mesh."""
    POLYGON = "polygon"
    LINE = "line"


class EdgeInfo(NamedTuple):
    """
    A pair of integer ids.

    Used for bisector lines (a pair of seed ids), for the two seeds around
    an edge, and for the two vertex ids at the ends of an edge.
    """
    first: int
    second: int

    def other(self, id_: int) -> int:
        """Return the member of the pair that is not ``id_``."""
        if id_ == self.first:
            return self.second
        if id_ == self.second:
            return self.first
        raise ValueError(f"{id_} is not part of pair {tuple(self)}")


@dataclass(frozen=True)
class VoronoiEdge:
    """
    One straight segment separating two regions.

    Attributes:
        left_id: Vertex id at the left end of the segment
        right_id: Vertex id at the right end of the segment
        left_seed: Seed id of the region on one side
        right_seed: Seed id of the region on the other side
        line_id: Bisector line this segment is a piece of
    """
    left_id: int
    right_id: int
    left_seed: int
    right_seed: int
    line_id: int

    @property
    def ends(self) -> EdgeInfo:
        return EdgeInfo(self.left_id, self.right_id)

    @property
    def seeds(self) -> EdgeInfo:
        return EdgeInfo(self.left_seed, self.right_seed)


@dataclass(frozen=True)
class MeshCell:
    """
    A cell handle stored in the generic mesh.

    The shape is selected by ``kind``. Polygon cells close their boundary
    once they have at least three points; a two-point polygon degenerates
    to a single segment and shorter ones have no edges.

    Attributes:
        kind: Shape tag
        point_ids: Vertex ids in boundary order
    """
    kind: CellKind
    point_ids: Tuple[int, ...]

    @property
    def number_of_points(self) -> int:
        return len(self.point_ids)

    @property
    def is_closed(self) -> bool:
        return self.kind is CellKind.POLYGON and len(self.point_ids) >= 3

    def edges(self) -> Tuple[EdgeInfo, ...]:
        """
        Vertex id pairs of the cell's edges, derived from its kind.

        Returns:
            Tuple of EdgeInfo in boundary order
        """
        ids = self.point_ids
        if self.kind is CellKind.LINE:
            return (EdgeInfo(ids[0], ids[1]),)

        n = len(ids)
        if n < 2:
            return ()
        if n == 2:
            return (EdgeInfo(ids[0], ids[1]),)
        return tuple(EdgeInfo(ids[i], ids[(i + 1) % n]) for i in range(n))

    @classmethod
    def polygon(cls, point_ids) -> "MeshCell":
        return cls(CellKind.POLYGON, tuple(int(p) for p in point_ids))

    @classmethod
    def line(cls, first: int, second: int) -> "MeshCell":
        return cls(CellKind.LINE, (int(first), int(second)))


@dataclass(frozen=True)
class BoundingWindow:
    """
    Axis-aligned clip rectangle for the whole diagram.

    Attributes:
        origin: Lower-left corner (x, y)
        size: Width and height
    """
    origin: Tuple[float, float] = (0.0, 0.0)
    size: Tuple[float, float] = (0.0, 0.0)

    @property
    def x_min(self) -> float:
        return self.origin[0]

    @property
    def y_min(self) -> float:
        return self.origin[1]

    @property
    def x_max(self) -> float:
        return self.origin[0] + self.size[0]

    @property
    def y_max(self) -> float:
        return self.origin[1] + self.size[1]

    @property
    def area(self) -> float:
        return self.size[0] * self.size[1]

    def corners(self) -> np.ndarray:
        """Return the four corners counter-clockwise from the origin."""
        return np.array([
            [self.x_min, self.y_min],
            [self.x_max, self.y_min],
            [self.x_max, self.y_max],
            [self.x_min, self.y_max]
        ], dtype=np.float64)

    def contains(self, point, tolerance: float = 0.0) -> bool:
        x, y = float(point[0]), float(point[1])
        return (self.x_min - tolerance <= x <= self.x_max + tolerance and
                self.y_min - tolerance <= y <= self.y_max + tolerance)
