"""
2D Voronoi Diagram Mesh

This module implements the mesh that stores a bounded Voronoi diagram:
seeds, vertices, bisector lines, edges, one polygon region per seed and
the seed adjacency derived from shared edges.

The diagram does not compute any geometry itself. A builder (see
generator.py) fills it through the mutation API while it sweeps, then
finalizes each region with ``build_edge``. After ``insert_cells`` the
regions are also visible through the generic ``Mesh`` the diagram owns.

Build cycle:
    EMPTY ─set_seeds→ SEEDS_SET ─set_boundary/set_origin→ CONFIGURED
    ─add_*→ FILLED ─build_edge × N→ BUILT ─insert_cells→ QUERYABLE

    reset():     FILLED / BUILT / QUERYABLE → CONFIGURED
    set_seeds(): any state → SEEDS_SET (all geometry discarded)

Every call is checked against the transition table below and rejected
with StateViolationError when it does not apply to the current state.

Example:
    >>> diagram = VoronoiDiagram2D()
    >>> diagram.set_seeds(2, [[0, 0], [10, 0]])
    >>> diagram.set_boundary([20, 10])
    >>> diagram.set_origin([-5, -5])
    >>> diagram.add_vert([5, -5])
    0
"""

from contextlib import contextmanager
import threading
from typing import Dict, Iterator, Optional, Sequence, Tuple
import numpy as np
import structlog

from ..data_models import (
    BoundingWindow, BuildState, EdgeInfo, MeshCell, VoronoiEdge
)
from ..errors import (
    DegeneratePairError, OutOfRangeError, PrematureQueryError,
    ReentrancyError, StateViolationError
)
from .containers import EdgeList, LineList, PointStore, SeedTable, as_point
from .kd_tree import KDTree
from .mesh import Mesh
from .neighbors import NeighborGraph
from .regions import RegionSet

logger = structlog.get_logger()

_S = BuildState
_ALL_STATES = tuple(BuildState)
_FILLING = {_S.CONFIGURED: _S.FILLED, _S.FILLED: _S.FILLED}
_KEEP_WHILE_FILLING = {_S.CONFIGURED: _S.CONFIGURED, _S.FILLED: _S.FILLED}
_CONFIGURE = {_S.SEEDS_SET: _S.CONFIGURED, _S.CONFIGURED: _S.CONFIGURED}

# call name -> {state the call is allowed in: state after the call}
TRANSITIONS: Dict[str, Dict[BuildState, BuildState]] = {
    "set_seeds": {state: _S.SEEDS_SET for state in _ALL_STATES},
    "set_boundary": _CONFIGURE,
    "set_origin": _CONFIGURE,
    "add_vert": _FILLING,
    "add_line": _FILLING,
    "add_edge": _FILLING,
    "add_cell_neighbor": _FILLING,
    "region_add_point_id": _FILLING,
    "vertex_list_clear": _KEEP_WHILE_FILLING,
    "line_list_clear": _KEEP_WHILE_FILLING,
    "edge_list_clear": _KEEP_WHILE_FILLING,
    "clear_region": {
        _S.CONFIGURED: _S.CONFIGURED,
        _S.FILLED: _S.FILLED,
        _S.BUILT: _S.FILLED,
    },
    # Moves on to BUILT once the last region is finalized.
    "build_edge": _FILLING,
    "insert_cells": {_S.BUILT: _S.QUERYABLE, _S.QUERYABLE: _S.QUERYABLE},
    "reset": {
        _S.EMPTY: _S.EMPTY,
        _S.SEEDS_SET: _S.SEEDS_SET,
        _S.CONFIGURED: _S.CONFIGURED,
        _S.FILLED: _S.CONFIGURED,
        _S.BUILT: _S.CONFIGURED,
        _S.QUERYABLE: _S.CONFIGURED,
    },
}

_READABLE = (_S.BUILT, _S.QUERYABLE)


class VoronoiDiagram2D:
    """
    Mesh structure for a bounded 2D Voronoi diagram.

    The diagram owns every sub-container. Accessors return copies or
    immutable values, so consumers cannot modify the diagram through them.

    Attributes:
        mesh: Generic point/cell mesh sharing the vertex storage
    """

    def __init__(self):
        self._seeds = SeedTable()
        self._vertices = PointStore()
        self._lines = LineList()
        self._edges = EdgeList()
        self._neighbors = NeighborGraph()
        self._regions = RegionSet()
        self.mesh = Mesh(self._vertices)

        self._window = BoundingWindow()
        self._state = BuildState.EMPTY
        self._seed_tree: Optional[KDTree] = None
        self._guard = threading.Lock()

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    @property
    def state(self) -> BuildState:
        return self._state

    def _check_transition(self, call: str) -> BuildState:
        allowed = TRANSITIONS[call]
        if self._state not in allowed:
            raise StateViolationError(
                call, f"not allowed in state {self._state.value}"
            )
        return allowed[self._state]

    @contextmanager
    def _mutation(self, call: str):
        """Run one mutating call: reject overlap, then apply the transition."""
        if not self._guard.acquire(blocking=False):
            raise ReentrancyError(call, "another mutation is in progress")
        try:
            # The body may replace outcome[0] to finish in a later state
            outcome = [self._check_transition(call)]
            yield outcome
            self._state = outcome[0]
        finally:
            self._guard.release()

    def _require_readable(self, accessor: str) -> None:
        if self._state not in _READABLE:
            raise PrematureQueryError(
                accessor,
                f"diagram is {self._state.value}; build every region first"
            )

    # ------------------------------------------------------------------
    # Seeds and clip window
    # ------------------------------------------------------------------

    @property
    def number_of_seeds(self) -> int:
        return len(self._seeds)

    def set_seeds(self, num: int, source) -> None:
        """
        Replace the seed set, discarding all prior geometry.

        Args:
            num: Number of seeds
            source: Iterable of at least ``num`` (x, y) points
        """
        with self._mutation("set_seeds"):
            self._seeds.set(num, source)
            self._clear_geometry()
            self._regions.allocate(num)
            self._neighbors.resize(num)
            self._seed_tree = None
        logger.info("Seeds set", num_seeds=num)

    def get_seed(self, seed_id: int) -> np.ndarray:
        return self._seeds.get(seed_id)

    def seeds_array(self) -> np.ndarray:
        return self._seeds.as_array()

    def set_boundary(self, size) -> None:
        """Set the width and height of the clip rectangle."""
        size = as_point(size)
        with self._mutation("set_boundary"):
            self._window = BoundingWindow(
                self._window.origin, (float(size[0]), float(size[1]))
            )

    def set_origin(self, origin) -> None:
        """Set the lower-left corner of the clip rectangle."""
        origin = as_point(origin)
        with self._mutation("set_origin"):
            self._window = BoundingWindow(
                (float(origin[0]), float(origin[1])), self._window.size
            )

    @property
    def boundary(self) -> np.ndarray:
        return np.array(self._window.size, dtype=np.float64)

    @property
    def origin(self) -> np.ndarray:
        return np.array(self._window.origin, dtype=np.float64)

    @property
    def window(self) -> BoundingWindow:
        return self._window

    # ------------------------------------------------------------------
    # Construction API used by the builder
    # ------------------------------------------------------------------

    def _check_seed_pair(self, pair: Sequence[int], accessor: str) -> EdgeInfo:
        a, b = int(pair[0]), int(pair[1])
        self._seeds.check(a, accessor)
        self._seeds.check(b, accessor)
        if a == b:
            raise DegeneratePairError(accessor, a)
        return EdgeInfo(a, b)

    def _check_vertex(self, vertex_id: int, accessor: str) -> None:
        if not 0 <= vertex_id < len(self._vertices):
            raise OutOfRangeError(accessor, vertex_id, len(self._vertices))

    def add_vert(self, point) -> int:
        """Append a vertex and return its id."""
        point = as_point(point)
        with self._mutation("add_vert"):
            vertex_id = self._vertices.append(point)
        return vertex_id

    def add_line(self, pair: Sequence[int]) -> int:
        """Append a bisector line between two seeds and return its id."""
        with self._mutation("add_line"):
            line_id = self._lines.append(self._check_seed_pair(pair, "add_line"))
        return line_id

    def add_edge(self, edge: VoronoiEdge) -> int:
        """
        Append an edge record and return its id.

        Every id the edge references must already exist.
        """
        with self._mutation("add_edge"):
            self._check_vertex(edge.left_id, "add_edge")
            self._check_vertex(edge.right_id, "add_edge")
            self._check_seed_pair((edge.left_seed, edge.right_seed), "add_edge")
            if not 0 <= edge.line_id < len(self._lines):
                raise OutOfRangeError("add_edge", edge.line_id, len(self._lines))
            edge_id = self._edges.append(edge)
        return edge_id

    def add_cell_neighbor(self, pair: Sequence[int]) -> None:
        """Record that two seeds' regions touch. Not deduplicated."""
        with self._mutation("add_cell_neighbor"):
            self._neighbors.add(pair)

    def clear_region(self, region_id: int) -> None:
        with self._mutation("clear_region"):
            self._regions.clear(region_id)

    def region_add_point_id(self, region_id: int, vertex_id: int) -> None:
        """Append a boundary vertex to a region in discovery order."""
        with self._mutation("region_add_point_id"):
            self._check_vertex(vertex_id, "region_add_point_id")
            self._regions.add_point_id(region_id, vertex_id)

    def build_edge(self, region_id: int) -> MeshCell:
        """
        Freeze a region's collected vertex ids into its polygon.

        Must run once per region after all of its points are known. The
        last region to be built also re-checks every edge's vertex ids, so
        the diagram never reaches BUILT with dangling edges.
        """
        with self._mutation("build_edge") as outcome:
            region = self._regions.region(region_id, "build_edge")
            for vertex_id in region.point_ids:
                self._check_vertex(vertex_id, "build_edge")

            last = (not region.is_built and
                    self._regions.num_built == len(self._regions) - 1)
            if last:
                for edge in self._edges:
                    self._check_vertex(edge.left_id, "build_edge")
                    self._check_vertex(edge.right_id, "build_edge")

            cell = self._regions.build(region_id)
            if last:
                outcome[0] = BuildState.BUILT

        if self._state is BuildState.BUILT:
            logger.info(
                "All regions built",
                num_regions=len(self._regions),
                num_vertices=len(self._vertices),
                num_edges=len(self._edges)
            )
        return cell

    def vertex_list_clear(self) -> None:
        with self._mutation("vertex_list_clear"):
            self._vertices.clear()

    def line_list_clear(self) -> None:
        with self._mutation("line_list_clear"):
            self._lines.clear()

    def edge_list_clear(self) -> None:
        with self._mutation("edge_list_clear"):
            self._edges.clear()

    def _clear_geometry(self) -> None:
        self._vertices.clear()
        self._lines.clear()
        self._edges.clear()
        self._neighbors.clear()
        self._regions.clear_all()
        self.mesh.clear_cells()

    def reset(self) -> None:
        """
        Clear all derived geometry but keep the seeds and clip window.

        Allows rebuilding against the same seed set without reallocating
        regions.
        """
        with self._mutation("reset"):
            self._clear_geometry()
        logger.debug("Diagram reset", state=self._state.value)

    def insert_cells(self) -> None:
        """Publish every built region into the generic mesh, keyed by seed id."""
        with self._mutation("insert_cells"):
            for region in self._regions:
                self.mesh.set_cell(region.seed_id, region.cell)
        logger.info("Cells inserted", num_cells=self.mesh.number_of_cells)

    # ------------------------------------------------------------------
    # Sizes and direct accessors
    # ------------------------------------------------------------------

    def vertex_list_size(self) -> int:
        return len(self._vertices)

    def line_list_size(self) -> int:
        return len(self._lines)

    def edge_list_size(self) -> int:
        return len(self._edges)

    def get_vertex(self, vertex_id: int) -> np.ndarray:
        return self._vertices.get(vertex_id)

    def get_point(self, point_id: int) -> np.ndarray:
        return self.mesh.get_point(point_id)

    def get_line(self, line_id: int) -> EdgeInfo:
        return self._lines.get(line_id)

    def get_edge(self, edge_id: int) -> VoronoiEdge:
        return self._edges.get(edge_id)

    def get_edge_end(self, edge_id: int) -> EdgeInfo:
        """Return the (left, right) vertex ids of an edge."""
        return self._edges.get(edge_id, accessor="get_edge_end").ends

    def get_edge_line_id(self, edge_id: int) -> int:
        return self._edges.get(edge_id, accessor="get_edge_line_id").line_id

    def get_edge_cell(self, edge_id: int) -> MeshCell:
        edge = self._edges.get(edge_id, accessor="get_edge_cell")
        return MeshCell.line(edge.left_id, edge.right_id)

    def get_seeds_id_around_edge(self, edge: VoronoiEdge) -> EdgeInfo:
        """Return the (left, right) seed ids an edge separates."""
        return self._check_seed_pair(edge.seeds, "get_seeds_id_around_edge")

    def get_cell_id(self, cell_id: int) -> MeshCell:
        """Return the built polygon of a region."""
        return self._regions.cell(cell_id)

    # ------------------------------------------------------------------
    # Consumer queries
    # ------------------------------------------------------------------

    def neighbor_ids(self, seed_id: int) -> Iterator[int]:
        self._require_readable("neighbor_ids")
        return self._neighbors.neighbor_ids(seed_id)

    def edges(self) -> Iterator[VoronoiEdge]:
        self._require_readable("edges")
        return iter(self._edges)

    def vertices(self) -> Iterator[Tuple[int, np.ndarray]]:
        """Yield (vertex id, coordinates) pairs in id order."""
        self._require_readable("vertices")
        return self._vertices.items()

    def region_polygon(self, region_id: int) -> np.ndarray:
        """Coordinates of a built region's boundary, shape (k, 2)."""
        cell = self._regions.cell(region_id, accessor="region_polygon")
        return self.mesh.cell_coordinates(cell)

    def region_area(self, region_id: int) -> float:
        """Area of a built region (shoelace formula)."""
        polygon = self.region_polygon(region_id)
        if len(polygon) < 3:
            return 0.0
        x, y = polygon[:, 0], polygon[:, 1]
        return float(abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))) / 2.0)

    def region_centroid(self, region_id: int) -> np.ndarray:
        """
        Area centroid of a built region.

        Falls back to the vertex mean for regions without area.
        """
        polygon = self.region_polygon(region_id)
        if len(polygon) == 0:
            return self.get_seed(region_id)

        x, y = polygon[:, 0], polygon[:, 1]
        x_next, y_next = np.roll(x, -1), np.roll(y, -1)
        cross = x * y_next - x_next * y
        signed_area = cross.sum() / 2.0
        if len(polygon) < 3 or abs(signed_area) < 1e-12:
            return polygon.mean(axis=0)

        cx = np.sum((x + x_next) * cross) / (6.0 * signed_area)
        cy = np.sum((y + y_next) * cross) / (6.0 * signed_area)
        return np.array([cx, cy], dtype=np.float64)

    def _seed_search(self, accessor: str) -> KDTree:
        if len(self._seeds) == 0:
            raise PrematureQueryError(accessor, "no seeds have been set")
        if self._seed_tree is None:
            self._seed_tree = KDTree(self._seeds.as_array())
        return self._seed_tree

    def find_region(self, point) -> int:
        """
        Return the id of the region that contains a point.

        A point lies in the region of its nearest seed, so this is a
        nearest-neighbor query over the seeds.
        """
        seed_id, _ = self._seed_search("find_region").nearest_neighbor(as_point(point))
        return seed_id

    def find_regions(self, points) -> np.ndarray:
        """Region ids for every row of an (m, 2) array of points."""
        seed_ids, _ = self._seed_search("find_regions").query_batch(points)
        return seed_ids

    def summary(self) -> str:
        """Human-readable description of the diagram contents."""
        lines = [
            f"VoronoiDiagram2D ({self._state.value})",
            f"  Seeds:    {len(self._seeds)}",
            f"  Boundary: size={tuple(self._window.size)} origin={tuple(self._window.origin)}",
            f"  Vertices: {len(self._vertices)}",
            f"  Lines:    {len(self._lines)}",
            f"  Edges:    {len(self._edges)}",
            f"  Regions:  {self._regions.num_built}/{len(self._regions)} built",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"VoronoiDiagram2D(state={self._state.value}, "
                f"seeds={len(self._seeds)}, vertices={len(self._vertices)}, "
                f"edges={len(self._edges)})")
