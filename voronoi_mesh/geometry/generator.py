"""
Bounded Voronoi Diagram Generator

This module computes a Voronoi diagram clipped to a rectangle and writes
it into a VoronoiDiagram2D using only the diagram's public construction
API. Two backends compute the clipped cells:

- "halfplane": every cell starts as the bounding rectangle and is cut by
  the bisector half-plane of each other seed, nearest seeds first. Pure
  numpy, exact for any seed set including co-circular ones.
- "scipy": scipy.spatial.Voronoi over the seeds plus their mirror images
  across the four window sides. The mirrored guard seeds close every
  original cell exactly along the window border.

Both backends label every cell side with the seed on its other side (or
a negative value for the window border). The shared fill step turns those
labelled rings into vertices, bisector lines, edges, neighbor pairs and
region point lists, then builds every region.

Fill protocol:
    set_seeds → set_boundary → set_origin →
    per region: clear_region, add_vert, region_add_point_id,
                add_line / add_cell_neighbor (once per pair), add_edge
    → build_edge for every region → insert_cells

Complexity (halfplane):
    O(n²) worst case, close to O(n · k) for well-spread seeds where k is
    the typical number of bisectors that cut a cell before the early exit.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import numpy as np
import structlog
from scipy.spatial import Voronoi, cKDTree

from ..data_models import BoundingWindow, BuildState, VoronoiEdge
from ..synthetic_data import generate_random_seeds
from .containers import as_point
from .diagram import VoronoiDiagram2D

logger = structlog.get_logger()

BOUNDARY = -1

# A clipped cell: ring of vertices (k, 2) and the label of the side that
# starts at each vertex (seed id across that side, or BOUNDARY).
LabelledRing = Tuple[np.ndarray, List[int]]


@dataclass
class GeneratorConfig:
    """
    Settings for diagram generation.

    Attributes:
        method: Cell backend, "halfplane" or "scipy"
        tolerance: Distance under which a point counts as on a bisector
        merge_distance: Vertices closer than this share one vertex id
    """
    method: str = "halfplane"
    tolerance: float = 1e-9
    merge_distance: float = 1e-6

    def __post_init__(self):
        if self.method not in ("halfplane", "scipy"):
            raise ValueError(f"Unknown method: {self.method}")
        if self.tolerance < 0 or self.merge_distance <= 0:
            raise ValueError("tolerance must be >= 0 and merge_distance > 0")


def clip_ring(
    ring: np.ndarray,
    labels: List[int],
    seed: np.ndarray,
    other: np.ndarray,
    other_id: int,
    tolerance: float
) -> LabelledRing:
    """
    Cut a convex labelled ring by the half-plane closer to ``seed`` than to ``other``.

    Sides created by the cut are labelled ``other_id``. Vertices within
    ``tolerance`` of the bisector are kept and never duplicated.
    """
    normal = other - seed
    length = float(np.hypot(normal[0], normal[1]))
    midpoint = (seed + other) / 2.0
    dist = (ring - midpoint) @ normal / length

    out_points: List[np.ndarray] = []
    out_labels: List[int] = []
    n = len(ring)

    for k in range(n):
        cur, nxt = ring[k], ring[(k + 1) % n]
        d_cur, d_nxt = dist[k], dist[(k + 1) % n]

        if d_cur <= tolerance:
            out_points.append(cur)
            out_labels.append(labels[k])
            if d_nxt > tolerance:
                # Leaving the half-plane: the side from here runs along the bisector
                if d_cur < -tolerance:
                    t = d_cur / (d_cur - d_nxt)
                    out_points.append(cur + t * (nxt - cur))
                    out_labels.append(other_id)
                else:
                    out_labels[-1] = other_id
        elif d_nxt < -tolerance:
            t = d_cur / (d_cur - d_nxt)
            out_points.append(cur + t * (nxt - cur))
            out_labels.append(labels[k])

    return np.array(out_points, dtype=np.float64).reshape(-1, 2), out_labels


def halfplane_cells(
    seeds: np.ndarray,
    window: BoundingWindow,
    tolerance: float = 1e-9
) -> List[LabelledRing]:
    """
    Clipped Voronoi cells by successive half-plane cuts.

    Returns:
        One labelled ring per seed, counter-clockwise
    """
    corners = window.corners()
    cells: List[LabelledRing] = []

    for i, seed in enumerate(seeds):
        ring, labels = corners.copy(), [BOUNDARY] * 4
        distances = np.hypot(*(seeds - seed).T)
        order = np.argsort(distances, kind="stable")

        for j in order:
            if j == i:
                continue
            if len(ring) == 0:
                break
            # No bisector farther than the cell radius can cut the cell
            radius = float(np.max(np.hypot(*(ring - seed).T)))
            if distances[j] > 2.0 * radius + tolerance:
                break
            ring, labels = clip_ring(ring, labels, seed, seeds[j], int(j), tolerance)

        cells.append((ring, labels))

    return cells


def mirror_guard_seeds(seeds: np.ndarray, window: BoundingWindow) -> np.ndarray:
    """Reflect every seed across each of the four window sides."""
    x, y = seeds[:, 0], seeds[:, 1]
    return np.vstack([
        np.column_stack([2 * window.x_min - x, y]),
        np.column_stack([2 * window.x_max - x, y]),
        np.column_stack([x, 2 * window.y_min - y]),
        np.column_stack([x, 2 * window.y_max - y]),
    ])


def scipy_cells(seeds: np.ndarray, window: BoundingWindow) -> List[LabelledRing]:
    """
    Clipped Voronoi cells from scipy.spatial.Voronoi with mirrored guard seeds.

    Returns:
        One labelled ring per seed, counter-clockwise
    """
    n = len(seeds)
    on_border = ((seeds[:, 0] <= window.x_min) | (seeds[:, 0] >= window.x_max) |
                 (seeds[:, 1] <= window.y_min) | (seeds[:, 1] >= window.y_max))
    if np.any(on_border):
        # A seed on the border coincides with its own mirror image
        raise ValueError("scipy backend requires seeds strictly inside the boundary")

    all_points = np.vstack([seeds, mirror_guard_seeds(seeds, window)])
    vor = Voronoi(all_points)
    tree = cKDTree(all_points)

    cells: List[LabelledRing] = []
    lower = np.array([window.x_min, window.y_min])
    upper = np.array([window.x_max, window.y_max])

    for i in range(n):
        region = vor.regions[vor.point_region[i]]
        if not region or -1 in region:
            raise RuntimeError(f"Cell {i} is unbounded despite guard seeds")

        offsets = vor.vertices[region] - seeds[i]
        order = np.argsort(np.arctan2(offsets[:, 1], offsets[:, 0]))
        ring = np.clip(vor.vertices[[region[k] for k in order]], lower, upper)

        # The midpoint of a side is equally close to seed i and to the
        # point on the other side, and farther from every other point.
        midpoints = (ring + np.roll(ring, -1, axis=0)) / 2.0
        _, nearest = tree.query(midpoints, k=min(3, len(all_points)))
        labels = []
        for candidates in nearest:
            other = next(int(c) for c in candidates if c != i)
            labels.append(other if other < n else BOUNDARY)
        cells.append((ring, labels))

    return cells


class _VertexIndex:
    """
    Assigns diagram vertex ids to coordinates, merging near-coincident points.

    Points are hashed on a grid of ``merge_distance``; a lookup checks the
    3x3 block of grid cells around the point.
    """

    def __init__(self, diagram: VoronoiDiagram2D, merge_distance: float):
        self.diagram = diagram
        self.merge_distance = merge_distance
        self._grid: Dict[Tuple[int, int], List[Tuple[int, np.ndarray]]] = {}

    def vertex_id(self, point: np.ndarray) -> int:
        gx = int(np.floor(point[0] / self.merge_distance))
        gy = int(np.floor(point[1] / self.merge_distance))

        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for vertex_id, existing in self._grid.get((gx + dx, gy + dy), ()):
                    if np.hypot(*(existing - point)) <= self.merge_distance:
                        return vertex_id

        vertex_id = self.diagram.add_vert(point)
        self._grid.setdefault((gx, gy), []).append((vertex_id, point))
        return vertex_id


def _drop_repeated_ids(ids: List[int], labels: List[int]) -> Tuple[List[int], List[int]]:
    """Remove zero-length sides: a vertex equal to its successor is dropped."""
    kept_ids, kept_labels = [], []
    n = len(ids)
    for k in range(n):
        if n > 1 and ids[k] == ids[(k + 1) % n]:
            continue
        kept_ids.append(ids[k])
        kept_labels.append(labels[k])
    return kept_ids, kept_labels


def fill_diagram(
    diagram: VoronoiDiagram2D,
    cells: List[LabelledRing],
    merge_distance: float = 1e-6
) -> VoronoiDiagram2D:
    """
    Write labelled cells into a configured diagram and build every region.

    The diagram must hold the same seeds the cells were computed for and
    be in the CONFIGURED state.
    """
    index = _VertexIndex(diagram, merge_distance)
    lines: Dict[Tuple[int, int], int] = {}

    for i, (ring, labels) in enumerate(cells):
        diagram.clear_region(i)
        ids = [index.vertex_id(p) for p in ring]
        ids, labels = _drop_repeated_ids(ids, labels)

        if not ids:
            logger.warning("Empty region", seed_id=i)

        for vertex_id in ids:
            diagram.region_add_point_id(i, vertex_id)

        for k, j in enumerate(labels):
            # Each shared side is reported once, from the lower seed id
            if j <= i or len(ids) < 2:
                continue
            pair = (i, j)
            if pair not in lines:
                lines[pair] = diagram.add_line(pair)
                diagram.add_cell_neighbor(pair)
            diagram.add_edge(VoronoiEdge(
                left_id=ids[k],
                right_id=ids[(k + 1) % len(ids)],
                left_seed=i,
                right_seed=j,
                line_id=lines[pair]
            ))

    for i in range(len(cells)):
        diagram.build_edge(i)
    diagram.insert_cells()
    return diagram


class VoronoiDiagram2DGenerator:
    """
    Computes a bounded Voronoi diagram for a seed set.

    Example:
        >>> gen = VoronoiDiagram2DGenerator()
        >>> gen.set_seeds([[0, 0], [10, 0], [0, 10], [10, 10]])
        >>> gen.set_boundary([20, 20])
        >>> gen.set_origin([-5, -5])
        >>> diagram = gen.update()
        >>> sorted(diagram.neighbor_ids(0))
        [1, 2]
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self._seeds = np.zeros((0, 2), dtype=np.float64)
        self._window = BoundingWindow()
        self.diagram = VoronoiDiagram2D()

    # Seeds -------------------------------------------------------------

    @property
    def number_of_seeds(self) -> int:
        return len(self._seeds)

    def set_seeds(self, points) -> None:
        """Replace the seed set."""
        self._seeds = np.array([as_point(p) for p in points], dtype=np.float64).reshape(-1, 2)

    def add_seeds(self, points) -> None:
        new = np.array([as_point(p) for p in points], dtype=np.float64).reshape(-1, 2)
        self._seeds = np.vstack([self._seeds, new])

    def add_one_seed(self, point) -> None:
        self.add_seeds([point])

    def set_random_seeds(self, num: int, seed: Optional[int] = None) -> None:
        """Replace the seeds with ``num`` uniform points inside the window."""
        self._check_window()
        self._seeds = generate_random_seeds(num, self._window, seed)

    def sort_seeds(self) -> None:
        """Order seeds by y, then x."""
        order = np.lexsort((self._seeds[:, 0], self._seeds[:, 1]))
        self._seeds = self._seeds[order]

    def get_seed(self, seed_id: int) -> np.ndarray:
        return self._seeds[seed_id].copy()

    # Window ------------------------------------------------------------

    def set_boundary(self, size) -> None:
        size = as_point(size)
        self._window = BoundingWindow(self._window.origin, (float(size[0]), float(size[1])))

    def set_origin(self, origin) -> None:
        origin = as_point(origin)
        self._window = BoundingWindow((float(origin[0]), float(origin[1])), self._window.size)

    @property
    def window(self) -> BoundingWindow:
        return self._window

    def _check_window(self) -> None:
        if self._window.size[0] <= 0 or self._window.size[1] <= 0:
            raise ValueError(f"Boundary must have positive size, got {self._window.size}")

    # Generation --------------------------------------------------------

    def _validate_seeds(self) -> None:
        self._check_window()
        if len(self._seeds) == 0:
            raise ValueError("At least one seed is required")

        for i, p in enumerate(self._seeds):
            if not self._window.contains(p, self.config.tolerance):
                raise ValueError(f"Seed {i} at {tuple(p)} lies outside the boundary")

        if len(np.unique(self._seeds, axis=0)) != len(self._seeds):
            raise ValueError("Seeds must be pairwise distinct")

    def compute_cells(self, seeds: np.ndarray, window: BoundingWindow) -> List[LabelledRing]:
        if self.config.method == "scipy":
            return scipy_cells(seeds, window)
        return halfplane_cells(seeds, window, self.config.tolerance)

    def update(self) -> VoronoiDiagram2D:
        """
        Generate the diagram for the current seeds and window.

        Returns:
            The generator's diagram, in the QUERYABLE state
        """
        self._validate_seeds()
        logger.info(
            "Generating Voronoi diagram",
            num_seeds=len(self._seeds),
            method=self.config.method
        )

        diagram = self.diagram
        diagram.set_seeds(len(self._seeds), self._seeds)
        diagram.set_boundary(self._window.size)
        diagram.set_origin(self._window.origin)
        fill_diagram(
            diagram,
            self.compute_cells(self._seeds, self._window),
            self.config.merge_distance
        )

        logger.info(
            "Voronoi diagram generated",
            num_vertices=diagram.vertex_list_size(),
            num_edges=diagram.edge_list_size(),
            num_lines=diagram.line_list_size()
        )
        return diagram

    def rebuild(self) -> VoronoiDiagram2D:
        """
        Regenerate geometry for the seeds already held by the diagram.

        Uses ``reset`` so the diagram keeps its seeds, window and regions.
        """
        diagram = self.diagram
        if diagram.state in (BuildState.EMPTY, BuildState.SEEDS_SET):
            raise ValueError("Nothing to rebuild; call update() first")
        diagram.reset()
        cells = self.compute_cells(diagram.seeds_array(), diagram.window)
        fill_diagram(diagram, cells, self.config.merge_distance)
        return diagram

    def relax(self, iterations: int = 1) -> VoronoiDiagram2D:
        """
        Lloyd relaxation: move each seed to its region centroid and regenerate.

        Args:
            iterations: Number of centroid steps

        Returns:
            Diagram of the relaxed seeds
        """
        if iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {iterations}")

        diagram = self.update()
        logger.info("Starting Lloyd's relaxation", iterations=iterations)
        for iteration in range(iterations):
            self._seeds = np.array(
                [diagram.region_centroid(i) for i in range(diagram.number_of_seeds)]
            )
            diagram = self.update()
            logger.debug("Relaxation iteration complete", iteration=iteration + 1)
        return diagram
