"""
Generic 2D Mesh Container

A minimal point/cell mesh: points with stable integer ids and cells
stored under integer ids. The Voronoi diagram owns one of these and
publishes its built regions into it, so code written against the generic
mesh can read the diagram without knowing about seeds or bisectors.

The point storage is shared with the diagram's vertex list rather than
copied.
"""

from typing import Dict, Iterator, Optional, Tuple
import numpy as np

from ..data_models import MeshCell
from ..errors import OutOfRangeError
from .containers import PointStore


class Mesh:
    """
    Points plus cells keyed by id.

    Attributes:
        points: Shared point storage
    """

    def __init__(self, points: Optional[PointStore] = None):
        self.points = points if points is not None else PointStore()
        self._cells: Dict[int, MeshCell] = {}

    @property
    def number_of_points(self) -> int:
        return len(self.points)

    @property
    def number_of_cells(self) -> int:
        return len(self._cells)

    def get_point(self, point_id: int) -> np.ndarray:
        return self.points.get(point_id, accessor="get_point")

    def set_cell(self, cell_id: int, cell: MeshCell) -> None:
        self._cells[cell_id] = cell

    def get_cell(self, cell_id: int) -> MeshCell:
        try:
            return self._cells[cell_id]
        except KeyError:
            raise OutOfRangeError("get_cell", cell_id, len(self._cells)) from None

    def has_cell(self, cell_id: int) -> bool:
        return cell_id in self._cells

    def cells(self) -> Iterator[Tuple[int, MeshCell]]:
        """Yield (id, cell) pairs in ascending id order."""
        for cell_id in sorted(self._cells):
            yield cell_id, self._cells[cell_id]

    def clear_cells(self) -> None:
        self._cells.clear()

    def cell_coordinates(self, cell: MeshCell) -> np.ndarray:
        """Return the coordinates of a cell's points, shape (k, 2)."""
        if not cell.point_ids:
            return np.zeros((0, 2), dtype=np.float64)
        return np.array(
            [self.get_point(p) for p in cell.point_ids], dtype=np.float64
        )

    def bounding_box(self) -> Optional[Tuple[float, float, float, float]]:
        """
        Axis-aligned bounds of all points.

        Returns:
            (x_min, y_min, x_max, y_max), or None for an empty mesh
        """
        if len(self.points) == 0:
            return None
        pts = self.points.as_array()
        x_min, y_min = pts.min(axis=0)
        x_max, y_max = pts.max(axis=0)
        return float(x_min), float(y_min), float(x_max), float(y_max)
