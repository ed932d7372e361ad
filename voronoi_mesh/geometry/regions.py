"""
Voronoi Regions

Each seed owns exactly one region. While the diagram is being filled a
region only collects boundary vertex ids in the order the builder finds
them; ``build`` then freezes that list into a polygon cell. The built
cell is what consumers see, so a region that has not been built cannot
be queried.

Lifecycle of one region:
    pending (collecting ids) → build() → built → clear() → pending
"""

from typing import List, Optional

from ..data_models import MeshCell
from ..errors import OutOfRangeError, PrematureQueryError, StateViolationError


class VoronoiRegion:
    """
    Boundary of the region around one seed.

    Attributes:
        seed_id: Seed this region belongs to
        point_ids: Boundary vertex ids collected so far
        cell: Built polygon, or None until build() runs
    """

    def __init__(self, seed_id: int):
        self.seed_id = seed_id
        self.point_ids: List[int] = []
        self.cell: Optional[MeshCell] = None

    @property
    def is_built(self) -> bool:
        return self.cell is not None

    def add_point_id(self, point_id: int) -> None:
        if self.cell is not None:
            raise StateViolationError(
                "region_add_point_id",
                f"region {self.seed_id} is already built; clear it first",
                index=self.seed_id
            )
        self.point_ids.append(point_id)

    def clear_points(self) -> None:
        self.point_ids = []
        self.cell = None

    def build(self) -> MeshCell:
        if self.cell is not None:
            raise StateViolationError(
                "build_edge",
                f"region {self.seed_id} was already built",
                index=self.seed_id
            )
        self.cell = MeshCell.polygon(self.point_ids)
        return self.cell


class RegionSet:
    """
    Arena of regions indexed by seed id.

    The set always holds one region per seed; region i belongs to seed i.
    """

    def __init__(self, num_regions: int = 0):
        self._regions: List[VoronoiRegion] = []
        self.allocate(num_regions)

    def __len__(self) -> int:
        return len(self._regions)

    def __iter__(self):
        return iter(self._regions)

    def allocate(self, num_regions: int) -> None:
        self._regions = [VoronoiRegion(i) for i in range(num_regions)]

    def region(self, region_id: int, accessor: str) -> VoronoiRegion:
        if not 0 <= region_id < len(self._regions):
            raise OutOfRangeError(accessor, region_id, len(self._regions))
        return self._regions[region_id]

    def clear(self, region_id: int) -> None:
        self.region(region_id, "clear_region").clear_points()

    def clear_all(self) -> None:
        for region in self._regions:
            region.clear_points()

    def add_point_id(self, region_id: int, point_id: int) -> None:
        self.region(region_id, "region_add_point_id").add_point_id(point_id)

    def build(self, region_id: int) -> MeshCell:
        return self.region(region_id, "build_edge").build()

    def cell(self, region_id: int, accessor: str = "get_cell_id") -> MeshCell:
        region = self.region(region_id, accessor)
        if region.cell is None:
            raise PrematureQueryError(
                accessor,
                f"region {region_id} has not been built",
                index=region_id
            )
        return region.cell

    @property
    def all_built(self) -> bool:
        return all(r.is_built for r in self._regions)

    @property
    def num_built(self) -> int:
        return sum(1 for r in self._regions if r.is_built)
