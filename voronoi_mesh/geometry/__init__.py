"""
Geometry Module for the Voronoi Diagram Mesh

This module provides the mesh structure and the code that fills it:
- containers: append-only vertex, seed, line and edge storage
- neighbors / regions: seed adjacency and per-seed polygons
- mesh: generic point/cell container the diagram publishes into
- diagram: the VoronoiDiagram2D orchestrator and its build-cycle checks
- generator: bounded diagram construction (half-plane or scipy backend)
- kd_tree: nearest-seed search for region lookup
"""

from .containers import PointStore, SeedTable, LineList, EdgeList
from .neighbors import NeighborGraph
from .regions import RegionSet, VoronoiRegion
from .mesh import Mesh
from .diagram import VoronoiDiagram2D
from .generator import (
    GeneratorConfig,
    VoronoiDiagram2DGenerator,
    fill_diagram,
    halfplane_cells,
    scipy_cells
)
from .kd_tree import KDTree, brute_force_nearest_neighbor

__all__ = [
    'PointStore',
    'SeedTable',
    'LineList',
    'EdgeList',
    'NeighborGraph',
    'RegionSet',
    'VoronoiRegion',
    'Mesh',
    'VoronoiDiagram2D',
    'GeneratorConfig',
    'VoronoiDiagram2DGenerator',
    'fill_diagram',
    'halfplane_cells',
    'scipy_cells',
    'KDTree',
    'brute_force_nearest_neighbor'
]
