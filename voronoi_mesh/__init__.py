"""
Bounded 2D Voronoi Diagram Mesh

This package stores a Voronoi diagram as a mesh that a builder fills
incrementally and region-based image analysis code reads afterwards:
seeds, vertices, bisector lines, edges, one polygon region per seed and
the seed adjacency graph.

Main modules:
- data_models: Value types (edges, cells, clip window, build states)
- errors: Exception hierarchy for out-of-range, premature and
  out-of-order calls
- geometry: Storage containers, the diagram itself, the generic mesh,
  the reference generator and nearest-seed search
- synthetic_data: Seed set generation
- timing: Benchmarking utilities
- visualize / main: matplotlib plot and command line tool
"""

from .data_models import (
    BoundingWindow,
    BuildState,
    CellKind,
    EdgeInfo,
    MeshCell,
    VoronoiEdge
)
from .errors import (
    DegeneratePairError,
    OutOfRangeError,
    PrematureQueryError,
    ReentrancyError,
    StateViolationError,
    VoronoiDiagramError
)
from .geometry import (
    GeneratorConfig,
    Mesh,
    VoronoiDiagram2D,
    VoronoiDiagram2DGenerator
)

__version__ = "1.0.0"

__all__ = [
    'BoundingWindow',
    'BuildState',
    'CellKind',
    'EdgeInfo',
    'MeshCell',
    'VoronoiEdge',
    'DegeneratePairError',
    'OutOfRangeError',
    'PrematureQueryError',
    'ReentrancyError',
    'StateViolationError',
    'VoronoiDiagramError',
    'GeneratorConfig',
    'Mesh',
    'VoronoiDiagram2D',
    'VoronoiDiagram2DGenerator'
]
