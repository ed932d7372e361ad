"""
Exception Hierarchy for the Voronoi Diagram Mesh

Every failure in the diagram core is reported immediately to the caller.
There is no retry and no partial-result mode: a malformed diagram cannot
safely drive region-based decisions downstream.

Taxonomy:
- OutOfRangeError: an id at or beyond the current count of a sequence
- PrematureQueryError: a query issued before the data it reads was built
- StateViolationError: a call that the build-cycle state machine rejects
- ReentrancyError: a mutation entered while another one is in progress
- DegeneratePairError: a seed pair whose two ids are equal

Each error records the accessor that failed and, where there is one,
the offending id.
"""

from typing import Optional


class VoronoiDiagramError(Exception):
    """Base class for all diagram errors."""

    def __init__(self, accessor: str, message: str, index: Optional[int] = None):
        self.accessor = accessor
        self.index = index
        super().__init__(f"{accessor}: {message}")


class OutOfRangeError(VoronoiDiagramError, IndexError):
    """An id was not in [0, size) for the sequence it addresses."""

    def __init__(self, accessor: str, index: int, size: int):
        self.size = size
        super().__init__(
            accessor,
            f"id {index} out of range [0, {size})",
            index=index
        )


class PrematureQueryError(VoronoiDiagramError, RuntimeError):
    """Data was queried before the build step that produces it."""


class StateViolationError(VoronoiDiagramError, RuntimeError):
    """A call is not allowed in the diagram's current build state."""


class ReentrancyError(VoronoiDiagramError, RuntimeError):
    """A mutation started while another mutation was still running."""


class DegeneratePairError(VoronoiDiagramError, ValueError):
    """A seed pair refers to the same seed twice."""

    def __init__(self, accessor: str, seed_id: int):
        super().__init__(
            accessor,
            f"seed pair ({seed_id}, {seed_id}) must have distinct ids",
            index=seed_id
        )
