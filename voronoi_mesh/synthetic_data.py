"""
Synthetic Seed Sets for Voronoi Diagrams

This module generates seed point sets inside a bounding window. There is
no external dataset: tests, the command line tool and the benchmarks all
build their inputs here.

Key Features:
- Uniform random seeds
- Regular grids (many co-circular seeds, a stress case for builders)
- Jittered grids (regular spacing without artificial alignment)
- Gaussian clusters clipped to the window
- Reproducible results via random seed control

Example Usage:
    >>> from voronoi_mesh.data_models import BoundingWindow
    >>> from voronoi_mesh.synthetic_data import generate_seeds, SeedPattern
    >>> window = BoundingWindow((0.0, 0.0), (100.0, 100.0))
    >>> seeds = generate_seeds(SeedPattern.JITTERED_GRID, 25, window, seed=42)
"""

from enum import Enum
from typing import Optional
import numpy as np

from .data_models import BoundingWindow


class SeedPattern(Enum):
    """Layouts for synthetic seed sets."""
    RANDOM = "random"                 # Uniform over the window
    GRID = "grid"                     # Cell centers of a regular grid
    JITTERED_GRID = "jittered_grid"   # Grid with per-point random offsets
    CLUSTERED = "clustered"           # Gaussian blobs around random centers


def _grid_shape(num: int, window: BoundingWindow):
    """Rows and columns whose product is at least ``num``, matching the aspect ratio."""
    width, height = window.size
    cols = max(1, int(round(np.sqrt(num * width / height))))
    rows = max(1, int(np.ceil(num / cols)))
    return rows, cols


def generate_random_seeds(
    num: int,
    window: BoundingWindow,
    seed: Optional[int] = None,
    margin: float = 0.0
) -> np.ndarray:
    """
    Uniformly distributed seeds.

    Args:
        num: Number of seeds
        window: Area to fill
        seed: Random seed for reproducibility
        margin: Distance kept free along every side of the window

    Returns:
        Array of shape (num, 2)
    """
    rng = np.random.RandomState(seed)
    x = rng.uniform(window.x_min + margin, window.x_max - margin, size=num)
    y = rng.uniform(window.y_min + margin, window.y_max - margin, size=num)
    return np.column_stack([x, y])


def generate_grid_seeds(num: int, window: BoundingWindow) -> np.ndarray:
    """
    Seeds at the centers of a regular grid, row by row.

    The grid is the smallest one with at least ``num`` cells; only the
    first ``num`` centers are returned.
    """
    rows, cols = _grid_shape(num, window)
    dx = window.size[0] / cols
    dy = window.size[1] / rows

    points = [
        [window.x_min + (c + 0.5) * dx, window.y_min + (r + 0.5) * dy]
        for r in range(rows)
        for c in range(cols)
    ]
    return np.array(points[:num], dtype=np.float64).reshape(-1, 2)


def generate_jittered_grid(
    num: int,
    window: BoundingWindow,
    seed: Optional[int] = None,
    jitter: float = 0.9
) -> np.ndarray:
    """
    Grid seeds moved by a random offset inside their own grid cell.

    Args:
        num: Number of seeds
        window: Area to fill
        seed: Random seed for reproducibility
        jitter: Maximum offset as a fraction of half the cell size

    Returns:
        Array of shape (num, 2)
    """
    if not 0.0 <= jitter < 1.0:
        raise ValueError(f"jitter must be in [0, 1), got {jitter}")

    rng = np.random.RandomState(seed)
    points = generate_grid_seeds(num, window)
    rows, cols = _grid_shape(num, window)
    half_cell = np.array([window.size[0] / cols, window.size[1] / rows]) / 2.0

    offsets = rng.uniform(-1.0, 1.0, size=points.shape) * half_cell * jitter
    return points + offsets


def generate_clustered_seeds(
    num: int,
    window: BoundingWindow,
    seed: Optional[int] = None,
    num_clusters: int = 4,
    spread: float = 0.08
) -> np.ndarray:
    """
    Seeds drawn from Gaussian blobs, clipped into the window.

    Args:
        num: Number of seeds
        window: Area to fill
        seed: Random seed for reproducibility
        num_clusters: Number of blob centers
        spread: Blob standard deviation as a fraction of the window size

    Returns:
        Array of shape (num, 2)
    """
    rng = np.random.RandomState(seed)
    centers = generate_random_seeds(num_clusters, window, seed=rng.randint(2**31 - 1))
    labels = rng.randint(0, num_clusters, size=num)
    sigma = np.array(window.size) * spread

    points = centers[labels] + rng.normal(size=(num, 2)) * sigma
    points[:, 0] = np.clip(points[:, 0], window.x_min, window.x_max)
    points[:, 1] = np.clip(points[:, 1], window.y_min, window.y_max)
    return points


def generate_seeds(
    pattern: SeedPattern,
    num: int,
    window: BoundingWindow,
    seed: Optional[int] = None
) -> np.ndarray:
    """
    Generate a seed set with the given layout.

    Raises:
        ValueError: If num is negative or the window has no area
    """
    if num < 0:
        raise ValueError(f"num must be non-negative, got {num}")
    if window.size[0] <= 0 or window.size[1] <= 0:
        raise ValueError(f"Window must have positive size, got {window.size}")

    if pattern == SeedPattern.RANDOM:
        return generate_random_seeds(num, window, seed)
    elif pattern == SeedPattern.GRID:
        return generate_grid_seeds(num, window)
    elif pattern == SeedPattern.JITTERED_GRID:
        return generate_jittered_grid(num, window, seed)
    elif pattern == SeedPattern.CLUSTERED:
        return generate_clustered_seeds(num, window, seed)
    else:
        raise ValueError(f"Unknown seed pattern: {pattern}")
