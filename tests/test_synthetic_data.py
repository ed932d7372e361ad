"""
Tests for Synthetic Seed Generation

Test Categories:
1. Shapes and bounds for every pattern
2. Reproducibility
3. Argument validation

Run with: pytest tests/test_synthetic_data.py -v
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from voronoi_mesh.data_models import BoundingWindow
from voronoi_mesh.synthetic_data import (
    SeedPattern,
    generate_clustered_seeds,
    generate_grid_seeds,
    generate_jittered_grid,
    generate_random_seeds,
    generate_seeds,
)


WINDOW = BoundingWindow((10.0, -20.0), (200.0, 100.0))


class TestPatterns:
    """Every pattern returns the requested number of seeds inside the window."""

    @pytest.mark.parametrize("pattern", list(SeedPattern))
    def test_shape_and_bounds(self, pattern):
        seeds = generate_seeds(pattern, 37, WINDOW, seed=1)

        assert seeds.shape == (37, 2)
        for p in seeds:
            assert WINDOW.contains(p)

    def test_grid_is_regular(self):
        window = BoundingWindow((0, 0), (4, 4))
        seeds = generate_grid_seeds(4, window)
        assert np.allclose(seeds, [[1, 1], [3, 1], [1, 3], [3, 3]])

    def test_grid_truncates_to_num(self):
        seeds = generate_grid_seeds(5, BoundingWindow((0, 0), (10, 10)))
        assert len(seeds) == 5

    def test_jitter_stays_in_grid_cell(self):
        window = BoundingWindow((0, 0), (10, 10))
        grid = generate_grid_seeds(25, window)
        jittered = generate_jittered_grid(25, window, seed=3, jitter=0.5)

        assert np.all(np.abs(jittered - grid) <= 1.0 * 0.5 + 1e-12)

    def test_random_margin(self):
        seeds = generate_random_seeds(200, WINDOW, seed=0, margin=5.0)
        assert seeds[:, 0].min() >= WINDOW.x_min + 5.0
        assert seeds[:, 1].max() <= WINDOW.y_max - 5.0

    def test_clustered_clipped_to_window(self):
        seeds = generate_clustered_seeds(500, WINDOW, seed=2, spread=0.5)
        assert seeds[:, 0].min() >= WINDOW.x_min
        assert seeds[:, 0].max() <= WINDOW.x_max

    def test_zero_seeds(self):
        assert generate_seeds(SeedPattern.RANDOM, 0, WINDOW).shape == (0, 2)


class TestReproducibility:
    """Random patterns depend only on the random seed."""

    @pytest.mark.parametrize("pattern", [SeedPattern.RANDOM, SeedPattern.JITTERED_GRID,
                                         SeedPattern.CLUSTERED])
    def test_same_seed_same_points(self, pattern):
        a = generate_seeds(pattern, 50, WINDOW, seed=42)
        b = generate_seeds(pattern, 50, WINDOW, seed=42)
        assert np.array_equal(a, b)

    def test_different_seed_different_points(self):
        a = generate_seeds(SeedPattern.RANDOM, 50, WINDOW, seed=1)
        b = generate_seeds(SeedPattern.RANDOM, 50, WINDOW, seed=2)
        assert not np.array_equal(a, b)


class TestValidation:
    """Arguments that are rejected."""

    def test_negative_num(self):
        with pytest.raises(ValueError):
            generate_seeds(SeedPattern.GRID, -1, WINDOW)

    def test_empty_window(self):
        with pytest.raises(ValueError):
            generate_seeds(SeedPattern.RANDOM, 10, BoundingWindow((0, 0), (0, 10)))

    def test_jitter_out_of_range(self):
        with pytest.raises(ValueError):
            generate_jittered_grid(10, WINDOW, jitter=1.0)
