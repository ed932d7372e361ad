"""
Tests for the Nearest-Seed KD-Tree

This module checks the KD-tree against brute-force nearest neighbor search
and checks region lookup on a built diagram.

Test Categories:
1. Construction
2. Correctness vs brute force
3. Edge cases (empty, single point, duplicates)
4. Batch queries
5. Region lookup through the diagram

Run with: pytest tests/test_kd_tree.py -v
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from voronoi_mesh.errors import PrematureQueryError
from voronoi_mesh.geometry.diagram import VoronoiDiagram2D
from voronoi_mesh.geometry.generator import VoronoiDiagram2DGenerator
from voronoi_mesh.geometry.kd_tree import KDTree, brute_force_nearest_neighbor


class TestKDTreeConstruction:
    """Tests for KD-tree construction."""

    def test_build_empty(self):
        """An empty point set gives an empty tree."""
        tree = KDTree(np.zeros((0, 2)))
        assert tree.root is None
        assert tree.n_points == 0

    def test_build_single_point(self):
        tree = KDTree(np.array([[5.0, 3.0]]))

        assert tree.n_points == 1
        assert np.allclose(tree.root.point, [5.0, 3.0])
        assert tree.root.left is None
        assert tree.root.right is None

    def test_root_splits_on_x(self):
        """The root splits on x and holds the median point."""
        points = np.array([[0.0, 0.0], [5.0, 1.0], [10.0, 2.0]])
        tree = KDTree(points)

        assert tree.root.split_dim == 0
        assert tree.root.index == 1


class TestNearestNeighbor:
    """Tests for nearest neighbor queries."""

    def test_nn_exact_match(self):
        points = np.array([[0.0, 0.0], [10.0, 0.0], [5.0, 5.0]])
        tree = KDTree(points)

        idx, dist = tree.nearest_neighbor([10.0, 0.0])

        assert idx == 1
        assert np.isclose(dist, 0.0)

    def test_nn_vs_brute_force(self):
        """KD-tree distances match brute force on random data."""
        np.random.seed(123)
        points = np.random.randn(500, 2) * 100
        tree = KDTree(points)

        for query in np.random.randn(50, 2) * 100:
            kd_idx, kd_dist = tree.nearest_neighbor(query)
            bf_idx, bf_dist = brute_force_nearest_neighbor(points, query)

            assert np.isclose(kd_dist, bf_dist, rtol=1e-10), \
                f"Mismatch: KD={kd_dist}, BF={bf_dist}"

    def test_nn_empty_raises(self):
        tree = KDTree(np.zeros((0, 2)))

        with pytest.raises(ValueError):
            tree.nearest_neighbor([0.0, 0.0])

    def test_duplicate_points(self):
        points = np.array([[5.0, 5.0], [5.0, 5.0], [0.0, 0.0]])
        tree = KDTree(points)

        idx, dist = tree.nearest_neighbor([5.0, 5.0])

        assert dist == 0.0
        assert idx in [0, 1]


class TestBatchQueries:
    """Tests for batch nearest-seed queries."""

    def test_batch_query(self):
        np.random.seed(7)
        points = np.random.rand(50, 2)
        queries = np.random.rand(20, 2)
        tree = KDTree(points)

        indices, distances = tree.query_batch(queries)

        assert indices.dtype == np.int64
        for i, query in enumerate(queries):
            _, bf_dist = brute_force_nearest_neighbor(points, query)
            assert np.isclose(distances[i], bf_dist)


class TestFindRegion:
    """Region lookup on a diagram."""

    @pytest.fixture
    def diagram(self):
        gen = VoronoiDiagram2DGenerator()
        gen.set_seeds([[0, 0], [10, 0], [0, 10], [10, 10]])
        gen.set_boundary([20, 20])
        gen.set_origin([-5, -5])
        return gen.update()

    def test_points_map_to_quadrant_seed(self, diagram):
        assert diagram.find_region([-4, -4]) == 0
        assert diagram.find_region([14, -1]) == 1
        assert diagram.find_region([1, 9]) == 2
        assert diagram.find_region([6, 6]) == 3

    def test_found_region_contains_point(self):
        """The region found for a point is the one whose seed is nearest."""
        np.random.seed(3)
        gen = VoronoiDiagram2DGenerator()
        gen.set_boundary([100, 100])
        gen.set_random_seeds(40, seed=3)
        diagram = gen.update()
        seeds = diagram.seeds_array()

        for query in np.random.rand(30, 2) * 100:
            expected, _ = brute_force_nearest_neighbor(seeds, query)
            assert diagram.find_region(query) == expected

    def test_batch_lookup_matches_single(self, diagram):
        queries = np.array([[-4, -4], [14, -1], [1, 9], [6, 6], [4.9, 4.9]])
        region_ids = diagram.find_regions(queries)

        assert region_ids.tolist() == [diagram.find_region(q) for q in queries]
        assert region_ids.tolist() == [0, 1, 2, 3, 0]

    def test_without_seeds_raises(self):
        with pytest.raises(PrematureQueryError):
            VoronoiDiagram2D().find_region([0, 0])
        with pytest.raises(PrematureQueryError):
            VoronoiDiagram2D().find_regions([[0, 0]])
