"""
Tests for Diagram Storage Containers

This module tests the append-only sequences, the neighbor graph, the
region set and the generic mesh that a diagram is assembled from.

Test Categories:
1. PointStore and SeedTable
2. LineList and EdgeList
3. NeighborGraph
4. RegionSet
5. Mesh and cell handles

Run with: pytest tests/test_containers.py -v
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from voronoi_mesh.data_models import BoundingWindow, CellKind, EdgeInfo, MeshCell, VoronoiEdge
from voronoi_mesh.errors import (
    DegeneratePairError, OutOfRangeError, PrematureQueryError, StateViolationError
)
from voronoi_mesh.geometry.containers import EdgeList, LineList, PointStore, SeedTable, as_point
from voronoi_mesh.geometry.mesh import Mesh
from voronoi_mesh.geometry.neighbors import NeighborGraph
from voronoi_mesh.geometry.regions import RegionSet


class TestPointStore:
    """Tests for vertex coordinate storage."""

    def test_append_returns_previous_length(self):
        store = PointStore()
        assert store.append([1, 2]) == 0
        assert store.append([3, 4]) == 1
        assert len(store) == 2

    def test_growth_keeps_points(self):
        store = PointStore(initial_capacity=2)
        for i in range(50):
            store.append([i, -i])

        assert len(store) == 50
        assert np.array_equal(store.get(0), [0, 0])
        assert np.array_equal(store.get(49), [49, -49])
        assert store.as_array().shape == (50, 2)

    def test_get_returns_copy(self):
        store = PointStore()
        store.append([1, 1])
        point = store.get(0)
        point[0] = 99
        assert np.array_equal(store.get(0), [1, 1])

    def test_out_of_range(self):
        store = PointStore()
        store.append([0, 0])
        with pytest.raises(OutOfRangeError):
            store.get(1)
        with pytest.raises(OutOfRangeError):
            store.get(-1)

    def test_clear_restarts_ids(self):
        store = PointStore()
        store.append([0, 0])
        store.clear()
        assert len(store) == 0
        assert store.append([5, 5]) == 0

    def test_items_in_id_order(self):
        store = PointStore()
        store.append([1, 0])
        store.append([2, 0])
        assert [i for i, _ in store.items()] == [0, 1]

    def test_as_point_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            as_point([1, 2, 3])


class TestSeedTable:
    """Tests for seed storage."""

    def test_set_copies_points(self):
        source = np.array([[1.0, 2.0], [3.0, 4.0]])
        table = SeedTable()
        table.set(2, source)
        source[0, 0] = 100.0

        assert np.array_equal(table.get(0), [1, 2])

    def test_set_accepts_generator(self):
        table = SeedTable()
        table.set(3, ((i, i) for i in range(10)))
        assert len(table) == 3

    def test_negative_num_raises(self):
        with pytest.raises(ValueError):
            SeedTable().set(-1, [])

    def test_zero_num_raises(self):
        table = SeedTable()
        with pytest.raises(ValueError):
            table.set(0, [[1.0, 2.0]])
        assert len(table) == 0

    def test_check_unknown_id(self):
        table = SeedTable()
        table.set(1, [[0, 0]])
        with pytest.raises(OutOfRangeError) as exc_info:
            table.check(1, "add_line")
        assert exc_info.value.accessor == "add_line"


class TestLineAndEdgeLists:
    """Tests for the append-only record lists."""

    def test_line_ids(self):
        lines = LineList()
        assert lines.append(EdgeInfo(0, 1)) == 0
        assert lines.append(EdgeInfo(1, 2)) == 1
        assert lines.get(1) == EdgeInfo(1, 2)

    def test_line_out_of_range_accessor(self):
        with pytest.raises(OutOfRangeError) as exc_info:
            LineList().get(0)
        assert exc_info.value.accessor == "get_line"

    def test_edge_list_shares_line_ids(self):
        edges = EdgeList()
        edges.append(VoronoiEdge(0, 1, 0, 1, 0))
        edges.append(VoronoiEdge(1, 2, 0, 1, 0))
        assert [e.line_id for e in edges] == [0, 0]

    def test_edge_out_of_range_accessor(self):
        with pytest.raises(OutOfRangeError) as exc_info:
            EdgeList().get(3, accessor="get_edge_end")
        assert exc_info.value.accessor == "get_edge_end"

    def test_edge_info_other(self):
        pair = EdgeInfo(4, 9)
        assert pair.other(4) == 9
        assert pair.other(9) == 4
        with pytest.raises(ValueError):
            pair.other(1)


class TestNeighborGraph:
    """Tests for seed adjacency."""

    def test_add_is_symmetric(self):
        graph = NeighborGraph(3)
        graph.add(EdgeInfo(0, 2))

        assert list(graph.neighbor_ids(0)) == [2]
        assert list(graph.neighbor_ids(2)) == [0]
        assert list(graph.neighbor_ids(1)) == []

    def test_pairs_listed_once(self):
        graph = NeighborGraph(4)
        graph.add((0, 1))
        graph.add((3, 1))
        assert sorted(graph.pairs()) == [(0, 1), (1, 3)]
        assert graph.degree(1) == 2

    def test_degenerate_pair(self):
        with pytest.raises(DegeneratePairError):
            NeighborGraph(2).add((1, 1))

    def test_unknown_seed(self):
        with pytest.raises(OutOfRangeError):
            NeighborGraph(2).add((0, 2))

    def test_clear_keeps_size(self):
        graph = NeighborGraph(2)
        graph.add((0, 1))
        graph.clear()
        assert len(graph) == 2
        assert list(graph.neighbor_ids(0)) == []


class TestRegionSet:
    """Tests for region collection and building."""

    def test_build_freezes_points(self):
        regions = RegionSet(2)
        for vertex_id in [3, 1, 2]:
            regions.add_point_id(0, vertex_id)

        cell = regions.build(0)

        assert cell == MeshCell.polygon([3, 1, 2])
        assert regions.num_built == 1
        assert not regions.all_built

    def test_unbuilt_cell_query(self):
        regions = RegionSet(1)
        with pytest.raises(PrematureQueryError):
            regions.cell(0)

    def test_add_after_build(self):
        regions = RegionSet(1)
        regions.build(0)
        with pytest.raises(StateViolationError):
            regions.add_point_id(0, 1)

    def test_clear_unbuilds(self):
        regions = RegionSet(1)
        regions.add_point_id(0, 5)
        regions.build(0)
        regions.clear(0)

        assert not regions.all_built
        assert regions.region(0, "test").point_ids == []

    def test_unknown_region(self):
        with pytest.raises(OutOfRangeError):
            RegionSet(1).add_point_id(1, 0)


class TestMesh:
    """Tests for the generic mesh and cell handles."""

    def test_cells_sorted_by_id(self):
        mesh = Mesh()
        mesh.set_cell(2, MeshCell.line(0, 1))
        mesh.set_cell(0, MeshCell.polygon([0, 1, 2]))

        assert [i for i, _ in mesh.cells()] == [0, 2]
        assert mesh.has_cell(2)
        assert not mesh.has_cell(1)

    def test_missing_cell(self):
        with pytest.raises(OutOfRangeError):
            Mesh().get_cell(0)

    def test_cell_coordinates_and_bounds(self):
        mesh = Mesh()
        for p in [[0, 0], [4, 0], [4, 3]]:
            mesh.points.append(p)

        coords = mesh.cell_coordinates(MeshCell.polygon([2, 0]))

        assert np.array_equal(coords, [[4, 3], [0, 0]])
        assert mesh.bounding_box() == (0.0, 0.0, 4.0, 3.0)

    def test_empty_bounds(self):
        assert Mesh().bounding_box() is None

    def test_cell_edges_by_kind(self):
        assert MeshCell.line(3, 4).edges() == (EdgeInfo(3, 4),)
        assert MeshCell.polygon([1]).edges() == ()
        triangle = MeshCell.polygon([0, 1, 2])
        assert triangle.kind == CellKind.POLYGON
        assert triangle.edges() == (EdgeInfo(0, 1), EdgeInfo(1, 2), EdgeInfo(2, 0))

    def test_window_corners(self):
        window = BoundingWindow((1, 2), (3, 4))
        assert np.array_equal(window.corners(), [[1, 2], [4, 2], [4, 6], [1, 6]])
        assert window.contains((4, 6))
        assert not window.contains((4.1, 6))
