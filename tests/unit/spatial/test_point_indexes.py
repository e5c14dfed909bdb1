"""
Unit tests for the point index strategies.

Both QuadtreeIndex and KDTreeIndex must answer any_within() identically,
including the strict boundary: a point at exactly the query radius is not
a conflict.
"""

import pytest
import numpy as np

from poisson_disk.core.types import Point2D
from poisson_disk.spatial import KDTreeIndex, QuadtreeIndex, create_point_index


BOUNDS = (-100.0, 100.0, -100.0, 100.0)


def make_quadtree():
    return QuadtreeIndex(BOUNDS, capacity=4, max_depth=12)


def make_kdtree():
    return KDTreeIndex(rebuild_every=8)


INDEX_FACTORIES = [
    pytest.param(make_quadtree, id="quadtree"),
    pytest.param(make_kdtree, id="kdtree"),
]


@pytest.mark.parametrize("factory", INDEX_FACTORIES)
class TestPointIndexContract:
    """Behavior shared by every index strategy."""

    def test_empty_index_has_no_conflicts(self, factory):
        index = factory()
        assert len(index) == 0
        assert index.any_within(Point2D(0.0, 0.0), 10.0) is False
        assert index.all_points() == []

    def test_point_inside_radius_conflicts(self, factory):
        index = factory()
        index.insert(Point2D(0.0, 0.0))
        assert index.any_within(Point2D(5.0, 5.0), 10.0) is True

    def test_point_outside_radius_does_not_conflict(self, factory):
        index = factory()
        index.insert(Point2D(0.0, 0.0))
        assert index.any_within(Point2D(20.0, 0.0), 10.0) is False

    def test_exact_distance_is_not_a_conflict(self, factory):
        """Strict inequality: distance == r passes the proximity test."""
        index = factory()
        index.insert(Point2D(0.0, 0.0))
        assert index.any_within(Point2D(10.0, 0.0), 10.0) is False
        assert index.any_within(Point2D(0.0, -10.0), 10.0) is False
        assert index.any_within(Point2D(3.0, 4.0), 5.0) is False

    def test_just_inside_radius_conflicts(self, factory):
        index = factory()
        index.insert(Point2D(0.0, 0.0))
        assert index.any_within(Point2D(9.999999, 0.0), 10.0) is True
        assert index.any_within(Point2D(3.0, 4.0), 5.000001) is True

    def test_all_points_in_insertion_order(self, factory):
        index = factory()
        points = [Point2D(float(i), float(-i)) for i in range(30)]
        for p in points:
            index.insert(p)
        assert index.all_points() == points
        assert len(index) == 30

    def test_all_points_returns_copy(self, factory):
        index = factory()
        index.insert(Point2D(1.0, 1.0))
        index.all_points().clear()
        assert len(index.all_points()) == 1

    def test_matches_brute_force(self, factory):
        """any_within() agrees with an exhaustive distance check."""
        rng = np.random.default_rng(7)
        stored = rng.uniform(-100.0, 100.0, size=(300, 2))
        queries = rng.uniform(-100.0, 100.0, size=(300, 2))
        radius = 6.0

        index = factory()
        for x, y in stored:
            index.insert(Point2D(float(x), float(y)))

        for x, y in queries:
            d2 = np.sum((stored - np.array([x, y])) ** 2, axis=1)
            expected = bool(np.any(d2 < radius * radius))
            assert index.any_within(Point2D(float(x), float(y)), radius) is expected


class TestQuadtreeIndex:
    """Tests specific to the region-partitioning tree."""

    def test_insert_outside_bounds_raises(self):
        index = make_quadtree()
        with pytest.raises(ValueError):
            index.insert(Point2D(100.5, 0.0))

    def test_boundary_points_accepted(self):
        index = make_quadtree()
        index.insert(Point2D(100.0, 100.0))
        index.insert(Point2D(-100.0, -100.0))
        assert len(index) == 2

    def test_invalid_bounds_raise(self):
        with pytest.raises(ValueError):
            QuadtreeIndex((1.0, 0.0, 0.0, 1.0))

    def test_splits_on_overflow(self):
        index = QuadtreeIndex(BOUNDS, capacity=2, max_depth=8)
        assert index._root.children is None
        for p in [(-50.0, -50.0), (50.0, 50.0), (-50.0, 50.0)]:
            index.insert(Point2D(*p))
        assert index._root.children is not None
        assert index.any_within(Point2D(49.0, 49.0), 2.0)
        assert not index.any_within(Point2D(50.0, -50.0), 2.0)

    def test_coincident_points_stop_at_max_depth(self):
        """Identical points cannot be separated; splitting stops at max_depth."""
        index = QuadtreeIndex(BOUNDS, capacity=2, max_depth=4)
        for _ in range(20):
            index.insert(Point2D(1.0, 1.0))
        node = index._root
        while node.children is not None:
            node = node.child_for(Point2D(1.0, 1.0))
        assert node.depth == 4
        assert len(node.points) == 20
        assert index.any_within(Point2D(1.0, 1.0), 0.5)


class TestKDTreeIndex:
    """Tests specific to the nearest-neighbor tree."""

    def test_nearest_distance_empty_is_inf(self):
        assert KDTreeIndex().nearest_distance(Point2D(0.0, 0.0)) == float("inf")

    def test_nearest_distance_spans_tree_and_buffer(self):
        index = KDTreeIndex(rebuild_every=2)
        index.insert(Point2D(10.0, 0.0))
        index.insert(Point2D(20.0, 0.0))
        assert index.rebuild_count == 1
        index.insert(Point2D(0.0, 3.0))
        assert index.nearest_distance(Point2D(0.0, 0.0)) == pytest.approx(3.0)
        assert index.nearest_distance(Point2D(19.0, 0.0)) == pytest.approx(1.0)

    def test_rebuilds_are_amortized(self):
        """Rebuild count grows logarithmically once the tree is large."""
        index = KDTreeIndex(rebuild_every=4)
        for i in range(1000):
            index.insert(Point2D(float(i), 0.0))
        assert index.rebuild_count < 20

    def test_invalid_rebuild_every(self):
        with pytest.raises(ValueError):
            KDTreeIndex(rebuild_every=0)


class TestCreatePointIndex:
    """Tests for the strategy factory."""

    def test_quadtree(self):
        index = create_point_index("quadtree", BOUNDS, quadtree_capacity=3)
        assert isinstance(index, QuadtreeIndex)
        assert index.capacity == 3
        assert index.bounds == BOUNDS

    def test_kdtree(self):
        index = create_point_index("kdtree", BOUNDS, kdtree_rebuild_every=5)
        assert isinstance(index, KDTreeIndex)
        assert index.rebuild_every == 5

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown index strategy"):
            create_point_index("rtree", BOUNDS)
