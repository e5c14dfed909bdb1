"""
Unit tests for the Poisson-disk sampler.

Covers the sampling invariants (minimum distance, containment, seed
inclusion, termination), determinism under a replayed random stream,
parameter validation and degenerate regions.
"""

from concurrent.futures import ThreadPoolExecutor
import numpy as np
import pytest

from pds_policies import PoissonSamplingPolicy
from poisson_disk.core.errors import (
    DegenerateRegionError,
    InvalidSamplingParametersError,
    PoissonSamplingError,
)
from poisson_disk.core.region import CircleRegion, RectRegion
from poisson_disk.core.region_polygon import PolygonRegion
from poisson_disk.core.types import Point2D
from poisson_disk.ops.poisson import poisson_disk_sample, sample_poisson_points
from poisson_disk.utils.geometry import min_pairwise_distance, packing_bound
from poisson_disk.utils.random_source import (
    NumpyRandomSource,
    RecordingRandomSource,
    ReplayRandomSource,
)


INDEXES = ["quadtree", "kdtree"]


def small_rect():
    return RectRegion(x_min=0.0, x_max=40.0, y_min=0.0, y_max=30.0)


def small_circle():
    return CircleRegion(radius=20.0, center=Point2D(5.0, -5.0))


def small_polygon():
    return PolygonRegion(vertices=[(0, 0), (40, 0), (40, 10), (10, 10), (10, 40), (0, 40)])


REGIONS = [
    pytest.param(small_rect, id="rect"),
    pytest.param(small_circle, id="circle"),
    pytest.param(small_polygon, id="polygon"),
]


@pytest.mark.parametrize("index", INDEXES)
@pytest.mark.parametrize("make_region", REGIONS)
class TestSamplingInvariants:
    """Invariants every returned point set satisfies."""

    def test_minimum_distance(self, make_region, index):
        points = poisson_disk_sample(make_region(), k=20, r=3.0, index=index, rng_seed=11)
        assert len(points) > 10
        assert min_pairwise_distance(points) >= 3.0

    def test_containment(self, make_region, index):
        region = make_region()
        points = poisson_disk_sample(region, k=20, r=3.0, index=index, rng_seed=12)
        assert all(region.contains(p) for p in points)

    def test_implicit_seed_is_first_point(self, make_region, index):
        """Without an explicit seed the first point is the drawn seed."""
        region = make_region()
        source = NumpyRandomSource(13)
        expected_seed = region.random_point_inside(NumpyRandomSource(13))
        points = poisson_disk_sample(region, k=20, r=3.0, index=index, random_source=source)
        assert points[0] == expected_seed

    def test_iteration_count_and_packing_bound(self, make_region, index):
        """Each point is accepted once and retired once: 2N - 1 iterations."""
        region = make_region()
        points, report = sample_poisson_points(
            region,
            PoissonSamplingPolicy(k=15, min_distance=4.0, index=index, rng_seed=14),
        )
        n = len(points)
        assert report.metrics["iterations"] == 2 * n - 1
        assert report.metrics["samples_retired"] == n
        assert n <= packing_bound(region.get_bounds(), 4.0)


class TestSeed:
    """Explicit seed handling."""

    @pytest.mark.parametrize("index", INDEXES)
    def test_explicit_seed_included(self, index):
        seed = Point2D(12.5, 7.25)
        points = poisson_disk_sample(small_rect(), k=10, r=2.0, seed=seed, index=index, rng_seed=1)
        assert points[0] == seed

    def test_seed_as_tuple(self):
        points = poisson_disk_sample(small_rect(), k=10, r=2.0, seed=(1.0, 2.0), rng_seed=1)
        assert points[0] == Point2D(1.0, 2.0)

    def test_seed_on_boundary_allowed(self):
        points = poisson_disk_sample(small_rect(), k=10, r=2.0, seed=(0.0, 0.0), rng_seed=1)
        assert points[0] == Point2D(0.0, 0.0)

    def test_seed_outside_region_rejected(self):
        with pytest.raises(InvalidSamplingParametersError, match="outside"):
            poisson_disk_sample(small_circle(), k=10, r=2.0, seed=(100.0, 100.0))

    def test_malformed_seed_rejected(self):
        with pytest.raises(InvalidSamplingParametersError):
            poisson_disk_sample(small_rect(), k=10, r=2.0, seed=(1.0, 2.0, 3.0))


class TestSinglePoint:
    """Regions smaller than the annulus only ever hold the seed."""

    @pytest.mark.parametrize("index", INDEXES)
    def test_region_smaller_than_r_returns_seed_only(self, index):
        region = RectRegion(x_min=0.0, x_max=1.0, y_min=0.0, y_max=1.0)
        seed = Point2D(0.5, 0.5)
        points = poisson_disk_sample(region, k=30, r=10.0, seed=seed, index=index, rng_seed=3)
        assert points == [seed]

    def test_k_one_still_terminates(self):
        points = poisson_disk_sample(small_rect(), k=1, r=2.0, rng_seed=5)
        assert len(points) >= 1
        assert min_pairwise_distance(points) >= 2.0


class TestTermination:
    """Runs end in bounded time and bounded work."""

    @pytest.mark.parametrize("index", INDEXES)
    def test_small_rectangle_finishes_within_timeout(self, index):
        region = RectRegion(x_min=0.0, x_max=10.0, y_min=0.0, y_max=10.0)
        policy = PoissonSamplingPolicy(k=30, min_distance=0.5, index=index, rng_seed=6)
        with ThreadPoolExecutor(max_workers=1) as pool:
            future = pool.submit(sample_poisson_points, region, policy)
            points, report = future.result(timeout=60)

        bound = packing_bound(region.get_bounds(), 0.5)
        assert len(points) <= bound
        assert report.metrics["iterations"] <= 2 * bound - 1
        assert report.metrics["candidates_generated"] == 30 * report.metrics["iterations"]

    def test_candidate_counts_match_stream(self):
        """Every draw is counted; in-region counts never exceed draws."""
        _, report = sample_poisson_points(
            small_polygon(), PoissonSamplingPolicy(k=7, min_distance=3.0, rng_seed=2),
        )
        m = report.metrics
        assert m["candidates_generated"] == 7 * m["iterations"]
        assert m["candidates_rejected"] <= m["candidates_in_region"] < m["candidates_generated"]


class TestSliverRegion:
    """Thin polygons with a small share of their bounding box still sample."""

    @pytest.mark.parametrize("index", INDEXES)
    def test_sliver_polygon_samples(self, index):
        region = PolygonRegion(vertices=[(0, 0), (1000, 1000), (1000, 1000.01)])
        points = poisson_disk_sample(region, k=10, r=1.0, index=index, rng_seed=0)
        assert len(points) >= 1
        assert all(region.contains(p) for p in points)
        assert min_pairwise_distance(points) >= 1.0


class TestDeterminism:
    """Identical random streams give identical outputs."""

    @pytest.mark.parametrize("index", INDEXES)
    def test_same_rng_seed_same_output(self, index):
        a = poisson_disk_sample(small_polygon(), k=20, r=2.5, index=index, rng_seed=99)
        b = poisson_disk_sample(small_polygon(), k=20, r=2.5, index=index, rng_seed=99)
        assert a == b

    def test_different_rng_seed_differs(self):
        a = poisson_disk_sample(small_rect(), k=20, r=2.5, seed=(20.0, 15.0), rng_seed=1)
        b = poisson_disk_sample(small_rect(), k=20, r=2.5, seed=(20.0, 15.0), rng_seed=2)
        assert a != b

    @pytest.mark.parametrize("selection", ["last", "first", "random"])
    def test_replayed_stream_reproduces_run(self, selection):
        """A recorded stream replays draw for draw into the same points."""
        recording = RecordingRandomSource(NumpyRandomSource(2024))
        first = poisson_disk_sample(
            small_rect(), k=12, r=3.0, random_source=recording, selection=selection,
        )
        replay = ReplayRandomSource.from_recording(recording)
        second = poisson_disk_sample(
            small_rect(), k=12, r=3.0, random_source=replay, selection=selection,
        )
        assert first == second
        assert replay.remaining == (0, 0)

    def test_replay_exhaustion_propagates(self):
        """Random source failures are not swallowed by the sampler."""
        source = ReplayRandomSource(scalars=[0.5] * 3, vectors=[(1.0, 0.0)] * 3)
        with pytest.raises(RuntimeError, match="exhausted"):
            poisson_disk_sample(small_rect(), k=5, r=2.0, seed=(20.0, 15.0), random_source=source)


class TestParameterValidation:
    """Invalid parameters fail before any sampling happens."""

    @pytest.mark.parametrize("k", [0, -1, 1.5, True, "3", None])
    def test_invalid_k(self, k):
        with pytest.raises(InvalidSamplingParametersError):
            poisson_disk_sample(small_rect(), k=k, r=2.0)

    @pytest.mark.parametrize("r", [0, 0.0, -1.0, float("nan"), float("inf"), "abc", None])
    def test_invalid_r(self, r):
        with pytest.raises(InvalidSamplingParametersError):
            poisson_disk_sample(small_rect(), k=10, r=r)

    def test_numpy_integer_k_accepted(self):
        points = poisson_disk_sample(small_rect(), k=np.int64(5), r=3.0, max_points=np.int32(4), rng_seed=0)
        assert len(points) == 4

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            poisson_disk_sample(small_rect(), k=0, r=2.0)

    def test_unknown_index(self):
        with pytest.raises(InvalidSamplingParametersError, match="index"):
            poisson_disk_sample(small_rect(), k=10, r=2.0, index="grid")

    def test_unknown_selection(self):
        with pytest.raises(InvalidSamplingParametersError, match="selection"):
            poisson_disk_sample(small_rect(), k=10, r=2.0, selection="oldest")

    @pytest.mark.parametrize("max_points", [0, -5, 2.5])
    def test_invalid_max_points(self, max_points):
        with pytest.raises(InvalidSamplingParametersError):
            poisson_disk_sample(small_rect(), k=10, r=2.0, max_points=max_points)

    def test_validation_happens_before_seed_draw(self):
        """No random draws are consumed on invalid input."""
        source = ReplayRandomSource()
        with pytest.raises(InvalidSamplingParametersError):
            poisson_disk_sample(small_rect(), k=0, r=2.0, random_source=source)


class TestDegenerateRegions:
    """Regions without interior fail fast."""

    @pytest.mark.parametrize("region", [
        RectRegion(x_min=0.0, x_max=0.0, y_min=0.0, y_max=10.0),
        RectRegion(x_min=5.0, x_max=5.0, y_min=5.0, y_max=5.0),
        CircleRegion(radius=0.0),
        PolygonRegion(vertices=[(0, 0), (5, 5), (10, 10)]),
    ])
    def test_zero_area_raises(self, region):
        with pytest.raises(DegenerateRegionError):
            poisson_disk_sample(region, k=10, r=1.0)

    def test_zero_area_with_explicit_seed_raises(self):
        region = RectRegion(x_min=0.0, x_max=0.0, y_min=0.0, y_max=10.0)
        with pytest.raises(DegenerateRegionError):
            poisson_disk_sample(region, k=10, r=1.0, seed=(0.0, 5.0))

    def test_degenerate_is_sampling_error(self):
        with pytest.raises(PoissonSamplingError):
            poisson_disk_sample(CircleRegion(radius=0.0), k=10, r=1.0)


class ExplodingRegion(RectRegion):
    """Region whose containment test fails away from the seed."""

    def contains(self, point):
        if point.x > 10.0:
            raise RuntimeError("boom")
        return super().contains(point)


class TestCollaboratorFailures:
    """Region errors propagate unchanged."""

    def test_region_error_propagates(self):
        region = ExplodingRegion(x_min=0.0, x_max=40.0, y_min=0.0, y_max=40.0)
        with pytest.raises(RuntimeError, match="boom"):
            poisson_disk_sample(region, k=30, r=5.0, seed=(5.0, 5.0), rng_seed=0)


class TestCeilingAndFilter:
    """max_points ceiling and final containment filter."""

    def test_max_points_ceiling(self):
        points, report = sample_poisson_points(
            small_rect(),
            PoissonSamplingPolicy(k=20, min_distance=2.0, rng_seed=4, max_points=5),
        )
        assert len(points) == 5
        assert report.metrics["stopped_by_ceiling"] is True
        assert any("max_points" in w for w in report.warnings)

    def test_max_points_one_returns_seed(self):
        points = poisson_disk_sample(small_rect(), k=20, r=2.0, seed=(3.0, 3.0), max_points=1)
        assert points == [Point2D(3.0, 3.0)]

    def test_auto_filter_for_circle(self):
        _, report = sample_poisson_points(
            small_circle(), PoissonSamplingPolicy(k=10, min_distance=3.0, rng_seed=8),
        )
        assert report.effective_policy["filter_to_region"] is True
        assert report.metrics["filtered_out"] == 0

    def test_auto_filter_skipped_for_rect(self):
        _, report = sample_poisson_points(
            small_rect(), PoissonSamplingPolicy(k=10, min_distance=3.0, rng_seed=8),
        )
        assert report.effective_policy["filter_to_region"] is False

    def test_forced_filter(self):
        _, report = sample_poisson_points(
            small_rect(),
            PoissonSamplingPolicy(k=10, min_distance=3.0, rng_seed=8, filter_to_region=True),
        )
        assert report.effective_policy["filter_to_region"] is True


class TestPolicyDrivenSampling:
    """sample_poisson_points() report contents."""

    def test_report_metrics(self):
        points, report = sample_poisson_points(
            small_rect(),
            PoissonSamplingPolicy(k=20, min_distance=3.0, index="kdtree", rng_seed=21),
        )
        assert report.success is True
        assert report.operation == "sample_poisson_points"
        m = report.metrics
        assert m["n_points"] == len(points)
        assert m["index"] == "kdtree"
        assert m["candidates_generated"] == 20 * m["iterations"]
        assert m["candidates_in_region"] <= m["candidates_generated"]
        assert m["elapsed_s"] >= 0.0
        assert m["region"]["type"] == "rect"
        assert report.metadata == report.metrics

    def test_effective_seed_recorded(self):
        points, report = sample_poisson_points(
            small_rect(), PoissonSamplingPolicy(k=10, min_distance=3.0, rng_seed=21),
        )
        assert report.requested_policy["seed_point"] is None
        assert report.effective_policy["seed_point"] == [points[0].x, points[0].y]

    def test_policy_seed_point_used(self):
        points, _ = sample_poisson_points(
            small_rect(),
            PoissonSamplingPolicy(k=10, min_distance=3.0, seed_point=[4.0, 4.0], rng_seed=1),
        )
        assert points[0] == Point2D(4.0, 4.0)

    def test_invalid_policy_raises(self):
        with pytest.raises(InvalidSamplingParametersError, match="k must be"):
            sample_poisson_points(small_rect(), PoissonSamplingPolicy(k=0))

    def test_default_policy(self):
        points, report = sample_poisson_points(RectRegion(0.0, 5.0, 0.0, 5.0))
        assert report.metrics["n_points"] == len(points)
        assert min_pairwise_distance(points) >= 1.0

    def test_explicit_random_source_overrides_rng_seed(self):
        policy = PoissonSamplingPolicy(k=10, min_distance=3.0, rng_seed=1)
        a, _ = sample_poisson_points(small_rect(), policy, random_source=NumpyRandomSource(77))
        b = poisson_disk_sample(small_rect(), k=10, r=3.0, rng_seed=77)
        assert a == b
