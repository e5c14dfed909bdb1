"""
Poisson-disk sampling (Bridson's algorithm) inside a 2D region.

The sampler keeps an active set of samples that may still spawn neighbours.
Each iteration picks one active sample, draws k candidates in the annulus
[r, 2r) around it, and accepts the first in-region candidate with no
accepted point strictly closer than r. Accepted candidates join the index
and the active set; a sample whose k attempts all fail is retired. The run
ends when the active set is empty, which always happens because only
finitely many r-separated points fit in a bounded region.

The run is single threaded and deterministic for a fixed random source.
"""

from dataclasses import dataclass, asdict
from numbers import Integral
from typing import Dict, Iterator, List, Optional, Tuple
import logging
import math
import time

from tqdm import tqdm

from pds_policies import OperationReport, PoissonSamplingPolicy
from pds_policies.sampling import INDEX_STRATEGIES, SELECTION_RULES
from ..core.errors import DegenerateRegionError, InvalidSamplingParametersError
from ..core.region import RegionSpec
from ..core.types import Point2D, as_point
from ..spatial.base import PointIndex, create_point_index
from ..utils.random_source import RandomSource, as_random_source
from .candidates import generate_candidates

logger = logging.getLogger(__name__)


class ActiveSet:
    """
    Set of samples still eligible to spawn candidates.

    Backed by a list plus a position map, so membership, insertion and
    removal are O(1). Removal swaps the last element into the freed slot.

    Selection rules:
    - "last": most recently added element (stack discipline)
    - "first": element at the front of the backing list
    - "random": uniform pick driven by the run's random source
    """

    def __init__(self, points: Optional[List[Point2D]] = None):
        self._items: List[Point2D] = []
        self._positions: Dict[Point2D, int] = {}
        for p in points or ():
            self.add(p)

    def add(self, point: Point2D) -> bool:
        """Add point; returns False if it was already active."""
        if point in self._positions:
            return False
        self._positions[point] = len(self._items)
        self._items.append(point)
        return True

    def remove(self, point: Point2D) -> bool:
        """Remove point; returns False if it was not active."""
        pos = self._positions.pop(point, None)
        if pos is None:
            return False
        last = self._items.pop()
        if pos < len(self._items):
            self._items[pos] = last
            self._positions[last] = pos
        return True

    def select(self, rule: str = "last", random_source: Optional[RandomSource] = None) -> Point2D:
        """
        Pick (without removing) the next sample to process.

        Raises
        ------
        IndexError
            If the set is empty.
        ValueError
            If the rule is unknown or "random" is used without a source.
        """
        if not self._items:
            raise IndexError("select from empty ActiveSet")
        if rule == "last":
            return self._items[-1]
        if rule == "first":
            return self._items[0]
        if rule == "random":
            if random_source is None:
                raise ValueError("random selection requires a random source")
            n = len(self._items)
            return self._items[min(int(random_source.uniform() * n), n - 1)]
        raise ValueError(f"Unknown selection rule: {rule!r}")

    def __contains__(self, point: Point2D) -> bool:
        return point in self._positions

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[Point2D]:
        return iter(list(self._items))


@dataclass
class SamplingStats:
    """Counters collected during a sampling run."""

    iterations: int = 0
    candidates_generated: int = 0
    candidates_in_region: int = 0
    candidates_rejected: int = 0
    samples_retired: int = 0
    filtered_out: int = 0
    stopped_by_ceiling: bool = False
    elapsed_s: float = 0.0

    def count_candidate(self, candidate: Point2D, inside: bool) -> None:
        self.candidates_generated += 1
        if inside:
            self.candidates_in_region += 1

    def to_dict(self) -> dict:
        return asdict(self)


def _validate_parameters(
    k,
    min_distance,
    index: str,
    selection: str,
    max_points: Optional[int],
) -> Tuple[int, float]:
    if isinstance(k, bool) or not isinstance(k, Integral) or k < 1:
        raise InvalidSamplingParametersError(f"k must be an integer >= 1, got {k!r}")
    try:
        r = float(min_distance)
    except (TypeError, ValueError):
        raise InvalidSamplingParametersError(f"r must be a number, got {min_distance!r}")
    if not math.isfinite(r) or r <= 0:
        raise InvalidSamplingParametersError(f"r must be a finite number > 0, got {min_distance!r}")
    if index not in INDEX_STRATEGIES:
        raise InvalidSamplingParametersError(
            f"index must be one of {INDEX_STRATEGIES}, got {index!r}"
        )
    if selection not in SELECTION_RULES:
        raise InvalidSamplingParametersError(
            f"selection must be one of {SELECTION_RULES}, got {selection!r}"
        )
    if max_points is not None and (
        isinstance(max_points, bool) or not isinstance(max_points, Integral) or max_points < 1
    ):
        raise InvalidSamplingParametersError(f"max_points must be an integer >= 1, got {max_points!r}")
    return int(k), r


def _resolve_seed(region: RegionSpec, seed, random_source: RandomSource) -> Point2D:
    if seed is None:
        return region.random_point_inside(random_source)
    try:
        point = as_point(seed)
    except (TypeError, ValueError) as e:
        raise InvalidSamplingParametersError(f"Invalid seed point: {e}") from e
    if not region.contains(point):
        raise InvalidSamplingParametersError(f"Seed point {point} is outside the region")
    return point


def _run_sampling(
    region: RegionSpec,
    k,
    min_distance,
    seed=None,
    index: str = "quadtree",
    random_source: Optional[RandomSource] = None,
    rng_seed: Optional[int] = None,
    selection: str = "last",
    max_points: Optional[int] = None,
    filter_to_region: Optional[bool] = None,
    show_progress: bool = False,
    quadtree_capacity: int = 8,
    quadtree_max_depth: int = 16,
    kdtree_rebuild_every: int = 64,
) -> Tuple[List[Point2D], SamplingStats, Point2D, bool]:
    """Run the sampler; returns (points, stats, seed_used, filter_applied)."""
    k, r = _validate_parameters(k, min_distance, index, selection, max_points)

    if region.area() <= 0:
        raise DegenerateRegionError(f"{type(region).__name__} has zero area; nothing to sample")

    random_source = as_random_source(random_source, rng_seed)
    seed_point = _resolve_seed(region, seed, random_source)

    logger.debug(
        f"Poisson sampling: k={k}, r={r}, index={index}, selection={selection}, seed={seed_point}"
    )

    stats = SamplingStats()
    start = time.perf_counter()

    point_index: PointIndex = create_point_index(
        index,
        region.get_bounds(),
        quadtree_capacity=quadtree_capacity,
        quadtree_max_depth=quadtree_max_depth,
        kdtree_rebuild_every=kdtree_rebuild_every,
    )
    point_index.insert(seed_point)
    active = ActiveSet([seed_point])

    pbar = tqdm(total=max_points, desc="Poisson sampling", unit="pt", disable=not show_progress)
    pbar.update(1)
    try:
        while active:
            if max_points is not None and len(point_index) >= max_points:
                stats.stopped_by_ceiling = True
                break

            sample = active.select(selection, random_source)
            stats.iterations += 1

            candidates = generate_candidates(
                sample, k, r, region, random_source, on_generated=stats.count_candidate,
            )

            fit = None
            for candidate in candidates:
                if point_index.any_within(candidate, r):
                    stats.candidates_rejected += 1
                    continue
                fit = candidate
                break

            if fit is not None:
                point_index.insert(fit)
                active.add(fit)
                pbar.update(1)
            else:
                active.remove(sample)
                stats.samples_retired += 1
    finally:
        pbar.close()

    if stats.stopped_by_ceiling:
        logger.warning(
            f"Stopped at max_points={max_points} with {len(active)} samples still active"
        )

    points = point_index.all_points()

    apply_filter = (not region.bounds_are_exact()) if filter_to_region is None else filter_to_region
    if apply_filter:
        kept = [p for p in points if region.contains(p)]
        stats.filtered_out = len(points) - len(kept)
        points = kept

    stats.elapsed_s = time.perf_counter() - start
    logger.info(
        f"Poisson sampling produced {len(points)} points in {stats.iterations} iterations "
        f"({index}, {stats.elapsed_s:.3f}s)"
    )

    return points, stats, seed_point, apply_filter


def poisson_disk_sample(
    region: RegionSpec,
    k: int,
    r: float,
    seed=None,
    *,
    index: str = "quadtree",
    random_source: Optional[RandomSource] = None,
    rng_seed: Optional[int] = None,
    selection: str = "last",
    max_points: Optional[int] = None,
    filter_to_region: Optional[bool] = None,
    show_progress: bool = False,
) -> List[Point2D]:
    """
    Generate a blue-noise point set inside region.

    Parameters
    ----------
    region : RegionSpec
        Region to fill
    k : int
        Candidate attempts per active sample (>= 1)
    r : float
        Minimum distance between any two returned points (> 0)
    seed : Point2D or (x, y), optional
        Starting sample; must lie inside region. Drawn uniformly from the
        region when omitted.
    index : str
        "quadtree" or "kdtree"
    random_source : RandomSource, optional
        Source of randomness; defaults to NumpyRandomSource(rng_seed)
    rng_seed : int, optional
        Seed for the default random source
    selection : str
        Active-set selection rule: "last", "first" or "random"
    max_points : int, optional
        Stop once this many points are accepted
    filter_to_region : bool, optional
        Force (True) or skip (False) the final containment pass;
        None applies it when the region is not its own bounding box
    show_progress : bool
        Show a tqdm progress bar

    Returns
    -------
    List[Point2D]
        Accepted points in acceptance order; the seed comes first.

    Raises
    ------
    InvalidSamplingParametersError
        For k < 1, r <= 0, unknown index/selection, or a seed outside region.
    DegenerateRegionError
        If region has no interior.
    """
    points, _, _, _ = _run_sampling(
        region,
        k,
        r,
        seed=seed,
        index=index,
        random_source=random_source,
        rng_seed=rng_seed,
        selection=selection,
        max_points=max_points,
        filter_to_region=filter_to_region,
        show_progress=show_progress,
    )
    return points


def sample_poisson_points(
    region: RegionSpec,
    policy: Optional[PoissonSamplingPolicy] = None,
    random_source: Optional[RandomSource] = None,
) -> Tuple[List[Point2D], OperationReport]:
    """
    Policy-driven Poisson-disk sampling.

    Parameters
    ----------
    region : RegionSpec
        Region to fill
    policy : PoissonSamplingPolicy, optional
        Sampling parameters; defaults to PoissonSamplingPolicy()
    random_source : RandomSource, optional
        Overrides the policy's rng_seed when given

    Returns
    -------
    points : List[Point2D]
        Sampled points
    report : OperationReport
        Requested/effective policy and run metrics

    Raises
    ------
    InvalidSamplingParametersError
        If the policy fails validation.
    DegenerateRegionError
        If region has no interior.
    """
    if policy is None:
        policy = PoissonSamplingPolicy()

    errors = policy.validate()
    if errors:
        raise InvalidSamplingParametersError("; ".join(errors))

    points, stats, seed_point, filter_applied = _run_sampling(
        region,
        policy.k,
        policy.min_distance,
        seed=policy.seed_point,
        index=policy.index,
        random_source=random_source,
        rng_seed=policy.rng_seed,
        selection=policy.selection,
        max_points=policy.max_points,
        filter_to_region=policy.filter_to_region,
        show_progress=policy.show_progress,
        quadtree_capacity=policy.quadtree_capacity,
        quadtree_max_depth=policy.quadtree_max_depth,
        kdtree_rebuild_every=policy.kdtree_rebuild_every,
    )

    effective = policy.to_dict()
    effective["seed_point"] = [seed_point.x, seed_point.y]
    effective["filter_to_region"] = filter_applied

    metrics = stats.to_dict()
    metrics.update({
        "n_points": len(points),
        "index": policy.index,
        "selection": policy.selection,
        "region": region.to_dict(),
    })

    report = OperationReport(
        operation="sample_poisson_points",
        success=True,
        requested_policy=policy.to_dict(),
        effective_policy=effective,
        metrics=metrics,
    )
    if stats.stopped_by_ceiling:
        report.add_warning(f"Stopped early at max_points={policy.max_points}")
    if stats.filtered_out:
        report.add_warning(f"{stats.filtered_out} points outside the region were discarded")

    return points, report
