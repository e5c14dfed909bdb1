"""
Candidate generation around an active sample.

Each attempt draws a random unit direction and a distance in [r, 2r), so
candidates land in the annulus around the sample. Candidates outside the
region are dropped (not retried); the rest are returned in generation order.
"""

from typing import Callable, List, Optional

from ..core.region import RegionSpec
from ..core.types import Point2D
from ..utils.random_source import RandomSource


def candidate_point(sample: Point2D, min_distance: float, random_source: RandomSource) -> Point2D:
    """One random point in the annulus [r, 2r) around sample."""
    ux, uy = random_source.unit_vector()
    distance = min_distance + random_source.uniform() * min_distance
    return Point2D(sample.x + ux * distance, sample.y + uy * distance)


def generate_candidates(
    sample: Point2D,
    k: int,
    min_distance: float,
    region: RegionSpec,
    random_source: RandomSource,
    on_generated: Optional[Callable[[Point2D, bool], None]] = None,
) -> List[Point2D]:
    """
    Generate up to k candidates around sample that lie inside region.

    Parameters
    ----------
    sample : Point2D
        Active sample the candidates are spawned from
    k : int
        Number of attempts (exactly k draws are made)
    min_distance : float
        Minimum distance r; candidates fall at distance [r, 2r)
    region : RegionSpec
        Region used to filter candidates
    random_source : RandomSource
        Source of unit vectors and scalars
    on_generated : callable, optional
        Called as on_generated(candidate, inside) for every draw

    Returns
    -------
    List[Point2D]
        In-region candidates in generation order, possibly empty.
    """
    candidates = []
    for _ in range(k):
        candidate = candidate_point(sample, min_distance, random_source)
        inside = region.contains(candidate)
        if on_generated is not None:
            on_generated(candidate, inside)
        if inside:
            candidates.append(candidate)
    return candidates
