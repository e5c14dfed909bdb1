"""
Poisson Disk - blue-noise point sampling inside 2D regions.

Points are spread with a guaranteed minimum pairwise distance while staying
as dense as possible (Bridson's algorithm), backed by either a quadtree or a
kd-tree proximity index.

Main Entry Points:
    - poisson_disk_sample(): Sample a region with explicit k / r arguments
    - sample_poisson_points(): Policy-driven sampling returning a report

Example:
    >>> from poisson_disk import RectRegion, poisson_disk_sample
    >>> region = RectRegion.from_corners((-100, -100), (100, 100))
    >>> points = poisson_disk_sample(region, k=20, r=10, seed=(0, 0), rng_seed=1)
"""

from .core import (
    Point2D,
    RegionSpec,
    RectRegion,
    CircleRegion,
    PolygonRegion,
    region_from_dict,
    PoissonSamplingError,
    InvalidSamplingParametersError,
    DegenerateRegionError,
)
from .ops import poisson_disk_sample, sample_poisson_points, generate_candidates, ActiveSet
from .spatial import PointIndex, QuadtreeIndex, KDTreeIndex, create_point_index
from .utils import (
    RandomSource,
    NumpyRandomSource,
    RecordingRandomSource,
    ReplayRandomSource,
    min_pairwise_distance,
)

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "poisson_disk_sample",
    "sample_poisson_points",
    "generate_candidates",
    "ActiveSet",
    # Core types
    "Point2D",
    "RegionSpec",
    "RectRegion",
    "CircleRegion",
    "PolygonRegion",
    "region_from_dict",
    # Errors
    "PoissonSamplingError",
    "InvalidSamplingParametersError",
    "DegenerateRegionError",
    # Spatial indexes
    "PointIndex",
    "QuadtreeIndex",
    "KDTreeIndex",
    "create_point_index",
    # Randomness / helpers
    "RandomSource",
    "NumpyRandomSource",
    "RecordingRandomSource",
    "ReplayRandomSource",
    "min_pairwise_distance",
]
