"""Core data structures for Poisson-disk sampling."""

from .types import Point2D, as_point
from .errors import (
    PoissonSamplingError,
    InvalidSamplingParametersError,
    DegenerateRegionError,
)
from .region import RegionSpec, RectRegion, CircleRegion, region_from_dict
from .region_polygon import PolygonRegion

__all__ = [
    "Point2D",
    "as_point",
    "PoissonSamplingError",
    "InvalidSamplingParametersError",
    "DegenerateRegionError",
    "RegionSpec",
    "RectRegion",
    "CircleRegion",
    "PolygonRegion",
    "region_from_dict",
]
