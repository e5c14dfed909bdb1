"""Utility modules: random sources and geometry helpers."""

from .random_source import (
    RandomSource,
    NumpyRandomSource,
    RecordingRandomSource,
    ReplayRandomSource,
    as_random_source,
)
from .geometry import min_pairwise_distance, packing_bound, points_to_array

__all__ = [
    "RandomSource",
    "NumpyRandomSource",
    "RecordingRandomSource",
    "ReplayRandomSource",
    "as_random_source",
    "min_pairwise_distance",
    "packing_bound",
    "points_to_array",
]
