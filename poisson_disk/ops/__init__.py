"""Sampling operations."""

from .candidates import candidate_point, generate_candidates
from .poisson import (
    ActiveSet,
    SamplingStats,
    poisson_disk_sample,
    sample_poisson_points,
)

__all__ = [
    "candidate_point",
    "generate_candidates",
    "ActiveSet",
    "SamplingStats",
    "poisson_disk_sample",
    "sample_poisson_points",
]
