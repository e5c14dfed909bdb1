"""Exceptions raised by the sampling core."""


class PoissonSamplingError(Exception):
    """Base class for sampling errors."""


class InvalidSamplingParametersError(PoissonSamplingError, ValueError):
    """Raised for k < 1, r <= 0 and similar precondition violations."""


class DegenerateRegionError(PoissonSamplingError, ValueError):
    """Raised when a region has no interior to sample from."""
