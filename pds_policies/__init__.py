"""
PDS Policies - policy definitions for Poisson-disk sampling.

All policies are JSON-serializable and support the "requested vs effective"
pattern for tracking runtime adjustments.

Usage:
    from pds_policies import PoissonSamplingPolicy, OperationReport
"""

from .base import (
    OperationReport,
    coerce_vec2,
    alias_fields,
)

from .sampling import (
    PoissonSamplingPolicy,
    INDEX_STRATEGIES,
    SELECTION_RULES,
)

__all__ = [
    "OperationReport",
    "coerce_vec2",
    "alias_fields",
    "PoissonSamplingPolicy",
    "INDEX_STRATEGIES",
    "SELECTION_RULES",
]
