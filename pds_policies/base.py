"""
Base utilities for sampling policies.

This module provides shared helpers and the OperationReport dataclass
returned by policy-driven sampling runs.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, List, Tuple
import json


def coerce_vec2(
    value: Any,
    default: Optional[Tuple[float, float]] = None,
) -> Optional[Tuple[float, float]]:
    """
    Coerce a value to a 2D vector tuple.

    Accepts:
    - tuple/list of 2 numbers
    - Point2D-like object with x, y attributes
    - dict with x, y keys

    Parameters
    ----------
    value : Any
        Value to coerce
    default : tuple, optional
        Default value if coercion fails

    Returns
    -------
    Tuple[float, float] or None
        Coerced 2D vector
    """
    if value is None:
        return default

    if isinstance(value, (tuple, list)) and len(value) >= 2:
        try:
            return (float(value[0]), float(value[1]))
        except (TypeError, ValueError):
            return default

    if hasattr(value, 'x') and hasattr(value, 'y'):
        try:
            return (float(value.x), float(value.y))
        except (TypeError, ValueError):
            return default

    if isinstance(value, dict) and 'x' in value and 'y' in value:
        try:
            return (float(value['x']), float(value['y']))
        except (TypeError, ValueError):
            return default

    return default


def alias_fields(d: Dict[str, Any], aliases: Dict[str, str]) -> Dict[str, Any]:
    """
    Apply field aliases to a dictionary.

    This allows legacy field names to be mapped to canonical names.
    A canonical name already present wins over its alias.
    """
    result = d.copy()
    for legacy_name, canonical_name in aliases.items():
        if legacy_name in result and canonical_name not in result:
            result[canonical_name] = result.pop(legacy_name)
    return result


@dataclass
class OperationReport:
    """
    Standard report structure for sampling operations.

    Every policy-driven run returns a report with requested vs effective
    policy, warnings, and run metrics.

    The "requested vs effective" pattern records runtime adjustments
    (e.g. the index strategy actually used, the auto filter decision).

    Note: `metadata` and `metrics` are kept in sync; `metrics` is the
    preferred name.
    """
    operation: str = "unknown"
    success: bool = True
    requested_policy: Dict[str, Any] = field(default_factory=dict)
    effective_policy: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    metrics: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.metrics and not self.metadata:
            self.metadata = dict(self.metrics)
        elif self.metadata and not self.metrics:
            self.metrics = dict(self.metadata)
        elif self.metrics and self.metadata:
            merged = dict(self.metadata)
            merged.update(self.metrics)
            self.metadata = merged
            self.metrics = dict(merged)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)


__all__ = [
    "OperationReport",
    "coerce_vec2",
    "alias_fields",
]
