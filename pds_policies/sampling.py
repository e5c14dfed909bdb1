"""
Sampling policies.

All policies are JSON-serializable dataclasses and support the
"requested vs effective" pattern through OperationReport.

UNIT CONVENTIONS
----------------
Distances are in the same (arbitrary) units as the region coordinates.
"""

from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any, List, Literal
from numbers import Integral
import math

from .base import alias_fields, coerce_vec2


INDEX_STRATEGIES = ("quadtree", "kdtree")
SELECTION_RULES = ("last", "first", "random")

# Field aliases for backward compatibility
POISSON_SAMPLING_ALIASES = {
    "r": "min_distance",
    "radius": "min_distance",
    "attempts": "k",
    "index_strategy": "index",
    "seed": "seed_point",
}


@dataclass
class PoissonSamplingPolicy:
    """
    Policy for Poisson-disk (blue noise) sampling inside a 2D region.

    JSON Schema:
    {
        "k": int (>= 1, candidate attempts per active sample),
        "min_distance": float (> 0),
        "index": "quadtree" | "kdtree",
        "selection": "last" | "first" | "random",
        "seed_point": [x, y] | null,
        "rng_seed": int | null,
        "max_points": int | null,
        "filter_to_region": bool | null,
        "quadtree_capacity": int,
        "quadtree_max_depth": int,
        "kdtree_rebuild_every": int,
        "show_progress": bool
    }

    `filter_to_region` None means "auto": the final containment filter
    runs only when the region's bounding box is not the region itself.
    """
    k: int = 30
    min_distance: float = 1.0
    index: Literal["quadtree", "kdtree"] = "quadtree"
    selection: Literal["last", "first", "random"] = "last"
    seed_point: Optional[List[float]] = None
    rng_seed: Optional[int] = None
    max_points: Optional[int] = None
    filter_to_region: Optional[bool] = None

    # Index tuning
    quadtree_capacity: int = 8
    quadtree_max_depth: int = 16
    kdtree_rebuild_every: int = 64

    show_progress: bool = False

    def __post_init__(self):
        if self.seed_point is not None:
            vec = coerce_vec2(self.seed_point)
            self.seed_point = list(vec) if vec is not None else self.seed_point
        # numpy integers stored as plain ints keep to_dict() JSON-clean
        if isinstance(self.k, Integral) and not isinstance(self.k, bool):
            self.k = int(self.k)
        if isinstance(self.max_points, Integral) and not isinstance(self.max_points, bool):
            self.max_points = int(self.max_points)

    def validate(self) -> List[str]:
        """Return a list of problems with this policy (empty if valid)."""
        errors = []
        if isinstance(self.k, bool) or not isinstance(self.k, Integral) or self.k < 1:
            errors.append(f"k must be an integer >= 1, got {self.k!r}")
        try:
            r = float(self.min_distance)
        except (TypeError, ValueError):
            errors.append(f"min_distance must be a number, got {self.min_distance!r}")
        else:
            if not math.isfinite(r) or r <= 0:
                errors.append(f"min_distance must be a finite number > 0, got {self.min_distance!r}")
        if self.index not in INDEX_STRATEGIES:
            errors.append(f"index must be one of {INDEX_STRATEGIES}, got {self.index!r}")
        if self.selection not in SELECTION_RULES:
            errors.append(f"selection must be one of {SELECTION_RULES}, got {self.selection!r}")
        if self.seed_point is not None and coerce_vec2(self.seed_point) is None:
            errors.append(f"seed_point must be [x, y], got {self.seed_point!r}")
        if self.max_points is not None and (
            isinstance(self.max_points, bool) or not isinstance(self.max_points, Integral) or self.max_points < 1
        ):
            errors.append(f"max_points must be an integer >= 1, got {self.max_points!r}")
        if self.quadtree_capacity < 1:
            errors.append(f"quadtree_capacity must be >= 1, got {self.quadtree_capacity}")
        if self.quadtree_max_depth < 0:
            errors.append(f"quadtree_max_depth must be >= 0, got {self.quadtree_max_depth}")
        if self.kdtree_rebuild_every < 1:
            errors.append(f"kdtree_rebuild_every must be >= 1, got {self.kdtree_rebuild_every}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PoissonSamplingPolicy":
        d = alias_fields(d, POISSON_SAMPLING_ALIASES)
        return PoissonSamplingPolicy(
            **{k: v for k, v in d.items() if k in PoissonSamplingPolicy.__dataclass_fields__}
        )


__all__ = [
    "PoissonSamplingPolicy",
    "INDEX_STRATEGIES",
    "SELECTION_RULES",
    "POISSON_SAMPLING_ALIASES",
]
