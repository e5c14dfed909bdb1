"""
Basic geometric types.
"""

from dataclasses import dataclass
import math
import numpy as np


@dataclass(frozen=True)
class Point2D:
    """Immutable 2D point (also used as a 2D vector)."""

    x: float
    y: float

    def __add__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x - other.x, self.y - other.y)

    def scale(self, factor: float) -> "Point2D":
        return Point2D(self.x * factor, self.y * factor)

    def distance_sq_to(self, other: "Point2D") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def distance_to(self, other: "Point2D") -> float:
        return math.sqrt(self.distance_sq_to(other))

    def to_tuple(self) -> tuple:
        return (self.x, self.y)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def from_array(cls, arr) -> "Point2D":
        """Create from any 2-element sequence or array."""
        return cls(float(arr[0]), float(arr[1]))

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, d: dict) -> "Point2D":
        return cls(float(d["x"]), float(d["y"]))


def as_point(value) -> Point2D:
    """
    Normalize a Point2D, (x, y) sequence, array or {"x", "y"} dict to Point2D.

    Raises
    ------
    TypeError
        If the value has no recognizable 2D form.
    """
    if isinstance(value, Point2D):
        return value
    if isinstance(value, dict) and "x" in value and "y" in value:
        return Point2D.from_dict(value)
    if hasattr(value, "x") and hasattr(value, "y"):
        return Point2D(float(value.x), float(value.y))
    if isinstance(value, (tuple, list, np.ndarray)) and len(value) == 2:
        return Point2D.from_array(value)
    raise TypeError(f"Cannot interpret {value!r} as a 2D point")
