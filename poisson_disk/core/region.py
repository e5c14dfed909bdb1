"""
Planar region specifications for Poisson-disk sampling.

A region is the capability the sampler consumes:
- contains(point): inclusive point containment
- get_bounds() / bounds(): axis-aligned bounding box
- random_point_inside(random_source): uniform interior sample (seed drawing)
- area(): used to reject degenerate regions up front
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple
import math

from .errors import DegenerateRegionError
from .types import Point2D, as_point
from ..utils.random_source import RandomSource


DEFAULT_MAX_SEED_ATTEMPTS = 10000


class RegionSpec(ABC):
    """Abstract base class for 2D sampling regions."""

    @abstractmethod
    def contains(self, point: Point2D) -> bool:
        """Check if a point is inside the region (boundary inclusive)."""
        pass

    @abstractmethod
    def get_bounds(self) -> tuple:
        """Get bounding box (min_x, max_x, min_y, max_y)."""
        pass

    @abstractmethod
    def area(self) -> float:
        """Area of the region."""
        pass

    @abstractmethod
    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        pass

    def bounds(self) -> Tuple[Point2D, Point2D]:
        """Bounding box as (min_corner, max_corner)."""
        min_x, max_x, min_y, max_y = self.get_bounds()
        return Point2D(min_x, min_y), Point2D(max_x, max_y)

    def bounds_are_exact(self) -> bool:
        """
        True if the bounding box is the region itself.

        Callers use this to decide whether points collected over the
        bounding box need a final containment pass.
        """
        return False

    def random_point_inside(
        self,
        random_source: RandomSource,
        max_attempts: int = DEFAULT_MAX_SEED_ATTEMPTS,
    ) -> Point2D:
        """
        Draw a point uniformly from the region interior.

        Default implementation: rejection sampling over the bounding box.

        Raises
        ------
        DegenerateRegionError
            If the region has no area or no point was found within
            max_attempts draws.
        """
        if self.area() <= 0:
            raise DegenerateRegionError(f"{type(self).__name__} has zero area")

        min_x, max_x, min_y, max_y = self.get_bounds()
        width = max_x - min_x
        height = max_y - min_y

        for _ in range(max_attempts):
            point = Point2D(
                min_x + random_source.uniform() * width,
                min_y + random_source.uniform() * height,
            )
            if self.contains(point):
                return point

        raise DegenerateRegionError(
            f"No point inside {type(self).__name__} found after {max_attempts} attempts"
        )


@dataclass
class RectRegion(RegionSpec):
    """Axis-aligned rectangle. Zero width or height is allowed but has no area."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def __post_init__(self):
        """Validate rectangle extents."""
        if self.x_min > self.x_max:
            raise ValueError(f"x_min ({self.x_min}) must not exceed x_max ({self.x_max})")
        if self.y_min > self.y_max:
            raise ValueError(f"y_min ({self.y_min}) must not exceed y_max ({self.y_max})")

    @classmethod
    def from_corners(cls, min_corner, max_corner) -> "RectRegion":
        """Create from two corners given as Point2D, (x, y) or dict."""
        lo = as_point(min_corner)
        hi = as_point(max_corner)
        return cls(x_min=lo.x, x_max=hi.x, y_min=lo.y, y_max=hi.y)

    @classmethod
    def from_center_and_size(cls, center, width: float, height: float) -> "RectRegion":
        c = as_point(center)
        return cls(
            x_min=c.x - width / 2,
            x_max=c.x + width / 2,
            y_min=c.y - height / 2,
            y_max=c.y + height / 2,
        )

    def contains(self, point: Point2D) -> bool:
        return (
            self.x_min <= point.x <= self.x_max and
            self.y_min <= point.y <= self.y_max
        )

    def get_bounds(self) -> tuple:
        return (self.x_min, self.x_max, self.y_min, self.y_max)

    def area(self) -> float:
        return (self.x_max - self.x_min) * (self.y_max - self.y_min)

    def bounds_are_exact(self) -> bool:
        return True

    def random_point_inside(
        self,
        random_source: RandomSource,
        max_attempts: int = DEFAULT_MAX_SEED_ATTEMPTS,
    ) -> Point2D:
        """Sample uniformly inside the rectangle (no rejection needed)."""
        if self.area() <= 0:
            raise DegenerateRegionError("RectRegion has zero area")
        return Point2D(
            self.x_min + random_source.uniform() * (self.x_max - self.x_min),
            self.y_min + random_source.uniform() * (self.y_max - self.y_min),
        )

    def to_dict(self) -> dict:
        return {
            "type": "rect",
            "x_min": self.x_min,
            "x_max": self.x_max,
            "y_min": self.y_min,
            "y_max": self.y_max,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "RectRegion":
        if "min" in d and "max" in d:
            return cls.from_corners(d["min"], d["max"])
        return cls(
            x_min=d["x_min"],
            x_max=d["x_max"],
            y_min=d["y_min"],
            y_max=d["y_max"],
        )


@dataclass
class CircleRegion(RegionSpec):
    """Disk with the given center and radius."""

    radius: float
    center: Point2D = None

    def __post_init__(self):
        if self.center is None:
            self.center = Point2D(0.0, 0.0)
        else:
            self.center = as_point(self.center)
        if self.radius < 0:
            raise ValueError(f"radius ({self.radius}) must not be negative")

    def contains(self, point: Point2D) -> bool:
        dx = point.x - self.center.x
        dy = point.y - self.center.y
        return dx * dx + dy * dy <= self.radius * self.radius

    def get_bounds(self) -> tuple:
        return (
            self.center.x - self.radius,
            self.center.x + self.radius,
            self.center.y - self.radius,
            self.center.y + self.radius,
        )

    def area(self) -> float:
        return math.pi * self.radius * self.radius

    def random_point_inside(
        self,
        random_source: RandomSource,
        max_attempts: int = DEFAULT_MAX_SEED_ATTEMPTS,
    ) -> Point2D:
        """Sample uniformly inside the disk (sqrt-radius polar sampling)."""
        if self.area() <= 0:
            raise DegenerateRegionError("CircleRegion has zero radius")
        rho = self.radius * math.sqrt(random_source.uniform())
        theta = 2.0 * math.pi * random_source.uniform()
        return Point2D(
            self.center.x + rho * math.cos(theta),
            self.center.y + rho * math.sin(theta),
        )

    def to_dict(self) -> dict:
        return {
            "type": "circle",
            "radius": self.radius,
            "center": self.center.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "CircleRegion":
        return cls(
            radius=d["radius"],
            center=as_point(d.get("center", (0.0, 0.0))),
        )


def region_from_dict(d: dict) -> RegionSpec:
    """
    Create a region from a dictionary based on its "type".

    Supports:
    - rect: RectRegion ({"x_min", "x_max", "y_min", "y_max"} or {"min", "max"})
    - circle: CircleRegion
    - polygon: PolygonRegion

    Raises
    ------
    ValueError
        If the region type is not recognized.
    """
    region_type = d.get("type")

    if region_type in ("rect", "box"):
        return RectRegion.from_dict(d)
    elif region_type == "circle":
        return CircleRegion.from_dict(d)
    elif region_type == "polygon":
        from .region_polygon import PolygonRegion
        return PolygonRegion.from_dict(d)
    else:
        raise ValueError(f"Unknown region type: {region_type!r}")
