"""
Polygon region.

Simple (non self-intersecting) polygons given as a vertex ring. Containment
uses the even-odd crossing rule with points on an edge counted as inside.
Vertex order (clockwise or counter-clockwise) does not matter.

Interior points are drawn from an ear-clipping triangulation, picking each
triangle with probability proportional to its area.
"""

from dataclasses import dataclass, field
from typing import Any
import numpy as np

from .errors import DegenerateRegionError
from .region import DEFAULT_MAX_SEED_ATTEMPTS, RegionSpec
from .types import Point2D
from ..utils.random_source import RandomSource


@dataclass(eq=False)
class PolygonRegion(RegionSpec):
    """
    Arbitrary simple polygon.

    Parameters
    ----------
    vertices : array-like of shape (N, 2)
        Polygon ring, N >= 3. The closing edge is implicit; a repeated
        first vertex at the end is dropped.
    edge_tolerance : float
        Absolute tolerance for treating a point as lying on an edge.
    """

    vertices: Any
    edge_tolerance: float = 1e-12
    _next: np.ndarray = field(init=False, repr=False, compare=False)
    _bounds: tuple = field(init=False, repr=False, compare=False)
    _triangles: np.ndarray = field(init=False, repr=False, compare=False)
    _cumulative_areas: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        verts = np.asarray(self.vertices, dtype=np.float64)
        if verts.ndim != 2 or verts.shape[1] != 2:
            raise ValueError(f"vertices must have shape (N, 2), got {verts.shape}")
        if len(verts) > 1 and np.array_equal(verts[0], verts[-1]):
            verts = verts[:-1]
        if len(verts) < 3:
            raise ValueError(f"polygon needs at least 3 vertices, got {len(verts)}")
        if not np.all(np.isfinite(verts)):
            raise ValueError("polygon vertices must be finite")
        self.vertices = verts
        self._next = np.roll(verts, -1, axis=0)
        mins = verts.min(axis=0)
        maxs = verts.max(axis=0)
        self._bounds = (float(mins[0]), float(maxs[0]), float(mins[1]), float(maxs[1]))
        self._triangles = _triangulate(verts)
        self._cumulative_areas = np.cumsum(_triangle_areas(self._triangles))

    def contains(self, point: Point2D) -> bool:
        x, y = point.x, point.y
        min_x, max_x, min_y, max_y = self._bounds
        if not (min_x <= x <= max_x and min_y <= y <= max_y):
            return False
        x0 = self.vertices[:, 0]
        y0 = self.vertices[:, 1]
        x1 = self._next[:, 0]
        y1 = self._next[:, 1]
        ex = x1 - x0
        ey = y1 - y0

        # Points on an edge are inside
        cross = ex * (y - y0) - ey * (x - x0)
        in_span = (
            (np.minimum(x0, x1) - self.edge_tolerance <= x) &
            (x <= np.maximum(x0, x1) + self.edge_tolerance) &
            (np.minimum(y0, y1) - self.edge_tolerance <= y) &
            (y <= np.maximum(y0, y1) + self.edge_tolerance)
        )
        edge_len = np.hypot(ex, ey)
        on_edge = in_span & (np.abs(cross) <= self.edge_tolerance * np.maximum(edge_len, 1.0))
        if np.any(on_edge):
            return True

        straddles = (y0 > y) != (y1 > y)
        safe_ey = np.where(ey == 0.0, 1.0, ey)
        x_cross = x0 + (y - y0) * ex / safe_ey
        crossings = np.count_nonzero(straddles & (x < x_cross))
        return bool(crossings % 2 == 1)

    def get_bounds(self) -> tuple:
        return self._bounds

    def area(self) -> float:
        """Shoelace area (unsigned)."""
        x0 = self.vertices[:, 0]
        y0 = self.vertices[:, 1]
        x1 = self._next[:, 0]
        y1 = self._next[:, 1]
        return float(abs(np.sum(x0 * y1 - x1 * y0)) / 2.0)

    def random_point_inside(
        self,
        random_source: RandomSource,
        max_attempts: int = DEFAULT_MAX_SEED_ATTEMPTS,
    ) -> Point2D:
        """
        Sample uniformly inside the polygon.

        Each attempt draws three scalars: one picks a triangle weighted by
        area, two place a point in it. Attempts only repeat when rounding
        puts the point outside the polygon.
        """
        if self.area() <= 0:
            raise DegenerateRegionError("PolygonRegion has zero area")

        cumulative = self._cumulative_areas
        last = len(cumulative) - 1
        for _ in range(max_attempts):
            target = random_source.uniform() * cumulative[-1]
            t = min(int(np.searchsorted(cumulative, target, side="right")), last)
            a, b, c = self._triangles[t]
            s = random_source.uniform()
            u = random_source.uniform()
            if s + u > 1.0:
                s, u = 1.0 - s, 1.0 - u
            point = Point2D(
                float(a[0] + s * (b[0] - a[0]) + u * (c[0] - a[0])),
                float(a[1] + s * (b[1] - a[1]) + u * (c[1] - a[1])),
            )
            if self.contains(point):
                return point

        raise DegenerateRegionError(
            f"No point inside PolygonRegion found after {max_attempts} attempts"
        )

    def to_dict(self) -> dict:
        return {
            "type": "polygon",
            "vertices": self.vertices.tolist(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "PolygonRegion":
        return cls(vertices=d["vertices"])


def _cross(o, a, b) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _in_triangle(p, a, b, c) -> bool:
    """Inclusive test against a counter-clockwise triangle."""
    return _cross(a, b, p) >= 0 and _cross(b, c, p) >= 0 and _cross(c, a, p) >= 0


def _triangulate(vertices: np.ndarray) -> np.ndarray:
    """
    Ear-clipping triangulation of a simple polygon.

    Returns an (N - 2, 3, 2) array of counter-clockwise triangles. When no
    proper ear is left (flat or repeated vertices) the next vertex is clipped
    anyway, giving a zero-area triangle.
    """
    pts = [tuple(v) for v in vertices.tolist()]
    x = vertices[:, 0]
    y = vertices[:, 1]
    if np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y) < 0:
        pts.reverse()

    ring = list(range(len(pts)))
    triangles = []
    while len(ring) > 3:
        n = len(ring)
        ear = 0
        for i in range(n):
            a, b, c = pts[ring[i - 1]], pts[ring[i]], pts[ring[(i + 1) % n]]
            if _cross(a, b, c) <= 0:
                continue
            if any(
                _in_triangle(pts[j], a, b, c)
                for j in ring
                if pts[j] not in (a, b, c)
            ):
                continue
            ear = i
            break
        triangles.append((pts[ring[ear - 1]], pts[ring[ear]], pts[ring[(ear + 1) % n]]))
        del ring[ear]
    triangles.append(tuple(pts[j] for j in ring))
    return np.array(triangles, dtype=np.float64)


def _triangle_areas(triangles: np.ndarray) -> np.ndarray:
    a = triangles[:, 0]
    ab = triangles[:, 1] - a
    ac = triangles[:, 2] - a
    return 0.5 * np.abs(ab[:, 0] * ac[:, 1] - ab[:, 1] * ac[:, 0])
