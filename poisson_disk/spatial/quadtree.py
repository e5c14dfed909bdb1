"""
Point quadtree for proximity queries.

The tree covers a fixed world rectangle (the region's bounding box). Leaves
hold up to `capacity` points and split into four quadrants on overflow until
`max_depth` is reached, after which leaves grow without bound. A query visits
only nodes whose rectangle comes closer than the search radius.
"""

from typing import List, Optional, Tuple

from ..core.types import Point2D
from .base import PointIndex


class _QuadNode:
    """Quadtree node; a leaf when children is None."""

    __slots__ = ("x_min", "x_max", "y_min", "y_max", "depth", "points", "children")

    def __init__(self, x_min: float, x_max: float, y_min: float, y_max: float, depth: int):
        self.x_min = x_min
        self.x_max = x_max
        self.y_min = y_min
        self.y_max = y_max
        self.depth = depth
        self.points: List[Point2D] = []
        self.children: Optional[List["_QuadNode"]] = None

    def split(self) -> None:
        cx = 0.5 * (self.x_min + self.x_max)
        cy = 0.5 * (self.y_min + self.y_max)
        d = self.depth + 1
        # order: SW, SE, NW, NE
        self.children = [
            _QuadNode(self.x_min, cx, self.y_min, cy, d),
            _QuadNode(cx, self.x_max, self.y_min, cy, d),
            _QuadNode(self.x_min, cx, cy, self.y_max, d),
            _QuadNode(cx, self.x_max, cy, self.y_max, d),
        ]
        points = self.points
        self.points = []
        for p in points:
            self.child_for(p).points.append(p)

    def child_for(self, point: Point2D) -> "_QuadNode":
        cx = 0.5 * (self.x_min + self.x_max)
        cy = 0.5 * (self.y_min + self.y_max)
        index = (1 if point.x >= cx else 0) + (2 if point.y >= cy else 0)
        return self.children[index]

    def distance_sq_to(self, x: float, y: float) -> float:
        """Squared distance from (x, y) to this node's rectangle (0 inside)."""
        dx = max(self.x_min - x, 0.0, x - self.x_max)
        dy = max(self.y_min - y, 0.0, y - self.y_max)
        return dx * dx + dy * dy


class QuadtreeIndex(PointIndex):
    """
    Region-partitioning point index.

    Parameters
    ----------
    bounds : tuple
        World rectangle (min_x, max_x, min_y, max_y). Inserted points must
        lie inside it (boundary inclusive).
    capacity : int
        Points per leaf before it splits.
    max_depth : int
        Depth at which leaves stop splitting (guards against coincident
        or near-coincident points).
    """

    def __init__(
        self,
        bounds: Tuple[float, float, float, float],
        capacity: int = 8,
        max_depth: int = 16,
    ):
        min_x, max_x, min_y, max_y = bounds
        if min_x > max_x or min_y > max_y:
            raise ValueError(f"Invalid quadtree bounds: {bounds}")
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.max_depth = max_depth
        self._root = _QuadNode(min_x, max_x, min_y, max_y, 0)
        self._points: List[Point2D] = []

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        root = self._root
        return (root.x_min, root.x_max, root.y_min, root.y_max)

    def insert(self, point: Point2D) -> None:
        """
        Insert a point.

        Raises
        ------
        ValueError
            If the point lies outside the tree's world rectangle.
        """
        root = self._root
        if not (root.x_min <= point.x <= root.x_max and root.y_min <= point.y <= root.y_max):
            raise ValueError(f"Point {point} outside quadtree bounds {self.bounds}")

        node = root
        while node.children is not None:
            node = node.child_for(point)
        node.points.append(point)
        if len(node.points) > self.capacity and node.depth < self.max_depth:
            node.split()

        self._points.append(point)

    def any_within(self, query: Point2D, radius: float) -> bool:
        qx = query.x
        qy = query.y
        r2 = radius * radius
        stack = [self._root]
        while stack:
            node = stack.pop()
            if node.distance_sq_to(qx, qy) >= r2:
                continue
            if node.children is None:
                for p in node.points:
                    dx = p.x - qx
                    dy = p.y - qy
                    if dx * dx + dy * dy < r2:
                        return True
            else:
                stack.extend(node.children)
        return False

    def all_points(self) -> List[Point2D]:
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)
