"""
Point index interface and strategy factory.

Both index variants share one contract:
- insert(point): add an accepted point (never removed)
- any_within(query, radius): True iff some point lies at distance < radius
- all_points(): every inserted point, in insertion order

The proximity test is strict: a point at exactly `radius` is not a conflict.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple

from ..core.types import Point2D


class PointIndex(ABC):
    """Abstract spatial index over accepted sample points."""

    @abstractmethod
    def insert(self, point: Point2D) -> None:
        """Insert a point."""
        pass

    @abstractmethod
    def any_within(self, query: Point2D, radius: float) -> bool:
        """Return True iff an inserted point lies strictly within radius of query."""
        pass

    @abstractmethod
    def all_points(self) -> List[Point2D]:
        """Return all inserted points in insertion order."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


def create_point_index(
    strategy: str,
    bounds: Tuple[float, float, float, float],
    quadtree_capacity: int = 8,
    quadtree_max_depth: int = 16,
    kdtree_rebuild_every: int = 64,
) -> PointIndex:
    """
    Create an empty point index.

    Parameters
    ----------
    strategy : str
        "quadtree" (region-partitioning tree over `bounds`) or
        "kdtree" (nearest-neighbor tree, `bounds` unused)
    bounds : tuple
        (min_x, max_x, min_y, max_y) of the sampling region

    Raises
    ------
    ValueError
        If the strategy is unknown.
    """
    if strategy == "quadtree":
        from .quadtree import QuadtreeIndex
        return QuadtreeIndex(
            bounds,
            capacity=quadtree_capacity,
            max_depth=quadtree_max_depth,
        )
    elif strategy == "kdtree":
        from .kdtree import KDTreeIndex
        return KDTreeIndex(rebuild_every=kdtree_rebuild_every)
    raise ValueError(f"Unknown index strategy: {strategy!r}")
