"""Spatial indexes for proximity queries over accepted samples."""

from .base import PointIndex, create_point_index
from .quadtree import QuadtreeIndex
from .kdtree import KDTreeIndex

__all__ = [
    "PointIndex",
    "create_point_index",
    "QuadtreeIndex",
    "KDTreeIndex",
]
