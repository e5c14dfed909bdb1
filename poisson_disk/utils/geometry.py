"""
Geometry helpers for checking sample sets.
"""

from typing import Sequence, Union
import math
import numpy as np
from scipy.spatial import cKDTree

from ..core.types import Point2D


def points_to_array(points: Sequence[Point2D]) -> np.ndarray:
    """Convert points to an (N, 2) float array."""
    if len(points) == 0:
        return np.zeros((0, 2), dtype=np.float64)
    return np.array([[p.x, p.y] for p in points], dtype=np.float64)


def min_pairwise_distance(points: Union[Sequence[Point2D], np.ndarray]) -> float:
    """
    Smallest distance between any two points (inf for fewer than two).

    Uses a kd-tree nearest-neighbor query, O(n log n).
    """
    arr = points if isinstance(points, np.ndarray) else points_to_array(points)
    if len(arr) < 2:
        return math.inf
    tree = cKDTree(arr)
    dists, _ = tree.query(arr, k=2)
    return float(np.min(dists[:, 1]))


def packing_bound(bounds: tuple, min_distance: float) -> int:
    """
    Upper bound on how many points with pairwise distance >= min_distance
    fit inside the bounding box (min_x, max_x, min_y, max_y).

    Disks of radius min_distance / 2 around the points are disjoint and lie
    inside the box grown by min_distance / 2 on every side.
    """
    min_x, max_x, min_y, max_y = bounds
    half = min_distance / 2.0
    grown_area = (max_x - min_x + 2 * half) * (max_y - min_y + 2 * half)
    return int(math.floor(grown_area / (math.pi * half * half)))
