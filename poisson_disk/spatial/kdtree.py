"""
Nearest-neighbor point index built on scipy's cKDTree.

cKDTree is static, so inserts go to a small pending buffer that is scanned
brute force; the tree is rebuilt over all points once the buffer grows past
max(rebuild_every, indexed_count // 2), which keeps rebuilds amortized.
The proximity test is `nearest_distance(query) < radius`.
"""

from typing import List, Tuple
import logging
import math
import numpy as np
from scipy.spatial import cKDTree

from ..core.types import Point2D
from .base import PointIndex

logger = logging.getLogger(__name__)


class KDTreeIndex(PointIndex):
    """
    Nearest-neighbor point index.

    Parameters
    ----------
    rebuild_every : int
        Minimum pending-buffer size that triggers a tree rebuild.
    """

    def __init__(self, rebuild_every: int = 64):
        if rebuild_every < 1:
            raise ValueError(f"rebuild_every must be >= 1, got {rebuild_every}")
        self.rebuild_every = rebuild_every
        self._points: List[Point2D] = []
        self._coords: List[Tuple[float, float]] = []
        self._tree = None
        self._n_indexed = 0
        self.rebuild_count = 0

    def insert(self, point: Point2D) -> None:
        self._points.append(point)
        self._coords.append((point.x, point.y))
        pending = len(self._coords) - self._n_indexed
        if pending >= max(self.rebuild_every, self._n_indexed // 2):
            self._rebuild()

    def _rebuild(self) -> None:
        self._tree = cKDTree(np.asarray(self._coords, dtype=np.float64))
        self._n_indexed = len(self._coords)
        self.rebuild_count += 1
        logger.debug(f"Rebuilt kd-tree over {self._n_indexed} points")

    def nearest_distance(self, query: Point2D) -> float:
        """Distance from query to the nearest inserted point (inf if empty)."""
        best = math.inf

        if self._tree is not None:
            dist, _ = self._tree.query((query.x, query.y), k=1)
            best = float(dist)

        if len(self._coords) > self._n_indexed:
            pending = np.asarray(self._coords[self._n_indexed:], dtype=np.float64)
            diff = pending - np.array([query.x, query.y])
            d2 = float(np.min(np.einsum("ij,ij->i", diff, diff)))
            best = min(best, math.sqrt(d2))

        return best

    def any_within(self, query: Point2D, radius: float) -> bool:
        return self.nearest_distance(query) < radius

    def all_points(self) -> List[Point2D]:
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)
