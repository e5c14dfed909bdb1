"""
Random sources used by the sampler, candidate generator and regions.

A random source provides two draws:
- uniform(): scalar uniformly distributed in [0, 1)
- unit_vector(): uniformly distributed direction on the unit circle

NumpyRandomSource is the default. RecordingRandomSource and
ReplayRandomSource make a run replayable draw by draw.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple, Union
import math
import numpy as np


class RandomSource(ABC):
    """Abstract source of uniform scalars and 2D unit vectors."""

    @abstractmethod
    def uniform(self) -> float:
        """Return a float uniformly distributed in [0, 1)."""
        pass

    @abstractmethod
    def unit_vector(self) -> Tuple[float, float]:
        """Return a uniformly distributed unit-length 2D vector."""
        pass


class NumpyRandomSource(RandomSource):
    """
    Random source backed by numpy's Generator API.

    Parameters
    ----------
    seed : int or np.random.Generator, optional
        Seed for np.random.default_rng, or an existing generator to draw from.
    """

    def __init__(self, seed: Optional[Union[int, np.random.Generator]] = None):
        if isinstance(seed, np.random.Generator):
            self.rng = seed
        else:
            self.rng = np.random.default_rng(seed)

    def uniform(self) -> float:
        return float(self.rng.random())

    def unit_vector(self) -> Tuple[float, float]:
        theta = self.rng.uniform(0.0, 2.0 * np.pi)
        return (math.cos(theta), math.sin(theta))


class RecordingRandomSource(RandomSource):
    """Wraps another source and records every draw in order."""

    def __init__(self, inner: RandomSource):
        self.inner = inner
        self.scalars: List[float] = []
        self.vectors: List[Tuple[float, float]] = []

    def uniform(self) -> float:
        value = self.inner.uniform()
        self.scalars.append(value)
        return value

    def unit_vector(self) -> Tuple[float, float]:
        value = self.inner.unit_vector()
        self.vectors.append(value)
        return value


class ReplayRandomSource(RandomSource):
    """
    Deterministic source that replays fixed scalar and vector sequences.

    Scalars and vectors are consumed from independent queues, so a
    recording replays exactly as long as the consumer asks for the same
    kinds of draws in the same order.

    Raises
    ------
    RuntimeError
        When a queue is exhausted.
    """

    def __init__(
        self,
        scalars: Iterable[float] = (),
        vectors: Iterable[Tuple[float, float]] = (),
    ):
        self._scalars = [float(s) for s in scalars]
        self._vectors = [(float(v[0]), float(v[1])) for v in vectors]
        self._scalar_pos = 0
        self._vector_pos = 0

    @classmethod
    def from_recording(cls, recording: RecordingRandomSource) -> "ReplayRandomSource":
        return cls(recording.scalars, recording.vectors)

    def uniform(self) -> float:
        if self._scalar_pos >= len(self._scalars):
            raise RuntimeError(
                f"Replay exhausted after {len(self._scalars)} scalar draws"
            )
        value = self._scalars[self._scalar_pos]
        self._scalar_pos += 1
        return value

    def unit_vector(self) -> Tuple[float, float]:
        if self._vector_pos >= len(self._vectors):
            raise RuntimeError(
                f"Replay exhausted after {len(self._vectors)} vector draws"
            )
        value = self._vectors[self._vector_pos]
        self._vector_pos += 1
        return value

    @property
    def remaining(self) -> Tuple[int, int]:
        """Number of unread (scalars, vectors)."""
        return (
            len(self._scalars) - self._scalar_pos,
            len(self._vectors) - self._vector_pos,
        )


def as_random_source(
    random_source: Optional[RandomSource] = None,
    seed: Optional[Union[int, np.random.Generator]] = None,
) -> RandomSource:
    """Return random_source if given, else a NumpyRandomSource seeded with seed."""
    if random_source is not None:
        return random_source
    return NumpyRandomSource(seed)
