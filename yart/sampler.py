"""Random sampling of points and directions."""

from __future__ import annotations

import math
import random
from typing import NamedTuple, Optional, Union

import numpy as np


class Sample(NamedTuple):
    """A sampled value with the density it was drawn from."""

    value: Union[float, np.ndarray]
    pdf: float


class Sampler:
    """Draws uniform and cosine-weighted samples from a seedable generator."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def _uniform(self) -> float:
        return self._rng.random()

    def uniform_1d(self) -> Sample:
        """A number in [0, 1)."""
        return Sample(self._uniform(), 1.0)

    def uniform_2d(self) -> Sample:
        """A point in [0, 1) x [0, 1)."""
        return Sample(np.array([self._uniform(), self._uniform()]), 1.0)

    def uniform_in_disk(self) -> Sample:
        """A point drawn from [0, 1)^2 and kept when inside the unit circle."""
        while True:
            p = np.array([self._uniform(), self._uniform()])
            if p @ p < 1.0:
                return Sample(p, 1.0 / math.pi)

    def uniform_in_sphere(self) -> Sample:
        """A point inside the unit ball."""
        while True:
            p = np.array([self._uniform() * 2.0 - 1.0 for _ in range(3)])
            if p @ p < 1.0:
                return Sample(p, math.pi / 4.0)

    def uniform_on_sphere(self) -> Sample:
        """A direction on the unit sphere."""
        cos_theta = 1.0 - 2.0 * self._uniform()
        return Sample(self._direction(cos_theta), math.pi / 4.0)

    def uniform_on_hemisphere(self) -> Sample:
        """A direction on the upper (+y) unit hemisphere."""
        cos_theta = 1.0 - self._uniform()
        return Sample(self._direction(cos_theta), math.pi / 2.0)

    def cosine_weighted_on_hemisphere(self) -> Sample:
        """A direction on the upper (+y) hemisphere with density cos(theta)/pi."""
        cos_theta = math.sqrt(1.0 - self._uniform())
        return Sample(self._direction(cos_theta), cos_theta / math.pi)

    def _direction(self, cos_theta: float) -> np.ndarray:
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
        phi = self._uniform() * math.pi * 2.0
        return np.array(
            [sin_theta * math.cos(phi), cos_theta, sin_theta * math.sin(phi)]
        )