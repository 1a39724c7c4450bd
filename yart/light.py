"""Light sources that cast shadow rays towards shaded points."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import NamedTuple, Optional

import numpy as np

from .geometry import Geometry
from .material import DiffuseLight
from .rayhit import Ray, make_ray

_SHADOW_EPSILON = 1e-4


class ShadowSample(NamedTuple):
    """A shadow ray from a light towards a target and the light's radiance."""

    ray: Ray
    radiance: np.ndarray


class Light(ABC):
    """Something that illuminates the scene directly."""

    @abstractmethod
    def cast_shadow_ray(self, target) -> Optional[ShadowSample]:
        """A shadow ray towards ``target``, or None if the light faces away."""


class AreaLight(Light):
    """A light spread over a geometry's surface with an emissive material."""

    def __init__(self, geom: Geometry, mat: DiffuseLight) -> None:
        self.geom = geom
        self.mat = mat

    def cast_shadow_ray(self, target) -> Optional[ShadowSample]:
        sample = self.geom.sample()
        direction = np.asarray(target, dtype=float) - sample.position
        if float(direction @ sample.normal) <= 0.0:
            return None
        ray = make_ray(sample.position, direction, 0.0, 1.0 - _SHADOW_EPSILON)
        return ShadowSample(ray, self.mat.emitted(sample.u, sample.v))