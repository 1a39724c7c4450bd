"""Rays, hit records and the vector helpers used while tracing them."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

INVALID_GEOMETRY_ID = -1
"""Identifier stored in a hit record that has not hit anything."""

FLOAT_MAX = float(np.finfo(np.float32).max)
"""Default far end of a ray: the largest single-precision float."""


def _vec3(values) -> np.ndarray:
    vec = np.array(values, dtype=float).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {vec.shape}")
    return vec


@dataclass
class Ray:
    """A ray whose parameter runs over [tnear, tfar]."""

    origin: np.ndarray
    direction: np.ndarray
    tnear: float = 0.0
    tfar: float = FLOAT_MAX

    def __post_init__(self) -> None:
        self.origin = _vec3(self.origin)
        self.direction = _vec3(self.direction)
        self.tnear = float(self.tnear)
        self.tfar = float(self.tfar)

    def point_at(self, t: float) -> np.ndarray:
        """Return the point reached at parameter ``t``."""
        return self.origin + t * self.direction


@dataclass
class Hit:
    """What a ray hit: geometric normal, surface coordinates and identifiers."""

    normal: np.ndarray = field(default_factory=lambda: np.zeros(3))
    u: float = 0.0
    v: float = 0.0
    geom_id: int = INVALID_GEOMETRY_ID
    prim_id: int = INVALID_GEOMETRY_ID
    inst_id: int = INVALID_GEOMETRY_ID

    def __post_init__(self) -> None:
        self.normal = _vec3(self.normal)


@dataclass
class RayHit:
    """A ray together with the record of its closest hit so far."""

    ray: Ray
    hit: Hit = field(default_factory=Hit)

    def hit_point(self) -> np.ndarray:
        """Return the point at the ray's current far end."""
        return self.ray.point_at(self.ray.tfar)


def make_ray(origin, direction, tnear: float = 0.0, tfar: float = FLOAT_MAX) -> Ray:
    """Build a ray from an origin and a direction."""
    return Ray(origin, direction, tnear, tfar)


def make_rayhit(
    origin, direction, tnear: float = 0.0, tfar: float = FLOAT_MAX
) -> RayHit:
    """Build a ray with an empty hit record."""
    return RayHit(Ray(origin, direction, tnear, tfar), Hit())


def reflect(incoming, normal) -> np.ndarray:
    """Mirror ``incoming`` about the unit ``normal``."""
    d = _vec3(incoming)
    n = _vec3(normal)
    return d - 2.0 * float(d @ n) * n


def refract(incoming, normal, ni_over_nt: float) -> Optional[np.ndarray]:
    """Refract ``incoming`` through a surface with unit ``normal``.

    Returns None on total internal reflection.
    """
    d = _vec3(incoming)
    n = _vec3(normal)
    uin = d / np.linalg.norm(d)
    cosi = float(uin @ n)
    cos2t = 1.0 - (1.0 - cosi * cosi) * ni_over_nt * ni_over_nt
    if cos2t > 0.0:
        return (uin - n * cosi) * ni_over_nt - n * math.sqrt(cos2t)
    return None


def transform_hitnormal(rayhit: RayHit, model_to_world) -> np.ndarray:
    """Carry the hit normal from model space to world space, normalised."""
    linear = np.asarray(model_to_world, dtype=float)[:3, :3]
    n = np.linalg.inv(linear).T @ rayhit.hit.normal
    return n / np.linalg.norm(n)