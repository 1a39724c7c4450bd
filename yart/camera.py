"""Positionable cameras that turn film coordinates into primary rays."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .rayhit import FLOAT_MAX, RayHit, make_rayhit
from .sampler import Sampler

_SHARED_SAMPLER = Sampler()


def _vec3(values) -> np.ndarray:
    vec = np.array(values, dtype=float).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {vec.shape}")
    return vec


def _normalized(vec: np.ndarray, what: str) -> np.ndarray:
    length = float(np.linalg.norm(vec))
    if length == 0.0:
        raise ValueError(f"{what} has zero length")
    return vec / length


def _film_height(vfov: float) -> float:
    return 2.0 * math.tan(math.radians(vfov) * 0.5)


@dataclass
class Film:
    """Extent of the film plane at unit distance from the camera."""

    width: float = 0.0
    height: float = 0.0


class Camera(ABC):
    """A positionable camera in a right-handed coordinate system.

    The camera looks along ``-direction``; ``u`` and ``v`` span the film
    plane.  Without a position the camera sits at the origin looking down
    the negative z axis with unit focus distance and lens radius.
    """

    def __init__(
        self,
        position=None,
        focus=(0.0, 0.0, 0.0),
        up=(0.0, 1.0, 0.0),
        aperture: float = 2.0,
        *,
        sampler: Optional[Sampler] = None,
    ) -> None:
        self.sampler = _SHARED_SAMPLER if sampler is None else sampler
        self.film = Film()
        if position is None:
            self.position = np.zeros(3)
            self.u = np.array([1.0, 0.0, 0.0])
            self.v = np.array([0.0, 1.0, 0.0])
            self.direction = np.array([0.0, 0.0, 1.0])
            self.focus = 1.0
            self.lens_radius = 1.0
            return
        self.lookat(position, focus, up)
        self.focus = float(np.linalg.norm(_vec3(focus) - self.position))
        self.lens_radius = float(aperture) * 0.5

    def lookat(self, position, focus, up) -> None:
        """Place the camera at ``position`` looking towards ``focus``."""
        pos = _vec3(position)
        direction = _normalized(pos - _vec3(focus), "position - focus")
        u = _normalized(np.cross(_vec3(up), direction), "up x direction")
        self.position = pos
        self.direction = direction
        self.u = u
        self.v = np.cross(direction, u)

    def zoom(self, focus_len: float) -> None:
        """Set the distance to the plane in focus."""
        self.focus = float(focus_len)

    @abstractmethod
    def gen_ray(
        self, s: float, t: float, near: float = 0.0, far: float = FLOAT_MAX
    ) -> RayHit:
        """Primary ray through film coordinates (s, t), each in [0, 1)."""


class PerspectiveCamera(Camera):
    """A camera whose frustum is set by a vertical field of view and aspect."""

    def __init__(
        self,
        position=None,
        focus=(0.0, 0.0, 0.0),
        up=(0.0, 1.0, 0.0),
        aperture: float = 2.0,
        vfov: float = 90.0,
        aspect: float = 1.0,
        *,
        sampler: Optional[Sampler] = None,
    ) -> None:
        super().__init__(position, focus, up, aperture, sampler=sampler)
        if position is None:
            height = 2.0 * math.tan(90.0 * 0.5)
            self.film = Film(height, height)
        else:
            height = _film_height(vfov)
            self.film = Film(float(aspect) * height, height)

    @classmethod
    def from_size(
        cls,
        position,
        focus=(0.0, 0.0, 0.0),
        up=(0.0, 1.0, 0.0),
        aperture: float = 2.0,
        vfov: float = 90.0,
        width: int = 256,
        height: int = 256,
    ) -> "PerspectiveCamera":
        """Build a camera whose aspect ratio matches an image size."""
        if height == 0:
            raise ValueError("image height must be non-zero")
        return cls(position, focus, up, aperture, vfov, width / height)

    def set_aspect(self, width: int, height: int) -> None:
        """Set the aspect ratio from an image size, keeping the film height."""
        if height == 0:
            raise ValueError("image height must be non-zero")
        self.film.width = (width / height) * self.film.height

    def set_fov(self, vfov: float) -> None:
        """Set the vertical field of view in degrees, keeping the aspect."""
        aspect = self.film.width / self.film.height
        self.film.height = _film_height(vfov)
        self.film.width = aspect * self.film.height

    def gen_ray(
        self, s: float, t: float, near: float = 0.0, far: float = FLOAT_MAX
    ) -> RayHit:
        offset = self.lens_radius * self.sampler.uniform_in_disk().value
        origin = self.position + offset[0] * self.u + offset[1] * self.v
        direction = (
            -self.direction * self.focus
            + (s - 0.5) * self.film.width * self.u * self.focus
            + (t - 0.5) * self.film.height * self.v * self.focus
        )
        return make_rayhit(origin, direction, near, far)