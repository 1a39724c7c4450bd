"""A collection of shapes, their materials, lights and a camera."""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from .camera import Camera
from .geometry import Bounds, Geometry
from .light import Light
from .material import Material
from .rayhit import Ray, RayHit

_BOX_PAD = 1e-5


def _ray_hits_box(ray: Ray, box: Bounds) -> bool:
    """Whether ``ray`` passes through ``box`` within [tnear, tfar]."""
    lower = box.lower - _BOX_PAD * (1.0 + np.abs(box.lower))
    upper = box.upper + _BOX_PAD * (1.0 + np.abs(box.upper))
    origin, direction = ray.origin, ray.direction
    flat = direction == 0.0
    if np.any(flat & ((origin < lower) | (origin > upper))):
        return False
    with np.errstate(divide="ignore", invalid="ignore"):
        t0 = (lower - origin) / direction
        t1 = (upper - origin) / direction
    tmin = np.where(flat, -np.inf, np.minimum(t0, t1))
    tmax = np.where(flat, np.inf, np.maximum(t0, t1))
    enter = max(float(tmin.max()), ray.tnear)
    leave = min(float(tmax.min()), ray.tfar)
    return enter <= leave


class Scene:
    """Shapes paired with materials, plus lights, a camera and a background.

    A shape's identifier is its position in the order it was added.  The
    scene must be committed after shapes are added (or moved) and before
    rays are traced through it.
    """

    def __init__(self, camera: Optional[Camera] = None, background=(0.0, 0.0, 0.0)) -> None:
        self.camera = camera
        self.background = background
        self._geometries: List[Geometry] = []
        self._materials: List[Material] = []
        self._lights: List[Light] = []
        self._bounds: Optional[List[Bounds]] = None

    @property
    def background(self) -> np.ndarray:
        """Radiance returned by rays that hit nothing."""
        return self._background

    @background.setter
    def background(self, value) -> None:
        self._background = np.array(value, dtype=float).reshape(3)

    @property
    def geometries(self) -> Tuple[Geometry, ...]:
        return tuple(self._geometries)

    @property
    def materials(self) -> Tuple[Material, ...]:
        return tuple(self._materials)

    @property
    def lights(self) -> Tuple[Light, ...]:
        return tuple(self._lights)

    @property
    def committed(self) -> bool:
        """Whether the scene is ready for tracing."""
        return self._bounds is not None

    def add(self, geom: Geometry, mat: Material) -> int:
        """Add a shape with its material; return the shape's identifier."""
        self._geometries.append(geom)
        self._materials.append(mat)
        self._bounds = None
        return len(self._geometries) - 1

    def add_light(self, light: Light) -> None:
        """Add a light used for direct illumination."""
        self._lights.append(light)

    def commit(self) -> None:
        """Record the current shapes' bounds so rays can be traced."""
        self._bounds = [geom.bounds() for geom in self._geometries]

    def _committed_bounds(self) -> List[Bounds]:
        if self._bounds is None:
            raise RuntimeError("scene must be committed before tracing rays")
        return self._bounds

    def intersect(self, rayhit: RayHit) -> bool:
        """Find the closest hit along the ray; return whether there is one."""
        found = False
        for geom_id, (geom, box) in enumerate(
            zip(self._geometries, self._committed_bounds())
        ):
            if _ray_hits_box(rayhit.ray, box) and geom.intersect(rayhit, geom_id):
                found = True
        return found

    def occluded(self, ray: Ray) -> bool:
        """Whether anything lies on the ray within [tnear, tfar]."""
        return any(
            _ray_hits_box(ray, box) and geom.occluded(ray)
            for geom, box in zip(self._geometries, self._committed_bounds())
        )