"""A transformed copy of a whole scene placed inside another scene."""

from __future__ import annotations

import itertools
import math
from typing import Optional

import numpy as np

from .geometry import Bounds, Geometry, LocalGeometry
from .rayhit import INVALID_GEOMETRY_ID, Ray, RayHit
from .sampler import Sampler
from .scene import Scene


def _vec3(values) -> np.ndarray:
    vec = np.array(values, dtype=float).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {vec.shape}")
    return vec


def _rotation(angle: float, axis) -> np.ndarray:
    a = _vec3(axis)
    length = float(np.linalg.norm(a))
    if length == 0.0:
        raise ValueError("rotation axis has zero length")
    x, y, z = a / length
    k = np.array([[0.0, -z, y], [z, 0.0, -x], [-y, x, 0.0]])
    return np.eye(3) + math.sin(angle) * k + (1.0 - math.cos(angle)) * (k @ k)


class Instance(Geometry):
    """A scene drawn through an affine model-to-world transform.

    Hits inside the instance report the instanced shape's identifier as
    ``geom_id``, the instance's own identifier as ``inst_id`` and the
    normal in model space.
    """

    def __init__(self, scene: Scene, *, sampler: Optional[Sampler] = None) -> None:
        super().__init__(sampler=sampler)
        self.scene = scene
        self._matrix = np.eye(4)

    @property
    def matrix(self) -> np.ndarray:
        """The 4x4 model-to-world matrix."""
        return self._matrix.copy()

    def translate(self, vec) -> None:
        """Apply a translation after the current transform."""
        step = np.eye(4)
        step[:3, 3] = _vec3(vec)
        self._matrix = step @ self._matrix

    def rotate(self, angle: float, axis) -> None:
        """Apply a rotation of ``angle`` radians about ``axis``."""
        step = np.eye(4)
        step[:3, :3] = _rotation(angle, axis)
        self._matrix = step @ self._matrix

    def scale(self, vec) -> None:
        """Apply a per-axis scaling."""
        self._matrix = np.diag([*_vec3(vec), 1.0]) @ self._matrix

    def set_transform(self, mat) -> None:
        """Replace the transform with a 4x4 affine matrix."""
        m = np.array(mat, dtype=float)
        if m.shape != (4, 4):
            raise ValueError(f"expected a 4x4 matrix, got shape {m.shape}")
        m[3] = (0.0, 0.0, 0.0, 1.0)
        self._matrix = m

    def _to_local(self, ray: Ray) -> Ray:
        inv = np.linalg.inv(self._matrix)
        linear = inv[:3, :3]
        return Ray(
            linear @ ray.origin + inv[:3, 3],
            linear @ ray.direction,
            ray.tnear,
            ray.tfar,
        )

    def bounds(self) -> Bounds:
        boxes = [geom.bounds() for geom in self.scene.geometries]
        if not boxes:
            raise ValueError("the instanced scene is empty")
        lower = np.min([box.lower for box in boxes], axis=0)
        upper = np.max([box.upper for box in boxes], axis=0)
        corners = np.array(list(itertools.product(*zip(lower, upper))))
        world = corners @ self._matrix[:3, :3].T + self._matrix[:3, 3]
        return Bounds(world.min(axis=0), world.max(axis=0))

    def intersect(
        self, rayhit: RayHit, geom_id: int = 0, inst_id: int = INVALID_GEOMETRY_ID
    ) -> bool:
        local = RayHit(self._to_local(rayhit.ray))
        found = False
        for child_id, geom in enumerate(self.scene.geometries):
            if geom.intersect(local, child_id, geom_id):
                found = True
        if found:
            rayhit.ray.tfar = local.ray.tfar
            rayhit.hit = local.hit
        return found

    def occluded(self, ray: Ray) -> bool:
        local = self._to_local(ray)
        if any(geom.occluded(local) for geom in self.scene.geometries):
            ray.tfar = local.tfar
            return True
        return False

    def sample(self) -> LocalGeometry:
        geoms = self.scene.geometries
        if not geoms:
            raise ValueError("the instanced scene is empty")
        index = min(int(self.sampler.uniform_1d().value * len(geoms)), len(geoms) - 1)
        point = geoms[index].sample()
        linear = self._matrix[:3, :3]
        position = linear @ point.position + self._matrix[:3, 3]
        normal = np.linalg.inv(linear).T @ point.normal
        normal = normal / np.linalg.norm(normal)
        return LocalGeometry(position, normal, point.u, point.v)