"""Shapes that rays can hit: planes, spheres and axis-aligned boxes."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

import numpy as np

from .rayhit import INVALID_GEOMETRY_ID, Ray, RayHit
from .sampler import Sampler

_SHARED_SAMPLER = Sampler()


def _vec3(values) -> np.ndarray:
    vec = np.array(values, dtype=float).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {vec.shape}")
    return vec


class Bounds(NamedTuple):
    """Axis-aligned bounding box given by its lower and upper corners."""

    lower: np.ndarray
    upper: np.ndarray


@dataclass
class LocalGeometry:
    """A point on a surface with its normal and surface coordinates."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    normal: np.ndarray = field(default_factory=lambda: np.zeros(3))
    u: float = 0.0
    v: float = 0.0


class Geometry(ABC):
    """A shape that can be bounded, intersected, tested for occlusion and sampled."""

    def __init__(self, *, sampler: Optional[Sampler] = None) -> None:
        self.sampler = _SHARED_SAMPLER if sampler is None else sampler

    @abstractmethod
    def bounds(self) -> Bounds:
        """Axis-aligned box enclosing the shape."""

    @abstractmethod
    def intersect(
        self, rayhit: RayHit, geom_id: int = 0, inst_id: int = INVALID_GEOMETRY_ID
    ) -> bool:
        """Record a closer hit in ``rayhit``; return whether one was found."""

    @abstractmethod
    def occluded(self, ray: Ray) -> bool:
        """Shorten ``ray`` to a hit on the shape; return whether one was found."""

    @abstractmethod
    def sample(self) -> LocalGeometry:
        """A random point on the surface."""


class Plane(Geometry):
    """A one-sided parallelogram spanned by two edges from a corner.

    Its normal is ``edge_u x edge_v``; rays only hit it from the front.
    """

    def __init__(self, corner, u, v, *, sampler: Optional[Sampler] = None) -> None:
        super().__init__(sampler=sampler)
        self.corner = _vec3(corner)
        self.edge_u = _vec3(u)
        self.edge_v = _vec3(v)
        n = np.cross(self.edge_u, self.edge_v)
        length = float(np.linalg.norm(n))
        if length == 0.0:
            raise ValueError("plane edges must be non-zero and not parallel")
        self.normal = n / length

    @property
    def ulen(self) -> float:
        return float(np.linalg.norm(self.edge_u))

    @property
    def vlen(self) -> float:
        return float(np.linalg.norm(self.edge_v))

    @property
    def udir(self) -> np.ndarray:
        return self.edge_u / self.ulen

    @property
    def vdir(self) -> np.ndarray:
        return self.edge_v / self.vlen

    @property
    def area(self) -> float:
        return float(np.linalg.norm(np.cross(self.edge_u, self.edge_v)))

    def bounds(self) -> Bounds:
        lb = self.corner
        rt = lb + self.edge_u + self.edge_v
        return Bounds(np.minimum(lb, rt), np.maximum(lb, rt))

    def _solve(self, ray: Ray):
        dn = float(ray.direction @ self.normal)
        if dn >= 0.0:
            return None
        t = float((self.corner - ray.origin) @ self.normal) / dn
        if t > ray.tfar or t < ray.tnear:
            return None
        pp = ray.point_at(t) - self.corner
        u = float(pp @ self.udir)
        if u < 0.0 or u > self.ulen:
            return None
        v = float(pp @ self.vdir)
        if v < 0.0 or v > self.vlen:
            return None
        return t, u, v

    def intersect(
        self, rayhit: RayHit, geom_id: int = 0, inst_id: int = INVALID_GEOMETRY_ID
    ) -> bool:
        found = self._solve(rayhit.ray)
        if found is None:
            return False
        t, u, v = found
        rayhit.ray.tfar = t
        hit = rayhit.hit
        hit.inst_id = inst_id
        hit.geom_id = geom_id
        hit.prim_id = 0
        hit.normal = self.normal.copy()
        hit.u = u / self.ulen
        hit.v = v / self.vlen
        return True

    def occluded(self, ray: Ray) -> bool:
        found = self._solve(ray)
        if found is None:
            return False
        ray.tfar = found[0]
        return True

    def sample(self) -> LocalGeometry:
        u = self.sampler.uniform_1d().value
        v = self.sampler.uniform_1d().value
        position = self.corner + u * self.edge_u + v * self.edge_v
        return LocalGeometry(position, self.normal.copy(), u, v)


def _sphere_uv(normal: np.ndarray):
    phi = math.atan2(normal[0], normal[2])
    theta = math.asin(min(max(float(normal[1]), -1.0), 1.0))
    u = 1.0 - (phi + math.pi) / (2.0 * math.pi)
    v = (theta + math.pi / 2.0) / math.pi
    return u, v


class Sphere(Geometry):
    """A sphere given by its radius and centre."""

    def __init__(self, radius: float, center, *, sampler: Optional[Sampler] = None) -> None:
        super().__init__(sampler=sampler)
        self.radius = float(radius)
        self.center = _vec3(center)

    def bounds(self) -> Bounds:
        return Bounds(self.center - self.radius, self.center + self.radius)

    def _roots(self, ray: Ray):
        oc = ray.origin - self.center
        d = ray.direction
        a = float(d @ d)
        b = 2.0 * float(oc @ d)
        c = float(oc @ oc) - self.radius * self.radius
        disc = b * b - 4.0 * a * c
        if disc < 0.0:
            return None
        q = math.sqrt(disc)
        denom = 0.5 / a
        return denom * (-b - q), denom * (-b + q)

    @staticmethod
    def _clip(ray: Ray, roots) -> None:
        for t in roots:
            if ray.tnear < t < ray.tfar:
                ray.tfar = t

    def intersect(
        self, rayhit: RayHit, geom_id: int = 0, inst_id: int = INVALID_GEOMETRY_ID
    ) -> bool:
        roots = self._roots(rayhit.ray)
        if roots is None:
            return False
        old_tfar = rayhit.ray.tfar
        self._clip(rayhit.ray, roots)
        if rayhit.ray.tfar == old_tfar:
            return False
        hit = rayhit.hit
        hit.inst_id = inst_id
        hit.geom_id = geom_id
        hit.prim_id = 0
        ng = rayhit.hit_point() - self.center
        ng = ng / np.linalg.norm(ng)
        hit.normal = ng
        hit.u, hit.v = _sphere_uv(ng)
        return True

    def occluded(self, ray: Ray) -> bool:
        roots = self._roots(ray)
        if roots is None:
            return False
        old_tfar = ray.tfar
        self._clip(ray, roots)
        return ray.tfar != old_tfar

    def sample(self) -> LocalGeometry:
        normal = np.asarray(self.sampler.uniform_on_sphere().value, dtype=float)
        normal = normal / np.linalg.norm(normal)
        u, v = _sphere_uv(normal)
        return LocalGeometry(self.center + self.radius * normal, normal, u, v)


class Box(Geometry):
    """An axis-aligned box made of six outward-facing planes."""

    def __init__(
        self, min_corner, max_corner, *, sampler: Optional[Sampler] = None
    ) -> None:
        super().__init__(sampler=sampler)
        self.min_corner = _vec3(min_corner)
        self.max_corner = _vec3(max_corner)
        size = self.max_corner - self.min_corner
        x = np.array([size[0], 0.0, 0.0])
        y = np.array([0.0, size[1], 0.0])
        z = np.array([0.0, 0.0, size[2]])
        lo, hi, s = self.min_corner, self.max_corner, self.sampler
        self._faces = [
            Plane(lo, z, y, sampler=s),  # left
            Plane(lo, x, z, sampler=s),  # bottom
            Plane(lo, y, x, sampler=s),  # back
            Plane(hi, -y, -z, sampler=s),  # right
            Plane(hi, -z, -x, sampler=s),  # top
            Plane(hi, -x, -y, sampler=s),  # front
        ]

    def faces(self) -> List[Plane]:
        """The six faces: left, bottom, back, right, top, front."""
        return list(self._faces)

    def bounds(self) -> Bounds:
        return Bounds(self.min_corner.copy(), self.max_corner.copy())

    def intersect(
        self, rayhit: RayHit, geom_id: int = 0, inst_id: int = INVALID_GEOMETRY_ID
    ) -> bool:
        hits = [face.intersect(rayhit, geom_id, inst_id) for face in self._faces]
        return any(hits)

    def occluded(self, ray: Ray) -> bool:
        hits = [face.occluded(ray) for face in self._faces]
        return any(hits)

    def sample(self) -> LocalGeometry:
        areas = [face.area for face in self._faces]
        pick = self.sampler.uniform_1d().value * sum(areas)
        for face, area in zip(self._faces, areas):
            if pick < area:
                return face.sample()
            pick -= area
        return self._faces[-1].sample()