"""Surface materials: how light scatters at a hit point."""

from __future__ import annotations

import math
from typing import ClassVar, Optional

import numpy as np

from .local_frame import LocalFrame
from .rayhit import RayHit, reflect, refract
from .sampler import Sample, Sampler
from .texture import Texture

_SHARED_SAMPLER = Sampler()


def _unit(vec) -> np.ndarray:
    vec = np.asarray(vec, dtype=float)
    return vec / np.linalg.norm(vec)


def _schlick_fresnel(cosine: float, rindex: float) -> float:
    r0 = (1.0 - rindex) / (1.0 + rindex)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


class Material:
    """A surface that absorbs all light and scatters nothing."""

    is_emissive: ClassVar[bool] = False

    def __init__(self, *, sampler: Optional[Sampler] = None) -> None:
        self.sampler = _SHARED_SAMPLER if sampler is None else sampler

    def sample(self, rayhit: RayHit) -> Sample:
        """Draw a scattered direction; a zero vector means absorption."""
        return Sample(np.zeros(3), 0.0)

    def eval(self, rayhit: RayHit, wi) -> np.ndarray:
        """Attenuation for light leaving along ``wi``."""
        return np.zeros(3)


class Dielectric(Material):
    """Clear glass-like material that reflects or refracts."""

    def __init__(self, rindex: float, *, sampler: Optional[Sampler] = None) -> None:
        super().__init__(sampler=sampler)
        self.rindex = float(rindex)

    def sample(self, rayhit: RayHit) -> Sample:
        wo = rayhit.ray.direction
        normal = rayhit.hit.normal
        if float(wo @ normal) > 0.0:  # leaving the solid
            outward = -normal
            ni_over_nt = self.rindex
            cosine = self.rindex * float(_unit(wo) @ normal)
        else:
            outward = normal
            ni_over_nt = 1.0 / self.rindex
            cosine = -float(_unit(wo) @ normal)

        refracted = refract(wo, _unit(outward), ni_over_nt)
        if refracted is None:
            return Sample(reflect(wo, _unit(normal)), 1.0)
        if self.sampler.uniform_1d().value < _schlick_fresnel(cosine, self.rindex):
            return Sample(reflect(wo, _unit(normal)), 1.0)
        return Sample(refracted, 1.0)

    def eval(self, rayhit: RayHit, wi) -> np.ndarray:
        return np.ones(3)


class DiffuseLight(Material):
    """An emitter whose radiance comes from a texture."""

    is_emissive: ClassVar[bool] = True

    def __init__(self, emit: Texture, *, sampler: Optional[Sampler] = None) -> None:
        super().__init__(sampler=sampler)
        self.emit = emit

    def eval(self, rayhit: RayHit, wi) -> np.ndarray:
        hit = rayhit.hit
        return self.emit.value(hit.u, hit.v, rayhit.hit_point())

    def emitted(self, u: float, v: float) -> np.ndarray:
        """Radiance at surface coordinates (u, v)."""
        return self.emit.value(u, v, np.zeros(3))


class Lambertian(Material):
    """An ideal diffuse surface coloured by a texture."""

    def __init__(self, texture: Texture, *, sampler: Optional[Sampler] = None) -> None:
        super().__init__(sampler=sampler)
        self.texture = texture

    def sample(self, rayhit: RayHit) -> Sample:
        frame = LocalFrame(rayhit.hit.normal)
        local = self.sampler.cosine_weighted_on_hemisphere()
        return Sample(frame.local(local.value), local.pdf)

    def eval(self, rayhit: RayHit, wi) -> np.ndarray:
        normal = _unit(rayhit.hit.normal)
        cos_theta = abs(float(_unit(wi) @ normal))
        hit = rayhit.hit
        colour = self.texture.value(hit.u, hit.v, rayhit.hit_point())
        return colour * cos_theta / math.pi


class Metal(Material):
    """A reflective surface with optional fuzz."""

    def __init__(
        self, albedo, roughness: float, *, sampler: Optional[Sampler] = None
    ) -> None:
        super().__init__(sampler=sampler)
        self.albedo = np.array(albedo, dtype=float).reshape(3)
        self.roughness = min(max(float(roughness), 0.0), 1.0)

    def sample(self, rayhit: RayHit) -> Sample:
        wo = rayhit.ray.direction
        normal = rayhit.hit.normal
        wi = reflect(wo, _unit(normal))
        wi = wi + self.roughness * self.sampler.uniform_in_sphere().value
        if float(wi @ normal) > 0.0:
            return Sample(wi, 1.0)
        return Sample(np.zeros(3), 1.0)

    def eval(self, rayhit: RayHit, wi) -> np.ndarray:
        return self.albedo.copy()