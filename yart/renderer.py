"""Renderers that fill an 8-bit RGB image tile by tile."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional

import numpy as np

from .rayhit import INVALID_GEOMETRY_ID, RayHit, make_rayhit, transform_hitnormal
from .sampler import Sampler
from .scene import Scene

TILE_SIZE = 8

_SHARED_SAMPLER = Sampler()

ProgressCallback = Callable[[int, int], None]


class PixelResult(NamedTuple):
    """A colour and the number of rays traced to get it."""

    color: np.ndarray
    rays: int


@dataclass
class RenderData:
    """Target image: 3 bytes per pixel, rows stored top first.

    Interleaved data stores RGB triples; otherwise the red, green and blue
    planes follow one another.
    """

    width: int
    height: int
    interleaved: bool = False
    pixels: Optional[bytearray] = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("image dimensions must be positive")
        size = 3 * self.width * self.height
        if self.pixels is None:
            self.pixels = bytearray(size)
        elif len(self.pixels) != size:
            raise ValueError(f"expected {size} bytes of pixels, got {len(self.pixels)}")


class Renderer(ABC):
    """Renders a scene into RenderData in square tiles."""

    def __init__(
        self,
        *,
        sampler: Optional[Sampler] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.sampler = _SHARED_SAMPLER if sampler is None else sampler
        self.progress = progress

    def render_tiled(self, scene: Scene, data: RenderData) -> int:
        """Render every pixel; return the number of rays traced."""
        if scene.camera is None:
            raise ValueError("the scene has no camera")
        tiles_x = (data.width + TILE_SIZE - 1) // TILE_SIZE
        tiles_y = (data.height + TILE_SIZE - 1) // TILE_SIZE
        total = tiles_x * tiles_y
        rays = 0
        for task in range(total):
            rays += self._render_tile(scene, data, task, tiles_x)
            if self.progress is not None:
                self.progress(task + 1, total)
        return rays

    def _render_tile(self, scene: Scene, data: RenderData, task: int, tiles_x: int) -> int:
        tile_y, tile_x = divmod(task, tiles_x)
        x0, y0 = tile_x * TILE_SIZE, tile_y * TILE_SIZE
        x1 = min(x0 + TILE_SIZE, data.width)
        y1 = min(y0 + TILE_SIZE, data.height)
        rays = 0
        for y in range(y0, y1):
            for x in range(x0, x1):
                result = self.render_pixel(scene, data, x, y)
                self._store(data, x, y, result.color)
                rays += result.rays
        return rays

    @staticmethod
    def _store(data: RenderData, x: int, y: int, color) -> None:
        clipped = np.nan_to_num(np.clip(np.asarray(color, dtype=float), 0.0, 1.0))
        channels = (clipped * 255).astype(int)
        index = (data.height - y - 1) * data.width + x
        if data.interleaved:
            data.pixels[3 * index : 3 * index + 3] = bytes(channels.tolist())
        else:
            plane = data.width * data.height
            for k, value in enumerate(channels.tolist()):
                data.pixels[k * plane + index] = value

    @abstractmethod
    def render_pixel(self, scene: Scene, data: RenderData, x: int, y: int) -> PixelResult:
        """Colour of pixel (x, y), counted from the bottom-left corner."""


class RenderMode(enum.Enum):
    """What the debug renderer shows."""

    ID = "id"
    NORMAL = "normal"


_DEFAULT_PALETTE = [
    (249, 65, 68),
    (243, 114, 44),
    (248, 150, 30),
    (249, 199, 79),
    (144, 190, 109),
    (67, 170, 139),
    (87, 117, 144),
]


class DebugRenderer(Renderer):
    """Shows which shape each pixel sees, or its surface normal."""

    def __init__(
        self,
        mode: RenderMode = RenderMode.ID,
        *,
        sampler: Optional[Sampler] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        super().__init__(sampler=sampler, progress=progress)
        self.mode = mode
        self._palette: List[np.ndarray] = [
            np.array(rgb, dtype=float) / 255.0 for rgb in _DEFAULT_PALETTE
        ]

    @property
    def color_palette(self) -> List[np.ndarray]:
        """Colours assigned to shape identifiers, cyclically."""
        return [colour.copy() for colour in self._palette]

    def generate_color_palette(self, num: int) -> None:
        """Resize the palette to ``num`` colours, jittering any new ones."""
        if num < 1:
            raise ValueError("the palette needs at least one colour")
        if num <= len(self._palette):
            del self._palette[num:]
            return
        base = len(self._palette)
        for i in range(base, num):
            jitter = np.array([self.sampler.uniform_1d().value for _ in range(3)])
            colour = self._palette[i % base] + jitter * 0.6 - 0.3
            self._palette.append(np.clip(colour, 0.0, 1.0))

    def render_pixel(self, scene: Scene, data: RenderData, x: int, y: int) -> PixelResult:
        rayhit = scene.camera.gen_ray(x / data.width, y / data.height)
        color = np.zeros(3)
        if scene.intersect(rayhit):
            hit = rayhit.hit
            if hit.inst_id != INVALID_GEOMETRY_ID:
                hit.geom_id = hit.inst_id
            if self.mode is RenderMode.NORMAL:
                normal = hit.normal / np.linalg.norm(hit.normal)
                color = normal * 0.5 + 0.5
            else:
                color = self._palette[hit.geom_id % len(self._palette)].copy()
        return PixelResult(color, 1)


class PathTracer(Renderer):
    """Monte Carlo path tracer with direct light sampling."""

    GAMMA = 1.0 / 2.2

    def __init__(
        self,
        samples: int = 1,
        depth: int = 100,
        *,
        sampler: Optional[Sampler] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        super().__init__(sampler=sampler, progress=progress)
        if samples < 1:
            raise ValueError("at least one sample per pixel is needed")
        if depth < 0:
            raise ValueError("path depth cannot be negative")
        self.samples = samples
        self.depth = depth

    def render_pixel(self, scene: Scene, data: RenderData, x: int, y: int) -> PixelResult:
        irradiance = np.zeros(3)
        rays = 0
        for _ in range(self.samples):
            r1 = self.sampler.uniform_1d().value - 0.5
            r2 = self.sampler.uniform_1d().value - 0.5
            rayhit = scene.camera.gen_ray((x + r1) / data.width, (y + r2) / data.height)
            result = self.trace(scene, rayhit)
            irradiance += result.color
            rays += result.rays
        irradiance /= self.samples
        return PixelResult(np.power(irradiance, self.GAMMA), rays)

    def trace(self, scene: Scene, rayhit: RayHit) -> PixelResult:
        """Follow one path from ``rayhit``; return its radiance and ray count."""
        irradiance = np.zeros(3)
        throughput = np.ones(3)
        rays = 0
        for bounce in range(self.depth):
            rays += 1
            if not scene.intersect(rayhit):
                irradiance += throughput * scene.background
                break
            hit = rayhit.hit
            if hit.inst_id != INVALID_GEOMETRY_ID:
                hit.geom_id = hit.inst_id
                instance = scene.geometries[hit.geom_id]
                hit.normal = transform_hitnormal(rayhit, instance.matrix)
            hitpt = rayhit.hit_point()
            material = scene.materials[hit.geom_id]

            if bounce == 0 and material.is_emissive:
                irradiance += throughput * material.eval(rayhit, np.zeros(3))
                break

            for light in scene.lights:
                shadow = light.cast_shadow_ray(hitpt)
                if shadow is not None and not scene.occluded(shadow.ray):
                    irradiance += (
                        shadow.radiance
                        * throughput
                        * material.eval(rayhit, shadow.ray.direction)
                    )

            scattered = material.sample(rayhit)
            wi = np.asarray(scattered.value, dtype=float)
            if not np.any(wi):
                break
            throughput = throughput * material.eval(rayhit, wi) / scattered.pdf
            rayhit = make_rayhit(hitpt, wi, 1e-4)
        return PixelResult(irradiance, rays)