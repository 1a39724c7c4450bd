"""Textures: colours looked up by surface coordinates and position."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

import numpy as np


class Texture(ABC):
    """A colour that varies over a surface."""

    @abstractmethod
    def value(self, u: float, v: float, p) -> np.ndarray:
        """Colour at surface coordinates (u, v) and position p."""


class ConstantTexture(Texture):
    """The same colour everywhere."""

    def __init__(self, color=(1.0, 1.0, 1.0)) -> None:
        self.color = np.array(color, dtype=float).reshape(3)

    def value(self, u: float, v: float, p) -> np.ndarray:
        return self.color.copy()


class CheckerBoardTexture(Texture):
    """Alternates between two textures in a 3D checker pattern."""

    def __init__(self, odd: Texture, even: Texture) -> None:
        self.odd = odd
        self.even = even

    def value(self, u: float, v: float, p) -> np.ndarray:
        x, y, z = p
        sines = math.sin(10.0 * x) * math.sin(10.0 * y) * math.sin(10.0 * z)
        if sines < 0.0:
            return self.odd.value(u, v, p)
        return self.even.value(u, v, p)


class ImageTexture(Texture):
    """An interleaved 8-bit RGB image, rows stored top first."""

    def __init__(self, pixels, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("image dimensions must be positive")
        data = bytes(pixels)
        if len(data) < 3 * width * height:
            raise ValueError(
                f"expected {3 * width * height} bytes of pixels, got {len(data)}"
            )
        self.pixels = data
        self.width = width
        self.height = height

    def value(self, u: float, v: float, p) -> np.ndarray:
        i = int(min(max(u * self.width, 0.0), self.width - 1))
        j = int(min(max((1.0 - v) * self.height, 0.0), self.height - 1))
        start = 3 * (i + self.width * j)
        return np.array(self.pixels[start : start + 3], dtype=float) / 255.0