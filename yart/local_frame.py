"""An orthonormal frame built around a single direction."""

from __future__ import annotations

import numpy as np


class LocalFrame:
    """Orthonormal basis (u, v, w) whose v axis is the given direction."""

    __slots__ = ("u", "v", "w")

    def __init__(self, direction) -> None:
        d = np.array(direction, dtype=float).reshape(-1)
        length = np.linalg.norm(d)
        if d.shape != (3,) or length == 0.0:
            raise ValueError("a local frame needs a non-zero 3-vector")
        v = d / length
        axis = np.array([1.0, 0.0, 0.0]) if abs(d[0]) < 0.9 else np.array([0.0, 0.0, 1.0])
        w = np.cross(axis, v)
        w /= np.linalg.norm(w)
        self.u = np.cross(v, w)
        self.v = v
        self.w = w

    def local(self, vec) -> np.ndarray:
        """Express frame coordinates (x, y, z) in world space."""
        x, y, z = vec
        return self.u * x + self.v * y + self.w * z