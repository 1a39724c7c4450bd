"""Minimal PNG encoder for 8-bit RGB images."""

from __future__ import annotations

import struct
import zlib
from os import PathLike
from pathlib import Path
from typing import Union

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
"""The eight bytes every PNG file starts with."""

_BIT_DEPTH = 8
_COLOR_TYPE_RGB = 2


def _chunk(kind: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(kind + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + kind + payload + struct.pack(">I", crc)


def encode_png(pixels, width: int, height: int) -> bytes:
    """Encode interleaved RGB bytes, rows top first, as a PNG file."""
    if width <= 0 or height <= 0:
        raise ValueError("image dimensions must be positive")
    data = bytes(pixels)
    stride = 3 * width
    if len(data) != stride * height:
        raise ValueError(f"expected {stride * height} bytes of pixels, got {len(data)}")
    raw = b"".join(
        b"\x00" + data[start : start + stride] for start in range(0, len(data), stride)
    )
    header = struct.pack(">IIBBBBB", width, height, _BIT_DEPTH, _COLOR_TYPE_RGB, 0, 0, 0)
    return (
        PNG_SIGNATURE
        + _chunk(b"IHDR", header)
        + _chunk(b"IDAT", zlib.compress(raw))
        + _chunk(b"IEND", b"")
    )


def write_png(path: Union[str, PathLike], pixels, width: int, height: int) -> Path:
    """Write interleaved RGB bytes to ``path`` as a PNG file; return the path."""
    target = Path(path)
    target.write_bytes(encode_png(pixels, width, height))
    return target