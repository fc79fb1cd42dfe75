# palette_quant/pixel_io.py
from __future__ import annotations

from pathlib import Path

import numpy as np

from .constants import (
    BLUE_SHIFT,
    FIVE_BIT_MASK,
    GREEN_SHIFT,
    PALETTE_SIZE,
    RED_SHIFT,
    SIX_BIT_MASK,
)
from .core_types import PixelLike, U16Pixels, U8Indices, U8Palette, as_pixel_array

"""
Raw pixel dump and palette/index byte I/O.

No image decoding happens here: inputs are already-packed RGB565 words or
interleaved 8-bit RGB triples, outputs are raw palette and index bytes.
"""

PIXEL_DUMP_SUFFIXES = {".565", ".rgb565", ".raw", ".rgb"}


def _pixel_dtype(byteorder: str) -> np.dtype:
    if byteorder == "little":
        return np.dtype("<u2")
    if byteorder == "big":
        return np.dtype(">u2")
    raise ValueError(f"byteorder must be 'little' or 'big', got {byteorder!r}")


def pack_rgb888(rgb: np.ndarray) -> U16Pixels:
    """Pack uint8 (...,3) RGB into RGB565 by dropping low bits. Returns flat uint16."""
    if rgb.dtype != np.uint8 or rgb.ndim < 1 or rgb.shape[-1] != 3:
        raise TypeError("expected uint8 (...,3) RGB array")
    flat = rgb.reshape(-1, 3).astype(np.uint16)
    red = flat[:, 0] >> 3
    green = flat[:, 1] >> 2
    blue = flat[:, 2] >> 3
    return ((red << RED_SHIFT) | (green << GREEN_SHIFT) | (blue << BLUE_SHIFT)).astype(
        np.uint16
    )


def unpack_rgb565(pixels: PixelLike) -> np.ndarray:
    """Raw 5/6/5 channel fields as uint8 [N,3]."""
    p = as_pixel_array(pixels)
    red = (p >> RED_SHIFT) & FIVE_BIT_MASK
    green = (p >> GREEN_SHIFT) & SIX_BIT_MASK
    blue = (p >> BLUE_SHIFT) & FIVE_BIT_MASK
    return np.stack([red, green, blue], axis=1).astype(np.uint8)


def load_pixel_dump(path: Path, byteorder: str = "little") -> U16Pixels:
    """Read a raw RGB565 dump (2 bytes per pixel) into native uint16 [N]."""
    dtype = _pixel_dtype(byteorder)
    raw = Path(path).read_bytes()
    if len(raw) % 2:
        raise ValueError(f"{path}: odd byte length {len(raw)} for 16-bit pixels")
    return np.frombuffer(raw, dtype=dtype).astype(np.uint16)


def load_rgb888_dump(path: Path) -> U16Pixels:
    """Read a raw interleaved 8-bit RGB dump and pack it to RGB565."""
    raw = Path(path).read_bytes()
    if len(raw) % 3:
        raise ValueError(f"{path}: byte length {len(raw)} is not a multiple of 3")
    rgb = np.frombuffer(raw, dtype=np.uint8).reshape(-1, 3)
    return pack_rgb888(rgb)


def save_pixel_dump(path: Path, pixels: PixelLike, byteorder: str = "little") -> Path:
    dtype = _pixel_dtype(byteorder)
    Path(path).write_bytes(as_pixel_array(pixels).astype(dtype).tobytes())
    return Path(path)


def save_palette(path: Path, palette: U8Palette) -> Path:
    """Write 192 RGB triples as 576 raw bytes."""
    if palette.shape != (PALETTE_SIZE, 3):
        raise ValueError(f"palette must have shape ({PALETTE_SIZE}, 3)")
    Path(path).write_bytes(np.ascontiguousarray(palette, dtype=np.uint8).tobytes())
    return Path(path)


def load_palette(path: Path) -> U8Palette:
    raw = Path(path).read_bytes()
    if len(raw) != PALETTE_SIZE * 3:
        raise ValueError(f"{path}: expected {PALETTE_SIZE * 3} bytes, got {len(raw)}")
    return np.frombuffer(raw, dtype=np.uint8).reshape(PALETTE_SIZE, 3).copy()


def save_indices(path: Path, indices: U8Indices) -> Path:
    """Write one palette slot byte per pixel."""
    Path(path).write_bytes(np.ascontiguousarray(indices, dtype=np.uint8).tobytes())
    return Path(path)


def is_pixel_dump(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in PIXEL_DUMP_SUFFIXES


__all__ = [
    "PIXEL_DUMP_SUFFIXES",
    "pack_rgb888",
    "unpack_rgb565",
    "load_pixel_dump",
    "load_rgb888_dump",
    "save_pixel_dump",
    "save_palette",
    "load_palette",
    "save_indices",
    "is_pixel_dump",
]
