# palette_quant/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and pixel validation helpers.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .constants import MAX_PIXEL, PALETTE_SIZE

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

U16Pixels = NDArray[np.uint16]  # (N,) packed RGB565
U8Indices = NDArray[np.uint8]  # (N,) palette slots
U8Palette = NDArray[np.uint8]  # (192, 3)
SlotMap = NDArray[np.int16]  # (4096,) fine bucket -> slot or UNASSIGNED

PixelLike = Union[int, Sequence[int], NDArray[np.integer]]

# Value objects


@dataclass(frozen=True)
class SynthesisResult:
    """Palette plus the fine-bucket -> slot map produced by one synthesis."""

    palette: U8Palette  # shape (192, 3)
    fine_to_slot: SlotMap  # shape (4096,)
    general_from_pixels: int  # general slots averaged from real pixels

    def colour(self, slot: int) -> RGBTuple:
        """RGB triple stored at a palette slot."""
        if not 0 <= slot < PALETTE_SIZE:
            raise IndexError(f"palette slot {slot} out of range")
        r, g, b = self.palette[slot].tolist()
        return (int(r), int(g), int(b))


# Small helpers


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def check_pixel(pixel: int) -> int:
    """Validate a single packed pixel and return it as a plain int."""
    if isinstance(pixel, (bool, np.bool_)) or not isinstance(
        pixel, (int, np.integer)
    ):
        raise TypeError(f"pixel must be an int, got {type(pixel).__name__}")
    value = int(pixel)
    if not 0 <= value <= MAX_PIXEL:
        raise ValueError(f"pixel {value:#x} is not a 16-bit value")
    return value


def as_pixel_array(pixels: PixelLike) -> U16Pixels:
    """
    Coerce pixels to a flat uint16 array.
    Accepts any integer array or sequence whose values fit in 16 bits.
    """
    arr = np.asarray(pixels)
    if arr.dtype == np.uint16:
        return arr.reshape(-1)
    if arr.size == 0:
        return np.zeros((0,), dtype=np.uint16)
    if arr.dtype.kind not in "iu":
        raise TypeError(f"expected integer pixels, got dtype {arr.dtype}")
    if int(arr.min()) < 0 or int(arr.max()) > MAX_PIXEL:
        raise ValueError("pixel values must lie in [0, 0xFFFF]")
    return arr.astype(np.uint16).reshape(-1)


__all__ = [
    "RGBTuple",
    "HexStr",
    "U16Pixels",
    "U8Indices",
    "U8Palette",
    "SlotMap",
    "PixelLike",
    "SynthesisResult",
    "rgb_to_hex",
    "check_pixel",
    "as_pixel_array",
]
