# palette_quant/buckets.py
from __future__ import annotations

"""
Bucket index mapping for packed RGB565 pixels.

Fine buckets key on the top 4 bits of each channel (4096 cells), coarse
buckets on the top 2 bits (64 cells). Coarse bits are a prefix of the fine
bits, so a coarse id can be derived either from the pixel or from the fine id.
"""

import numpy as np

from .constants import (
    BLUE_SHIFT,
    COARSE_GREEN_WEIGHT,
    COARSE_RED_WEIGHT,
    FINE_GREEN_WEIGHT,
    FINE_RED_WEIGHT,
    FIVE_BIT_MASK,
    GREEN_SHIFT,
    NIBBLE_MASK,
    RED_SHIFT,
    SIX_BIT_MASK,
    TWO_BIT_MASK,
)
from .core_types import PixelLike, RGBTuple, as_pixel_array, check_pixel


def fine_index(pixel: int) -> int:
    """Fine bucket id in [0, 4096) from the top 4 bits of each channel."""
    p = check_pixel(pixel)
    red4 = p >> (RED_SHIFT + 1)
    green4 = (p >> (GREEN_SHIFT + 2)) & NIBBLE_MASK
    blue4 = (p >> (BLUE_SHIFT + 1)) & NIBBLE_MASK
    return red4 * FINE_RED_WEIGHT + green4 * FINE_GREEN_WEIGHT + blue4


def coarse_index(pixel: int) -> int:
    """Coarse bucket id in [0, 64) from the top 2 bits of each channel."""
    p = check_pixel(pixel)
    red2 = p >> (RED_SHIFT + 3)
    green2 = (p >> (GREEN_SHIFT + 4)) & TWO_BIT_MASK
    blue2 = (p >> (BLUE_SHIFT + 3)) & TWO_BIT_MASK
    return red2 * COARSE_RED_WEIGHT + green2 * COARSE_GREEN_WEIGHT + blue2


def coarse_index_of_fine(fine_id: int) -> int:
    """Coarse bucket id taken from a fine bucket id's own bits."""
    red2 = (fine_id >> 10) & TWO_BIT_MASK
    green2 = (fine_id >> 6) & TWO_BIT_MASK
    blue2 = (fine_id >> 2) & TWO_BIT_MASK
    return red2 * COARSE_RED_WEIGHT + green2 * COARSE_GREEN_WEIGHT + blue2


def scaled_channels(pixel: int) -> RGBTuple:
    """
    Channel contributions added to a bucket's sums.
    Red and blue (5 bits) are doubled; green (6 bits) is taken as is.
    """
    p = check_pixel(pixel)
    red = (p >> RED_SHIFT) * 2
    green = (p >> GREEN_SHIFT) & SIX_BIT_MASK
    blue = ((p >> BLUE_SHIFT) & FIVE_BIT_MASK) * 2
    return red, green, blue


# Vectorised forms


def fine_indices(pixels: PixelLike) -> np.ndarray:
    """fine_index() over an array of pixels. Returns int64 [N]."""
    p = as_pixel_array(pixels).astype(np.int64)
    red4 = p >> (RED_SHIFT + 1)
    green4 = (p >> (GREEN_SHIFT + 2)) & NIBBLE_MASK
    blue4 = (p >> (BLUE_SHIFT + 1)) & NIBBLE_MASK
    return red4 * FINE_RED_WEIGHT + green4 * FINE_GREEN_WEIGHT + blue4


def coarse_indices(pixels: PixelLike) -> np.ndarray:
    """coarse_index() over an array of pixels. Returns int64 [N]."""
    p = as_pixel_array(pixels).astype(np.int64)
    red2 = p >> (RED_SHIFT + 3)
    green2 = (p >> (GREEN_SHIFT + 4)) & TWO_BIT_MASK
    blue2 = (p >> (BLUE_SHIFT + 3)) & TWO_BIT_MASK
    return red2 * COARSE_RED_WEIGHT + green2 * COARSE_GREEN_WEIGHT + blue2


def coarse_indices_of_fine(fine_ids: np.ndarray) -> np.ndarray:
    """coarse_index_of_fine() over an array of fine ids. Returns int64 [N]."""
    f = np.asarray(fine_ids, dtype=np.int64)
    red2 = (f >> 10) & TWO_BIT_MASK
    green2 = (f >> 6) & TWO_BIT_MASK
    blue2 = (f >> 2) & TWO_BIT_MASK
    return red2 * COARSE_RED_WEIGHT + green2 * COARSE_GREEN_WEIGHT + blue2


def scaled_channels_many(pixels: PixelLike) -> np.ndarray:
    """scaled_channels() over an array of pixels. Returns int64 [N,3]."""
    p = as_pixel_array(pixels).astype(np.int64)
    red = (p >> RED_SHIFT) * 2
    green = (p >> GREEN_SHIFT) & SIX_BIT_MASK
    blue = ((p >> BLUE_SHIFT) & FIVE_BIT_MASK) * 2
    return np.stack([red, green, blue], axis=1)


__all__ = [
    "fine_index",
    "coarse_index",
    "coarse_index_of_fine",
    "scaled_channels",
    "fine_indices",
    "coarse_indices",
    "coarse_indices_of_fine",
    "scaled_channels_many",
]
