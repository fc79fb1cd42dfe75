# palette_quant/lookup.py
from __future__ import annotations

"""
Palette lookup for the second pass.

A pixel whose fine bucket owns a specific colour maps to that slot; any other
pixel maps to the general colour of its coarse bucket (128 + coarse id).

Given a map with every entry UNASSIGNED (synthesis never ran), every pixel
resolves to a general slot.
"""

import numpy as np

from .buckets import coarse_index, coarse_indices, fine_index, fine_indices
from .constants import FINE_BUCKETS, SPECIFIC_COLOURS, UNASSIGNED
from .core_types import PixelLike, SlotMap, U8Indices


def _as_map(fine_to_slot: SlotMap) -> np.ndarray:
    """Slot map as int64 [4096]; accepts any integer sequence."""
    arr = np.asarray(fine_to_slot)
    if arr.shape != (FINE_BUCKETS,):
        raise ValueError(
            f"fine_to_slot must have shape ({FINE_BUCKETS},), got {arr.shape}"
        )
    if arr.dtype.kind not in "iu":
        raise TypeError(f"fine_to_slot must hold integers, got dtype {arr.dtype}")
    return arr.astype(np.int64, copy=False)


def lookup(pixel: int, fine_to_slot: SlotMap) -> int:
    """Palette slot in [0, 192) for one pixel."""
    slot = int(_as_map(fine_to_slot)[fine_index(pixel)])
    if slot != UNASSIGNED:
        return slot
    return SPECIFIC_COLOURS + coarse_index(pixel)


def lookup_many(pixels: PixelLike, fine_to_slot: SlotMap) -> U8Indices:
    """lookup() over an array of pixels. Returns uint8 [N]."""
    slots = _as_map(fine_to_slot)[fine_indices(pixels)]
    general = SPECIFIC_COLOURS + coarse_indices(pixels)
    return np.where(slots != UNASSIGNED, slots, general).astype(np.uint8)


__all__ = ["lookup", "lookup_many"]
