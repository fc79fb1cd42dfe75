# palette_quant/synthesis.py
from __future__ import annotations

"""
Palette synthesis from a populated fine histogram.

Steps:
  1. Rank fine buckets by count, descending (ties in no particular order).
  2. The first 128 ranked buckets claim slots 0..127, even when empty.
     Their colour is the truncated bucket mean, (0, 0, 0) when empty.
  3. Remaining non-empty buckets are folded into 64 coarse buckets, keyed by
     the top 2 bits of each channel of the fine bucket id.
  4. Slot 128 + c holds coarse bucket c's mean, or a colour derived from c
     alone when nothing was folded into it.
"""

import numpy as np

from .buckets import coarse_indices_of_fine
from .constants import (
    COARSE_BUCKETS,
    FALLBACK_STEP,
    FINE_BUCKETS,
    PALETTE_SIZE,
    SPECIFIC_COLOURS,
    TWO_BIT_MASK,
    UNASSIGNED,
)
from .core_types import SynthesisResult, U8Palette
from .histogram import BucketTable


def rank_buckets(counts: np.ndarray) -> np.ndarray:
    """Bucket ids ordered by count, largest first. Returns int64 [size]."""
    keys = -np.asarray(counts).astype(np.int64)
    return np.argsort(keys, kind="quicksort").astype(np.int64)


def fallback_colours() -> U8Palette:
    """Colour for each coarse bucket id from its own 2-bit channel fields."""
    ids = np.arange(COARSE_BUCKETS, dtype=np.int64)
    red2 = (ids >> 4) & TWO_BIT_MASK
    green2 = (ids >> 2) & TWO_BIT_MASK
    blue2 = ids & TWO_BIT_MASK
    return (np.stack([red2, green2, blue2], axis=1) * FALLBACK_STEP).astype(np.uint8)


def build_coarse(fine: BucketTable, ranked: np.ndarray) -> BucketTable:
    """
    Fold every non-empty fine bucket ranked past the specific colours into a
    fresh coarse table.
    """
    coarse = BucketTable.coarse()
    occupied = int(np.count_nonzero(fine.counts))
    if occupied <= SPECIFIC_COLOURS:
        return coarse
    rest = ranked[SPECIFIC_COLOURS:occupied]
    coarse.fold(rest, fine, coarse_indices_of_fine(rest))
    return coarse


def synthesize_palette(fine: BucketTable) -> SynthesisResult:
    """Build the 192-entry palette and fine-bucket -> slot map."""
    if fine.size != FINE_BUCKETS:
        raise ValueError(f"expected a {FINE_BUCKETS}-bucket table, got {fine.size}")

    ranked = rank_buckets(fine.counts)
    palette: U8Palette = np.zeros((PALETTE_SIZE, 3), dtype=np.uint8)
    fine_to_slot = np.full((FINE_BUCKETS,), UNASSIGNED, dtype=np.int16)

    # Specific colours
    top = ranked[:SPECIFIC_COLOURS]
    palette[:SPECIFIC_COLOURS] = fine.means()[top]
    fine_to_slot[top] = np.arange(SPECIFIC_COLOURS, dtype=np.int16)

    # General colours
    coarse = build_coarse(fine, ranked)
    filled = coarse.counts > 0
    palette[SPECIFIC_COLOURS:] = np.where(
        filled[:, None], coarse.means(), fallback_colours()
    )

    fine_to_slot.setflags(write=False)
    palette.setflags(write=False)
    return SynthesisResult(
        palette=palette,
        fine_to_slot=fine_to_slot,
        general_from_pixels=int(np.count_nonzero(filled)),
    )


__all__ = [
    "rank_buckets",
    "fallback_colours",
    "build_coarse",
    "synthesize_palette",
]
