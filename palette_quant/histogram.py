# palette_quant/histogram.py
from __future__ import annotations

"""
Dense bucket tables for the fine (4096) and coarse (64) histograms.

Each bucket holds a pixel count and running sums of the scaled channel
values. Tables are flat arrays indexed directly by bucket id.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .buckets import fine_index, fine_indices, scaled_channels, scaled_channels_many
from .constants import COARSE_BUCKETS, FINE_BUCKETS
from .core_types import PixelLike, RGBTuple, as_pixel_array


@dataclass
class BucketTable:
    """Per-bucket counts and channel sums (uint64 so large images cannot wrap)."""

    counts: NDArray[np.uint64]
    red: NDArray[np.uint64]
    green: NDArray[np.uint64]
    blue: NDArray[np.uint64]

    @classmethod
    def empty(cls, size: int) -> "BucketTable":
        return cls(
            counts=np.zeros((size,), dtype=np.uint64),
            red=np.zeros((size,), dtype=np.uint64),
            green=np.zeros((size,), dtype=np.uint64),
            blue=np.zeros((size,), dtype=np.uint64),
        )

    @classmethod
    def fine(cls) -> "BucketTable":
        return cls.empty(FINE_BUCKETS)

    @classmethod
    def coarse(cls) -> "BucketTable":
        return cls.empty(COARSE_BUCKETS)

    @property
    def size(self) -> int:
        return int(self.counts.shape[0])

    def copy(self) -> "BucketTable":
        return BucketTable(
            counts=self.counts.copy(),
            red=self.red.copy(),
            green=self.green.copy(),
            blue=self.blue.copy(),
        )

    def total(self) -> int:
        """Sum of all bucket counts."""
        return int(self.counts.sum())

    def accumulate(self, pixel: int) -> int:
        """Add one pixel to its fine bucket. Returns the bucket id."""
        i = fine_index(pixel)
        r, g, b = scaled_channels(pixel)
        self.counts[i] += np.uint64(1)
        self.red[i] += np.uint64(r)
        self.green[i] += np.uint64(g)
        self.blue[i] += np.uint64(b)
        return i

    def accumulate_many(self, pixels: PixelLike) -> int:
        """Add every pixel in an array. Returns how many were added."""
        flat = as_pixel_array(pixels)
        if flat.size == 0:
            return 0
        idx = fine_indices(flat)
        chans = scaled_channels_many(flat)
        n = self.size
        self.counts += np.bincount(idx, minlength=n).astype(np.uint64)
        self.red += _bincount_sum(idx, chans[:, 0], n)
        self.green += _bincount_sum(idx, chans[:, 1], n)
        self.blue += _bincount_sum(idx, chans[:, 2], n)
        return int(flat.size)

    def fold(self, ids: np.ndarray, source: "BucketTable", into: np.ndarray) -> None:
        """Add source buckets `ids` onto this table's buckets `into`."""
        np.add.at(self.counts, into, source.counts[ids])
        np.add.at(self.red, into, source.red[ids])
        np.add.at(self.green, into, source.green[ids])
        np.add.at(self.blue, into, source.blue[ids])

    def means(self) -> NDArray[np.uint8]:
        """
        Integer-truncated mean colour per bucket as uint8 [size,3].
        Empty buckets come out as (0, 0, 0).
        """
        safe = np.maximum(self.counts, np.uint64(1))
        out = np.stack(
            [self.red // safe, self.green // safe, self.blue // safe], axis=1
        )
        out[self.counts == 0] = 0
        return out.astype(np.uint8)

    def mean_colour(self, bucket: int) -> RGBTuple:
        """Mean colour of a single bucket; (0, 0, 0) when empty."""
        n = int(self.counts[bucket])
        if n == 0:
            return (0, 0, 0)
        return (
            int(self.red[bucket]) // n,
            int(self.green[bucket]) // n,
            int(self.blue[bucket]) // n,
        )


def _bincount_sum(idx: np.ndarray, values: np.ndarray, size: int) -> np.ndarray:
    # Chunked so float64 weights stay exact well past realistic image sizes.
    out = np.zeros((size,), dtype=np.uint64)
    chunk = 1 << 20
    for start in range(0, idx.shape[0], chunk):
        part = np.bincount(
            idx[start : start + chunk],
            weights=values[start : start + chunk],
            minlength=size,
        )
        out += part.astype(np.uint64)
    return out


__all__ = ["BucketTable"]
