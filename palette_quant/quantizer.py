# palette_quant/quantizer.py
from __future__ import annotations

"""
Two-pass quantizer run.

A Quantizer owns one fine histogram and, after synthesize(), one palette and
fine-bucket -> slot map. Nothing is shared between instances, so separate
images can be quantized concurrently with separate Quantizers.

  q = Quantizer()
  q.accumulate_many(pixels)      # pass 1
  result = q.synthesize()        # palette + map
  indices = q.index_pixels(pixels)  # pass 2
"""

import time
from typing import Optional, Tuple

from .core_types import (
    PixelLike,
    SynthesisResult,
    U8Indices,
    U8Palette,
    as_pixel_array,
)
from .histogram import BucketTable
from .lookup import lookup, lookup_many
from .synthesis import synthesize_palette
from .utils import debug_log, format_seconds_compact, key_value_pairs_to_string


class Quantizer:
    def __init__(self, debug: bool = False) -> None:
        self.fine = BucketTable.fine()
        self.debug = debug
        self._result: Optional[SynthesisResult] = None

    # Pass 1

    def accumulate(self, pixel: int) -> None:
        self.fine.accumulate(pixel)

    def accumulate_many(self, pixels: PixelLike) -> int:
        return self.fine.accumulate_many(pixels)

    # Synthesis

    def synthesize(self) -> SynthesisResult:
        """
        Build the palette and map from the pixels accumulated so far.
        Re-running without new pixels yields an identical result.
        """
        t0 = time.perf_counter()
        self._result = synthesize_palette(self.fine)
        if self.debug:
            debug_log(
                key_value_pairs_to_string(
                    [
                        ("Pixels", self.fine.total()),
                        ("General(real)", self._result.general_from_pixels),
                        ("Synthesis", format_seconds_compact(time.perf_counter() - t0)),
                    ]
                )
            )
        return self._result

    @property
    def synthesized(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> SynthesisResult:
        if self._result is None:
            raise RuntimeError("palette not synthesized; call synthesize() first")
        return self._result

    @property
    def palette(self) -> U8Palette:
        return self.result.palette

    # Pass 2

    def lookup(self, pixel: int) -> int:
        return lookup(pixel, self.result.fine_to_slot)

    def index_pixels(self, pixels: PixelLike) -> U8Indices:
        return lookup_many(pixels, self.result.fine_to_slot)


def quantize(pixels: PixelLike, debug: bool = False) -> Tuple[U8Palette, U8Indices]:
    """Run both passes on one image. Returns (palette [192,3], indices [N])."""
    flat = as_pixel_array(pixels)
    q = Quantizer(debug=debug)
    q.accumulate_many(flat)
    result = q.synthesize()
    return result.palette, q.index_pixels(flat)


__all__ = ["Quantizer", "quantize"]
