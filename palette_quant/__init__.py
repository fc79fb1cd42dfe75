# palette_quant/__init__.py
"""
palette_quant package.

Purpose:
  Two-pass reduction of RGB565 images to a fixed 192-colour palette for
  indexed-colour displays. See quantize565.py for the CLI.

Public API:
  Quantizer     : per-image run (accumulate -> synthesize -> index_pixels).
  quantize      : one-call convenience returning (palette, indices).
  buckets       : fine/coarse bucket index mapping.
  histogram     : BucketTable, the dense fine/coarse histogram.
  synthesis     : synthesize_palette and its building blocks.
  lookup        : per-pixel palette slot lookup.
  pixel_io      : raw pixel dump and palette/index byte I/O.
  analysis      : histogram and palette usage statistics.
  utils         : formatting and logging helpers.

Quick start:
  from palette_quant import quantize
  palette, indices = quantize(pixels)
"""

__version__ = "0.1.0"

from . import constants
from . import core_types
from . import buckets
from . import histogram
from . import synthesis
from . import lookup
from . import pixel_io
from . import analysis
from . import utils

from .quantizer import Quantizer, quantize  # noqa: E402,F401

__all__ = [
    "__version__",
    "constants",
    "core_types",
    "buckets",
    "histogram",
    "synthesis",
    "lookup",
    "pixel_io",
    "analysis",
    "utils",
    "Quantizer",
    "quantize",
]
