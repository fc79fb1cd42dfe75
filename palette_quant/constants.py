# palette_quant/constants.py
"""
Bit layout and table sizes shared across the project.

- RGB565 channel shifts and masks
- Fine (4 bits per channel) and coarse (2 bits per channel) bucket counts
- Palette split into specific (fine) and general (coarse) colours
"""
from __future__ import annotations

# =====================
# Pixel layout (RGB565)
# =====================
RED_SHIFT: int = 11
GREEN_SHIFT: int = 5
BLUE_SHIFT: int = 0

FIVE_BIT_MASK: int = 0x1F
SIX_BIT_MASK: int = 0x3F
NIBBLE_MASK: int = 0xF
TWO_BIT_MASK: int = 0x3

MAX_PIXEL: int = 0xFFFF

# =============
# Bucket tables
# =============
FINE_BUCKETS: int = 4096  # 16 * 16 * 16
COARSE_BUCKETS: int = 64  # 4 * 4 * 4

FINE_RED_WEIGHT: int = 256
FINE_GREEN_WEIGHT: int = 16
COARSE_RED_WEIGHT: int = 16
COARSE_GREEN_WEIGHT: int = 4

# =======
# Palette
# =======
SPECIFIC_COLOURS: int = 128
GENERAL_COLOURS: int = COARSE_BUCKETS
PALETTE_SIZE: int = SPECIFIC_COLOURS + GENERAL_COLOURS

UNASSIGNED: int = -1

# Empty coarse buckets get (16*r2, 16*g2, 16*b2).
FALLBACK_STEP: int = 16

__all__ = [
    "RED_SHIFT",
    "GREEN_SHIFT",
    "BLUE_SHIFT",
    "FIVE_BIT_MASK",
    "SIX_BIT_MASK",
    "NIBBLE_MASK",
    "TWO_BIT_MASK",
    "MAX_PIXEL",
    "FINE_BUCKETS",
    "COARSE_BUCKETS",
    "FINE_RED_WEIGHT",
    "FINE_GREEN_WEIGHT",
    "COARSE_RED_WEIGHT",
    "COARSE_GREEN_WEIGHT",
    "SPECIFIC_COLOURS",
    "GENERAL_COLOURS",
    "PALETTE_SIZE",
    "UNASSIGNED",
    "FALLBACK_STEP",
]
