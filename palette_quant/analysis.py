# palette_quant/analysis.py
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import numpy as np

from .constants import PALETTE_SIZE, SPECIFIC_COLOURS
from .core_types import U8Indices, U8Palette, rgb_to_hex
from .histogram import BucketTable


def histogram_summary(table: BucketTable) -> Dict[str, float]:
    """Pixel total, occupied buckets and the share held by the top 128 buckets."""
    counts = table.counts.astype(np.int64)
    total = int(counts.sum())
    occupied = int(np.count_nonzero(counts))
    if total == 0:
        top_share = 0.0
    else:
        k = min(SPECIFIC_COLOURS, counts.shape[0])
        top = np.partition(counts, counts.shape[0] - k)[-k:]
        top_share = float(top.sum()) / total
    return {"pixels": total, "occupied": occupied, "top_share": top_share}


def slot_usage(indices: U8Indices) -> np.ndarray:
    """Pixel count per palette slot, int64 [192]."""
    idx = np.asarray(indices, dtype=np.int64).reshape(-1)
    return np.bincount(idx, minlength=PALETTE_SIZE).astype(np.int64)


def palette_usage_report(
    palette: U8Palette, indices: U8Indices, top: Optional[int] = None
) -> List[Tuple[int, str, int]]:
    """
    (slot, hex, count) for every used slot, most used first, ties by slot.
    """
    usage = slot_usage(indices)
    used = np.nonzero(usage)[0].tolist()
    rows: List[Tuple[int, str, int]] = []
    for slot in sorted(used, key=lambda s: (-int(usage[s]), s)):
        r, g, b = palette[slot].tolist()
        rows.append((int(slot), rgb_to_hex((int(r), int(g), int(b))), int(usage[slot])))
    return rows if top is None else rows[:top]


__all__ = ["histogram_summary", "slot_usage", "palette_usage_report"]
