#!/usr/bin/env python3
"""
quantize565.py
Reduce raw RGB565 pixel dumps to a 192-colour palette plus one index byte per pixel.

Usage:
  python quantize565.py SRC --outdir DIR --format [rgb565|rgb888] --byteorder [little|big] --width W --jobs N --debug

Input:
  A raw dump file or a folder of them (*.565, *.rgb565, *.raw, *.rgb).
  rgb565: 2 bytes per pixel in the given byte order.
  rgb888: 3 bytes per pixel (R, G, B), packed to RGB565 by dropping low bits.

Output:
  <stem>.pal : 192 RGB triples (576 bytes).
  <stem>.idx : one palette slot per pixel.
  Written next to the input unless --outdir is given.

Notes:
  Each file gets its own Quantizer, so --jobs runs files in parallel threads.
"""

from __future__ import annotations

import argparse
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np

from palette_quant.analysis import histogram_summary, palette_usage_report
from palette_quant.constants import SPECIFIC_COLOURS
from palette_quant.pixel_io import (
    is_pixel_dump,
    load_pixel_dump,
    load_rgb888_dump,
    save_indices,
    save_palette,
)
from palette_quant.quantizer import Quantizer
from palette_quant.utils import (
    captured_output,
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_percentage,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    warn,
)


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: Path to dump file or folder
        outdir: optional Path for outputs
        format: "rgb565" | "rgb888"
        byteorder: "little" | "big" (rgb565 only)
        width: optional int, image width for the size report
        jobs: parallel file workers
        debug: bool for statistics and timings
    """
    parser = argparse.ArgumentParser(
        prog="quantize565",
        description="Quantize raw RGB565 dumps to a 192-colour palette and index bytes.",
    )
    parser.add_argument("src", type=Path, help="Input dump or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--format",
        choices=["rgb565", "rgb888"],
        default="rgb565",
        help="Input pixel format.",
    )
    parser.add_argument(
        "--byteorder",
        choices=["little", "big"],
        default="little",
        help="Byte order of rgb565 input.",
    )
    parser.add_argument(
        "--width", type=int, default=None, help="Image width, for reporting WxH"
    )
    parser.add_argument(
        "--jobs", type=int, default=2, help="Files processed in parallel"
    )
    parser.add_argument("--debug", action="store_true", help="Statistics and timings")
    return parser.parse_args(argv)


# Per-file processing


def _process_single_dump(
    src_path: Path,
    outdir: Optional[Path],
    pixel_format: str,
    byteorder: str,
    width: Optional[int],
    debug: bool,
) -> bool:
    """
    Process one dump end-to-end:
      load -> pass 1 -> synthesize -> pass 2 -> save -> report.
    Returns False when the file was skipped or failed.
    """
    t_start = time.perf_counter()
    print_banner(src_path.name)

    try:
        if pixel_format == "rgb888":
            pixels = load_rgb888_dump(src_path)
        else:
            pixels = load_pixel_dump(src_path, byteorder=byteorder)
    except (OSError, ValueError) as e:
        error(f"{src_path.name}: {e}")
        return False

    n_pixels = int(pixels.shape[0])
    size_field = ""
    if width is not None:
        if width <= 0 or n_pixels % width:
            warn(f"{n_pixels:,} pixels do not fill rows of width {width}; skipped")
            return False
        size_field = f"size={width}x{n_pixels // width} | "
    t_loaded = time.perf_counter()

    quantizer = Quantizer(debug=debug)
    quantizer.accumulate_many(pixels)
    t_pass1 = time.perf_counter()

    if debug:
        summary = histogram_summary(quantizer.fine)
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Pixels", int(summary["pixels"])),
                    ("Occupied buckets", int(summary["occupied"])),
                    ("Top128 share", format_percentage(summary["top_share"])),
                ]
            )
        )

    result = quantizer.synthesize()
    t_synth = time.perf_counter()
    indices = quantizer.index_pixels(pixels)
    t_pass2 = time.perf_counter()

    dst_dir = outdir if outdir is not None else src_path.parent
    pal_path = dst_dir / f"{src_path.stem}.pal"
    idx_path = dst_dir / f"{src_path.stem}.idx"
    try:
        dst_dir.mkdir(parents=True, exist_ok=True)
        save_palette(pal_path, result.palette)
        save_indices(idx_path, indices)
    except OSError as e:
        error(f"{src_path.name}: {e}")
        return False
    t_saved = time.perf_counter()

    occupied = int(np.count_nonzero(quantizer.fine.counts))
    specific_used = min(SPECIFIC_COLOURS, occupied)
    log(
        f"Wrote {pal_path.name} / {idx_path.name} | {size_field}"
        f"pixels={n_pixels:,} | specific={specific_used} | "
        f"general(real)={result.general_from_pixels}"
    )

    if debug:
        debug_log("palette usage (top 10):")
        for slot, hex_code, count in palette_usage_report(
            result.palette, indices, top=10
        ):
            share = count / n_pixels if n_pixels else 0.0
            debug_log(f"  -> slot {slot:3d}  {hex_code}: pixels={count:,}  share={share:.1%}")
        debug_log(
            f"Total {format_total_duration_compact(t_saved - t_start)}  "
            f"(load={format_seconds_compact(t_loaded - t_start)}, "
            f"pass1={format_seconds_compact(t_pass1 - t_loaded)}, "
            f"synth={format_seconds_compact(t_synth - t_pass1)}, "
            f"pass2={format_seconds_compact(t_pass2 - t_synth)}, "
            f"save={format_seconds_compact(t_saved - t_pass2)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_saved - t_start)}")
    return True


def _process_one_captured(
    path: Path,
    outdir: Optional[Path],
    pixel_format: str,
    byteorder: str,
    width: Optional[int],
    debug: bool,
) -> Tuple[bool, str]:
    """Process one file with log output captured, for ordered output under --jobs."""
    with captured_output() as buf:
        ok = _process_single_dump(path, outdir, pixel_format, byteorder, width, debug)
    return ok, buf.getvalue()


def _drop_output_clashes(files: List[Path]) -> Tuple[List[Path], List[Path]]:
    """
    Split dumps into those to process and those whose <stem>.pal / <stem>.idx
    would overwrite an earlier file's outputs. Stems compare case-insensitively.
    """
    seen: Dict[str, Path] = {}
    keep: List[Path] = []
    clashes: List[Path] = []
    for p in files:
        key = p.stem.lower()
        if key in seen:
            warn(f"{p.name}: outputs would overwrite those of {seen[key].name}; skipped")
            clashes.append(p)
            continue
        seen[key] = p
        keep.append(p)
    return keep, clashes


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Handles a single file or a folder. In folder mode supports --jobs
    parallelism while keeping per-file output in order.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    print_config_line(
        "run",
        [
            ("CPU cores", os.cpu_count() or 1),
            ("Jobs", args.jobs),
            ("Format", args.format),
        ],
        debug=False,
    )
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Byte order", args.byteorder),
                    ("Width", args.width or "-"),
                    ("Outdir", str(args.outdir) if args.outdir else "-"),
                ]
            )
        )

    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2

    if src.is_dir():
        files = sorted(
            (p for p in src.iterdir() if is_pixel_dump(p)),
            key=lambda p: p.name.lower(),
        )
        if args.debug:
            debug_log(key_value_pairs_to_string([("Dumps", len(files))]))
        files, clashes = _drop_output_clashes(files)
        if args.jobs <= 1:
            results = [
                _process_single_dump(
                    p, args.outdir, args.format, args.byteorder, args.width, args.debug
                )
                for p in files
            ]
        else:
            with ThreadPoolExecutor(max_workers=args.jobs) as ex:
                futures = [
                    ex.submit(
                        _process_one_captured,
                        p,
                        args.outdir,
                        args.format,
                        args.byteorder,
                        args.width,
                        args.debug,
                    )
                    for p in files
                ]
                captured = [f.result() for f in futures]
            print("".join(text for _ok, text in captured), end="", flush=True)
            results = [ok for ok, _text in captured]
        results += [False] * len(clashes)
    else:
        results = [
            _process_single_dump(
                src, args.outdir, args.format, args.byteorder, args.width, args.debug
            )
        ]

    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
