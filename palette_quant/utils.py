# palette_quant/utils.py
from __future__ import annotations

"""
Shared utilities for palette_quant.

Time and number formatting for reports, plus tidy print-based logging used by
the Quantizer in debug mode and by the quantize565 CLI.
"""

import io
import sys
import threading
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, TextIO, Tuple


#  Time / size formatting


def _split_minutes(seconds: float) -> Tuple[int, float]:
    minutes, rem = divmod(seconds, 60.0)
    return int(minutes), rem


def format_seconds_compact(seconds: float) -> str:
    """Stage timing: '12.3ms', '2.500s', or '2m 5.0s'."""
    if seconds < 1.0:
        return f"{seconds * 1e3:.1f}ms"
    minutes, rem = _split_minutes(seconds)
    if minutes == 0:
        return f"{rem:.3f}s"
    return f"{minutes}m {rem:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Whole-run timing: '12.3ms', '2.5s', or '2m 5s' (seconds rounded)."""
    minutes, rem = _split_minutes(seconds)
    if minutes:
        return f"{minutes}m {int(round(rem))}s"
    return f"{rem:.1f}s" if seconds >= 1.0 else f"{seconds * 1e3:.1f}ms"


# Pretty values


def format_bool_on_off(value: Any) -> str:
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """1,234 style for ints; up to 3 decimals for floats; passthrough otherwise."""
    if isinstance(value, bool):
        return format_bool_on_off(value)
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def format_percentage(x: float, decimals: int = 1) -> str:
    """Format a 0..1 share as a percentage."""
    return f"{x * 100.0:.{decimals}f}%"


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """Format (name, value) pairs as 'Name: value' blocks separated by sep."""
    out: List[str] = []
    for name, value in pairs:
        out.append(f"{name}{eq}{format_number_compact(value)}")
    return sep.join(out)


#  Logging

_local = threading.local()


def _out() -> TextIO:
    stream = getattr(_local, "stream", None)
    return stream if stream is not None else sys.stdout


@contextmanager
def captured_output() -> Iterator[io.StringIO]:
    """Route log lines from the current thread into a buffer."""
    buf = io.StringIO()
    prev = getattr(_local, "stream", None)
    _local.stream = buf
    try:
        yield buf
    finally:
        _local.stream = prev


def enable_line_buffered_stdout() -> None:
    """Line-buffer stdout when the stream supports .reconfigure()."""
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit one config line, e.g.:
      [run] CPU cores: 8  Jobs: 2  Format: rgb565
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    print(f"\n=== {title} ===", file=_out(), flush=True)


def log(message: str) -> None:
    print(message, file=_out(), flush=True)


def debug_log(message: str) -> None:
    print(f"[debug] {message}", file=_out(), flush=True)


def warn(message: str) -> None:
    print(f"[warn] {message}", file=_out(), flush=True)


def error(message: str) -> None:
    """Error line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "format_total_duration_compact",
    "format_bool_on_off",
    "format_number_compact",
    "format_percentage",
    "key_value_pairs_to_string",
    "enable_line_buffered_stdout",
    "captured_output",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
