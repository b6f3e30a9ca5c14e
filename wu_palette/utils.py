# wu_palette/utils.py
from __future__ import annotations

"""
Shared utilities for wu_palette.

Exports:
- format_duration(seconds, precise=False) -> str
- palette_usage_report(indices, lookups) -> [(hex, count)]
- key_value_pairs_to_string(pairs) -> str
- print_config_line / print_banner
- log / debug_log / warn / error: print-based log lines, flushed immediately

Log lines go to stdout except error(), which writes to stderr so a failing file
in folder mode stays visible even when its stdout block is captured.
"""

import sys
from typing import Any, Iterable, List, Optional, Sequence, TextIO, Tuple

import numpy as np

from .core_types import IndexImage, Pixel, pixel_to_hex


# Durations


def format_duration(seconds: float, precise: bool = False) -> str:
    """
    Compact duration text: '12.3ms', '4.5s' or '2m 5s'.
    precise=True keeps milliseconds on seconds ('4.512s') and tenths on minutes.
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s" if precise else f"{seconds:.1f}s"
    minutes, rest = divmod(seconds, 60.0)
    if precise:
        return f"{int(minutes)}m {rest:.1f}s"
    return f"{int(minutes)}m {int(round(rest))}s"


# Palette report


def palette_usage_report(
    indices: IndexImage, lookups: Sequence[Optional[Pixel]]
) -> List[Tuple[str, int]]:
    """
    Pixels mapped to each palette slot, as ('#rrggbbaa', count), busiest first.
    Empty slots and the transparent slot past the end are left out.
    """
    counts = np.bincount(indices.reshape(-1), minlength=len(lookups) + 1)
    used = [
        (pixel_to_hex(px), int(counts[slot]))
        for slot, px in enumerate(lookups)
        if px is not None and counts[slot] > 0
    ]
    return sorted(used, key=lambda item: item[1], reverse=True)


# Config lines


def _display_value(value: Any) -> str:
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """'Name: value' blocks; bools read on/off, ints get thousands separators."""
    return sep.join(f"{name}{eq}{_display_value(value)}" for name, value in pairs)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    One config line, e.g.:
      [quantize] Colors: 256  Alpha threshold: 0  Alpha fader: 1
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    if debug:
        debug_log(line)
    else:
        log(line)


# Logging


def enable_line_buffered_stdout() -> None:
    """Flush stdout per line where the stream allows reconfiguring."""
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is None:
        return
    try:
        reconfigure(line_buffering=True, write_through=True)
    except (OSError, ValueError):
        # not a real text stream (e.g. captured)
        return


def _emit(message: str, prefix: str = "", stream: Optional[TextIO] = None) -> None:
    # sys.stdout is looked up per call so redirect_stdout() captures it
    print(f"{prefix}{message}", file=stream or sys.stdout, flush=True)


def print_banner(title: str) -> None:
    _emit(f"\n=== {title} ===")


def log(message: str) -> None:
    _emit(message)


def debug_log(message: str) -> None:
    _emit(message, "[debug] ")


def warn(message: str) -> None:
    _emit(message, "[warn] ")


def error(message: str) -> None:
    _emit(message, "[error] ", sys.stderr)


__all__ = [
    "format_duration",
    "palette_usage_report",
    "key_value_pairs_to_string",
    "print_config_line",
    "enable_line_buffered_stdout",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
