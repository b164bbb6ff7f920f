# pixelwarp/utils.py
from __future__ import annotations

"""
Shared utilities for pixelwarp.

Row partitioning for threaded warps, duration / number formatting, and the
tidy print-based logging used by the CLI and the engines' debug output.
"""

import sys
from typing import Any, Iterable, List, Tuple


# Row partitioning


def split_rows_into_parts(height: int, parts: int) -> List[Tuple[int, int]]:
    """Partition range [0, height) into ~parts contiguous [start, end) row spans."""
    parts = max(1, int(parts))
    if height <= 0:
        return []
    step = (height + parts - 1) // parts
    return [(start, min(start + step, height)) for start in range(0, height, step)]


#  Time / size formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


# Log lines

# Tagged levels; warnings and errors go to stderr so palette reports on
# stdout stay machine-readable.
_LEVEL_TAGS = {"info": "", "debug": "[debug] ", "warn": "[warn] ", "error": "[error] "}
_STDERR_LEVELS = frozenset({"warn", "error"})


def format_config_value(value: Any) -> str:
    """'on'/'off' for bools, 1,234 for ints, trimmed 3dp for floats, str() otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def format_percentage(value: float, decimals: int = 1) -> str:
    """Format a 0..100 percentage."""
    return f"{value:.{decimals}f}%"


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """Format (name, value) pairs as 'Name: value' blocks separated by sep."""
    return sep.join(f"{name}{eq}{format_config_value(value)}" for name, value in pairs)


def format_log_line(level: str, message: str) -> str:
    """Prefix message with its level tag. Raises ValueError for unknown levels."""
    try:
        return f"{_LEVEL_TAGS[level]}{message}"
    except KeyError:
        raise ValueError(f"unknown log level {level!r}") from None


def _emit(level: str, message: str) -> None:
    stream = sys.stderr if level in _STDERR_LEVELS else sys.stdout
    print(format_log_line(level, message), file=stream, flush=True)


def log(message: str) -> None:
    _emit("info", message)


def debug_log(message: str) -> None:
    _emit("debug", message)


def warn(message: str) -> None:
    _emit("warn", message)


def error(message: str) -> None:
    _emit("error", message)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    One settings line per command, e.g.:
      [bulge] Center: 4,4  Radius: 4  Intensity: 0.5
    Tagged as debug when debug=True.
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """'=== title ===' header before each processed file."""
    print(f"\n=== {title} ===", flush=True)


def enable_line_buffered_stdout() -> None:
    """Enable line-buffered stdout when the stream supports .reconfigure()."""
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        reconfig(line_buffering=True, write_through=True)


__all__ = [
    "split_rows_into_parts",
    "format_seconds_compact",
    "format_config_value",
    "format_log_line",
    "format_percentage",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
    "enable_line_buffered_stdout",
]
