# pixelwarp/colour_convert.py
from __future__ import annotations

"""
RGB -> display strings (hex / rgb() / hsl()) and RGB -> HSL.

Exports:
- rgb_to_hex(rgb)
- rgb_to_rgb_string(rgb)
- rgb_to_hsl(rgb)
- rgb_to_hsl_string(rgb)
- format_colour(rgb, fmt)
- luminance_batch(rgb)
"""

from typing import Literal, Tuple

import numpy as np

from .constants import LUMA_WEIGHTS
from .core_types import HexStr, RGBTuple, round_half_up

ColourFormat = Literal["hex", "rgb", "hsl"]
COLOUR_FORMATS: Tuple[str, ...] = ("hex", "rgb", "hsl")


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{int(rgb[0]):02x}{int(rgb[1]):02x}{int(rgb[2]):02x}"


def rgb_to_rgb_string(rgb: RGBTuple) -> str:
    return f"rgb({int(rgb[0])}, {int(rgb[1])}, {int(rgb[2])})"


def rgb_to_hsl(rgb: RGBTuple) -> Tuple[int, int, int]:
    """
    sRGB (0..255) -> HSL as integers.

    Hue in degrees [0, 360], saturation and lightness in percent [0, 100],
    each rounded half-up. Greys have hue 0 and saturation 0.
    """
    r, g, b = (int(c) / 255.0 for c in rgb[:3])
    hi = max(r, g, b)
    lo = min(r, g, b)
    lightness = (hi + lo) / 2.0
    hue = 0.0
    sat = 0.0

    if hi != lo:
        d = hi - lo
        sat = d / (2.0 - hi - lo) if lightness > 0.5 else d / (hi + lo)
        if hi == r:
            hue = ((g - b) / d + (6.0 if g < b else 0.0)) / 6.0
        elif hi == g:
            hue = ((b - r) / d + 2.0) / 6.0
        else:
            hue = ((r - g) / d + 4.0) / 6.0

    return (
        int(round_half_up(hue * 360.0)),
        int(round_half_up(sat * 100.0)),
        int(round_half_up(lightness * 100.0)),
    )


def rgb_to_hsl_string(rgb: RGBTuple) -> str:
    h, s, l = rgb_to_hsl(rgb)
    return f"hsl({h}, {s}%, {l}%)"


def format_colour(rgb: RGBTuple, fmt: ColourFormat = "hex") -> str:
    """Render an RGB triple in one of the display formats."""
    if fmt == "hex":
        return rgb_to_hex(rgb)
    if fmt == "rgb":
        return rgb_to_rgb_string(rgb)
    if fmt == "hsl":
        return rgb_to_hsl_string(rgb)
    raise ValueError(f"unknown colour format {fmt!r}; expected one of {COLOUR_FORMATS}")


def luminance_batch(rgb: np.ndarray) -> np.ndarray:
    """
    Rec. 601 luma of (...,3) uint8 RGB, normalised to [0,1]. Returns float64.
    """
    arr = np.asarray(rgb, dtype=np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    return (wr * arr[..., 0] + wg * arr[..., 1] + wb * arr[..., 2]) / 255.0


__all__ = [
    "ColourFormat",
    "COLOUR_FORMATS",
    "rgb_to_hex",
    "rgb_to_rgb_string",
    "rgb_to_hsl",
    "rgb_to_hsl_string",
    "format_colour",
    "luminance_batch",
]
