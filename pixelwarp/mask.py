# pixelwarp/mask.py
from __future__ import annotations

"""
Alpha masking: scale a primary buffer's alpha by a per-pixel mask factor.

Modes:
  alpha     : factor = mask alpha / 255
  luminance : factor = (0.299 R + 0.587 G + 0.114 B) / 255 of the mask
  inverse   : factor = 1 - mask alpha / 255

The mask must already match the primary's size (see image_io.resize_mask_to).
RGB channels of the primary are never changed.
"""

from typing import Literal, Tuple

import numpy as np

from .colour_convert import luminance_batch
from .core_types import CHANNELS, PixelBuffer, round_half_up
from .errors import BufferShapeError

MaskMode = Literal["alpha", "luminance", "inverse"]
MASK_MODES: Tuple[str, ...] = ("alpha", "luminance", "inverse")


def mask_factors(mask: PixelBuffer, mode: MaskMode = "alpha") -> np.ndarray:
    """Per-pixel alpha multiplier in [0,1] (float64, flat W*H)."""
    rgba = mask.pixels.reshape(-1, CHANNELS)
    if mode == "alpha":
        return rgba[:, 3].astype(np.float64) / 255.0
    if mode == "luminance":
        return luminance_batch(rgba[:, :3])
    if mode == "inverse":
        return 1.0 - rgba[:, 3].astype(np.float64) / 255.0
    raise ValueError(f"unknown mask mode {mode!r}; expected one of {MASK_MODES}")


def apply_mask(
    primary: PixelBuffer,
    mask: PixelBuffer,
    mode: MaskMode = "alpha",
    in_place: bool = False,
) -> PixelBuffer:
    """
    Multiply primary's alpha by the mask factor, rounded half-up.

    With in_place=True the primary's pixel array is updated and primary is
    returned; otherwise a new buffer is returned and primary is untouched.
    """
    if (primary.width, primary.height) != (mask.width, mask.height):
        raise BufferShapeError(
            f"mask is {mask.width}x{mask.height}, primary is "
            f"{primary.width}x{primary.height}"
        )
    factors = mask_factors(mask, mode)

    out = primary if in_place else primary.copy()
    rgba = out.pixels.reshape(-1, CHANNELS)
    scaled = round_half_up(rgba[:, 3].astype(np.float64) * factors)
    rgba[:, 3] = np.clip(scaled, 0, 255).astype(np.uint8)
    return out


__all__ = ["MaskMode", "MASK_MODES", "mask_factors", "apply_mask"]
