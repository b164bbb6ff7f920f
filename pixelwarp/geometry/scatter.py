# pixelwarp/geometry/scatter.py
from __future__ import annotations

"""
Forward-scatter helper shared by the radial and mesh warps.

Source pixels are written to computed destination positions in row-major
source order; when several land on the same destination, the last one wins,
matching a sequential per-pixel loop.
"""

import numpy as np

from ..core_types import CHANNELS, U8Pixels


def scatter_last_wins(
    dest_pixels: U8Pixels,
    src_pixels: U8Pixels,
    src_index: np.ndarray,
    dest_index: np.ndarray,
) -> None:
    """
    Copy RGBA pixels src_index[i] -> dest_index[i] into dest_pixels, in place.

    Args:
      dest_pixels: flat uint8 destination (W*H*4,), modified in place
      src_pixels: flat uint8 source (W*H*4,)
      src_index, dest_index: equal-length pixel indices (not sample offsets),
        ordered as the source pixels would be visited
    """
    if dest_index.size == 0:
        return
    # np.unique on the reversed targets returns each target's last writer.
    _, first_in_reversed = np.unique(dest_index[::-1], return_index=True)
    keep = dest_index.size - 1 - first_in_reversed

    dest_view = dest_pixels.reshape(-1, CHANNELS)
    src_view = src_pixels.reshape(-1, CHANNELS)
    dest_view[dest_index[keep]] = src_view[src_index[keep]]


__all__ = ["scatter_last_wins"]
