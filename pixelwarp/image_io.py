# pixelwarp/image_io.py
from __future__ import annotations

"""
Pillow adapters: decode to / encode from PixelBuffer, resize helpers.

The engines only see PixelBuffer; everything that touches files or Pillow
images goes through here.
"""

from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import PALETTE_SAMPLE_MAX_SIDE
from .core_types import PixelBuffer, U8Samples
from .palette.extract import samples_from_buffer


def buffer_from_image(image: Image.Image) -> PixelBuffer:
    """Convert any Pillow image to an RGBA PixelBuffer."""
    rgba = image.convert("RGBA")
    width, height = rgba.size
    arr = np.array(rgba, dtype=np.uint8)
    return PixelBuffer(width, height, arr.reshape(-1))


def buffer_to_image(buffer: PixelBuffer) -> Image.Image:
    """PixelBuffer -> RGBA Pillow image (copy)."""
    return Image.fromarray(buffer.as_array().copy())


def load_buffer(path: Path) -> PixelBuffer:
    """Open an image file, apply EXIF orientation, return RGBA pixels."""
    with Image.open(path) as im0:
        im = ImageOps.exif_transpose(im0)
        return buffer_from_image(im)


def save_buffer(path: Path, buffer: PixelBuffer) -> Path:
    """Write buffer as PNG (suffix forced to .png). Returns the written path."""
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    buffer_to_image(buffer).save(path)
    return path


def resize_mask_to(mask: PixelBuffer, width: int, height: int) -> PixelBuffer:
    """Bilinear-resample mask to width x height (no-op copy if already that size)."""
    if (mask.width, mask.height) == (width, height):
        return mask.copy()
    resized = buffer_to_image(mask).resize(
        (int(width), int(height)), resample=Image.Resampling.BILINEAR
    )
    return buffer_from_image(resized)


def downsample_to_fit(image: Image.Image, max_side: int) -> Image.Image:
    """Shrink (never enlarge) so both sides are <= max_side, keeping aspect."""
    out = image.copy()
    out.thumbnail((int(max_side), int(max_side)), Image.Resampling.BILINEAR)
    return out


def palette_samples_from_image(
    image: Image.Image,
    max_side: int = PALETTE_SAMPLE_MAX_SIDE,
    skip_transparent: bool = False,
) -> Tuple[U8Samples, Tuple[int, int]]:
    """
    Colour samples for palette extraction from a Pillow image.

    Returns (samples (N,3) uint8, sampled size (w, h)).
    """
    small = downsample_to_fit(image, max_side)
    buf = buffer_from_image(small)
    return samples_from_buffer(buf, skip_transparent=skip_transparent), small.size


def is_image_file(path: Path) -> bool:
    try:
        with Image.open(path) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = [
    "buffer_from_image",
    "buffer_to_image",
    "load_buffer",
    "save_buffer",
    "resize_mask_to",
    "downsample_to_fit",
    "palette_samples_from_image",
    "is_image_file",
]
