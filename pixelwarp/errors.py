# pixelwarp/errors.py
"""
Exception types raised by the engines.

All of them subclass ValueError as well, so callers that already guard
numeric input with `except ValueError` keep working.
"""
from __future__ import annotations


class PixelWarpError(Exception):
    """Base class for every error raised by pixelwarp."""


class DegenerateGeometryError(PixelWarpError, ValueError):
    """Point correspondences are duplicate, collinear or otherwise singular."""


class InvalidGridError(PixelWarpError, ValueError):
    """Mesh control-point grid does not match the requested grid size."""


class EmptySampleSetError(PixelWarpError, ValueError):
    """Palette extraction was given no colour samples."""


class BufferShapeError(PixelWarpError, ValueError):
    """Pixel data length or buffer dimensions are inconsistent."""


__all__ = [
    "PixelWarpError",
    "DegenerateGeometryError",
    "InvalidGridError",
    "EmptySampleSetError",
    "BufferShapeError",
]
