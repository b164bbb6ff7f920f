# pixelwarp/__init__.py
"""
pixelwarp package.

Purpose:
  Pixel-space transforms and colour quantization over flat RGBA8 buffers.
  See pixelwarp_cli.py for the command line.

Public API:
  PixelBuffer        : RGBA8 buffer (width, height, flat pixels).
  geometry           : homography warp, radial bulge/pinch, mesh warp.
  palette            : k-means / median-cut palette extraction.
  mask               : alpha / luminance / inverse alpha masking.
  colour_convert     : hex / rgb() / hsl() formatting, RGB -> HSL.
  image_io           : Pillow adapters (load, save, resize, sampling).
  errors             : DegenerateGeometryError, InvalidGridError, ...

Quick start:
  from pixelwarp import PixelBuffer, PointF, bulge, extract_palette
  from pixelwarp.palette import PaletteOptions
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import constants
from . import core_types
from . import errors
from . import geometry
from . import image_io
from . import mask
from . import palette
from . import utils

from .core_types import ClusterCentroid, ColorSample, PixelBuffer, PointF
from .errors import (
    BufferShapeError,
    DegenerateGeometryError,
    EmptySampleSetError,
    InvalidGridError,
    PixelWarpError,
)
from .geometry import (
    bulge,
    estimate_homography,
    invert_homography,
    mesh_warp,
    perspective_distort,
    pinch,
    warp_perspective,
)
from .mask import apply_mask
from .palette import PaletteEntry, PaletteOptions, extract_palette, samples_from_buffer

__all__ = [
    "__version__",
    # namespaces
    "colour_convert",
    "constants",
    "core_types",
    "errors",
    "geometry",
    "image_io",
    "mask",
    "palette",
    "utils",
    # types
    "PixelBuffer",
    "PointF",
    "ColorSample",
    "ClusterCentroid",
    "PaletteEntry",
    "PaletteOptions",
    # errors
    "PixelWarpError",
    "DegenerateGeometryError",
    "InvalidGridError",
    "EmptySampleSetError",
    "BufferShapeError",
    # operations
    "estimate_homography",
    "invert_homography",
    "warp_perspective",
    "perspective_distort",
    "bulge",
    "pinch",
    "mesh_warp",
    "extract_palette",
    "samples_from_buffer",
    "apply_mask",
]
