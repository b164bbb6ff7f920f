"""Pixel-space geometric warps: homography, radial bulge/pinch, mesh."""

from .homography import (
    PerspectiveResult,
    apply_homography,
    estimate_homography,
    invert_homography,
    perspective_distort,
    warp_perspective,
)
from .mesh import mesh_warp
from .radial import bulge, pinch

__all__ = [
    "PerspectiveResult",
    "apply_homography",
    "estimate_homography",
    "invert_homography",
    "perspective_distort",
    "warp_perspective",
    "mesh_warp",
    "bulge",
    "pinch",
]
