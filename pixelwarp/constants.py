# pixelwarp/constants.py
"""
Tunables and defaults shared across the engines.

- Geometry tolerances (homography estimation / inversion / warping)
- K-means and median-cut limits
- Palette extraction defaults
"""
from __future__ import annotations

from typing import Tuple

# =========================
# Geometry
# =========================
# Three points closer than this (cross product) to a line count as collinear.
COLLINEAR_EPS: float = 1e-4

# Pivot threshold for the 8x8 elimination, relative to the largest matrix entry.
PIVOT_REL_EPS: float = 1e-12

# Below this |det| the inverse falls back to identity.
SINGULAR_DET_EPS: float = 1e-4

# Destination pixels whose projective denominator is this small stay transparent.
PROJECTIVE_DENOM_EPS: float = 1e-4

# Source coordinates this close to an integer are snapped onto it.
COORD_SNAP_EPS: float = 1e-9

IDENTITY_HOMOGRAPHY: Tuple[float, ...] = (
    1.0, 0.0, 0.0,
    0.0, 1.0, 0.0,
    0.0, 0.0, 1.0,
)

# =========================
# Palette extraction
# =========================
KMEANS_ITERATIONS: int = 10

# Median-cut never produces more buckets than this, whatever the requested count.
MEDIAN_CUT_MAX_BUCKETS: int = 8

DEFAULT_PALETTE_COUNT: int = 10
DEFAULT_PALETTE_METHOD: str = "kmeans"
DEFAULT_PALETTE_FORMAT: str = "hex"

# Longest side callers downsample to before sampling colours.
PALETTE_SAMPLE_MAX_SIDE: int = 200

# =========================
# Mask compositing
# =========================
LUMA_WEIGHTS: Tuple[float, float, float] = (0.299, 0.587, 0.114)

# =========================
# Mesh warp (CLI defaults)
# =========================
DEFAULT_MESH_GRID: Tuple[int, int] = (10, 10)

__all__ = [
    "COLLINEAR_EPS",
    "PIVOT_REL_EPS",
    "SINGULAR_DET_EPS",
    "PROJECTIVE_DENOM_EPS",
    "COORD_SNAP_EPS",
    "IDENTITY_HOMOGRAPHY",
    "KMEANS_ITERATIONS",
    "MEDIAN_CUT_MAX_BUCKETS",
    "DEFAULT_PALETTE_COUNT",
    "DEFAULT_PALETTE_METHOD",
    "DEFAULT_PALETTE_FORMAT",
    "PALETTE_SAMPLE_MAX_SIDE",
    "LUMA_WEIGHTS",
    "DEFAULT_MESH_GRID",
]
