# pixelwarp/geometry/homography.py
from __future__ import annotations

"""
Projective (homography) warping.

Exports:
- estimate_homography(src, dst) -> Homography
- invert_homography(h) -> Homography
- apply_homography(h, point) -> PointF
- warp_perspective(src, h, dest_width, dest_height, workers=1) -> PixelBuffer
- perspective_distort(src, points, workers=1) -> PerspectiveResult

Notes:
- Estimation fixes h8 = 1 and solves the remaining 8x8 system by Gaussian
  elimination with partial pivoting.
- Warping iterates over destination pixels and samples the source through the
  inverse map with bilinear interpolation, so the output has no holes.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from itertools import combinations
from typing import List, Sequence

import numpy as np

from ..constants import (
    COLLINEAR_EPS,
    COORD_SNAP_EPS,
    IDENTITY_HOMOGRAPHY,
    PIVOT_REL_EPS,
    PROJECTIVE_DENOM_EPS,
    SINGULAR_DET_EPS,
)
from ..core_types import Homography, PixelBuffer, PointF, U8Image, round_half_up
from ..errors import DegenerateGeometryError
from ..utils import split_rows_into_parts

# Below this many destination rows threading is not worth the overhead.
_MIN_ROWS_FOR_THREADS = 64


@dataclass(frozen=True)
class PerspectiveResult:
    """Warped buffer plus where its top-left corner sits in the caller's space."""

    buffer: PixelBuffer
    origin: PointF


# Estimation


def _check_quad(points: Sequence[PointF], label: str) -> None:
    if len(points) != 4:
        raise DegenerateGeometryError(
            f"{label}: need exactly 4 points, got {len(points)}"
        )
    for a, b, c in combinations(points, 3):
        cross = (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)
        if abs(cross) < COLLINEAR_EPS:
            raise DegenerateGeometryError(
                f"{label}: points ({a.x}, {a.y}), ({b.x}, {b.y}), ({c.x}, {c.y}) "
                "are duplicate or collinear"
            )


def _solve_linear_system(matrix: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    """Gaussian elimination with partial pivoting on an n x n system."""
    n = matrix.shape[0]
    aug = np.hstack([matrix.astype(np.float64), rhs.reshape(-1, 1).astype(np.float64)])
    tolerance = PIVOT_REL_EPS * max(float(np.abs(matrix).max()), 1.0)

    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(aug[col:, col])))
        if abs(aug[pivot_row, col]) < tolerance:
            raise DegenerateGeometryError("correspondence system is singular")
        if pivot_row != col:
            aug[[col, pivot_row]] = aug[[pivot_row, col]]
        factors = aug[col + 1 :, col] / aug[col, col]
        aug[col + 1 :, col:] -= factors[:, None] * aug[col, col:]

    solution = np.zeros(n, dtype=np.float64)
    for row in range(n - 1, -1, -1):
        acc = aug[row, n] - float(aug[row, row + 1 : n] @ solution[row + 1 :])
        solution[row] = acc / aug[row, row]
    return solution


def estimate_homography(
    src: Sequence[PointF], dst: Sequence[PointF]
) -> Homography:
    """
    Projective transform mapping each src corner onto its dst corner.

    Raises DegenerateGeometryError for anything other than 4 distinct,
    non-collinear correspondences on both sides.
    """
    _check_quad(src, "source")
    _check_quad(dst, "destination")

    matrix = np.zeros((8, 8), dtype=np.float64)
    rhs = np.zeros(8, dtype=np.float64)
    for i, (p, q) in enumerate(zip(src, dst)):
        x, y, u, v = float(p.x), float(p.y), float(q.x), float(q.y)
        matrix[2 * i] = [x, y, 1.0, 0.0, 0.0, 0.0, -u * x, -u * y]
        rhs[2 * i] = u
        matrix[2 * i + 1] = [0.0, 0.0, 0.0, x, y, 1.0, -v * x, -v * y]
        rhs[2 * i + 1] = v

    h = _solve_linear_system(matrix, rhs)
    return tuple(float(c) for c in h) + (1.0,)  # type: ignore[return-value]


def invert_homography(h: Homography) -> Homography:
    """Adjugate inverse; identity when |det| < SINGULAR_DET_EPS."""
    a, b, c, d, e, f, g, hh, i = (float(v) for v in h)
    det = a * (e * i - f * hh) - b * (d * i - f * g) + c * (d * hh - e * g)
    if abs(det) < SINGULAR_DET_EPS:
        return IDENTITY_HOMOGRAPHY  # type: ignore[return-value]

    inv = 1.0 / det
    return (
        (e * i - f * hh) * inv,
        (c * hh - b * i) * inv,
        (b * f - c * e) * inv,
        (f * g - d * i) * inv,
        (a * i - c * g) * inv,
        (c * d - a * f) * inv,
        (d * hh - e * g) * inv,
        (b * g - a * hh) * inv,
        (a * e - b * d) * inv,
    )


def apply_homography(h: Homography, point: PointF) -> PointF:
    """Map one point through h (with the projective divide)."""
    x, y = float(point.x), float(point.y)
    w = h[6] * x + h[7] * y + h[8]
    if abs(w) < 1e-12:
        raise DegenerateGeometryError(f"({x}, {y}) maps to infinity")
    return PointF((h[0] * x + h[1] * y + h[2]) / w, (h[3] * x + h[4] * y + h[5]) / w)


# Warping


def _snap_to_grid(coords: np.ndarray) -> np.ndarray:
    nearest = np.rint(coords)
    return np.where(np.abs(coords - nearest) < COORD_SNAP_EPS, nearest, coords)


def _warp_rows(
    src_img: U8Image, hinv: Homography, dest_width: int, y_start: int, y_end: int
) -> U8Image:
    """Resample destination rows [y_start, y_end) from src through hinv."""
    src_h, src_w = src_img.shape[0], src_img.shape[1]
    ys, xs = np.mgrid[y_start:y_end, 0:dest_width].astype(np.float64)

    denom = hinv[6] * xs + hinv[7] * ys + hinv[8]
    valid = np.abs(denom) >= PROJECTIVE_DENOM_EPS
    denom = np.where(valid, denom, 1.0)
    sx = _snap_to_grid((hinv[0] * xs + hinv[1] * ys + hinv[2]) / denom)
    sy = _snap_to_grid((hinv[3] * xs + hinv[4] * ys + hinv[5]) / denom)

    x1 = np.floor(sx)
    y1 = np.floor(sy)
    fx = sx - x1
    fy = sy - y1

    # The +1 neighbour may sit one past the edge only when its weight is zero.
    x_ok = (x1 >= 0) & ((x1 + 1 < src_w) | ((x1 + 1 == src_w) & (fx == 0.0)))
    y_ok = (y1 >= 0) & ((y1 + 1 < src_h) | ((y1 + 1 == src_h) & (fy == 0.0)))
    inside = valid & x_ok & y_ok

    x1i = np.where(inside, x1, 0).astype(np.intp)
    y1i = np.where(inside, y1, 0).astype(np.intp)
    x2i = np.minimum(x1i + 1, src_w - 1)
    y2i = np.minimum(y1i + 1, src_h - 1)
    wx = np.where(inside, fx, 0.0)[..., None]
    wy = np.where(inside, fy, 0.0)[..., None]

    p11 = src_img[y1i, x1i].astype(np.float64)
    p21 = src_img[y1i, x2i].astype(np.float64)
    p12 = src_img[y2i, x1i].astype(np.float64)
    p22 = src_img[y2i, x2i].astype(np.float64)

    blended = (
        p11 * (1.0 - wx) * (1.0 - wy)
        + p21 * wx * (1.0 - wy)
        + p12 * (1.0 - wx) * wy
        + p22 * wx * wy
    )
    out = np.clip(round_half_up(blended), 0, 255).astype(np.uint8)
    out[~inside] = 0
    return out


def warp_perspective(
    src: PixelBuffer,
    h: Homography,
    dest_width: int,
    dest_height: int,
    workers: int = 1,
) -> PixelBuffer:
    """
    Resample src into a dest_width x dest_height buffer through h.

    Every destination pixel is mapped back with the inverse of h; pixels whose
    2x2 source neighbourhood falls outside src stay fully transparent.

    Args:
      src: source buffer (not modified)
      h: forward transform, source -> destination
      dest_width, dest_height: output size
      workers: threads for row-parallel resampling; <=1 runs inline
    """
    dest_width = int(dest_width)
    dest_height = int(dest_height)
    if dest_width < 0 or dest_height < 0:
        raise ValueError(f"invalid destination size {dest_width}x{dest_height}")
    if dest_width == 0 or dest_height == 0 or src.width == 0 or src.height == 0:
        return PixelBuffer.blank(dest_width, dest_height)

    hinv = invert_homography(h)
    src_img = src.as_array()

    if workers <= 1 or dest_height < _MIN_ROWS_FOR_THREADS:
        out = _warp_rows(src_img, hinv, dest_width, 0, dest_height)
    else:
        spans = split_rows_into_parts(dest_height, workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(_warp_rows, src_img, hinv, dest_width, s, e)
                for s, e in spans
            ]
            parts: List[U8Image] = [f.result() for f in futures]
        out = np.vstack(parts)

    return PixelBuffer(dest_width, dest_height, out.reshape(-1))


def perspective_distort(
    src: PixelBuffer, points: Sequence[PointF], workers: int = 1
) -> PerspectiveResult:
    """
    Map the full src rectangle onto the quadrilateral `points`.

    Points are in the caller's space, ordered top-left, top-right,
    bottom-right, bottom-left. The output covers their bounding box; its
    origin is returned so the caller can place it.
    """
    if len(points) != 4:
        raise DegenerateGeometryError(
            f"perspective distortion needs exactly 4 points, got {len(points)}"
        )
    min_x = min(p.x for p in points)
    max_x = max(p.x for p in points)
    min_y = min(p.y for p in points)
    max_y = max(p.y for p in points)
    dest_width = int(math.ceil(max_x - min_x))
    dest_height = int(math.ceil(max_y - min_y))

    w, hgt = float(src.width), float(src.height)
    src_corners = [PointF(0.0, 0.0), PointF(w, 0.0), PointF(w, hgt), PointF(0.0, hgt)]
    dst_corners = [PointF(p.x - min_x, p.y - min_y) for p in points]

    h = estimate_homography(src_corners, dst_corners)
    warped = warp_perspective(src, h, dest_width, dest_height, workers=workers)
    return PerspectiveResult(buffer=warped, origin=PointF(min_x, min_y))


__all__ = [
    "PerspectiveResult",
    "estimate_homography",
    "invert_homography",
    "apply_homography",
    "warp_perspective",
    "perspective_distort",
]
