# pixelwarp/geometry/radial.py
from __future__ import annotations

"""
Radial bulge / pinch distortion.

Every source pixel within `radius` of `center` is pushed along its ray to
distance * (1 + intensity * (1 - r^2)), r = distance / radius, and written
there (forward scatter, rounded half-up). The output starts as a copy of the
source, so pixels outside the radius and destinations no source pixel lands
on keep their original values. Strong pinches can leave such spots inside
the circle; that is expected with forward mapping.
"""

import numpy as np

from ..core_types import PixelBuffer, PointF, round_half_up
from .scatter import scatter_last_wins


def bulge(
    src: PixelBuffer, center: PointF, radius: float, intensity: float
) -> PixelBuffer:
    """
    Bulge (intensity > 0) or pinch (intensity < 0) around center.

    Args:
      src: source buffer (not modified)
      center: effect centre in buffer pixel coordinates
      radius: radius of the influence circle in pixels
      intensity: nominally in [-1, 1]; 0 is a no-op
    """
    out = src.copy()
    radius = float(radius)
    if radius <= 0.0 or intensity == 0 or src.width == 0 or src.height == 0:
        return out

    width, height = src.width, src.height
    cx, cy = float(center.x), float(center.y)
    ys, xs = np.mgrid[0:height, 0:width]
    dx = xs.reshape(-1).astype(np.float64) - cx
    dy = ys.reshape(-1).astype(np.float64) - cy
    distance = np.sqrt(dx * dx + dy * dy)

    src_index = np.flatnonzero(distance < radius)
    if src_index.size == 0:
        return out

    dist_in = distance[src_index]
    r = dist_in / radius
    amount = float(intensity) * (1.0 - r * r)
    new_distance = dist_in * (1.0 + amount)
    angle = np.arctan2(dy[src_index], dx[src_index])
    new_x = round_half_up(cx + np.cos(angle) * new_distance)
    new_y = round_half_up(cy + np.sin(angle) * new_distance)

    in_bounds = (new_x >= 0) & (new_x < width) & (new_y >= 0) & (new_y < height)
    dest_index = (new_y[in_bounds] * width + new_x[in_bounds]).astype(np.intp)
    scatter_last_wins(out.pixels, src.pixels, src_index[in_bounds], dest_index)
    return out


def pinch(
    src: PixelBuffer, center: PointF, radius: float, strength: float
) -> PixelBuffer:
    """Pull pixels towards center; same as bulge with intensity = -strength."""
    return bulge(src, center, radius, -float(strength))


__all__ = ["bulge", "pinch"]
