# pixelwarp/geometry/mesh.py
from __future__ import annotations

"""
Grid ("mesh") warp driven by one control point per cell.

The buffer is cut into grid_x x grid_y equal cells. Each pixel in a cell with
control point cp moves to round(cp + (p - cp) * local) per axis, where local
is the pixel's fractional position inside its cell. Writes are a forward
scatter onto a copy of the source; cells whose control point is None pass
through untouched.
"""

from typing import List, Optional

import numpy as np

from ..core_types import MeshControlGrid, PixelBuffer, PointF, round_half_up
from ..errors import InvalidGridError
from .scatter import scatter_last_wins


def _validate_grid(
    grid_x: int, grid_y: int, control_points: MeshControlGrid
) -> List[List[Optional[PointF]]]:
    if grid_x < 1 or grid_y < 1:
        raise InvalidGridError(f"grid must be at least 1x1, got {grid_x}x{grid_y}")
    rows = [list(row) for row in control_points]
    if len(rows) != grid_y:
        raise InvalidGridError(
            f"expected {grid_y} control-point rows, got {len(rows)}"
        )
    for i, row in enumerate(rows):
        if len(row) != grid_x:
            raise InvalidGridError(
                f"row {i}: expected {grid_x} control points, got {len(row)}"
            )
    return rows


def mesh_warp(
    src: PixelBuffer, grid_x: int, grid_y: int, control_points: MeshControlGrid
) -> PixelBuffer:
    """
    Warp src by the control-point lattice.

    Args:
      src: source buffer (not modified)
      grid_x, grid_y: number of cells across / down
      control_points: [row][col] grid of PointF (or None), grid_y x grid_x

    Raises:
      InvalidGridError if the lattice does not match grid_y x grid_x.
    """
    grid_x = int(grid_x)
    grid_y = int(grid_y)
    rows = _validate_grid(grid_x, grid_y, control_points)

    out = src.copy()
    width, height = src.width, src.height
    if width == 0 or height == 0:
        return out

    # Per-cell lookup tables; NaN marks a missing control point.
    cp_x = np.full((grid_y, grid_x), np.nan, dtype=np.float64)
    cp_y = np.full((grid_y, grid_x), np.nan, dtype=np.float64)
    for r, row in enumerate(rows):
        for c, cp in enumerate(row):
            if cp is not None:
                cp_x[r, c] = float(cp.x)
                cp_y[r, c] = float(cp.y)

    cell_w = width / grid_x
    cell_h = height / grid_y
    ys, xs = np.mgrid[0:height, 0:width]
    px = xs.reshape(-1).astype(np.float64)
    py = ys.reshape(-1).astype(np.float64)

    col = np.minimum(np.floor(px / cell_w).astype(np.intp), grid_x - 1)
    row_idx = np.minimum(np.floor(py / cell_h).astype(np.intp), grid_y - 1)
    cell_cx = cp_x[row_idx, col]
    cell_cy = cp_y[row_idx, col]

    src_index = np.flatnonzero(~np.isnan(cell_cx))
    if src_index.size == 0:
        return out

    px = px[src_index]
    py = py[src_index]
    ccx = cell_cx[src_index]
    ccy = cell_cy[src_index]
    local_x = np.mod(px, cell_w) / cell_w
    local_y = np.mod(py, cell_h) / cell_h
    new_x = round_half_up(ccx + (px - ccx) * local_x)
    new_y = round_half_up(ccy + (py - ccy) * local_y)

    in_bounds = (new_x >= 0) & (new_x < width) & (new_y >= 0) & (new_y < height)
    dest_index = (new_y[in_bounds] * width + new_x[in_bounds]).astype(np.intp)
    scatter_last_wins(out.pixels, src.pixels, src_index[in_bounds], dest_index)
    return out


__all__ = ["mesh_warp"]
