import pytest

from pixelwarp.core_types import PointF
from pixelwarp.errors import InvalidGridError
from pixelwarp.geometry.mesh import mesh_warp


@pytest.mark.parametrize(
    "grid_x,grid_y,points",
    [
        (2, 2, [[PointF(0, 0), PointF(1, 0)]]),
        (2, 1, [[PointF(0, 0)]]),
        (0, 1, [[]]),
        (1, 2, [[PointF(0, 0)], [PointF(0, 0), PointF(1, 1)]]),
    ],
)
def test_grid_mismatch_raises(gradient, grid_x, grid_y, points):
    with pytest.raises(InvalidGridError):
        mesh_warp(gradient(4, 4), grid_x, grid_y, points)


def test_cells_without_control_points_pass_through(gradient):
    src = gradient(4, 4)
    assert mesh_warp(src, 2, 2, [[None, None], [None, None]]) == src


def test_right_cell_anchored_at_its_origin_is_identity(gradient):
    src = gradient(4, 2)
    out = mesh_warp(src, 2, 1, [[None, PointF(2, 0)]])
    assert out == src


def test_single_cell_contracts_towards_control_point(gradient):
    src = gradient(4, 4)
    out = mesh_warp(src, 1, 1, [[PointF(0, 0)]])
    # new = round(p * p / 4): 0->0, 1->0, 2->1, 3->2 on both axes; last writer wins
    assert out.pixel(0, 0) == src.pixel(1, 1)
    assert out.pixel(1, 0) == src.pixel(2, 1)
    assert out.pixel(2, 2) == src.pixel(3, 3)
    # nothing lands on the last row/column, so it keeps the source pixels
    assert out.pixel(3, 3) == src.pixel(3, 3)


def test_mesh_does_not_modify_source(gradient):
    src = gradient(6, 6)
    before = src.copy()
    mesh_warp(src, 3, 3, [[PointF(1, 1)] * 3 for _ in range(3)])
    assert src == before
