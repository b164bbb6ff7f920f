import numpy as np

from pixelwarp.core_types import PointF
from pixelwarp.geometry.radial import bulge, pinch


def test_zero_intensity_is_a_no_op(gradient):
    src = gradient(9, 9)
    assert bulge(src, PointF(4, 4), 3.0, 0.0) == src


def test_zero_radius_returns_copy(gradient):
    src = gradient(5, 5)
    out = bulge(src, PointF(2, 2), 0.0, 1.0)
    assert out == src
    assert out.pixels is not src.pixels


def test_pixels_outside_radius_pass_through(gradient):
    src = gradient(9, 9)
    out = bulge(src, PointF(2, 2), 1.5, 0.8)
    ys, xs = np.mgrid[0:9, 0:9]
    outside = np.hypot(xs - 2, ys - 2) >= 1.5
    assert np.array_equal(out.as_array()[outside], src.as_array()[outside])


def test_bulge_pushes_pixels_outward(gradient):
    src = gradient(11, 11)
    out = bulge(src, PointF(5, 5), 4.0, 1.0)
    # (6,5): d=1, amount=0.9375 -> lands on x=round(6.9375)=7
    assert out.pixel(7, 5) == src.pixel(6, 5)
    # (7,5) and (8,5) both land on x=9; row-major order means (8,5) wins
    assert out.pixel(9, 5) == src.pixel(8, 5)
    # centre stays put
    assert out.pixel(5, 5) == src.pixel(5, 5)


def test_bulge_does_not_modify_source(gradient):
    src = gradient(7, 7)
    before = src.copy()
    bulge(src, PointF(3, 3), 3.0, -0.7)
    assert src == before


def test_pinch_is_negative_bulge(gradient):
    src = gradient(10, 8)
    center = PointF(4.5, 3.5)
    assert pinch(src, center, 4.0, 0.6) == bulge(src, center, 4.0, -0.6)


def test_pinch_pulls_pixels_inward(gradient):
    src = gradient(11, 11)
    out = bulge(src, PointF(5, 5), 4.0, -1.0)
    # (8,5): d=3, amount=-0.4375 -> lands on x=round(6.6875)=7
    assert out.pixel(7, 5) == src.pixel(8, 5)
    # (2,5): mirrored on the left -> x=round(3.3125)=3
    assert out.pixel(3, 5) == src.pixel(2, 5)
    # d == radius is outside the circle
    assert out.pixel(9, 5) == src.pixel(9, 5)
