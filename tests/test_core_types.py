import numpy as np
import pytest

from pixelwarp.core_types import ColorSample, PixelBuffer, as_samples, round_half_up
from pixelwarp.errors import BufferShapeError


def test_pixel_buffer_rejects_wrong_length():
    with pytest.raises(BufferShapeError):
        PixelBuffer(2, 2, [0] * 15)


def test_pixel_buffer_rejects_out_of_range_values():
    with pytest.raises(BufferShapeError):
        PixelBuffer(1, 1, [0, 0, 0, 256])


def test_pixel_buffer_accepts_bytes():
    buf = PixelBuffer(1, 1, bytes([1, 2, 3, 4]))
    assert buf.pixel(0, 0) == (1, 2, 3, 4)


def test_from_array_rgb_gets_opaque_alpha():
    buf = PixelBuffer.from_array(np.zeros((2, 3, 3), dtype=np.uint8))
    assert (buf.width, buf.height) == (3, 2)
    assert buf.pixels.size == 24
    assert np.all(buf.as_array()[..., 3] == 255)


def test_as_array_is_a_view(quad_buffer):
    view = quad_buffer.as_array()
    view[0, 0, 0] = 7
    assert quad_buffer.pixel(0, 0)[0] == 7


def test_row_major_layout(quad_buffer):
    assert quad_buffer.pixel(1, 0) == (0, 255, 0, 255)
    assert quad_buffer.pixel(0, 1) == (0, 0, 255, 255)
    with pytest.raises(IndexError):
        quad_buffer.pixel(2, 0)


def test_copy_is_independent_and_equal(quad_buffer):
    dup = quad_buffer.copy()
    assert dup == quad_buffer
    dup.pixels[0] = 0
    assert dup != quad_buffer


def test_round_half_up_matches_canvas_rounding():
    assert round_half_up(2.5) == 3.0
    assert round_half_up(-0.5) == 0.0
    assert round_half_up(127.5) == 128.0


def test_as_samples_accepts_color_samples():
    arr = as_samples([ColorSample(1, 2, 3), ColorSample(4, 5, 6)])
    assert arr.dtype == np.uint8
    assert arr.tolist() == [[1, 2, 3], [4, 5, 6]]
    assert as_samples([]).shape == (0, 3)


@pytest.mark.parametrize(
    "samples",
    [
        [(300, 0, 12)],
        [(0, -1, 12)],
        [(1.0, 2.0, 12.9)],
        np.array([[np.nan, 0, 0]]),
        [("a", "b", "c")],
    ],
)
def test_as_samples_rejects_values_that_do_not_fit_a_byte(samples):
    with pytest.raises(ValueError):
        as_samples(samples)


def test_as_samples_accepts_whole_floats_and_wide_ints():
    assert as_samples(np.array([[0.0, 128.0, 255.0]])).tolist() == [[0, 128, 255]]
    assert as_samples(np.array([[1, 2, 3, 99]], dtype=np.int64)).tolist() == [[1, 2, 3]]
