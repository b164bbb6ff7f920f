import numpy as np
import pytest

from pixelwarp.core_types import PixelBuffer
from pixelwarp.errors import BufferShapeError
from pixelwarp.mask import apply_mask


def solid(width, height, rgba):
    return PixelBuffer.from_array(np.full((height, width, 4), rgba, dtype=np.uint8))


def test_opaque_white_alpha_mask_is_a_no_op(gradient):
    primary = gradient(4, 3)
    out = apply_mask(primary, solid(4, 3, (255, 255, 255, 255)), "alpha")
    assert out == primary


def test_transparent_mask_zeroes_alpha_only(gradient):
    primary = gradient(4, 3)
    out = apply_mask(primary, solid(4, 3, (255, 255, 255, 0)), "alpha")
    assert np.all(out.as_array()[..., 3] == 0)
    assert np.array_equal(out.as_array()[..., :3], primary.as_array()[..., :3])


def test_luminance_mode_uses_mask_brightness():
    primary = solid(2, 2, (10, 20, 30, 200))
    out = apply_mask(primary, solid(2, 2, (128, 128, 128, 0)), "luminance")
    # 200 * 128/255 = 100.39
    assert np.all(out.as_array()[..., 3] == 100)
    assert out.pixel(1, 1)[:3] == (10, 20, 30)


def test_inverse_mode():
    primary = solid(1, 2, (0, 0, 0, 255))
    mask = PixelBuffer(1, 2, [0, 0, 0, 255, 0, 0, 0, 0])
    out = apply_mask(primary, mask, "inverse")
    assert out.pixel(0, 0)[3] == 0
    assert out.pixel(0, 1)[3] == 255


def test_scaled_alpha_rounds_to_nearest():
    primary = solid(1, 2, (0, 0, 0, 200))
    mask = PixelBuffer(1, 2, [0, 0, 0, 128, 0, 0, 0, 192])
    out = apply_mask(primary, mask, "alpha")
    # 200 * 128/255 = 100.39, 200 * 192/255 = 150.59
    assert out.pixel(0, 0)[3] == 100
    assert out.pixel(0, 1)[3] == 151


def test_copy_by_default_in_place_on_request(gradient):
    primary = gradient(3, 3)
    before = primary.copy()
    mask = solid(3, 3, (0, 0, 0, 0))
    out = apply_mask(primary, mask)
    assert primary == before
    assert out is not primary

    same = apply_mask(primary, mask, in_place=True)
    assert same is primary
    assert np.all(primary.as_array()[..., 3] == 0)


def test_size_mismatch_raises(gradient):
    with pytest.raises(BufferShapeError):
        apply_mask(gradient(3, 3), gradient(2, 3))


def test_unknown_mode_raises(gradient):
    with pytest.raises(ValueError):
        apply_mask(gradient(2, 2), gradient(2, 2), "multiply")
