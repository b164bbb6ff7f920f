from __future__ import annotations

import numpy as np
import pytest

from pixelwarp.core_types import PixelBuffer


def make_gradient(width: int, height: int) -> PixelBuffer:
    """Every pixel distinct: R encodes x, G encodes y, opaque."""
    ys, xs = np.mgrid[0:height, 0:width]
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[..., 0] = (xs * 20) % 256
    arr[..., 1] = (ys * 20) % 256
    arr[..., 2] = ((xs + ys) * 7) % 256
    arr[..., 3] = 255
    return PixelBuffer.from_array(arr)


RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
WHITE = (255, 255, 255, 255)


@pytest.fixture
def quad_buffer() -> PixelBuffer:
    """2x2 [[red, green], [blue, white]]."""
    return PixelBuffer.from_array(np.array([[RED, GREEN], [BLUE, WHITE]], dtype=np.uint8))


@pytest.fixture
def gradient():
    return make_gradient
