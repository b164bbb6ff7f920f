import numpy as np
from PIL import Image

from pixelwarp.image_io import (
    buffer_from_image,
    buffer_to_image,
    downsample_to_fit,
    load_buffer,
    palette_samples_from_image,
    resize_mask_to,
    save_buffer,
)


def test_rgb_image_becomes_opaque_rgba():
    buf = buffer_from_image(Image.new("RGB", (3, 2), (1, 2, 3)))
    assert (buf.width, buf.height) == (3, 2)
    assert buf.pixel(2, 1) == (1, 2, 3, 255)


def test_buffer_to_image_keeps_pixels(quad_buffer):
    im = buffer_to_image(quad_buffer)
    assert im.mode == "RGBA"
    assert im.getpixel((1, 1)) == (255, 255, 255, 255)
    assert buffer_from_image(im) == quad_buffer


def test_save_forces_png_and_loads_back(tmp_path, quad_buffer):
    written = save_buffer(tmp_path / "out.jpg", quad_buffer)
    assert written.suffix == ".png"
    assert load_buffer(written) == quad_buffer


def test_resize_mask_to_target_size(gradient):
    mask = resize_mask_to(gradient(4, 4), 8, 2)
    assert (mask.width, mask.height) == (8, 2)
    assert mask.pixels.size == 8 * 2 * 4


def test_downsample_never_enlarges():
    assert downsample_to_fit(Image.new("RGB", (50, 20)), 200).size == (50, 20)
    assert downsample_to_fit(Image.new("RGB", (400, 100)), 200).size == (200, 50)


def test_palette_samples_from_image():
    samples, size = palette_samples_from_image(Image.new("RGBA", (400, 100), (9, 8, 7, 255)))
    assert size == (200, 50)
    assert samples.shape == (200 * 50, 3)
    assert np.all(samples == [9, 8, 7])
