import numpy as np
import pytest

from ppm_filter.models.errors import FormatError, FormatErrorReason
from ppm_filter.models.pixel_grid import Pixel, PixelGrid


def test_allocate_zero_filled():
    grid = PixelGrid.allocate(4, 3)
    assert grid.size == (4, 3)
    assert grid.max_color == 255
    assert grid.pixels.shape == (3, 4, 3)
    assert grid.pixels.dtype == np.uint8
    assert not grid.pixels.any()


@pytest.mark.parametrize("width,height", [(0, 1), (1, 0), (-2, 3), (0, 0)])
def test_allocate_rejects_non_positive_dimensions(width, height):
    with pytest.raises(FormatError) as info:
        PixelGrid.allocate(width, height)
    assert info.value.reason is FormatErrorReason.BAD_HEADER


def test_from_pixels_is_row_major(three_by_two):
    assert three_by_two.pixel_at(0, 0) == Pixel(0, 1, 2)
    assert three_by_two.pixel_at(0, 2) == Pixel(6, 7, 8)
    assert three_by_two.pixel_at(1, 0) == Pixel(9, 10, 11)
    assert three_by_two.to_bytes() == bytes(range(18))


def test_from_pixels_accepts_pixel_objects():
    grid = PixelGrid.from_pixels(1, 2, [Pixel(1, 2, 3), Pixel(4, 5, 6)], max_color=200)
    assert list(grid.iter_pixels()) == [Pixel(1, 2, 3), Pixel(4, 5, 6)]
    assert grid.max_color == 200


def test_from_pixels_wrong_count():
    with pytest.raises(ValueError):
        PixelGrid.from_pixels(2, 2, [(0, 0, 0)] * 3)


def test_set_pixel_and_flat_index(three_by_two):
    three_by_two.set_pixel(1, 2, Pixel(200, 201, 202))
    flat = three_by_two.pixels.reshape(-1, 3)
    assert tuple(flat[1 * 3 + 2]) == (200, 201, 202)


def test_pixel_is_immutable():
    pixel = Pixel(1, 2, 3)
    with pytest.raises(AttributeError):
        pixel.r = 5


def test_copy_does_not_alias(three_by_two):
    clone = three_by_two.copy()
    assert clone == three_by_two
    clone.set_pixel(0, 0, (255, 255, 255))
    assert clone != three_by_two
    assert three_by_two.pixel_at(0, 0) == Pixel(0, 1, 2)


def test_view_buffer_is_copied_on_construction():
    source = np.zeros((2, 2, 3), dtype=np.uint8)
    grid = PixelGrid(width=2, height=2, max_color=255, pixels=source[::-1])
    grid.set_pixel(0, 0, (9, 9, 9))
    assert not source.any()


def test_shape_mismatch_rejected():
    with pytest.raises(ValueError):
        PixelGrid(width=3, height=2, max_color=255, pixels=np.zeros((3, 2, 3), dtype=np.uint8))


def test_equality_considers_max_color(two_by_one):
    other = two_by_one.copy()
    other.max_color = 100
    assert other != two_by_one
