import numpy as np
import pytest

from accordion_tiler.errors import InvalidParameterError
from accordion_tiler.image_processing import (
    composite_vertical,
    repeat_horizontal,
    scale,
    slice_image,
)
from accordion_tiler.image_processing.compositor import over_white
from accordion_tiler.image_processing.scaler import scaled_width
from accordion_tiler.image_processing.slicer import slice_bounds
from accordion_tiler.models import (
    RasterImage,
    RemainderPolicy,
    ResampleMethod,
    SliceSet,
)

from conftest import make_gradient


# --- Scaler ---


@pytest.mark.parametrize(
    "width,factor,expected",
    [(100, 2, 200), (100, 0.25, 25), (7, 1.5, 10), (100, 1e-6, 1), (3, 0.1, 1)],
)
def test_scaled_width_floors_and_clamps(width, factor, expected):
    assert scaled_width(width, factor) == expected


def test_scale_keeps_height(gradient):
    scaled = scale(gradient, 2)
    assert scaled.size == (200, 50)


def test_scale_by_one_is_a_copy(gradient):
    assert scale(gradient, 1) == gradient


def test_nearest_doubling_duplicates_columns(small_gradient):
    scaled = scale(small_gradient, 2, ResampleMethod.NEAREST)
    np.testing.assert_array_equal(scaled.pixels[:, 0::2], small_gradient.pixels)
    np.testing.assert_array_equal(scaled.pixels[:, 1::2], small_gradient.pixels)


@pytest.mark.parametrize("method", list(ResampleMethod))
def test_scale_is_deterministic(gradient, method):
    assert scale(gradient, 1.7, method) == scale(gradient, 1.7, method)


# --- Slicer ---


def test_slices_cover_equal_columns():
    scaled = make_gradient(200, 50)
    slices = slice_image(scaled, 4)
    assert slices.widths == [50, 50, 50, 50]
    for i, piece in enumerate(slices):
        np.testing.assert_array_equal(
            piece.pixels, scaled.pixels[:, i * 50 : (i + 1) * 50]
        )


def test_remainder_columns_are_discarded_by_default(small_gradient):
    slices = slice_image(small_gradient, 3)
    assert slices.widths == [3, 3, 3]
    np.testing.assert_array_equal(slices[2].pixels, small_gradient.pixels[:, 6:9])


def test_remainder_can_extend_last_slice(small_gradient):
    slices = slice_image(small_gradient, 3, RemainderPolicy.EXTEND_LAST)
    assert slices.widths == [3, 3, 4]
    np.testing.assert_array_equal(slices[2].pixels, small_gradient.pixels[:, 6:10])


def test_one_pixel_slices(small_gradient):
    slices = slice_image(small_gradient, 10)
    assert slices.widths == [1] * 10


def test_more_splits_than_columns_is_rejected(small_gradient):
    with pytest.raises(InvalidParameterError):
        slice_image(small_gradient, 11)


def test_slice_bounds_rejects_zero_splits():
    with pytest.raises(InvalidParameterError):
        slice_bounds(10, 0)


def test_slices_do_not_alias_source(small_gradient):
    piece = slice_image(small_gradient, 2)[0]
    assert not piece.pixels.flags.writeable
    assert not np.shares_memory(piece.pixels, small_gradient.pixels)


# --- Vertical compositor ---


def test_composite_geometry():
    slices = slice_image(make_gradient(200, 50), 4)
    composite = composite_vertical(slices)
    assert composite.size == (50, 200)


def test_even_slices_kept_odd_slices_mirrored():
    slices = slice_image(make_gradient(40, 6), 5)
    composite = composite_vertical(slices)
    for i, piece in enumerate(slices):
        band = composite.pixels[i * 6 : (i + 1) * 6]
        if i % 2 == 1:
            band = band[::-1]
        np.testing.assert_array_equal(band, piece.pixels)


def test_narrow_slices_leave_white_gap():
    slices = SliceSet([make_gradient(3, 2), make_gradient(5, 2)])
    composite = composite_vertical(slices)
    assert composite.size == (5, 4)
    assert (composite.pixels[0:2, 3:] == 255).all()
    np.testing.assert_array_equal(
        composite.pixels[2:4], make_gradient(5, 2).pixels[::-1]
    )


def test_transparency_renders_over_white():
    pixels = np.zeros((1, 2, 4), dtype=np.uint8)
    pixels[0, 1] = (0, 0, 0, 128)
    composite = composite_vertical(SliceSet([RasterImage(pixels)]))
    np.testing.assert_array_equal(composite.pixels[0, 0], [255, 255, 255, 255])
    np.testing.assert_array_equal(composite.pixels[0, 1], [127, 127, 127, 255])


def test_over_white_keeps_opaque_pixels(gradient):
    np.testing.assert_array_equal(over_white(gradient.pixels), gradient.pixels)


def test_parallel_and_serial_placement_agree():
    slices = slice_image(make_gradient(120, 9), 40)
    serial = composite_vertical(slices, max_workers=1, parallel_threshold=4)
    parallel = composite_vertical(slices, max_workers=4, parallel_threshold=4)
    assert serial == parallel


# --- Horizontal repeater ---


def test_repeat_tiles_unmodified_copies(small_gradient):
    output = repeat_horizontal(small_gradient, 3)
    assert output.size == (30, 6)
    for k in range(3):
        np.testing.assert_array_equal(
            output.pixels[:, k * 10 : (k + 1) * 10], small_gradient.pixels
        )


def test_repeat_once_is_a_copy(small_gradient):
    assert repeat_horizontal(small_gradient, 1) == small_gradient


def test_repeat_rejects_zero(small_gradient):
    with pytest.raises(InvalidParameterError):
        repeat_horizontal(small_gradient, 0)
