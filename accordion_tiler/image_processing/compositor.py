"""Stack slices into one tall image, mirroring every other slice.

AIDEV-NOTE: Slices at odd indices (1, 3, 5, ...) are flipped top-to-bottom
before placement so neighbouring edges meet like the folds of an accordion.
Slice i always lands at rows [i * height, (i + 1) * height).
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from ..models import (
    BYTES_PER_PIXEL,
    PARALLEL_SLICE_THRESHOLD,
    WHITE,
    RasterImage,
    SliceSet,
)

LOGGER = logging.getLogger(__name__)


def over_white(pixels: np.ndarray) -> np.ndarray:
    """Composite RGBA pixels source-over onto opaque white.

    Opaque pixels come back unchanged. The result is always opaque.
    """
    rgba = pixels.astype(np.uint32)
    alpha = rgba[..., 3:4]
    out = np.empty(pixels.shape, dtype=np.uint8)
    out[..., :3] = (rgba[..., :3] * alpha + 255 * (255 - alpha) + 127) // 255
    out[..., 3] = 255
    return out


def _place_slice(
    canvas: np.ndarray, piece: RasterImage, index: int, width: int
) -> None:
    """Write one slice into its own band of the canvas."""
    pixels = piece.pixels[:, :width]
    if index % 2 == 1:
        pixels = pixels[::-1]
    top = index * piece.height
    canvas[top : top + piece.height, : pixels.shape[1]] = over_white(pixels)


def composite_vertical(
    slices: SliceSet,
    max_workers: int | None = None,
    parallel_threshold: int = PARALLEL_SLICE_THRESHOLD,
) -> RasterImage:
    """Stack slices top-to-bottom into a single image.

    Args:
        slices: Slices from the slicer, all the same height
        max_workers: Thread pool size, 1 forces serial placement
        parallel_threshold: Slice count at which the pool is used

    Returns:
        Image of size (widest slice, slice height * slice count)

    AIDEV-NOTE: The canvas starts opaque white. Narrower slices are
    left-aligned and leave white columns on their right.
    """
    width = max(slices.widths)
    height = slices.height * len(slices)
    LOGGER.debug(
        "Compositing %d slices into %dx%d", len(slices), width, height
    )

    canvas = np.empty((height, width, BYTES_PER_PIXEL), dtype=np.uint8)
    canvas[:, :] = WHITE

    use_pool = len(slices) >= parallel_threshold and max_workers != 1
    if use_pool:
        # Each task writes a disjoint row band, so no locking is needed
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(_place_slice, canvas, piece, index, width)
                for index, piece in enumerate(slices)
            ]
            for future in futures:
                future.result()
    else:
        for index, piece in enumerate(slices):
            _place_slice(canvas, piece, index, width)

    return RasterImage(canvas)
