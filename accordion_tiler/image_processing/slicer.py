"""Cut a scaled image into vertical strips."""

import logging

from ..errors import InvalidParameterError
from ..models import RasterImage, RemainderPolicy, SliceSet

LOGGER = logging.getLogger(__name__)


def slice_bounds(
    width: int,
    num_splits: int,
    policy: RemainderPolicy = RemainderPolicy.DISCARD,
) -> "list[tuple[int, int]]":
    """Column ranges [start, stop) of every slice.

    Args:
        width: Width of the scaled image
        num_splits: Number of slices to cut
        policy: What to do with the columns integer division leaves over

    Returns:
        One (start, stop) pair per slice

    Raises:
        InvalidParameterError: If num_splits is below 1 or exceeds width,
            which would leave slices with no columns
    """
    if num_splits < 1:
        raise InvalidParameterError(f"Number of splits must be >= 1, got {num_splits}")

    slice_width = width // num_splits
    if slice_width == 0:
        raise InvalidParameterError(
            f"Cannot cut {num_splits} slices from an image {width}px wide; "
            "lower the number of splits or raise the scale"
        )

    bounds = [(i * slice_width, (i + 1) * slice_width) for i in range(num_splits)]

    remainder = width - num_splits * slice_width
    if remainder and policy == RemainderPolicy.EXTEND_LAST:
        start, _ = bounds[-1]
        bounds[-1] = (start, width)
    return bounds


def slice_image(
    scaled: RasterImage,
    num_splits: int,
    policy: RemainderPolicy = RemainderPolicy.DISCARD,
) -> SliceSet:
    """Partition an image into num_splits full-height vertical strips.

    AIDEV-NOTE: With the default DISCARD policy every slice is exactly
    floor(width / num_splits) wide and any leftover columns on the right
    are dropped, never redistributed.
    """
    bounds = slice_bounds(scaled.width, num_splits, policy)
    dropped = scaled.width - bounds[-1][1]
    LOGGER.debug(
        "Slicing %dpx into %d slices of %dpx (%d columns dropped)",
        scaled.width,
        num_splits,
        bounds[0][1] - bounds[0][0],
        dropped,
    )
    return SliceSet(
        tuple(RasterImage(scaled.pixels[:, start:stop]) for start, stop in bounds)
    )
