"""Tile the vertical composite side by side."""

import logging

import numpy as np

from ..errors import InvalidParameterError
from ..models import RasterImage

LOGGER = logging.getLogger(__name__)


def repeat_horizontal(composite: RasterImage, count: int) -> RasterImage:
    """Place count unmodified copies of composite next to each other.

    Copy k starts at column k * composite.width. No flipping, no gaps.
    """
    if count < 1:
        raise InvalidParameterError(f"Repeat count must be >= 1, got {count}")
    LOGGER.debug(
        "Repeating %dx%d composite %d times",
        composite.width,
        composite.height,
        count,
    )
    return RasterImage(np.tile(composite.pixels, (1, count, 1)))
