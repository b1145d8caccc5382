"""Horizontal scaling, the first pipeline stage."""

import logging
import math

from ..models import RasterImage, ResampleMethod

LOGGER = logging.getLogger(__name__)


def scaled_width(width: int, factor: float) -> int:
    """Width after scaling: floor(width * factor), never below 1."""
    return max(1, int(math.floor(width * factor)))


def scale(
    source: RasterImage,
    factor: float,
    resample: ResampleMethod = ResampleMethod.BILINEAR,
) -> RasterImage:
    """Stretch or squeeze an image horizontally.

    Args:
        source: Image to scale
        factor: Horizontal multiplier
        resample: Resampling filter

    Returns:
        New image of size (floor(width * factor), height)

    AIDEV-NOTE: Height is never scaled. Only the width follows the factor.
    """
    new_width = scaled_width(source.width, factor)
    LOGGER.debug(
        "Scaling %dx%d by %s -> %dx%d",
        source.width,
        source.height,
        factor,
        new_width,
        source.height,
    )
    if new_width == source.width:
        return RasterImage(source.pixels)

    resized = source.to_pil().resize(
        (new_width, source.height), resample.pil_filter
    )
    return RasterImage.from_pil(resized)
