"""Raster pipeline turning one image into an accordion-tiled composite.

AIDEV-NOTE: One module per stage:
- scaler: horizontal resize by a multiplier
- slicer: equal-width vertical strips
- compositor: stack strips, mirroring every other one
- repeater: tile the stack side by side
- codec: Pillow decode/encode at the boundaries
- processor: ImageProcessor orchestrator
"""

from .codec import SUPPORTED_INPUT_EXTENSIONS, decode_image, encode_image
from .compositor import composite_vertical
from .processor import ImageProcessor, process
from .repeater import repeat_horizontal
from .scaler import scale
from .slicer import slice_image

__all__ = [
    "ImageProcessor",
    "process",
    "scale",
    "slice_image",
    "composite_vertical",
    "repeat_horizontal",
    "decode_image",
    "encode_image",
    "SUPPORTED_INPUT_EXTENSIONS",
]
