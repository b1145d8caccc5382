"""Accordion tiler: slice, mirror and repeat a raster image."""

from .errors import (
    DecodeFailure,
    EncodeFailure,
    InvalidParameterError,
    PipelineError,
    TilerError,
)
from .image_processing import ImageProcessor, process
from .models import (
    DEFAULT_PARAMETERS,
    PREVIEW_PARAMETERS,
    EditorParameters,
    ProcessedImage,
    RasterImage,
    RemainderPolicy,
    ResampleMethod,
    SliceSet,
    TilerConfig,
)

__version__ = "0.1.0"

__all__ = [
    "ImageProcessor",
    "process",
    "RasterImage",
    "EditorParameters",
    "SliceSet",
    "ProcessedImage",
    "TilerConfig",
    "RemainderPolicy",
    "ResampleMethod",
    "DEFAULT_PARAMETERS",
    "PREVIEW_PARAMETERS",
    "TilerError",
    "InvalidParameterError",
    "DecodeFailure",
    "EncodeFailure",
    "PipelineError",
]
