"""Data models and constants for the accordion tiler."""

import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import numpy as np
from PIL import Image

from .errors import InvalidParameterError

# Configuration file path
CONFIG_FILE = Path.home() / ".accordion_tiler_config.json"

BYTES_PER_PIXEL = 4  # RGBA
WHITE = (255, 255, 255, 255)

# AIDEV-NOTE: Compositor switches to a worker pool at this many slices
PARALLEL_SLICE_THRESHOLD = 32


class RemainderPolicy(Enum):
    """What the slicer does with columns left over by integer division."""

    DISCARD = "discard"  # Strict equal-width partition, leftovers dropped
    EXTEND_LAST = "extend-last"  # Leftover columns appended to the final slice


class ResampleMethod(Enum):
    """Resampling filters available to the scaler."""

    NEAREST = "nearest"
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"
    LANCZOS = "lanczos"

    @property
    def pil_filter(self) -> Image.Resampling:
        """Matching Pillow resampling filter."""
        filters = {
            ResampleMethod.NEAREST: Image.Resampling.NEAREST,
            ResampleMethod.BILINEAR: Image.Resampling.BILINEAR,
            ResampleMethod.BICUBIC: Image.Resampling.BICUBIC,
            ResampleMethod.LANCZOS: Image.Resampling.LANCZOS,
        }
        return filters[self]


@dataclass(frozen=True, eq=False)
class RasterImage:
    """Decoded RGBA bitmap passed between pipeline stages.

    AIDEV-NOTE: pixels is a read-only (height, width, 4) uint8 array, so a
    stage can never mutate the image it was handed. Every stage builds a
    new RasterImage for its output.
    """

    pixels: np.ndarray

    def __post_init__(self):
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] != BYTES_PER_PIXEL:
            raise InvalidParameterError(
                f"Expected an RGBA pixel array, got shape {pixels.shape}"
            )
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise InvalidParameterError(
                f"Image must be at least 1x1, got {pixels.shape[1]}x{pixels.shape[0]}"
            )
        # Copy so callers holding the original array cannot alias our pixels
        pixels = np.array(pixels, dtype=np.uint8, copy=True, order="C")
        pixels.flags.writeable = False
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> "tuple[int, int]":
        """(width, height), the same order Pillow uses."""
        return (self.width, self.height)

    @property
    def buffer(self) -> bytes:
        """Row-major RGBA bytes, width * height * 4 long."""
        return self.pixels.tobytes()

    @classmethod
    def from_buffer(cls, width: int, height: int, data: bytes) -> "RasterImage":
        """Build an image from a raw row-major RGBA buffer.

        Raises:
            InvalidParameterError: If the buffer length does not match the
                dimensions or either dimension is below 1
        """
        if width < 1 or height < 1:
            raise InvalidParameterError(
                f"Image must be at least 1x1, got {width}x{height}"
            )
        expected = width * height * BYTES_PER_PIXEL
        if len(data) != expected:
            raise InvalidParameterError(
                f"Buffer holds {len(data)} bytes, expected {expected} "
                f"for a {width}x{height} RGBA image"
            )
        array = np.frombuffer(data, dtype=np.uint8).reshape(
            height, width, BYTES_PER_PIXEL
        )
        return cls(array)

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        """Convert a Pillow image (any mode) to RGBA."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(np.asarray(image))

    @classmethod
    def blank(cls, width: int, height: int, color=WHITE) -> "RasterImage":
        """Solid-color image, opaque white by default."""
        if width < 1 or height < 1:
            raise InvalidParameterError(
                f"Image must be at least 1x1, got {width}x{height}"
            )
        array = np.empty((height, width, BYTES_PER_PIXEL), dtype=np.uint8)
        array[:, :] = color
        return cls(array)

    def to_pil(self) -> Image.Image:
        return Image.fromarray(np.array(self.pixels))

    def __eq__(self, other):
        if not isinstance(other, RasterImage):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(
            np.array_equal(self.pixels, other.pixels)
        )

    def __hash__(self):
        return hash((self.pixels.shape, self.buffer))

    def __repr__(self):
        return f"RasterImage(width={self.width}, height={self.height})"


def _clamp_real(value) -> float:
    """Parse a free-form number, substituting 1 for anything unusable."""
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 1.0
    if not math.isfinite(number) or number <= 0:
        return 1.0
    return number


def _clamp_count(value) -> int:
    """Parse a free-form count, floored, never below 1."""
    return max(1, int(math.floor(_clamp_real(value))))


@dataclass(frozen=True)
class EditorParameters:
    """The three numeric inputs of the editor.

    AIDEV-NOTE: Clamp-on-input. Non-numeric, non-finite or non-positive
    values silently become 1 instead of raising. Counts are floored.
    """

    scale: float = 1.0  # Horizontal scale multiplier
    num_splits: int = 1  # Number of vertical slices
    horizontal_repeat: int = 1  # Times the composite is tiled side by side

    def __post_init__(self):
        object.__setattr__(self, "scale", _clamp_real(self.scale))
        object.__setattr__(self, "num_splits", _clamp_count(self.num_splits))
        object.__setattr__(
            self, "horizontal_repeat", _clamp_count(self.horizontal_repeat)
        )

    def to_dict(self) -> dict:
        return {
            "scale": self.scale,
            "num_splits": self.num_splits,
            "horizontal_repeat": self.horizontal_repeat,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EditorParameters":
        return cls(
            scale=data.get("scale", 1),
            num_splits=data.get("num_splits", 1),
            horizontal_repeat=data.get("horizontal_repeat", 1),
        )


# Download editor defaults
DEFAULT_PARAMETERS = EditorParameters(scale=6, num_splits=1, horizontal_repeat=1)
# Live-preview editor defaults
PREVIEW_PARAMETERS = EditorParameters(scale=1, num_splits=1, horizontal_repeat=1)

PRESETS = {
    "default": DEFAULT_PARAMETERS,
    "preview": PREVIEW_PARAMETERS,
}


@dataclass(frozen=True)
class SliceSet:
    """Ordered vertical strips cut from the scaled image."""

    slices: "tuple[RasterImage, ...]"

    def __post_init__(self):
        slices = tuple(self.slices)
        if not slices:
            raise InvalidParameterError("A slice set needs at least one slice")
        heights = {s.height for s in slices}
        if len(heights) != 1:
            raise InvalidParameterError(
                f"All slices must share one height, got {sorted(heights)}"
            )
        object.__setattr__(self, "slices", slices)

    def __len__(self) -> int:
        return len(self.slices)

    def __iter__(self):
        return iter(self.slices)

    def __getitem__(self, index: int) -> RasterImage:
        return self.slices[index]

    @property
    def height(self) -> int:
        return self.slices[0].height

    @property
    def widths(self) -> "list[int]":
        return [s.width for s in self.slices]


@dataclass
class TilerConfig:
    """Persisted defaults for the pipeline and its front ends."""

    parameters: EditorParameters = field(default_factory=lambda: DEFAULT_PARAMETERS)
    remainder_policy: RemainderPolicy = RemainderPolicy.DISCARD
    resample: ResampleMethod = ResampleMethod.BILINEAR

    output_format: str = "PNG"
    output_filename: str = "image.png"

    # Compositor worker pool
    max_workers: int | None = None  # None lets the executor decide, 1 disables
    parallel_threshold: int = PARALLEL_SLICE_THRESHOLD


@dataclass
class ProcessedImage:
    """Result of a complete pipeline run."""

    # Encoded output
    data: bytes
    output_format: str

    parameters: EditorParameters
    composite: RasterImage  # Vertical composite before horizontal repeat

    # Geometry (width, height) at each stage
    source_size: "tuple[int, int]" = (0, 0)
    scaled_size: "tuple[int, int]" = (0, 0)
    slice_widths: "list[int]" = field(default_factory=list)
    output_size: "tuple[int, int]" = (0, 0)

    @property
    def composite_size(self) -> "tuple[int, int]":
        return self.composite.size
