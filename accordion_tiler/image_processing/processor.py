"""Main image processor orchestrating the complete pipeline.

AIDEV-NOTE: Stage order is fixed: scale -> slice -> composite vertically ->
repeat horizontally -> encode. Each stage only reads the output of the
stage before it, and every run is a pure function of (source, parameters,
config): no clock, no randomness, no shared state.
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from ..errors import PipelineError, TilerError
from ..models import (
    EditorParameters,
    ProcessedImage,
    RasterImage,
    SliceSet,
    TilerConfig,
)
from .codec import decode_image, encode_image
from .compositor import composite_vertical
from .repeater import repeat_horizontal
from .scaler import scale
from .slicer import slice_image

LOGGER = logging.getLogger(__name__)


@contextmanager
def _stage(name: str):
    """Report unexpected failures inside a stage as one PipelineError."""
    try:
        yield
    except TilerError:
        raise
    except Exception as e:
        raise PipelineError(name, str(e) or type(e).__name__) from e


class ImageProcessor:
    """Turns one source image into the accordion-tiled output."""

    def __init__(self, config: TilerConfig | None = None):
        self.config = config or TilerConfig()

    def load_image(self, source: "str | Path | bytes") -> RasterImage:
        """Decode an image file or raw bytes.

        Raises:
            DecodeFailure: If the source cannot be decoded
        """
        return decode_image(source)

    def scale(self, source: RasterImage, factor: float) -> RasterImage:
        return scale(source, factor, self.config.resample)

    def slice(self, scaled: RasterImage, num_splits: int) -> SliceSet:
        return slice_image(scaled, num_splits, self.config.remainder_policy)

    def composite_vertical(self, slices: SliceSet) -> RasterImage:
        return composite_vertical(
            slices,
            max_workers=self.config.max_workers,
            parallel_threshold=self.config.parallel_threshold,
        )

    def repeat_horizontal(self, composite: RasterImage, count: int) -> RasterImage:
        return repeat_horizontal(composite, count)

    def encode(self, image: RasterImage) -> bytes:
        with _stage("encode"):
            return encode_image(image, self.config.output_format)

    def preview_slices(
        self, source: RasterImage, params: EditorParameters
    ) -> SliceSet:
        """Scale and slice only, for showing the strips before merging."""
        with _stage("scale"):
            scaled = self.scale(source, params.scale)
        with _stage("slice"):
            return self.slice(scaled, params.num_splits)

    def _run(self, source: RasterImage, params: EditorParameters):
        with _stage("scale"):
            scaled = self.scale(source, params.scale)
        with _stage("slice"):
            slices = self.slice(scaled, params.num_splits)
        with _stage("composite"):
            composite = self.composite_vertical(slices)
        with _stage("repeat"):
            output = self.repeat_horizontal(composite, params.horizontal_repeat)
        return scaled, slices, composite, output

    def render(self, source: RasterImage, params: EditorParameters) -> RasterImage:
        """Run every stage except encoding."""
        return self._run(source, params)[-1]

    def process(self, source: RasterImage, params: EditorParameters) -> bytes:
        """Run the full pipeline and return the encoded output.

        Raises:
            InvalidParameterError: If the parameters give an empty slice
            EncodeFailure: If the output cannot be encoded
            PipelineError: If a stage fails for any other reason
        """
        LOGGER.info(
            "Processing %dx%d image (scale=%s, splits=%d, repeat=%d)",
            source.width,
            source.height,
            params.scale,
            params.num_splits,
            params.horizontal_repeat,
        )
        output = self.render(source, params)
        data = self.encode(output)
        LOGGER.info(
            "Produced %dx%d %s (%d bytes)",
            output.width,
            output.height,
            self.config.output_format,
            len(data),
        )
        return data

    def process_file(
        self, file_path: "str | Path | bytes", params: EditorParameters
    ) -> ProcessedImage:
        """Decode a file, run the pipeline and collect statistics.

        Args:
            file_path: Path to input image, or its raw bytes
            params: Editor parameters

        Returns:
            ProcessedImage with encoded bytes and per-stage geometry
        """
        source = self.load_image(file_path)
        scaled, slices, composite, output = self._run(source, params)
        data = self.encode(output)
        LOGGER.info(
            "Processed %dx%d source into %dx%d %s",
            source.width,
            source.height,
            output.width,
            output.height,
            self.config.output_format,
        )

        return ProcessedImage(
            data=data,
            output_format=self.config.output_format,
            parameters=params,
            composite=composite,
            source_size=source.size,
            scaled_size=scaled.size,
            slice_widths=slices.widths,
            output_size=output.size,
        )


def process(
    source: RasterImage,
    params: EditorParameters,
    config: TilerConfig | None = None,
) -> bytes:
    """Encode the accordion-tiled rendering of source."""
    return ImageProcessor(config).process(source, params)
