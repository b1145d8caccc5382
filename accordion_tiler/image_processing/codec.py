"""Decoding source files and encoding pipeline output with Pillow."""

import io
from pathlib import Path

from PIL import Image, ImageOps

from ..errors import DecodeFailure, EncodeFailure
from ..models import RasterImage

SUPPORTED_INPUT_EXTENSIONS = {
    ".png",
    ".jpg",
    ".jpeg",
    ".bmp",
    ".gif",
    ".tif",
    ".tiff",
    ".webp",
}

# Formats without an alpha channel get flattened to RGB before saving
_RGB_ONLY_FORMATS = {"JPEG", "BMP"}

# AIDEV-NOTE: Fixed encoder options keep output byte-identical across runs
_SAVE_OPTIONS = {
    "PNG": {"optimize": False, "compress_level": 6},
    "JPEG": {"quality": 95, "subsampling": 0},
    "WEBP": {"lossless": True, "method": 4},
}


def decode_image(source: "str | Path | bytes") -> RasterImage:
    """Load an image file or in-memory bytes as RGBA.

    Args:
        source: Path to an image file, or its raw bytes

    Returns:
        Decoded RasterImage with EXIF orientation applied

    Raises:
        DecodeFailure: If the data cannot be read or decoded
    """
    try:
        handle = io.BytesIO(source) if isinstance(source, bytes) else source
        with Image.open(handle) as img:
            img = ImageOps.exif_transpose(img)
            img.load()
            return RasterImage.from_pil(img)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeFailure(f"Failed to load image: {e}") from e


def encode_image(image: RasterImage, fmt: str = "PNG") -> bytes:
    """Serialize an image to bytes in the given Pillow format.

    Raises:
        EncodeFailure: If the format is unknown or the encoder fails
    """
    fmt = fmt.upper()
    pil_image = image.to_pil()
    if fmt in _RGB_ONLY_FORMATS:
        pil_image = pil_image.convert("RGB")

    buffer = io.BytesIO()
    try:
        pil_image.save(buffer, format=fmt, **_SAVE_OPTIONS.get(fmt, {}))
    except (KeyError, ValueError, OSError) as e:
        raise EncodeFailure(f"Failed to encode image as {fmt}: {e}") from e
    return buffer.getvalue()


def is_supported_input(path: "str | Path") -> bool:
    return Path(path).suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
