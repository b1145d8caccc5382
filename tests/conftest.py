import numpy as np
import pytest

from accordion_tiler.models import RasterImage, ResampleMethod, TilerConfig


def make_gradient(width, height):
    """Opaque image where every column and every row is distinct."""
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = xs % 256
    pixels[..., 1] = ys % 256
    pixels[..., 2] = (xs * 7 + ys * 3) % 256
    pixels[..., 3] = 255
    return RasterImage(pixels)


@pytest.fixture
def gradient():
    return make_gradient(100, 50)


@pytest.fixture
def small_gradient():
    return make_gradient(10, 6)


@pytest.fixture
def nearest_config():
    return TilerConfig(resample=ResampleMethod.NEAREST)


@pytest.fixture
def gradient_png(tmp_path, gradient):
    path = tmp_path / "source.png"
    gradient.to_pil().save(path)
    return path
