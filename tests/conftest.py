"""Pytest fixtures for linez tests."""

import tempfile

import numpy as np
import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def checker_target():
    """2x2 target: white on the diagonal, black elsewhere."""
    from linez.raster import RasterBuffer

    pixels = np.array(
        [
            [[255, 255, 255], [0, 0, 0]],
            [[0, 0, 0], [255, 255, 255]],
        ],
        dtype=np.uint8,
    )
    return RasterBuffer.from_array(pixels, readonly=True)


@pytest.fixture
def gradient_image():
    """Small RGB image with a horizontal red ramp and a vertical blue ramp."""
    img = np.zeros((24, 32, 3), dtype=np.uint8)
    img[:, :, 0] = np.linspace(0, 255, 32, dtype=np.uint8)[None, :]
    img[:, :, 2] = np.linspace(0, 255, 24, dtype=np.uint8)[:, None]
    img[8:16, 10:20, 1] = 200
    return img


@pytest.fixture
def gradient_target(gradient_image):
    """Read-only buffer of the gradient image."""
    from linez.raster import RasterBuffer
    return RasterBuffer.from_array(gradient_image, readonly=True)


@pytest.fixture
def default_config():
    """Create default application configuration."""
    from linez.config import AppConfig
    return AppConfig()


def random_buffer(rng, width, height, readonly=False):
    """Random RGB buffer for property tests."""
    from linez.raster import RasterBuffer

    pixels = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    return RasterBuffer.from_array(pixels, readonly=readonly)


@pytest.fixture
def make_random_buffer():
    """Factory fixture for random buffers."""
    return random_buffer
