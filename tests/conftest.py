"""Test configuration and fixtures for cl_image_tools.

Rasters are synthesized with numpy, so no test media has to be present:
- solid rasters of any size / color
- "pattern" rasters whose pixels are all distinct (for exact geometry checks)
- rasters with the sizes of the reference camera photos (landscape / portrait)
"""

from collections.abc import Callable

import numpy as np
import pytest
from loguru import logger
from PIL import Image

from cl_image_tools import Orientation, Raster

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)

LANDSCAPE_SIZE = (3872, 2592)
PORTRAIT_SIZE = (1593, 2161)


# ============================================================================
# Factories
# ============================================================================


def solid_raster(
    width: int,
    height: int,
    color: tuple[int, int, int, int] = RED,
    *,
    scale: float = 1.0,
    orientation: Orientation = Orientation.UP,
) -> Raster:
    image = Image.new("RGBA", (width, height), color)
    return Raster(image=image, scale=scale, orientation=orientation)


def pattern_array(width: int, height: int) -> np.ndarray:
    """Opaque RGBA array where every pixel differs from the others."""
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = (xs * 7) % 256
    pixels[..., 1] = (ys * 11) % 256
    pixels[..., 2] = (xs + ys * width) % 256
    pixels[..., 3] = 255
    return pixels


def pattern_raster(
    width: int,
    height: int,
    *,
    orientation: Orientation = Orientation.UP,
) -> Raster:
    return Raster(image=Image.fromarray(pattern_array(width, height)), orientation=orientation)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def make_solid() -> Callable[..., Raster]:
    return solid_raster


@pytest.fixture
def make_pattern() -> Callable[..., Raster]:
    return pattern_raster


@pytest.fixture(scope="session")
def landscape_raster() -> Raster:
    """Opaque raster with the size of the reference landscape photo (3872x2592)."""
    width, height = LANDSCAPE_SIZE
    gradient = np.linspace(0, 255, width, dtype=np.uint8)
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = gradient[None, :]
    pixels[..., 1] = 128
    pixels[..., 3] = 255
    return Raster(image=Image.fromarray(pixels))


@pytest.fixture(scope="session")
def portrait_raster() -> Raster:
    """Opaque raster with the size of the reference portrait photo (1593x2161)."""
    width, height = PORTRAIT_SIZE
    return solid_raster(width, height, (40, 90, 200, 255))


@pytest.fixture
def square_raster() -> Raster:
    return solid_raster(400, 400, GREEN)


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="DEBUG")
    yield messages
    logger.remove(handler_id)
