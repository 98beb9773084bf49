"""
Shared pytest fixtures for the tileset tool tests
"""

import logging

import numpy as np
import pytest
from PIL import Image

from ss14_tileset.constants import LOGGER_NAME

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


def make_pattern(width, height):
    """RGBA image where every pixel is distinct and fully opaque"""
    ys, xs = np.mgrid[0:height, 0:width]
    array = np.zeros((height, width, 4), dtype=np.uint8)
    array[..., 0] = (xs * 7) % 256
    array[..., 1] = (ys * 11) % 256
    array[..., 2] = (xs * 3 + ys * 5) % 256
    array[..., 3] = 255
    return Image.fromarray(array, "RGBA")


def write_tileset(directory, base="wall", size=(32, 32), colors=(RED, GREEN, BLUE)):
    """Write <base>0/7/15.png solid images into directory"""
    directory.mkdir(parents=True, exist_ok=True)
    paths = {}
    for suffix, color in zip(("0", "7", "15"), colors):
        path = directory / f"{base}{suffix}.png"
        Image.new("RGBA", size, color).save(path)
        paths[suffix] = path
    return paths


@pytest.fixture
def pattern_image():
    """32x32 RGBA image with unique pixels"""
    image = make_pattern(32, 32)
    yield image
    image.close()


@pytest.fixture
def input_dir(tmp_path):
    directory = tmp_path / "ss13"
    directory.mkdir()
    return directory


@pytest.fixture
def output_dir(tmp_path):
    directory = tmp_path / "ss14"
    directory.mkdir()
    return directory


@pytest.fixture
def solid_tileset(input_dir):
    """wall0.png red, wall7.png green, wall15.png blue, all 32x32"""
    return write_tileset(input_dir)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by CLI tests so later tests don't log to closed streams"""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
