import os

os.environ.setdefault('MPLBACKEND', 'Agg')

import numpy as np
import pytest
from PIL import Image

from img_scramble.config import load_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


def random_pixels(width, height, seed=1337):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)


@pytest.fixture
def sample_png(tmp_path):
    path = tmp_path / 'sample.png'
    Image.fromarray(random_pixels(30, 20)).save(path)
    return path
