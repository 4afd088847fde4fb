"""Pytest fixtures for rasterdrone tests."""

import tempfile

import numpy as np
import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def single_white_pixel_image():
    """4x4 opaque black RGBA image with one white pixel at (1, 1)."""
    img = np.zeros((4, 4, 4), dtype=np.uint8)
    img[..., 3] = 255
    img[1, 1, :3] = 255
    return img


@pytest.fixture
def scattered_dots_image():
    """32x32 opaque black RGBA image with a few white dots of varying brightness."""
    img = np.zeros((32, 32, 4), dtype=np.uint8)
    img[..., 3] = 255
    dots = [(2, 3, 255), (28, 4, 240), (15, 15, 200), (5, 27, 180), (29, 29, 160), (16, 2, 120)]
    for x, y, value in dots:
        img[y, x, :3] = value
    return img


@pytest.fixture
def random_coordinates():
    """Deterministic pseudo-random coordinate list."""
    from rasterdrone.models import Coordinate

    rng = np.random.default_rng(1234)
    xy = rng.integers(0, 200, size=(60, 2))
    return [Coordinate(int(x), int(y)) for x, y in xy]


@pytest.fixture
def default_config():
    """Create default pipeline configuration."""
    from rasterdrone.config import PipelineConfig
    return PipelineConfig()


@pytest.fixture(autouse=True)
def tracer_disabled():
    """Keep the global tracer off between tests."""
    from rasterdrone.tracer import configure_tracer

    configure_tracer(enabled=False)
    yield
    configure_tracer(enabled=False)
