"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from portrait_diff.types import BoundingBox, RasterImage  # noqa: E402
from portrait_diff.image_io import save_image  # noqa: E402


@pytest.fixture
def make_image():
    """Factory for uniformly colored RGB images."""
    def _make(width, height, color=(0, 0, 0)):
        return RasterImage.filled(width, height, color)
    return _make


@pytest.fixture
def random_image():
    """Factory for reproducible random RGB images."""
    def _make(width, height, seed=0):
        rng = np.random.default_rng(seed)
        return RasterImage(rng.integers(0, 256, (height, width, 3), dtype=np.uint8))
    return _make


@pytest.fixture
def write_image(tmp_path):
    """Write an image into tmp_path (PNG keeps pixels exact)."""
    def _write(relative, image):
        return save_image(image, tmp_path / relative)
    return _write


class FakeDetector:
    """Detector stub returning a fixed list of boxes."""

    def __init__(self, boxes=None, error=None):
        self.boxes = list(boxes or [])
        self.error = error
        self.calls = 0

    def detect(self, image):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.boxes)


@pytest.fixture
def fake_detector():
    """Factory for detector stubs."""
    def _make(boxes=None, error=None):
        return FakeDetector(boxes=boxes, error=error)
    return _make


@pytest.fixture
def centered_face():
    """Face box centered in a 600x800 photo."""
    return BoundingBox(x=250, y=150, width=100, height=100)
