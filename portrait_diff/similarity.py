"""Pixel-level image similarity and difference visualisation.

Both operations are pure functions of their inputs: images are resampled
into fresh buffers, compared with vectorised numpy arithmetic, and nothing
is cached between calls.
"""

import logging
import math
from typing import Optional, Tuple

import cv2
import numpy as np

from .constants import get_similarity_config
from .exceptions import InvalidConfiguration, InvalidImage
from .types import RasterImage, SimilarityResult

logger = logging.getLogger(__name__)

# Largest per-sample difference: 255 on each of the three channels
MAX_CHANNEL_DIFF = 255 * 3

# Single interpolation used for every resample so scores stay comparable
RESAMPLE_INTERPOLATION = cv2.INTER_LINEAR


def round2(value: float) -> float:
    """Round to two decimals, halves away from zero."""
    scaled = math.floor(abs(value) * 100 + 0.5) / 100
    return math.copysign(scaled, value) if value else 0.0


def resample(image: RasterImage, width: int, height: int) -> np.ndarray:
    """Resample an image to exactly ``width`` x ``height``.

    Width and height are scaled independently; aspect ratio is not kept.

    Returns:
        New ``(height, width, 3)`` uint8 array
    """
    if image.size == (width, height):
        return np.array(image.pixels, copy=True)
    return cv2.resize(image.pixels, (width, height), interpolation=RESAMPLE_INTERPOLATION)


def _require_non_empty(*images: RasterImage) -> None:
    for image in images:
        if image.is_empty:
            raise InvalidImage(f"Image has zero area: {image.width}x{image.height}")


class SimilarityEngine:
    """Computes similarity scores and difference images for image pairs."""

    def __init__(self, sample_size: Optional[int] = None):
        """Initialize the engine.

        Args:
            sample_size: Side of the square sampling grid (uses config default if None)

        Raises:
            InvalidConfiguration: If the sampling grid is empty
        """
        if sample_size is None:
            sample_size = get_similarity_config().sample_size
        size = int(sample_size)
        if size <= 0 or size != sample_size:
            raise InvalidConfiguration(
                f"Sampling grid size must be a positive integer, got {sample_size}"
            )
        self.sample_size = size

    def compare(self, image_a: RasterImage, image_b: RasterImage) -> SimilarityResult:
        """Compare two images.

        Args:
            image_a: First image
            image_b: Second image

        Returns:
            SimilarityResult with the score and the difference image

        Raises:
            InvalidImage: If either image has zero width or height
        """
        score = self.calculate_similarity(image_a, image_b)
        diff = self.diff_image(image_a, image_b)
        return SimilarityResult(score=score, diff_image=diff)

    def calculate_similarity(self, image_a: RasterImage, image_b: RasterImage) -> float:
        """Percentage similarity over the resampled grid.

        100 means identical at the sampled resolution, 0 means every channel
        of every sample differs by 255.
        """
        _require_non_empty(image_a, image_b)
        size = self.sample_size

        grid_a = resample(image_a, size, size).astype(np.int32)
        grid_b = resample(image_b, size, size).astype(np.int32)

        total_diff = int(np.abs(grid_a - grid_b).sum())
        max_diff = size * size * MAX_CHANNEL_DIFF

        score = round2((1 - total_diff / max_diff) * 100)
        logger.debug(f"Similarity {score}% (total diff {total_diff}/{max_diff})")
        return score

    def diff_image(self, image_a: RasterImage, image_b: RasterImage) -> RasterImage:
        """Build the red-emphasised difference image.

        Both inputs are stretched to ``(max width, max height)``; each output
        pixel is ``(2i, i/2, i/2)`` where ``i`` is the mean absolute channel
        difference, clamped to [0, 255].
        """
        _require_non_empty(image_a, image_b)
        width, height = diff_size(image_a, image_b)

        # NOTE: independent width/height stretch can distort the two inputs
        # differently before differencing. Kept for output compatibility.
        stretched_a = resample(image_a, width, height).astype(np.float32)
        stretched_b = resample(image_b, width, height).astype(np.float32)

        intensity = np.abs(stretched_a - stretched_b).sum(axis=2) / 3.0

        out = np.empty((height, width, 3), dtype=np.float32)
        out[:, :, 0] = intensity * 2
        out[:, :, 1] = intensity / 2
        out[:, :, 2] = intensity / 2
        return RasterImage(np.rint(np.clip(out, 0, 255)).astype(np.uint8))


def diff_size(image_a: RasterImage, image_b: RasterImage) -> Tuple[int, int]:
    """Return the (width, height) of the difference image for a pair."""
    return (max(image_a.width, image_b.width), max(image_a.height, image_b.height))
