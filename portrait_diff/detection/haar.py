"""OpenCV Haar Cascade face detector."""

import logging
from typing import List, Tuple

import cv2

from ..types import BoundingBox, RasterImage
from .base import BaseFaceDetector

logger = logging.getLogger(__name__)


class HaarCascadeDetector(BaseFaceDetector):
    """Face detector using OpenCV Haar Cascades."""

    def __init__(
        self,
        scale_factor: float = 1.1,
        min_neighbors: int = 5,
        min_size: Tuple[int, int] = (30, 30),
    ):
        """Initialize Haar Cascade detector.

        Args:
            scale_factor: Scale factor for multi-scale detection
            min_neighbors: Minimum neighbors for detection
            min_size: Minimum face size to detect
        """
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = tuple(min_size)

        cascade_path = cv2.data.haarcascades + "haarcascade_frontalface_default.xml"
        self.cascade = cv2.CascadeClassifier(cascade_path)

        if self.cascade.empty():
            raise RuntimeError(f"Failed to load cascade from {cascade_path}")

    def detect(self, image: RasterImage) -> List[BoundingBox]:
        """Detect faces using Haar Cascade."""
        if image.is_empty:
            return []

        gray = cv2.cvtColor(image.pixels, cv2.COLOR_RGB2GRAY)
        faces = self.cascade.detectMultiScale(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=self.min_size,
        )

        detected = [
            BoundingBox(x=int(x), y=int(y), width=int(w), height=int(h))
            for (x, y, w, h) in faces
        ]
        logger.debug(f"Haar cascade found {len(detected)} face(s)")
        return detected
