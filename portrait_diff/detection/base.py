"""Base face detector interface."""

from abc import ABC, abstractmethod
from typing import List

from ..types import BoundingBox, RasterImage


class BaseFaceDetector(ABC):
    """Abstract base class for face detectors."""

    @abstractmethod
    def detect(self, image: RasterImage) -> List[BoundingBox]:
        """Detect faces in an image.

        Args:
            image: RGB image

        Returns:
            List of BoundingBox objects, possibly empty
        """
        pass
