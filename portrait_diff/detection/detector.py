"""Face detector facade with configurable backend."""

import logging
from typing import Dict, List, Optional, Type

from ..constants import get_detection_config
from ..face_crop import select_largest_face
from ..types import BoundingBox, RasterImage
from .base import BaseFaceDetector
from .haar import HaarCascadeDetector

logger = logging.getLogger(__name__)

DETECTION_BACKENDS: Dict[str, Type[BaseFaceDetector]] = {
    "haar_cascade": HaarCascadeDetector,
}


class FaceDetector:
    """Main face detector class with configurable backend."""

    BACKENDS = DETECTION_BACKENDS

    def __init__(self, backend: Optional[str] = None, **kwargs):
        """Initialize face detector with specified backend.

        Args:
            backend: Detection backend to use (uses config default if None)
            **kwargs: Additional arguments for the detector. Haar settings
                default to the values in the detection config.
        """
        config = get_detection_config()
        backend = backend or config.backend

        if backend not in self.BACKENDS:
            raise ValueError(
                f"Unknown backend: {backend}. "
                f"Available: {list(self.BACKENDS.keys())}"
            )

        if backend == "haar_cascade":
            kwargs.setdefault("scale_factor", config.scale_factor)
            kwargs.setdefault("min_neighbors", config.min_neighbors)
            kwargs.setdefault("min_size", config.min_size)

        self.backend_name = backend
        self.detector = self.BACKENDS[backend](**kwargs)
        logger.debug(f"Using {backend} face detection backend")

    def detect(self, image: RasterImage) -> List[BoundingBox]:
        """Detect all faces in an image."""
        return self.detector.detect(image)

    def detect_largest(self, image: RasterImage) -> Optional[BoundingBox]:
        """Detect faces and return the largest one, or None."""
        return select_largest_face(self.detect(image))
