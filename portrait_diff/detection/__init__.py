"""Face detector collaborators.

Detectors return every candidate face as a BoundingBox; choosing the
face to crop around is left to ``face_crop.select_largest_face``.
"""

from .base import BaseFaceDetector
from .haar import HaarCascadeDetector
from .detector import FaceDetector, DETECTION_BACKENDS

__all__ = [
    "BaseFaceDetector",
    "HaarCascadeDetector",
    "FaceDetector",
    "DETECTION_BACKENDS",
]
