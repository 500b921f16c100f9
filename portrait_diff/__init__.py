"""Portrait Diff - image comparison and face-anchored portrait cropping.

Two independent building blocks:
- SimilarityEngine: similarity score and amplified difference image
- face_crop: crop rectangle anchored on a detected face, cover-resize

Quick Start:
    from portrait_diff import SimilarityEngine, RasterImage

    engine = SimilarityEngine()
    result = engine.compare(RasterImage.from_array(a), RasterImage.from_array(b))
    print(result.score)
"""

from .exceptions import (
    PortraitDiffError,
    InvalidImage,
    InvalidConfiguration,
    InvalidCropRectangle,
    ImageLoadError,
)
from .types import BoundingBox, CropRectangle, RasterImage, SimilarityResult
from .similarity import SimilarityEngine, round2
from .face_crop import apply_crop, compute_crop_rectangle, select_largest_face

__version__ = "0.1.0"

__all__ = [
    # Errors
    "PortraitDiffError", "InvalidImage", "InvalidConfiguration",
    "InvalidCropRectangle", "ImageLoadError",
    # Types
    "BoundingBox", "CropRectangle", "RasterImage", "SimilarityResult",
    # Core
    "SimilarityEngine", "round2",
    "apply_crop", "compute_crop_rectangle", "select_largest_face",
]
