"""Batch portrait processing.

For every photo in the input directory: detect faces, keep the largest,
crop around it with the face-anchored policy, resize to the target size
and write a JPEG plus a JSON record. One bad photo never stops the batch;
its error is recorded and processing moves on to the next file.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import cv2

from .constants import PORTRAIT_EXTENSIONS, CropConfig, get_crop_config, get_paths_config
from .detection import BaseFaceDetector, FaceDetector
from .exceptions import PortraitDiffError
from .face_crop import apply_crop, compute_crop_rectangle, select_largest_face
from .image_io import list_images, load_image, save_image
from .types import BoundingBox, CropRectangle, RasterImage

logger = logging.getLogger(__name__)


@dataclass
class PortraitResult:
    """Outcome of processing one photo."""

    filename: str
    success: bool
    output_path: Optional[str] = None
    original_size: Optional[Tuple[int, int]] = None
    processed_size: Optional[Tuple[int, int]] = None
    face_box: Optional[BoundingBox] = None
    crop: Optional[CropRectangle] = None
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def face_detected(self) -> bool:
        return self.face_box is not None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        if not self.success:
            return {"filename": self.filename, "success": False, "error": self.error}

        def size(value):
            return {"width": value[0], "height": value[1]} if value else None

        return {
            "filename": self.filename,
            "output_path": self.output_path,
            "success": True,
            "original_size": size(self.original_size),
            "processed_size": size(self.processed_size),
            "face_detected": self.face_detected,
            "face_box": self.face_box.to_dict() if self.face_box else None,
            "crop": self.crop.to_dict() if self.crop else None,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class ProgressEvent:
    """Emitted after each successfully processed photo."""

    filename: str
    result: PortraitResult
    progress: float


# Type alias for progress callback function
ProgressCallback = Callable[[ProgressEvent], None]


def make_portrait(
    image: RasterImage,
    face_box: Optional[BoundingBox],
    config: CropConfig,
) -> Tuple[RasterImage, CropRectangle]:
    """Crop and resize one image to the configured portrait size."""
    rect = compute_crop_rectangle(
        image.width,
        image.height,
        config.target_width,
        config.target_height,
        face_box=face_box,
        head_top_margin=config.head_top_margin,
    )
    portrait = apply_crop(image, rect, config.target_width, config.target_height)
    return portrait, rect


class PortraitProcessor:
    """Turns a directory of photos into uniformly framed portraits."""

    def __init__(
        self,
        input_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        config: Optional[CropConfig] = None,
        detector: Optional[BaseFaceDetector] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        """Initialize the processor.

        Args:
            input_dir: Directory of source photos (uses config default if None)
            output_dir: Where portraits and JSON records are written
            config: Crop settings (uses config default if None)
            detector: Face detector; the configured backend is created lazily if None
            on_progress: Callback invoked after each processed photo
        """
        paths = get_paths_config()
        self.input_dir = Path(input_dir or paths.input_dir)
        self.output_dir = Path(output_dir or paths.processed_dir)
        self.config = config or get_crop_config()
        self._detector = detector
        self._detector_failed = False
        self._on_progress = on_progress
        self.results: List[PortraitResult] = []

    @property
    def detector(self) -> Optional[BaseFaceDetector]:
        """Face detector, or None when it could not be initialized."""
        if self._detector is None and not self._detector_failed:
            try:
                self._detector = FaceDetector()
            except (AttributeError, RuntimeError, ValueError, cv2.error) as e:
                logger.error(f"Face detector unavailable: {e}")
                logger.warning("Face detection will be disabled")
                self._detector_failed = True
        return self._detector

    def ensure_directories(self) -> None:
        """Create the input and output directories if missing."""
        for directory in (self.input_dir, self.output_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def detect_face(self, image: RasterImage) -> Optional[BoundingBox]:
        """Return the largest detected face, or None.

        Detector failures are logged and treated as "no face".
        """
        detector = self.detector
        if detector is None:
            return None
        try:
            return select_largest_face(detector.detect(image))
        except (RuntimeError, ValueError, cv2.error) as e:
            logger.warning(f"Skipping face detection: {e}")
            return None

    def process_image(self, path: Path) -> PortraitResult:
        """Process a single photo and write its portrait and JSON record.

        Raises:
            PortraitDiffError: If the photo cannot be loaded or cropped
            OSError: If the outputs cannot be written
        """
        path = Path(path)
        logger.info(f"Processing: {path.name}")

        image = load_image(path)
        logger.debug(f"Original size: {image.width}x{image.height}")

        face_box = self.detect_face(image)
        if face_box:
            logger.info(
                f"Face detected: x={face_box.x}, y={face_box.y}, "
                f"w={face_box.width}, h={face_box.height}"
            )
        else:
            logger.warning(f"No face detected in {path.name}")

        portrait, rect = make_portrait(image, face_box, self.config)

        output_path = self.output_dir / f"{path.stem}{self.config.output_suffix}"
        save_image(portrait, output_path, jpeg_quality=self.config.jpeg_quality)

        result = PortraitResult(
            filename=path.name,
            success=True,
            output_path=str(output_path),
            original_size=image.size,
            processed_size=portrait.size,
            face_box=face_box,
            crop=rect,
        )
        self.save_result(path.stem, result)

        logger.info(f"Saved: {output_path}")
        return result

    def save_result(self, stem: str, result: PortraitResult) -> Path:
        """Write the JSON record for a processed photo."""
        path = self.output_dir / f"{stem}{self.config.result_suffix}"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2)
        return path

    def process_all(self) -> List[PortraitResult]:
        """Process every photo in the input directory, in name order."""
        self.ensure_directories()
        files = list_images(self.input_dir, PORTRAIT_EXTENSIONS)
        logger.info(f"Found {len(files)} image(s) in {self.input_dir}")

        results: List[PortraitResult] = []
        processed = 0

        for path in files:
            try:
                result = self.process_image(path)
            except (PortraitDiffError, OSError) as e:
                logger.error(f"Error processing {path.name}: {e}")
                results.append(PortraitResult(filename=path.name, success=False, error=str(e)))
                continue

            results.append(result)
            processed += 1
            if self._on_progress:
                self._on_progress(ProgressEvent(
                    filename=path.name,
                    result=result,
                    progress=processed / len(files),
                ))

        logger.info(f"Done: {processed}/{len(files)} image(s)")
        self.results = results
        return results

    def get_processing_status(self) -> dict:
        """Return detector availability, result counts and settings."""
        return {
            "detector_available": self._detector is not None,
            "results_count": len(self.results),
            "successful": sum(1 for r in self.results if r.success),
            "faces_detected": sum(1 for r in self.results if r.face_detected),
            "config": {
                "input_dir": str(self.input_dir),
                "output_dir": str(self.output_dir),
                "target_width": self.config.target_width,
                "target_height": self.config.target_height,
                "head_top_margin": self.config.head_top_margin,
            },
        }
