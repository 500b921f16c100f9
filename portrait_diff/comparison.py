"""Directory-pair comparison workflow.

Images in an "original" and a "target" directory are paired by file stem.
Every pair is scored with the SimilarityEngine, its diff image written as
PNG and a JSON record saved next to it. A failing pair is recorded with
status "error" and the remaining pairs are still compared.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .constants import COMPARISON_EXTENSIONS, get_paths_config, get_similarity_config
from .exceptions import PortraitDiffError
from .image_io import image_metadata, list_images, load_image, save_image
from .similarity import SimilarityEngine
from .types import RasterImage

logger = logging.getLogger(__name__)


@dataclass
class LoadedImage:
    """An image loaded from disk with its file metadata."""

    key: str
    path: Path
    image: RasterImage
    metadata: dict


@dataclass
class ComparisonRecord:
    """Outcome of comparing one original/target pair."""

    key: str
    original: dict
    target: dict
    status: str = "compared"
    similarity: float = 0.0
    differences: Dict[str, int] = field(default_factory=dict)
    diff_image_path: Optional[str] = None
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def succeeded(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "key": self.key,
            "timestamp": self.timestamp.isoformat(),
            "original": self.original,
            "target": self.target,
            "differences": self.differences,
            "similarity": self.similarity,
            "status": self.status,
        }
        if self.diff_image_path is not None:
            data["diff_image_path"] = self.diff_image_path
        if self.error is not None:
            data["error"] = self.error
        return data


# Type alias for per-pair callback
ComparisonCallback = Callable[[ComparisonRecord], None]


class ImageComparator:
    """Compares every same-named image pair across two directories."""

    def __init__(
        self,
        original_dir: Optional[Path] = None,
        target_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        engine: Optional[SimilarityEngine] = None,
        on_compared: Optional[ComparisonCallback] = None,
    ):
        """Initialize the comparator.

        Args:
            original_dir: Directory of reference images (uses config default if None)
            target_dir: Directory of images to compare against the originals
            output_dir: Where diff images and JSON records are written
            engine: Similarity engine (a default one is created if None)
            on_compared: Callback invoked for every pair, in key order
        """
        paths = get_paths_config()
        self.original_dir = Path(original_dir or paths.original_dir)
        self.target_dir = Path(target_dir or paths.target_dir)
        self.output_dir = Path(output_dir or paths.output_dir)
        self.engine = engine or SimilarityEngine()
        self.config = get_similarity_config()
        self._on_compared = on_compared

        self.original_images: Dict[str, LoadedImage] = {}
        self.target_images: Dict[str, LoadedImage] = {}
        self.results: Dict[str, ComparisonRecord] = {}

    def ensure_directories(self) -> None:
        """Create the input and output directories if missing."""
        for directory in (self.original_dir, self.target_dir, self.output_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def load_images(self) -> None:
        """(Re)load both directories, skipping files that fail to decode."""
        self.original_images = self._load_directory(self.original_dir, "original")
        self.target_images = self._load_directory(self.target_dir, "target")

    def _load_directory(self, directory: Path, kind: str) -> Dict[str, LoadedImage]:
        loaded: Dict[str, LoadedImage] = {}
        for path in list_images(directory, COMPARISON_EXTENSIONS):
            try:
                image = load_image(path)
                loaded[path.stem] = LoadedImage(
                    key=path.stem,
                    path=path,
                    image=image,
                    metadata=image_metadata(path, image),
                )
                logger.info(f"Loaded {kind} image: {path.name}")
            except (PortraitDiffError, OSError) as e:
                logger.error(f"Error loading image {path.name}: {e}")
        return loaded

    def common_keys(self) -> List[str]:
        """Keys present in both directories, sorted."""
        return sorted(set(self.original_images) & set(self.target_images))

    def compare_pair(self, original: LoadedImage, target: LoadedImage) -> ComparisonRecord:
        """Compare one pair and write its diff image.

        Errors are captured on the returned record rather than raised.
        """
        record = ComparisonRecord(
            key=original.key,
            original=original.metadata,
            target=target.metadata,
        )

        try:
            record.differences = {
                "width_diff": target.metadata["width"] - original.metadata["width"],
                "height_diff": target.metadata["height"] - original.metadata["height"],
                "size_diff": target.metadata["size"] - original.metadata["size"],
            }

            result = self.engine.compare(original.image, target.image)
            record.similarity = result.score

            diff_path = self.output_dir / f"{original.key}{self.config.diff_suffix}"
            save_image(result.diff_image, diff_path)
            record.diff_image_path = str(diff_path)
            record.status = "success"

        except (PortraitDiffError, OSError) as e:
            logger.error(f"Error comparing {original.key}: {e}")
            record.status = "error"
            record.error = str(e)

        return record

    def compare_all(self) -> List[ComparisonRecord]:
        """Compare every common pair, save records and log a summary."""
        logger.info("Comparing images...")
        self.output_dir.mkdir(parents=True, exist_ok=True)

        records = []
        for key in self.common_keys():
            record = self.compare_pair(self.original_images[key], self.target_images[key])
            self.results[key] = record
            self.save_result(record)
            records.append(record)

            if self._on_compared:
                self._on_compared(record)

        self.log_summary()
        return records

    def run(self) -> List[ComparisonRecord]:
        """Create directories, load both sides and compare every pair."""
        self.ensure_directories()
        self.load_images()
        return self.compare_all()

    def save_result(self, record: ComparisonRecord) -> Path:
        """Write the JSON record for a pair."""
        path = self.output_dir / f"{record.key}{self.config.result_suffix}"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(record.to_dict(), f, indent=2)
        return path

    def summary(self) -> dict:
        """Counts and average similarity over the current results."""
        successful = [r for r in self.results.values() if r.succeeded]
        average = (
            sum(r.similarity for r in successful) / len(successful) if successful else None
        )
        return {
            "total": len(self.results),
            "successful": len(successful),
            "failed": len(self.results) - len(successful),
            "average_similarity": round(average, 2) if average is not None else None,
        }

    def log_summary(self) -> None:
        """Log the comparison summary and per-pair results."""
        stats = self.summary()
        logger.info(f"Total comparisons: {stats['total']}")

        if stats["total"] == 0:
            logger.info("No matching pairs found")
            return

        logger.info(f"Successful comparisons: {stats['successful']}")
        if stats["average_similarity"] is not None:
            logger.info(f"Average similarity: {stats['average_similarity']:.2f}%")

        for key, record in self.results.items():
            if record.succeeded:
                logger.info(f"  {key}: {record.similarity}% similarity")
            else:
                logger.info(f"  {key}: error - {record.error}")

    def get_status(self) -> dict:
        """Return loaded image and result counts."""
        return {
            "original_images": len(self.original_images),
            "target_images": len(self.target_images),
            "comparisons": len(self.results),
            "last_update": datetime.now().isoformat(),
        }
