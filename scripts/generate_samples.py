#!/usr/bin/env python3
"""Generate sample images for trying out the comparison and portrait workflows.

Writes:
- <original_dir>/sample.png   400x300 uniform (100, 150, 200)
- <target_dir>/sample.png     400x300 uniform (120, 170, 220), scores 92.16%
- <input_dir>/person001.png   600x800 seated-person mock-up with a face disc
                              and a name board

Directories default to the ``paths`` section of config/config.yaml.

Usage:
    python scripts/generate_samples.py [--config PATH]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from portrait_diff.constants import PathsConfig, get_config  # noqa: E402
from portrait_diff.image_io import save_image  # noqa: E402
from portrait_diff.types import RasterImage  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Colors (RGB)
ORIGINAL_COLOR = (100, 150, 200)
TARGET_COLOR = (120, 170, 220)
BACKGROUND_COLOR = (240, 240, 240)
SKIN_COLOR = (255, 220, 177)
OUTLINE_COLOR = (0, 0, 0)
BOARD_COLOR = (255, 255, 255)


def create_comparison_samples(original_dir: Path, target_dir: Path) -> List[Path]:
    """Write the original/target pair used by the comparison workflow."""
    original = RasterImage.filled(400, 300, ORIGINAL_COLOR)
    target = RasterImage.filled(400, 300, TARGET_COLOR)

    paths = [
        save_image(original, Path(original_dir) / "sample.png"),
        save_image(target, Path(target_dir) / "sample.png"),
    ]
    logger.info(f"Comparison samples: {paths[0]}, {paths[1]}")
    return paths


def draw_person(width: int = 600, height: int = 800) -> RasterImage:
    """Draw a seated-person mock-up: face disc near the top, name board below."""
    canvas = np.empty((height, width, 3), dtype=np.uint8)
    canvas[:, :] = BACKGROUND_COLOR

    # Face
    cv2.circle(canvas, (300, 200), 50, SKIN_COLOR, thickness=-1)
    cv2.circle(canvas, (300, 200), 50, OUTLINE_COLOR, thickness=2)

    # Name board with a 4-digit number
    cv2.rectangle(canvas, (200, 600), (400, 700), BOARD_COLOR, thickness=-1)
    cv2.rectangle(canvas, (200, 600), (400, 700), OUTLINE_COLOR, thickness=2)
    cv2.putText(
        canvas, "1234", (265, 645), cv2.FONT_HERSHEY_SIMPLEX, 0.8, OUTLINE_COLOR, 2
    )

    return RasterImage(canvas)


def create_person_samples(input_dir: Path) -> List[Path]:
    """Write the seated-person photo used by the portrait workflow."""
    path = save_image(draw_person(), Path(input_dir) / "person001.png")
    logger.info(f"Person sample: {path}")
    return [path]


def generate_samples(paths: PathsConfig) -> List[Path]:
    """Generate every sample image into the configured directories."""
    logger.info("Generating sample images...")
    written = create_comparison_samples(paths.original_dir, paths.target_dir)
    written += create_person_samples(paths.input_dir)
    logger.info(f"Generated {len(written)} sample image(s)")
    return written


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate portrait-diff sample images")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file",
    )
    args = parser.parse_args(argv)

    config = get_config()
    if args.config:
        if not args.config.exists():
            logger.error(f"Config file not found: {args.config}")
            return 1
        config.reload(args.config)

    generate_samples(config.paths)
    return 0


if __name__ == "__main__":
    sys.exit(main())
