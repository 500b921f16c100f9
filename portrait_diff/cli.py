"""CLI entry point for portrait-diff.

Usage:
    portrait-diff compare IMAGE_A IMAGE_B [--diff PATH] [--sample-size N]
    portrait-diff compare-dirs [--original DIR] [--target DIR] [--output DIR]
    portrait-diff portraits [--input DIR] [--output DIR] [--width W] [--height H]
                            [--margin M] [--backend NAME]

Global options: --config PATH, --debug
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from . import __version__
from .constants import get_config

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def cmd_compare(args) -> int:
    """Compare two image files."""
    import cv2

    from .exceptions import PortraitDiffError
    from .image_io import load_image, save_image
    from .similarity import SimilarityEngine

    try:
        engine = SimilarityEngine(sample_size=args.sample_size)
        image_a = load_image(args.image_a)
        image_b = load_image(args.image_b)
        result = engine.compare(image_a, image_b)
    except PortraitDiffError as e:
        logger.error(f"Comparison failed: {e}")
        return 1

    logger.info(f"Similarity: {result.score:.2f}%")
    if args.diff:
        try:
            save_image(result.diff_image, args.diff)
        except (OSError, cv2.error) as e:
            logger.error(f"Could not write diff image {args.diff}: {e}")
            return 1
        logger.info(f"Saved diff image: {args.diff}")
    return 0


def cmd_compare_dirs(args) -> int:
    """Compare every same-named image pair across two directories."""
    from .comparison import ImageComparator
    from .exceptions import PortraitDiffError

    try:
        comparator = ImageComparator(
            original_dir=args.original,
            target_dir=args.target,
            output_dir=args.output,
        )
    except PortraitDiffError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    comparator.run()
    return 0


def cmd_portraits(args) -> int:
    """Crop a directory of photos into face-anchored portraits."""
    from .detection import FaceDetector
    from .portrait import PortraitProcessor

    config = get_config().crop
    overrides = {
        "target_width": args.width,
        "target_height": args.height,
        "head_top_margin": args.margin,
    }
    config = replace(config, **{k: v for k, v in overrides.items() if v is not None})

    detector = None
    if args.backend:
        try:
            detector = FaceDetector(backend=args.backend)
        except ValueError as e:
            logger.error(str(e))
            return 1

    def report(event):
        logger.info(f"Progress: {round(event.progress * 100)}% - {event.filename} done")

    processor = PortraitProcessor(
        input_dir=args.input,
        output_dir=args.output,
        config=config,
        detector=detector,
        on_progress=report,
    )
    results = processor.process_all()

    successful = [r for r in results if r.success]
    with_faces = [r for r in successful if r.face_detected]
    logger.info(f"Succeeded: {len(successful)}/{len(results)}")
    logger.info(f"Faces detected: {len(with_faces)}/{len(successful)}")
    logger.info(f"Portraits saved to {processor.output_dir}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="portrait-diff",
        description="Image similarity comparison and face-anchored portrait cropping",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Compare command
    compare_parser = subparsers.add_parser("compare", help="Compare two images")
    compare_parser.add_argument("image_a", type=Path, help="First image")
    compare_parser.add_argument("image_b", type=Path, help="Second image")
    compare_parser.add_argument("--diff", type=Path, help="Write the diff image here")
    compare_parser.add_argument(
        "--sample-size",
        type=int,
        default=None,
        help="Side of the square sampling grid",
    )

    # Compare-dirs command
    dirs_parser = subparsers.add_parser(
        "compare-dirs", help="Compare same-named images across two directories"
    )
    dirs_parser.add_argument("--original", type=Path, help="Original images directory")
    dirs_parser.add_argument("--target", type=Path, help="Target images directory")
    dirs_parser.add_argument("--output", type=Path, help="Output directory")

    # Portraits command
    portraits_parser = subparsers.add_parser(
        "portraits", help="Crop photos into face-anchored portraits"
    )
    portraits_parser.add_argument("--input", type=Path, help="Input photos directory")
    portraits_parser.add_argument("--output", type=Path, help="Output directory")
    portraits_parser.add_argument("--width", type=int, help="Target width")
    portraits_parser.add_argument("--height", type=int, help="Target height")
    portraits_parser.add_argument("--margin", type=int, help="Head top margin (px)")
    portraits_parser.add_argument("--backend", type=str, help="Face detection backend")

    return parser


COMMANDS = {
    "compare": cmd_compare,
    "compare-dirs": cmd_compare_dirs,
    "portraits": cmd_portraits,
}


def main(argv=None) -> int:
    """Main entry point for the portrait-diff CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.config:
        if not args.config.exists():
            logger.error(f"Config file not found: {args.config}")
            return 1
        get_config().reload(args.config)

    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
