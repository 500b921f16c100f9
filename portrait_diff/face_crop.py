"""Face-anchored portrait cropping.

The crop is sized to the target aspect ratio, centered horizontally on the
face and anchored a fixed margin above the top of the head, so a batch of
photos with faces in different places comes out with the same framing.
"""

import logging
import math
from functools import reduce
from typing import Iterable, Optional

import cv2
import numpy as np

from .exceptions import InvalidConfiguration, InvalidCropRectangle, InvalidImage
from .types import BoundingBox, CropRectangle, RasterImage

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _require_positive_target(target_width: int, target_height: int) -> None:
    if target_width <= 0 or target_height <= 0:
        raise InvalidConfiguration(
            f"Target size must be positive, got {target_width}x{target_height}"
        )


def select_largest_face(boxes: Iterable[BoundingBox]) -> Optional[BoundingBox]:
    """Pick the candidate with the largest area.

    Ties go to the later box. Returns None when there are no candidates.
    """
    candidates = list(boxes)
    if not candidates:
        return None
    return reduce(lambda prev, cur: prev if prev.area > cur.area else cur, candidates)


def compute_crop_rectangle(
    source_width: int,
    source_height: int,
    target_width: int,
    target_height: int,
    face_box: Optional[BoundingBox] = None,
    head_top_margin: int = 50,
) -> CropRectangle:
    """Compute the crop rectangle for a portrait.

    Args:
        source_width: Source image width
        source_height: Source image height
        target_width: Output width
        target_height: Output height
        face_box: Detected face, or None when no face was found
        head_top_margin: Headroom kept above the face top (px)

    Returns:
        CropRectangle inside the source bounds. Without a face this is the
        whole source image and the aspect ratio is left to the resize.

    Raises:
        InvalidImage: If the source has zero area
        InvalidConfiguration: If the target size or margin is invalid
    """
    if source_width <= 0 or source_height <= 0:
        raise InvalidImage(f"Source has zero area: {source_width}x{source_height}")
    _require_positive_target(target_width, target_height)
    if head_top_margin < 0:
        raise InvalidConfiguration(f"Head top margin must be >= 0, got {head_top_margin}")

    if face_box is None:
        return CropRectangle(left=0, top=0, width=source_width, height=source_height)

    aspect_ratio = target_width / target_height
    crop_height = float(source_height)
    crop_width = crop_height * aspect_ratio

    if crop_width > source_width:
        crop_width = float(source_width)
        crop_height = crop_width / aspect_ratio

    face_center_x = face_box.x + face_box.width / 2
    crop_left = _clamp(face_center_x - crop_width / 2, 0, source_width - crop_width)

    top_y = max(0, face_box.y - head_top_margin)
    crop_top = _clamp(top_y, 0, source_height - crop_height)

    # Rounding can push the far edge one pixel past the source; pull it back
    width = min(max(1, _round_half_up(crop_width)), source_width)
    height = min(max(1, _round_half_up(crop_height)), source_height)
    left = min(_round_half_up(crop_left), source_width - width)
    top = min(_round_half_up(crop_top), source_height - height)

    rect = CropRectangle(left=left, top=top, width=width, height=height)
    logger.debug(
        f"Crop: x={rect.left}, y={rect.top}, w={rect.width}, h={rect.height}"
    )
    return rect


def apply_crop(
    source: RasterImage,
    rect: CropRectangle,
    target_width: int,
    target_height: int,
) -> RasterImage:
    """Extract ``rect`` and resize it to exactly the target size.

    Uses a cover fit anchored at the center: when the rectangle already has
    the target aspect ratio this is a pure scale, otherwise the excess is
    trimmed evenly from both sides before scaling.

    Raises:
        InvalidCropRectangle: If ``rect`` is empty or leaves the source
        InvalidConfiguration: If the target size is not positive
    """
    _require_positive_target(target_width, target_height)
    if not rect.fits_within(source.width, source.height):
        raise InvalidCropRectangle(
            f"Crop {rect.to_dict()} outside source {source.width}x{source.height}"
        )

    region = source.pixels[rect.top:rect.bottom, rect.left:rect.right]

    scale = max(target_width / rect.width, target_height / rect.height)
    cover_width = min(rect.width, max(1, _round_half_up(target_width / scale)))
    cover_height = min(rect.height, max(1, _round_half_up(target_height / scale)))
    offset_x = (rect.width - cover_width) // 2
    offset_y = (rect.height - cover_height) // 2
    region = region[offset_y:offset_y + cover_height, offset_x:offset_x + cover_width]

    if cover_width >= target_width and cover_height >= target_height:
        interpolation = cv2.INTER_AREA
    else:
        interpolation = cv2.INTER_CUBIC

    resized = cv2.resize(
        np.ascontiguousarray(region),
        (target_width, target_height),
        interpolation=interpolation,
    )
    return RasterImage(resized)
