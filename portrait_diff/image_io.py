"""Image file I/O for the batch workflows.

OpenCV works in BGR; everything handed to the core is converted to RGB
RasterImage values here and back to BGR on write.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

import cv2
import numpy as np

from .exceptions import ImageLoadError
from .types import RasterImage

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_gif(path: Path) -> Optional[np.ndarray]:
    """Read the first frame of a GIF (cv2.imread does not decode GIF)."""
    capture = cv2.VideoCapture(str(path))
    try:
        ok, frame = capture.read()
    finally:
        capture.release()
    return frame if ok else None


def load_image(path: PathLike) -> RasterImage:
    """Decode an image file into an RGB RasterImage.

    Args:
        path: JPEG, PNG, BMP or GIF file

    Returns:
        Decoded image (alpha dropped)

    Raises:
        ImageLoadError: If the file is missing or cannot be decoded
    """
    path = Path(path)
    if not path.is_file():
        raise ImageLoadError(f"Image not found: {path}")

    # imdecode handles non-ASCII paths that imread can choke on
    data = np.fromfile(str(path), dtype=np.uint8)
    bgr = cv2.imdecode(data, cv2.IMREAD_COLOR) if data.size else None
    if bgr is None and path.suffix.lower() == ".gif":
        bgr = _read_gif(path)
    if bgr is None:
        raise ImageLoadError(f"Could not decode image: {path}")

    return RasterImage(cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB))


def save_image(image: RasterImage, path: PathLike, jpeg_quality: Optional[int] = None) -> Path:
    """Encode an image to disk, format chosen by file extension.

    Args:
        image: Image to write
        path: Destination path
        jpeg_quality: JPEG quality (1-100), only used for .jpg/.jpeg

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    params: List[int] = []
    if jpeg_quality is not None and path.suffix.lower() in (".jpg", ".jpeg"):
        params = [int(cv2.IMWRITE_JPEG_QUALITY), max(1, min(100, int(jpeg_quality)))]

    bgr = cv2.cvtColor(np.ascontiguousarray(image.pixels), cv2.COLOR_RGB2BGR)
    ok, encoded = cv2.imencode(path.suffix.lower(), bgr, params)
    if not ok:
        raise OSError(f"Failed to encode image: {path}")
    encoded.tofile(str(path))
    return path


def list_images(directory: PathLike, extensions: Iterable[str]) -> List[Path]:
    """List image files in a directory, sorted by name.

    Hidden files are ignored. A missing directory yields an empty list.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []
    allowed = {ext.lower() for ext in extensions}
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and not p.name.startswith(".") and p.suffix.lower() in allowed
    )


def image_metadata(path: PathLike, image: RasterImage) -> dict:
    """Return size and file metadata for a loaded image."""
    stat = Path(path).stat()
    return {
        "width": image.width,
        "height": image.height,
        "size": stat.st_size,
        "last_modified": datetime.fromtimestamp(stat.st_mtime).isoformat(),
    }
