"""Value types shared by the similarity engine and the face crop."""

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np


@dataclass(frozen=True, eq=False)
class RasterImage:
    """Immutable view of decoded RGB pixel data.

    Pixels are stored as an ``(height, width, 3)`` uint8 array in RGB order.
    The array is marked read-only so nothing downstream can modify it.
    """

    pixels: np.ndarray

    def __post_init__(self):
        arr = np.asarray(self.pixels)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(
                f"Expected (height, width, 3) RGB array, got shape {arr.shape}"
            )
        if arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255).astype(np.uint8)
        view = np.ascontiguousarray(arr).view()
        view.setflags(write=False)
        object.__setattr__(self, "pixels", view)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterImage":
        """Build from a grayscale, RGB or RGBA array (alpha is dropped).

        Args:
            array: ``(h, w)``, ``(h, w, 3)`` or ``(h, w, 4)`` array in RGB order

        Returns:
            RasterImage owning a copy of the pixel data
        """
        arr = np.asarray(array)
        if arr.ndim == 2:
            arr = np.repeat(arr[:, :, np.newaxis], 3, axis=2)
        elif arr.ndim == 3 and arr.shape[2] == 4:
            arr = arr[:, :, :3]
        elif arr.ndim == 3 and arr.shape[2] == 1:
            arr = np.repeat(arr, 3, axis=2)
        return cls(np.array(arr, copy=True))

    @classmethod
    def filled(cls, width: int, height: int, color: Tuple[int, int, int]) -> "RasterImage":
        """Create a uniformly colored image."""
        arr = np.empty((height, width, 3), dtype=np.uint8)
        arr[:, :] = color
        return cls(arr)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        """Return the (r, g, b) value at an in-bounds coordinate."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        r, g, b = self.pixels[y, x]
        return (int(r), int(g), int(b))


@dataclass(frozen=True)
class BoundingBox:
    """Detected face region in source-image pixel coordinates."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        if min(self.x, self.y, self.width, self.height) < 0:
            raise ValueError(f"Bounding box values must be non-negative: {self}")

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        """Return center point of bounding box."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class CropRectangle:
    """Axis-aligned crop region in source-image coordinates."""

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height if self.height else 0.0

    def fits_within(self, source_width: int, source_height: int) -> bool:
        """Check the rectangle is non-empty and inside the source bounds."""
        return (
            self.width > 0
            and self.height > 0
            and self.left >= 0
            and self.top >= 0
            and self.right <= source_width
            and self.bottom <= source_height
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "left": self.left,
            "top": self.top,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True, eq=False)
class SimilarityResult:
    """Similarity score in [0, 100] plus the amplified difference image."""

    score: float
    diff_image: RasterImage = field(repr=False)

    def to_dict(self) -> dict:
        return {
            "similarity": self.score,
            "diff_size": {"width": self.diff_image.width, "height": self.diff_image.height},
        }
