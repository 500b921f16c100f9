"""Error taxonomy for the comparison and cropping core."""


class PortraitDiffError(Exception):
    """Base exception for portrait-diff errors."""
    pass


class InvalidImage(PortraitDiffError):
    """Raised when an image has zero width or height."""
    pass


class InvalidConfiguration(PortraitDiffError):
    """Raised for non-positive sampling grids or target dimensions."""
    pass


class InvalidCropRectangle(PortraitDiffError):
    """Raised when a crop rectangle does not lie within the source image."""
    pass


class ImageLoadError(PortraitDiffError):
    """Raised when an image file cannot be read or decoded."""
    pass
