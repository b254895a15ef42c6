class ImagingError(Exception):
    """Base exception for image processing errors."""


class ImageDecodeError(ImagingError):
    """Raised when image bytes cannot be decoded into a pixel buffer."""
