import io
import math

import numpy as np
from PIL import Image

from certcard.imaging.exceptions import ImageDecodeError

RGBA = tuple[int, int, int, int]


class PixelBuffer:
    """A 2-D grid of RGBA samples backed by an ``H x W x 4`` uint8 array."""

    def __init__(self, data: np.ndarray) -> None:
        if data.ndim != 3 or data.shape[2] != 4:
            raise ValueError(f"Expected an H x W x 4 array, got shape {data.shape}")
        if data.dtype != np.uint8:
            raise ValueError(f"Expected uint8 samples, got {data.dtype}")
        self.data = data

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    def get(self, x: int, y: int) -> RGBA:
        r, g, b, a = (int(v) for v in self.data[y, x])
        return (r, g, b, a)

    def set(self, x: int, y: int, rgba: RGBA) -> None:
        self.data[y, x] = rgba

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.data.copy())

    @property
    def red(self) -> np.ndarray:
        return self.data[:, :, 0]

    @property
    def rgb(self) -> np.ndarray:
        return self.data[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        return self.data[:, :, 3]

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        return cls(np.array(image.convert("RGBA"), dtype=np.uint8))

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.data)

    def to_png(self) -> bytes:
        buf = io.BytesIO()
        self.to_image().save(buf, format="PNG")
        return buf.getvalue()


def decode_image(image_bytes: bytes) -> PixelBuffer:
    """Decode encoded image bytes (PNG, JPEG, ...) into an RGBA buffer.

    Raises:
        ImageDecodeError: if the bytes are empty or not a decodable image.
    """
    if not image_bytes:
        raise ImageDecodeError("Missing image bytes")
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img.load()
            return PixelBuffer.from_image(img)
    except Exception as exc:
        raise ImageDecodeError(f"Unable to decode image bytes: {exc}") from exc


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def scaled_size(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Proportional size whose larger side is ``max_dimension``, if it exceeds it."""
    if width <= max_dimension and height <= max_dimension:
        return width, height
    if width > height:
        return max_dimension, max(1, _round_half_up(height * max_dimension / width))
    return max(1, _round_half_up(width * max_dimension / height)), max_dimension


def downscale(buffer: PixelBuffer, max_dimension: int = 1024) -> PixelBuffer:
    """Shrink the buffer so neither side exceeds ``max_dimension``. Not reversible."""
    size = scaled_size(buffer.width, buffer.height, max_dimension)
    if size == (buffer.width, buffer.height):
        return buffer
    resized = buffer.to_image().resize(size, Image.Resampling.LANCZOS)
    return PixelBuffer.from_image(resized)
