import re
from dataclasses import dataclass

import numpy as np

from certcard.imaging.pixels import PixelBuffer

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class BackgroundColor:
    """Reference colour the background is keyed against."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"Colour channel out of range: {channel}")

    @classmethod
    def from_hex(cls, value: str) -> "BackgroundColor":
        """Parse ``#rrggbb`` (leading ``#`` optional)."""
        match = _HEX_RE.match(value.strip())
        if match is None:
            raise ValueError(f"Invalid hex colour: {value!r}")
        packed = int(match.group(1), 16)
        return cls(r=(packed >> 16) & 255, g=(packed >> 8) & 255, b=packed & 255)

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


def sample_background(buffer: PixelBuffer) -> BackgroundColor:
    """Use the top-left pixel as the background colour."""
    r, g, b, _ = buffer.get(0, 0)
    return BackgroundColor(r=r, g=g, b=b)


def color_distance(buffer: PixelBuffer, color: BackgroundColor) -> np.ndarray:
    """Per-pixel Euclidean RGB distance to ``color`` (H x W float array)."""
    reference = np.array([color.r, color.g, color.b], dtype=np.float64)
    diff = buffer.rgb.astype(np.float64) - reference
    return np.sqrt(np.sum(diff * diff, axis=2))
