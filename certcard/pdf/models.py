import base64
from dataclasses import dataclass, field

Transform = tuple[float, float, float, float, float, float]


@dataclass(frozen=True)
class GlyphRun:
    """A positioned run of text as emitted by a PDF reader.

    ``transform`` is the ``(a, b, c, d, e, f)`` text matrix of the run, with
    ``(e, f)`` the origin in page space (bottom-left origin, unscaled).
    """

    text: str
    transform: Transform
    height: float
    has_eol: bool = False


@dataclass(frozen=True)
class EmbeddedImage:
    """A raster image embedded in a page, encoded as ``ext`` bytes."""

    data: bytes
    ext: str = "png"
    width: int = 0
    height: int = 0

    @property
    def href(self) -> str:
        """Data URI reference for the image, as used in rendered page markup."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:image/{self.ext};base64,{encoded}"


@dataclass(frozen=True)
class RawPage:
    """Reader output for a single page (1-based ``number``)."""

    number: int
    width: float
    height: float
    runs: list[GlyphRun] = field(default_factory=list)
    images: list[EmbeddedImage] = field(default_factory=list)
