import io
from dataclasses import dataclass
from typing import Any

import pdfplumber

from certcard.logging.logger import Log
from certcard.pdf.base import BasePdfReader
from certcard.pdf.exceptions import PdfReadError
from certcard.pdf.models import EmbeddedImage, GlyphRun, RawPage

_BASELINE_TOLERANCE = 0.5


@dataclass(frozen=True)
class _Glyph:
    """One character placed in PDF user space."""

    text: str
    fontname: str
    size: float
    x: float
    y: float
    advance: float


@dataclass(frozen=True)
class _PageSpace:
    """Undoes the MediaBox shift and /Rotate pdfminer applies to positions."""

    x0: float
    y0: float
    x1: float
    y1: float
    rotation: int

    @classmethod
    def of(cls, page: Any) -> "_PageSpace":
        x0, y0, x1, y1 = (float(v) for v in page.page_obj.mediabox)
        return cls(x0, y0, x1, y1, int(page.page_obj.rotate) % 360)

    @property
    def width(self) -> float:
        return abs(self.x1 - self.x0)

    @property
    def height(self) -> float:
        return abs(self.y1 - self.y0)

    def to_user(self, x: float, y: float) -> tuple[float, float]:
        if self.rotation == 90:
            return self.x1 - y, x + self.y0
        if self.rotation == 180:
            return self.x1 - x, self.y1 - y
        if self.rotation == 270:
            return y + self.x0, self.y1 - x
        return x + self.x0, y + self.y0

    def glyph(self, char: dict[str, Any]) -> _Glyph:
        # The text matrix origin is the glyph origin; the bbox is axis-aligned
        # in the rotated space, so a quarter turn swaps its width and height.
        matrix = char["matrix"]
        x, y = self.to_user(float(matrix[4]), float(matrix[5]))
        quarter_turn = self.rotation in (90, 270)
        width, height = float(char["width"]), float(char["height"])
        return _Glyph(
            text=char.get("text", ""),
            fontname=char.get("fontname", ""),
            size=width if quarter_turn else height,
            x=x,
            y=y,
            advance=height if quarter_turn else width,
        )


class PdfPlumberReader(BasePdfReader):
    """Reads character runs and embedded images using pdfplumber.

    Consecutive characters sharing a baseline, font and size are joined into
    one run. A baseline change closes the current line with an EOL run.
    Positions are reported in PDF user space, whatever the page's MediaBox
    origin or rotation. Images are rasterised from the page area they cover
    at ``viewport_scale``.
    """

    def __init__(self, viewport_scale: float = 1.5) -> None:
        self._viewport_scale = viewport_scale

    def read(self, pdf_bytes: bytes) -> list[RawPage]:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return [self._read_page(page) for page in pdf.pages]
        except PdfReadError:
            raise
        except Exception as exc:
            raise PdfReadError(f"pdfplumber read failed: {exc}") from exc

    def read_page(self, pdf_bytes: bytes, page_number: int) -> RawPage:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                if not 1 <= page_number <= len(pdf.pages):
                    raise PdfReadError(
                        f"Page {page_number} out of range (document has {len(pdf.pages)})"
                    )
                return self._read_page(pdf.pages[page_number - 1])
        except PdfReadError:
            raise
        except Exception as exc:
            raise PdfReadError(f"pdfplumber read failed: {exc}") from exc

    def _read_page(self, page: Any) -> RawPage:
        space = _PageSpace.of(page)
        runs = self._runs([space.glyph(char) for char in page.chars])
        images = self._images(page)
        Log.debug(
            f"pdfplumber page {page.page_number}: {len(runs)} runs, {len(images)} images"
        )
        return RawPage(
            number=page.page_number,
            width=space.width,
            height=space.height,
            runs=runs,
            images=images,
        )

    def _runs(self, glyphs: list[_Glyph]) -> list[GlyphRun]:
        runs: list[GlyphRun] = []
        current: list[_Glyph] = []

        for glyph in glyphs:
            if current and not self._same_run(current[-1], glyph):
                runs.append(self._to_run(current))
                if abs(glyph.y - current[-1].y) > _BASELINE_TOLERANCE:
                    runs.append(self._eol_run(current[-1]))
                current = []
            current.append(glyph)

        if current:
            runs.append(self._to_run(current))
            runs.append(self._eol_run(current[-1]))
        return runs

    def _same_run(self, prev: _Glyph, glyph: _Glyph) -> bool:
        if prev.fontname != glyph.fontname or prev.size != glyph.size:
            return False
        if abs(prev.y - glyph.y) > _BASELINE_TOLERANCE:
            return False
        # A horizontal jump wider than the font size starts a new run.
        return glyph.x - (prev.x + prev.advance) <= glyph.size

    def _to_run(self, glyphs: list[_Glyph]) -> GlyphRun:
        first = glyphs[0]
        return GlyphRun(
            text="".join(g.text for g in glyphs),
            transform=(first.size, 0.0, 0.0, first.size, first.x, first.y),
            height=max(g.size for g in glyphs),
        )

    def _eol_run(self, glyph: _Glyph) -> GlyphRun:
        return GlyphRun(
            text="", transform=(0.0, 0.0, 0.0, 0.0, glyph.x, glyph.y), height=0.0, has_eol=True
        )

    def _images(self, page: Any) -> list[EmbeddedImage]:
        images: list[EmbeddedImage] = []
        x0, top, x1, bottom = page.bbox
        for img in page.images:
            bbox = (
                max(float(img["x0"]), x0),
                max(float(img["top"]), top),
                min(float(img["x1"]), x1),
                min(float(img["bottom"]), bottom),
            )
            if bbox[2] <= bbox[0] or bbox[3] <= bbox[1]:
                continue
            rendered = page.crop(bbox).to_image(resolution=72 * self._viewport_scale)
            buf = io.BytesIO()
            rendered.original.save(buf, format="PNG")
            width, height = rendered.original.size
            images.append(
                EmbeddedImage(data=buf.getvalue(), ext="png", width=width, height=height)
            )
        return images
