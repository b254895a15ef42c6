from typing import Any

import pymupdf

from certcard.logging.logger import Log
from certcard.pdf.base import BasePdfReader
from certcard.pdf.exceptions import PdfReadError
from certcard.pdf.models import EmbeddedImage, GlyphRun, RawPage

_TEXT_BLOCK = 0


class PyMuPdfReader(BasePdfReader):
    """Reads text spans and embedded images using PyMuPDF."""

    def read(self, pdf_bytes: bytes) -> list[RawPage]:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return [self._read_page(doc, page) for page in doc]
        except PdfReadError:
            raise
        except Exception as exc:
            raise PdfReadError(f"pymupdf read failed: {exc}") from exc

    def read_page(self, pdf_bytes: bytes, page_number: int) -> RawPage:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if not 1 <= page_number <= doc.page_count:
                    raise PdfReadError(
                        f"Page {page_number} out of range (document has {doc.page_count})"
                    )
                return self._read_page(doc, doc[page_number - 1])
        except PdfReadError:
            raise
        except Exception as exc:
            raise PdfReadError(f"pymupdf read failed: {exc}") from exc

    def _read_page(self, doc: Any, page: Any) -> RawPage:
        runs = self._runs(page.get_text("dict"), self._user_space_origin(page))
        images = self._images(doc, page)
        Log.debug(
            f"pymupdf page {page.number + 1}: {len(runs)} runs, {len(images)} images"
        )
        return RawPage(
            number=page.number + 1,
            width=page.mediabox.width,
            height=page.mediabox.height,
            runs=runs,
            images=images,
        )

    def _user_space_origin(self, page: Any) -> tuple[float, float]:
        """PDF user-space point that text coordinates are measured from.

        PyMuPDF extracts text from the unrotated page, with the origin at the
        top-left of the visible area (MediaBox clipped by CropBox). ``cropbox``
        is reported with y measured down from the MediaBox top.
        """
        mediabox = page.mediabox
        cropbox = page.cropbox
        return max(mediabox.x0, cropbox.x0), mediabox.y1 - max(cropbox.y0, 0.0)

    def _runs(self, text_dict: dict[str, Any], origin: tuple[float, float]) -> list[GlyphRun]:
        """Flatten spans into runs; each line is closed by an empty EOL run."""
        left, top = origin
        runs: list[GlyphRun] = []
        for block in text_dict.get("blocks", []):
            if block.get("type") != _TEXT_BLOCK:
                continue
            for line in block.get("lines", []):
                spans = line.get("spans", [])
                for span in spans:
                    size = float(span.get("size", 0.0))
                    origin_x, origin_y = span.get("origin", (0.0, 0.0))
                    _, y0, _, y1 = span.get("bbox", (0.0, 0.0, 0.0, 0.0))
                    height = y1 - y0 if span.get("text") else 0.0
                    runs.append(
                        GlyphRun(
                            text=span.get("text", ""),
                            transform=(size, 0.0, 0.0, size, left + origin_x, top - origin_y),
                            height=height,
                        )
                    )
                if spans:
                    last_x, last_y = spans[-1].get("origin", (0.0, 0.0))
                    runs.append(
                        GlyphRun(
                            text="",
                            transform=(0.0, 0.0, 0.0, 0.0, left + last_x, top - last_y),
                            height=0.0,
                            has_eol=True,
                        )
                    )
        return runs

    def _images(self, doc: Any, page: Any) -> list[EmbeddedImage]:
        images: list[EmbeddedImage] = []
        for img_info in page.get_images(full=True):
            xref = img_info[0]
            pix = pymupdf.Pixmap(doc, xref)
            if pix.n - pix.alpha >= 4:
                pix = pymupdf.Pixmap(pymupdf.csRGB, pix)
            images.append(
                EmbeddedImage(
                    data=pix.tobytes("png"),
                    ext="png",
                    width=pix.width,
                    height=pix.height,
                )
            )
        return images
