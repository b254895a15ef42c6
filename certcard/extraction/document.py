from certcard.extraction.fragments import classify_runs
from certcard.extraction.models import TextFragment
from certcard.pdf.base import BasePdfReader
from certcard.pdf.models import EmbeddedImage, RawPage


class DocumentReader:
    """Per-document view over a PDF reader; pages are read once and cached."""

    def __init__(self, reader: BasePdfReader, pdf_bytes: bytes) -> None:
        self._reader = reader
        self._pdf_bytes = pdf_bytes
        self._pages: list[RawPage] | None = None

    def pages(self) -> list[RawPage]:
        """Read all pages on first use.

        Raises:
            PdfReadError: if the underlying reader fails.
        """
        if self._pages is None:
            self._pages = self._reader.read(self._pdf_bytes)
        return self._pages

    @property
    def page_count(self) -> int:
        return len(self.pages())

    def page(self, page_number: int) -> RawPage | None:
        for page in self.pages():
            if page.number == page_number:
                return page
        return None

    def get_page_fragments(self, page_number: int) -> list[TextFragment]:
        page = self.page(page_number)
        return classify_runs(page.runs) if page is not None else []

    def get_page_embedded_images(self, page_number: int) -> list[EmbeddedImage]:
        page = self.page(page_number)
        return list(page.images) if page is not None else []
