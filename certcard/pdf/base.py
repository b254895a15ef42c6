from abc import ABC, abstractmethod

from certcard.pdf.models import RawPage


class BasePdfReader(ABC):
    """Contract for all PDF reader adapters."""

    @abstractmethod
    def read(self, pdf_bytes: bytes) -> list[RawPage]:
        """Read positioned text runs and embedded images from every page.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            One RawPage per page, in document order.

        Raises:
            PdfReadError: if the document cannot be read for any reason.
        """

    @abstractmethod
    def read_page(self, pdf_bytes: bytes, page_number: int) -> RawPage:
        """Read a single page (1-based).

        Raises:
            PdfReadError: if the document cannot be read or the page is missing.
        """
