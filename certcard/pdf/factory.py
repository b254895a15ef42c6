from collections.abc import Callable

from certcard.config.settings import Settings
from certcard.pdf.base import BasePdfReader
from certcard.pdf.pdfplumber_adapter import PdfPlumberReader
from certcard.pdf.pymupdf_adapter import PyMuPdfReader


class PdfReaderFactory:
    """Creates the correct PDF reader based on settings."""

    ADAPTERS: dict[str, Callable[[Settings], BasePdfReader]] = {
        "pdfplumber": lambda s: PdfPlumberReader(viewport_scale=s.image_viewport_scale),
        "pymupdf": lambda s: PyMuPdfReader(),
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfReader:
        engine = settings.pdf_engine.lower()
        builder = cls.ADAPTERS.get(engine)
        if builder is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return builder(settings)
