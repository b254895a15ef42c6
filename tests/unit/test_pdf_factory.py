from unittest.mock import patch

import pytest

from certcard.pdf.factory import PdfReaderFactory
from certcard.pdf.pdfplumber_adapter import PdfPlumberReader
from certcard.pdf.pymupdf_adapter import PyMuPdfReader


def _make_settings(pdf_engine: str, viewport_scale: float = 1.5):  # type: ignore[no-untyped-def]
    """Create a minimal Settings-like object with only the reader options."""
    with patch("certcard.config.settings.Settings") as mock_cls:
        settings = mock_cls.return_value
        settings.pdf_engine = pdf_engine
        settings.image_viewport_scale = viewport_scale
        return settings


class TestPdfReaderFactory:
    def test_creates_pdfplumber_reader(self) -> None:
        reader = PdfReaderFactory.create(_make_settings("pdfplumber"))
        assert isinstance(reader, PdfPlumberReader)

    def test_creates_pymupdf_reader(self) -> None:
        reader = PdfReaderFactory.create(_make_settings("pymupdf"))
        assert isinstance(reader, PyMuPdfReader)

    def test_is_case_insensitive(self) -> None:
        reader = PdfReaderFactory.create(_make_settings("PyMuPDF"))
        assert isinstance(reader, PyMuPdfReader)

    def test_passes_viewport_scale_to_pdfplumber(self) -> None:
        reader = PdfReaderFactory.create(_make_settings("pdfplumber", viewport_scale=2.0))
        assert isinstance(reader, PdfPlumberReader)
        assert reader._viewport_scale == 2.0

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            PdfReaderFactory.create(_make_settings("unknown"))
