from unittest.mock import patch

import pytest

from label_finishing.pdf.factory import PageSizeReaderFactory
from label_finishing.pdf.pdfplumber_adapter import PdfPlumberPageSizeReader
from label_finishing.pdf.pymupdf_adapter import PyMuPdfPageSizeReader


def _make_settings(pdf_engine: str):  # type: ignore[no-untyped-def]
    """Create a minimal Settings-like object with only pdf_engine."""
    with patch("label_finishing.config.settings.Settings") as mock_cls:
        settings = mock_cls.return_value
        settings.pdf_engine = pdf_engine
        return settings


class TestPageSizeReaderFactory:
    def test_creates_pymupdf_reader(self) -> None:
        settings = _make_settings("pymupdf")
        reader = PageSizeReaderFactory.create(settings)
        assert isinstance(reader, PyMuPdfPageSizeReader)

    def test_creates_pdfplumber_reader(self) -> None:
        settings = _make_settings("pdfplumber")
        reader = PageSizeReaderFactory.create(settings)
        assert isinstance(reader, PdfPlumberPageSizeReader)

    def test_is_case_insensitive(self) -> None:
        settings = _make_settings(" PdfPlumber ")
        reader = PageSizeReaderFactory.create(settings)
        assert isinstance(reader, PdfPlumberPageSizeReader)

    def test_explicit_engine_overrides_settings(self) -> None:
        settings = _make_settings("pymupdf")
        reader = PageSizeReaderFactory.create(settings, engine="pdfplumber")
        assert isinstance(reader, PdfPlumberPageSizeReader)

    def test_raises_for_unknown_engine(self) -> None:
        settings = _make_settings("unknown")
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            PageSizeReaderFactory.create(settings)
