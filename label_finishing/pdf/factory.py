from label_finishing.config.settings import Settings
from label_finishing.pdf.base import BasePageSizeReader
from label_finishing.pdf.pdfplumber_adapter import PdfPlumberPageSizeReader
from label_finishing.pdf.pymupdf_adapter import PyMuPdfPageSizeReader


class PageSizeReaderFactory:
    """Creates the page-size reader named by settings (or an explicit engine)."""

    ADAPTERS: dict[str, type[BasePageSizeReader]] = {
        "pdfplumber": PdfPlumberPageSizeReader,
        "pymupdf": PyMuPdfPageSizeReader,
    }

    @classmethod
    def create(cls, settings: Settings, engine: str | None = None) -> BasePageSizeReader:
        name = (engine or settings.pdf_engine).strip().lower()
        adapter_cls = cls.ADAPTERS.get(name)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{name}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
