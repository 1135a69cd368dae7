import pymupdf

from label_finishing.imaging.exceptions import EmptyBufferError
from label_finishing.pdf.base import BasePageSizeReader
from label_finishing.pdf.exceptions import PdfReadError
from label_finishing.pdf.models import PageSize


class PyMuPdfPageSizeReader(BasePageSizeReader):
    """Reads the first page box using PyMuPDF."""

    def read(self, pdf_bytes: bytes) -> PageSize:
        if not pdf_bytes:
            raise EmptyBufferError("PDF buffer is empty")
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.page_count < 1:
                    raise PdfReadError("PDF has no pages")
                rect = doc[0].rect
                return PageSize(
                    width_pt=float(rect.width),
                    height_pt=float(rect.height),
                    page_count=doc.page_count,
                )
        except PdfReadError:
            raise
        except Exception as exc:
            raise PdfReadError(f"pymupdf page read failed: {exc}") from exc
