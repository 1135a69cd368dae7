import io

import pdfplumber

from label_finishing.imaging.exceptions import EmptyBufferError
from label_finishing.pdf.base import BasePageSizeReader
from label_finishing.pdf.exceptions import PdfReadError
from label_finishing.pdf.models import PageSize


class PdfPlumberPageSizeReader(BasePageSizeReader):
    """Reads the first page box using pdfplumber."""

    def read(self, pdf_bytes: bytes) -> PageSize:
        if not pdf_bytes:
            raise EmptyBufferError("PDF buffer is empty")
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                if not pdf.pages:
                    raise PdfReadError("PDF has no pages")
                first = pdf.pages[0]
                return PageSize(
                    width_pt=float(first.width),
                    height_pt=float(first.height),
                    page_count=len(pdf.pages),
                )
        except PdfReadError:
            raise
        except Exception as exc:
            raise PdfReadError(f"pdfplumber page read failed: {exc}") from exc
