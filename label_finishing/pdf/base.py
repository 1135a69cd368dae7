from abc import ABC, abstractmethod

from label_finishing.pdf.models import PageSize


class BasePageSizeReader(ABC):
    """Contract for all PDF page-box reading adapters."""

    @abstractmethod
    def read(self, pdf_bytes: bytes) -> PageSize:
        """Read the first page's size and the document's page count.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PageSize of the first page, in PDF points.

        Raises:
            EmptyBufferError: if ``pdf_bytes`` is empty.
            PdfReadError: if the document cannot be parsed or has no pages.
        """
