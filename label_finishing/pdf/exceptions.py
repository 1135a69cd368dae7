class PdfReadError(Exception):
    """Raised when a PDF cannot be opened or its page box cannot be read."""


class PdfExportError(Exception):
    """Raised when a label image cannot be written into a PDF page."""
