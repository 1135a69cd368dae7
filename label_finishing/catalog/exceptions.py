class UnknownLabelError(Exception):
    """Raised when no label size is configured for a bottle style and side."""
