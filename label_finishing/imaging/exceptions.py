class ImagingError(Exception):
    """Base exception for all pixel-pipeline errors."""


class EmptyBufferError(ImagingError):
    """Raised when an image buffer has zero length after decoding its transport."""


class DecodeError(ImagingError):
    """Raised when bytes cannot be read as a raster image."""


class UnsupportedBackgroundFlattenError(ImagingError):
    """Raised when alpha flattening is requested onto a colour other than white."""


class ComposeError(ImagingError):
    """Raised when resizing or compositing onto the label canvas fails."""
