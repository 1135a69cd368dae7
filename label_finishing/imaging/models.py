import base64
import binascii
import re
from dataclasses import dataclass
from typing import Literal

from label_finishing.imaging.exceptions import EmptyBufferError

Orientation = Literal["normal", "rotated", "unknown"]

_DATA_URL_PATTERN = re.compile(r"^data:(.*?);base64,(.*)$", re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class ImageBuffer:
    """Encoded image bytes with their declared MIME type."""

    data: bytes
    mime_type: str = "image/png"

    def __len__(self) -> int:
        return len(self.data)

    @classmethod
    def from_data_url(cls, value: str) -> "ImageBuffer":
        """Decode a ``data:<mime>;base64,<payload>`` URL or a bare base64 string.

        Raises:
            EmptyBufferError: if the payload decodes to zero bytes.
            ValueError: if the payload is not valid base64.
        """
        text = value.strip()
        mime_type = "image/png"
        payload = text
        match = _DATA_URL_PATTERN.match(text)
        if match:
            declared = match.group(1).lower()
            mime_type = declared if "/" in declared else "image/png"
            payload = match.group(2)
        try:
            data = base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"Image payload is not valid base64: {exc}") from exc
        if not data:
            raise EmptyBufferError("Decoded image buffer is empty")
        return cls(data=data, mime_type=mime_type)

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


@dataclass(frozen=True)
class RasterMetadata:
    """Pixel dimensions of a decoded image and its density hint, if any."""

    width: int
    height: int
    dpi: float | None = None

    @property
    def ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class PhysicalSize:
    """Target label area in millimetres.

    ``width_mm``/``height_mm`` are always the nominal label size; the
    including-bleed size is a separate value obtained from ``with_bleed()``.
    """

    width_mm: float
    height_mm: float
    bleed_per_side_mm: float = 2.0

    def __post_init__(self) -> None:
        if self.width_mm <= 0 or self.height_mm <= 0:
            raise ValueError(
                f"Label size must be positive, got {self.width_mm}x{self.height_mm}mm"
            )
        if self.bleed_per_side_mm < 0:
            raise ValueError(f"Bleed must not be negative, got {self.bleed_per_side_mm}mm")

    @property
    def ratio(self) -> float:
        return self.width_mm / self.height_mm

    @property
    def nominal(self) -> "PhysicalSize":
        return self

    def with_bleed(self) -> "PhysicalSize":
        """Return the size including bleed on both sides of each axis."""
        total = self.bleed_per_side_mm * 2
        return PhysicalSize(
            width_mm=self.width_mm + total,
            height_mm=self.height_mm + total,
            bleed_per_side_mm=0.0,
        )

    def rotated(self) -> "PhysicalSize":
        return PhysicalSize(
            width_mm=self.height_mm,
            height_mm=self.width_mm,
            bleed_per_side_mm=self.bleed_per_side_mm,
        )


@dataclass(frozen=True)
class TrimResult:
    """Output of the border trimmer."""

    buffer: ImageBuffer
    original: RasterMetadata
    cropped: RasterMetadata

    @property
    def removed_width(self) -> int:
        return self.original.width - self.cropped.width

    @property
    def removed_height(self) -> int:
        return self.original.height - self.cropped.height


@dataclass(frozen=True)
class DimensionVerdict:
    """Accept/reject decision of a dimension policy plus its diagnostic metrics."""

    acceptable: bool
    pixel_ratio: float
    target_ratio: float
    ratio_diff: float
    orientation: Orientation
    policy: str
    width_diff_mm: float | None = None
    height_diff_mm: float | None = None
    measured_width_mm: float | None = None
    measured_height_mm: float | None = None


@dataclass(frozen=True)
class ComposedLabel:
    """Final label raster sized exactly to the physical target."""

    buffer: ImageBuffer
    width_px: int
    height_px: int
    dpi: int
    background_hex: str


@dataclass(frozen=True)
class DebugCapture:
    """A single intermediate image recorded during a debug run."""

    label: str
    buffer: ImageBuffer

