from dataclasses import dataclass

from label_finishing.config.settings import Settings
from label_finishing.imaging.codec import read_metadata
from label_finishing.imaging.models import DimensionVerdict, ImageBuffer, PhysicalSize
from label_finishing.imaging.validator import AbsoluteSizePolicy
from label_finishing.logging.logger import Log
from label_finishing.pdf.base import BasePageSizeReader
from label_finishing.pdf.factory import PageSizeReaderFactory
from label_finishing.processor.exceptions import PageCountError


@dataclass(frozen=True)
class UploadValidation:
    """Outcome of checking a customer-supplied print file against a label."""

    verdict: DimensionVerdict
    target: PhysicalSize
    page_count: int = 1

    @property
    def acceptable(self) -> bool:
        return self.verdict.acceptable

    @property
    def expected(self) -> PhysicalSize:
        return self.target.with_bleed()

    def export_size(self) -> tuple[float, float]:
        """Page size including bleed in millimetres, swapped when the upload was rotated."""
        expected = self.expected
        if self.verdict.orientation == "rotated":
            return expected.height_mm, expected.width_mm
        return expected.width_mm, expected.height_mm


class UploadValidator:
    """Checks uploaded PDF or raster print files against a label's size plus bleed."""

    def __init__(
        self,
        page_reader: BasePageSizeReader,
        policy: AbsoluteSizePolicy,
        dpi: int,
    ) -> None:
        self._page_reader = page_reader
        self._policy = policy
        self._dpi = dpi

    def validate_pdf(self, pdf_bytes: bytes, target: PhysicalSize) -> UploadValidation:
        """Validate the first page box of a single-page PDF.

        Raises:
            EmptyBufferError: if ``pdf_bytes`` is empty.
            PdfReadError: if the PDF cannot be read.
            PageCountError: if the document does not have exactly one page.
        """
        page = self._page_reader.read(pdf_bytes)
        if page.page_count != 1:
            raise PageCountError(f"PDF must have exactly one page, found {page.page_count}")
        verdict = self._policy.evaluate(page.width_mm, page.height_mm, target)
        self._log(verdict, target, "PDF")
        return UploadValidation(verdict=verdict, target=target, page_count=page.page_count)

    def validate_raster(self, buffer: ImageBuffer, target: PhysicalSize) -> UploadValidation:
        """Validate an image, using its embedded DPI when present.

        Raises:
            EmptyBufferError, DecodeError: if the image cannot be read.
        """
        metadata = read_metadata(buffer)
        verdict = self._policy.evaluate_raster(metadata, target, self._dpi)
        self._log(verdict, target, "raster")
        return UploadValidation(verdict=verdict, target=target)

    def _log(self, verdict: DimensionVerdict, target: PhysicalSize, kind: str) -> None:
        expected = target.with_bleed()
        message = (
            f"Upload {kind} {verdict.measured_width_mm:.1f}x{verdict.measured_height_mm:.1f}mm "
            f"vs expected {expected.width_mm:.1f}x{expected.height_mm:.1f}mm"
        )
        if verdict.acceptable:
            Log.info(f"{message}: accepted", orientation=verdict.orientation)
        else:
            Log.warning(f"{message}: rejected")


def build_upload_validator(settings: Settings) -> UploadValidator:
    return UploadValidator(
        page_reader=PageSizeReaderFactory.create(settings),
        policy=AbsoluteSizePolicy(tolerance_mm=settings.label_dimension_tolerance_mm),
        dpi=settings.label_export_dpi,
    )
