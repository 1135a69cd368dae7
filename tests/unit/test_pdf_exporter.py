from collections.abc import Callable

import pymupdf
import pytest

from label_finishing.imaging.exceptions import EmptyBufferError
from label_finishing.imaging.models import ImageBuffer
from label_finishing.pdf.exporter import create_pdf_from_image
from label_finishing.pdf.pymupdf_adapter import PyMuPdfPageSizeReader


def _image_rect(pdf_bytes: bytes) -> pymupdf.Rect:
    with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
        page = doc[0]
        xref = page.get_images()[0][0]
        return page.get_image_rects(xref)[0]


class TestCreatePdfFromImage:
    def test_page_has_requested_size(self, make_png: Callable[..., ImageBuffer]) -> None:
        pdf_bytes = create_pdf_from_image(make_png(size=(110, 65)), 110, 65)
        page = PyMuPdfPageSizeReader().read(pdf_bytes)
        assert page.width_mm == pytest.approx(110, abs=0.01)
        assert page.height_mm == pytest.approx(65, abs=0.01)
        assert page.page_count == 1

    def test_output_is_pdf(self, make_png: Callable[..., ImageBuffer]) -> None:
        pdf_bytes = create_pdf_from_image(make_png(), 110, 65)
        assert pdf_bytes.startswith(b"%PDF")

    def test_image_fills_matching_page(self, make_png: Callable[..., ImageBuffer]) -> None:
        rect = _image_rect(create_pdf_from_image(make_png(size=(100, 100)), 50, 50))
        assert rect.width == pytest.approx(rect.height, abs=0.01)
        assert rect.x0 == pytest.approx(0, abs=0.01)

    def test_image_is_centred_on_wider_page(self, make_png: Callable[..., ImageBuffer]) -> None:
        pdf_bytes = create_pdf_from_image(make_png(size=(100, 100)), 100, 50)
        rect = _image_rect(pdf_bytes)
        page_width = 100 / 25.4 * 72
        assert rect.height == pytest.approx(50 / 25.4 * 72, abs=0.01)
        assert rect.x0 == pytest.approx(page_width - rect.x1, abs=0.01)

    def test_non_embeddable_format_is_reencoded(self, bmp_buffer: ImageBuffer) -> None:
        pdf_bytes = create_pdf_from_image(bmp_buffer, 40, 30)
        assert PyMuPdfPageSizeReader().read(pdf_bytes).page_count == 1

    def test_empty_buffer(self) -> None:
        with pytest.raises(EmptyBufferError):
            create_pdf_from_image(ImageBuffer(b""), 110, 65)
