import pymupdf

from label_finishing.imaging.codec import describe, encode_png, open_image
from label_finishing.imaging.models import ImageBuffer
from label_finishing.imaging.units import mm_to_points
from label_finishing.pdf.exceptions import PdfExportError

EMBEDDABLE_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/jpg"})


def create_pdf_from_image(buffer: ImageBuffer, width_mm: float, height_mm: float) -> bytes:
    """Place an image on a single PDF page of ``width_mm`` x ``height_mm``.

    The image is scaled to fit and centred; PNG and JPEG bytes are embedded
    as-is, other formats are re-encoded as PNG first.

    Raises:
        EmptyBufferError, DecodeError: if the image cannot be read.
        PdfExportError: if PyMuPDF fails to build the document.
    """
    page_width = mm_to_points(width_mm)
    page_height = mm_to_points(height_mm)

    with open_image(buffer) as image:
        metadata = describe(image)
        if buffer.mime_type.lower() in EMBEDDABLE_MIME_TYPES:
            stream = buffer.data
        else:
            stream = encode_png(image.convert("RGBA")).data

    scale = min(page_width / metadata.width, page_height / metadata.height)
    draw_width = metadata.width * scale
    draw_height = metadata.height * scale
    left = (page_width - draw_width) / 2
    top = (page_height - draw_height) / 2

    try:
        with pymupdf.open() as doc:  # type: ignore[no-untyped-call]
            page = doc.new_page(width=page_width, height=page_height)
            page.insert_image(
                pymupdf.Rect(left, top, left + draw_width, top + draw_height),
                stream=stream,
            )
            return doc.tobytes()
    except Exception as exc:
        raise PdfExportError(f"pymupdf export failed: {exc}") from exc
