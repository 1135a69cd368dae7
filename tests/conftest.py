import io
from collections.abc import Callable

import pytest
from PIL import Image
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from label_finishing.imaging.models import ImageBuffer

Box = tuple[int, int, int, int]


def _encode(image: Image.Image, fmt: str = "PNG", dpi: float | None = None) -> bytes:
    buf = io.BytesIO()
    params: dict[str, object] = {}
    if dpi is not None:
        params["dpi"] = (dpi, dpi)
    image.save(buf, format=fmt, **params)
    return buf.getvalue()


@pytest.fixture()
def make_png() -> Callable[..., ImageBuffer]:
    """Build a PNG of ``size`` filled with ``background``, optionally with a solid box."""

    def _make(
        size: tuple[int, int] = (100, 80),
        background: tuple[int, ...] = (255, 255, 255),
        box: Box | None = None,
        box_color: tuple[int, ...] = (0, 0, 0),
        mode: str = "RGB",
        dpi: float | None = None,
    ) -> ImageBuffer:
        image = Image.new(mode, size, background)
        if box is not None:
            image.paste(box_color, box)
        return ImageBuffer(data=_encode(image, dpi=dpi), mime_type="image/png")

    return _make


@pytest.fixture()
def artwork_png(make_png: Callable[..., ImageBuffer]) -> ImageBuffer:
    """500x300 red artwork padded by a 20px white border."""
    return make_png(size=(540, 340), box=(20, 20, 520, 320), box_color=(200, 30, 30))


@pytest.fixture()
def bmp_buffer() -> ImageBuffer:
    image = Image.new("RGB", (40, 30), (10, 20, 30))
    return ImageBuffer(data=_encode(image, fmt="BMP"), mime_type="image/bmp")


@pytest.fixture()
def sixteen_bit_png() -> ImageBuffer:
    """40x40 16-bit greyscale PNG: white background, 20x20 dark box at (10, 10)."""
    image = Image.new("I;16", (40, 40), 65535)
    image.paste(1000, (10, 10, 30, 30))
    return ImageBuffer(data=_encode(image), mime_type="image/png")


@pytest.fixture()
def colour_key_png() -> ImageBuffer:
    """RGB PNG whose green background is transparent through a tRNS colour key."""
    image = Image.new("RGB", (20, 20), (0, 255, 0))
    image.paste((200, 0, 0), (5, 5, 15, 15))
    buf = io.BytesIO()
    image.save(buf, format="PNG", transparency=(0, 255, 0))
    return ImageBuffer(data=buf.getvalue(), mime_type="image/png")


@pytest.fixture()
def make_pdf() -> Callable[..., bytes]:
    """Build a PDF whose pages measure exactly ``width_mm`` x ``height_mm``."""

    def _make(width_mm: float, height_mm: float, pages: int = 1) -> bytes:
        buf = io.BytesIO()
        c = canvas.Canvas(buf, pagesize=(width_mm * mm, height_mm * mm))
        for number in range(pages):
            c.drawString(10, 10, f"Label page {number + 1}")
            c.showPage()
        c.save()
        return buf.getvalue()

    return _make


@pytest.fixture()
def open_png() -> Callable[[ImageBuffer], Image.Image]:
    def _open(buffer: ImageBuffer) -> Image.Image:
        image = Image.open(io.BytesIO(buffer.data))
        image.load()
        return image

    return _open
