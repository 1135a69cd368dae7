from PIL import Image

from label_finishing.imaging.codec import encode_png, flatten_onto_white, open_image
from label_finishing.imaging.color import hex_to_rgb, rgb_to_hex
from label_finishing.imaging.exceptions import ComposeError
from label_finishing.imaging.models import ComposedLabel, ImageBuffer, PhysicalSize
from label_finishing.imaging.units import mm_to_pixels

DEFAULT_DPI = 300


def fit_inside(
    source_size: tuple[int, int],
    canvas_size: tuple[int, int],
) -> tuple[int, int, int, int]:
    """Scale ``source_size`` to fit ``canvas_size`` without cropping and centre it.

    Returns:
        ``(width, height, left, top)`` of the resized content on the canvas.
    """
    source_width, source_height = source_size
    canvas_width, canvas_height = canvas_size
    # integer cross-multiplication keeps floor(scale * size) exact on the limiting axis
    if canvas_width * source_height <= canvas_height * source_width:
        width = canvas_width
        height = max(1, source_height * canvas_width // source_width)
    else:
        width = max(1, source_width * canvas_height // source_height)
        height = canvas_height
    left = (canvas_width - width) // 2
    top = (canvas_height - height) // 2
    return width, height, left, top


def compose_label(
    buffer: ImageBuffer,
    target: PhysicalSize,
    background_hex: str,
    dpi: int = DEFAULT_DPI,
) -> ComposedLabel:
    """Centre the artwork on an opaque canvas of exactly ``target`` at ``dpi``.

    The canvas size depends only on the target and ``dpi``; the input's own
    resolution only affects how much it is scaled.

    Raises:
        ValueError: if ``background_hex`` is not a hex colour.
        EmptyBufferError, DecodeError: if the input cannot be read.
        ComposeError: if resizing or compositing fails.
    """
    background = hex_to_rgb(background_hex)
    canvas_size = (mm_to_pixels(target.width_mm, dpi), mm_to_pixels(target.height_mm, dpi))

    with open_image(buffer) as decoded:
        artwork = flatten_onto_white(decoded)

    try:
        width, height, left, top = fit_inside(artwork.size, canvas_size)
        resized = artwork.resize((width, height), Image.Resampling.LANCZOS)
        canvas = Image.new("RGB", canvas_size, background)
        canvas.paste(resized, (left, top))
        encoded = encode_png(canvas, dpi=dpi)
    except (OSError, ValueError, MemoryError) as exc:
        raise ComposeError(f"Failed to compose label onto {canvas_size} canvas: {exc}") from exc

    return ComposedLabel(
        buffer=encoded,
        width_px=canvas_size[0],
        height_px=canvas_size[1],
        dpi=dpi,
        background_hex=rgb_to_hex(background),
    )
