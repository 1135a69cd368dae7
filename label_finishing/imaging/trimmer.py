import numpy as np
from PIL import Image

from label_finishing.imaging.codec import describe, encode_png, flatten_onto_white, open_image
from label_finishing.imaging.color import hex_to_rgb
from label_finishing.imaging.exceptions import UnsupportedBackgroundFlattenError
from label_finishing.imaging.models import ImageBuffer, TrimResult

DEFAULT_TRIM_THRESHOLD = 12


def content_bounds(image: Image.Image, threshold: int) -> tuple[int, int, int, int] | None:
    """Bounding box ``(left, top, right, bottom)`` of pixels that differ from the edge colour.

    The top-left pixel is the reference background. A pixel is content when
    any channel deviates from it by more than ``threshold``. Returns ``None``
    when the whole image is background.
    """
    pixels = np.asarray(image, dtype=np.int16)
    reference = pixels[0, 0]
    content = np.any(np.abs(pixels - reference) > threshold, axis=2)
    rows = np.flatnonzero(content.any(axis=1))
    columns = np.flatnonzero(content.any(axis=0))
    if rows.size == 0 or columns.size == 0:
        return None
    return int(columns[0]), int(rows[0]), int(columns[-1]) + 1, int(rows[-1]) + 1


def trim_border(
    buffer: ImageBuffer,
    threshold: int = DEFAULT_TRIM_THRESHOLD,
    flatten_color: str = "#FFFFFF",
) -> TrimResult:
    """Remove a uniform padding border after flattening transparency onto white.

    Raises:
        EmptyBufferError: if the buffer has no bytes.
        DecodeError: if the buffer is not a readable image.
        UnsupportedBackgroundFlattenError: if ``flatten_color`` is not white.
    """
    if hex_to_rgb(flatten_color) != (255, 255, 255):
        raise UnsupportedBackgroundFlattenError(
            f"Only white alpha flattening is supported, got {flatten_color}"
        )
    if threshold < 0:
        raise ValueError(f"threshold must not be negative, got {threshold}")

    with open_image(buffer) as decoded:
        flattened = flatten_onto_white(decoded)
    original = describe(flattened)

    bounds = content_bounds(flattened, threshold)
    if bounds is None or bounds == (0, 0, original.width, original.height):
        cropped_image = flattened
    else:
        cropped_image = flattened.crop(bounds)

    cropped = describe(cropped_image)
    return TrimResult(
        buffer=encode_png(cropped_image),
        original=original,
        cropped=cropped,
    )
