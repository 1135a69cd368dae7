import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from label_finishing.imaging.exceptions import DecodeError, EmptyBufferError
from label_finishing.imaging.models import ImageBuffer, RasterMetadata

PASSTHROUGH_MIME_TYPES = frozenset(
    {"image/png", "image/jpeg", "image/jpg", "image/webp", "image/gif"}
)
WHITE = (255, 255, 255)
HIGH_BIT_DEPTH_MODES = frozenset({"I", "F"})


def open_image(buffer: ImageBuffer) -> Image.Image:
    """Decode a buffer into a fully loaded Pillow image.

    Raises:
        EmptyBufferError: if the buffer has no bytes.
        DecodeError: if the bytes are not a readable raster image.
    """
    if not buffer.data:
        raise EmptyBufferError("Image buffer is empty")
    try:
        image = Image.open(io.BytesIO(buffer.data))
        image.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(f"Cannot decode {buffer.mime_type} image: {exc}") from exc
    return image


def _density(image: Image.Image) -> float | None:
    dpi = image.info.get("dpi")
    if not dpi:
        return None
    try:
        horizontal = float(dpi[0])
    except (TypeError, ValueError, IndexError):
        return None
    return horizontal if horizontal > 1 else None


def describe(image: Image.Image) -> RasterMetadata:
    width, height = image.size
    return RasterMetadata(width=width, height=height, dpi=_density(image))


def read_metadata(buffer: ImageBuffer) -> RasterMetadata:
    """Return pixel size and density hint of an encoded image."""
    with open_image(buffer) as image:
        return describe(image)


def _to_8bit(image: Image.Image) -> Image.Image:
    """Scale 16/32-bit integer greyscale down to 8-bit ``L``.

    Raises:
        DecodeError: for floating-point images, whose value range is unknown.
    """
    if image.mode == "F":
        raise DecodeError("Floating-point images are not supported")
    # 65535 -> 255
    scaled = np.rint(np.asarray(image, dtype=np.float64) / 257)
    converted = Image.fromarray(np.clip(scaled, 0, 255).astype(np.uint8))
    if "dpi" in image.info:
        converted.info["dpi"] = image.info["dpi"]
    return converted


def _is_high_bit_depth(image: Image.Image) -> bool:
    return image.mode in HIGH_BIT_DEPTH_MODES or image.mode.startswith("I;16")


def flatten_onto_white(image: Image.Image) -> Image.Image:
    """Composite any transparency onto white and return an opaque RGB image."""
    if _is_high_bit_depth(image):
        image = _to_8bit(image)
    elif image.mode == "P" or "transparency" in image.info:
        image = image.convert("RGBA")
    if image.mode in ("RGBA", "LA", "PA"):
        rgba = image.convert("RGBA")
        background = Image.new("RGBA", rgba.size, WHITE + (255,))
        return Image.alpha_composite(background, rgba).convert("RGB")
    return image.convert("RGB")


def encode_png(image: Image.Image, dpi: int | None = None) -> ImageBuffer:
    params: dict[str, object] = {}
    if dpi is not None:
        params["dpi"] = (dpi, dpi)
    with io.BytesIO() as output:
        image.save(output, format="PNG", **params)
        return ImageBuffer(data=output.getvalue(), mime_type="image/png")


def normalize_to_png(buffer: ImageBuffer) -> ImageBuffer:
    """Pass common web raster types through; re-encode anything else as PNG."""
    if buffer.mime_type.lower() in PASSTHROUGH_MIME_TYPES:
        return buffer
    with open_image(buffer) as image:
        if _is_high_bit_depth(image):
            image = _to_8bit(image)
        elif image.mode not in ("RGB", "RGBA", "L", "LA"):
            image = image.convert("RGBA")
        return encode_png(image)
