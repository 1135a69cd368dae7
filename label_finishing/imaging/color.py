import re

import numpy as np
from PIL import Image

WHITE_HEX = "#FFFFFF"

_HEX_PATTERN = re.compile(r"^#?[0-9a-fA-F]{6}$")


def normalize_hex(value: str | None) -> str:
    """Return ``#RRGGBB`` for a six-digit hex colour (``#`` optional), else ``""``."""
    text = (value or "").strip()
    if not _HEX_PATTERN.match(text):
        return ""
    return text if text.startswith("#") else f"#{text}"


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Parse ``#RRGGBB`` into an RGB tuple.

    Raises:
        ValueError: if the value is not a six-digit hex colour.
    """
    normalized = normalize_hex(value)
    if not normalized:
        raise ValueError(f"Invalid hex colour '{value}'")
    digits = normalized[1:]
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    return "#" + "".join(f"{channel:02X}" for channel in rgb)


def _ring_pixels(pixels: np.ndarray, ring: int) -> np.ndarray:
    """Collect the pixels of the outer ``ring`` rings, one (N, 3) block per ring.

    Each ring contributes its top and bottom rows in full, then the left and
    right columns strictly between them. Coordinates are clamped, so tiny
    images repeat pixels instead of indexing out of range.
    """
    height, width = pixels.shape[:2]
    blocks: list[np.ndarray] = []
    for k in range(ring):
        left = min(max(k, 0), width - 1)
        right = min(max(width - 1 - k, 0), width - 1)
        top = min(max(k, 0), height - 1)
        bottom = min(max(height - 1 - k, 0), height - 1)
        columns = slice(left, right + 1)
        blocks.append(pixels[top, columns])
        blocks.append(pixels[bottom, columns])
        if bottom - top > 1:
            rows = slice(top + 1, bottom)
            blocks.append(pixels[rows, left])
            blocks.append(pixels[rows, right])
    return np.concatenate(blocks, axis=0)


def _median_channel(values: np.ndarray) -> int:
    ordered = np.sort(values)
    middle = len(ordered) // 2
    if len(ordered) % 2:
        return int(ordered[middle])
    # halves round up
    return int(np.floor((int(ordered[middle - 1]) + int(ordered[middle])) / 2 + 0.5))


def detect_first_content_color(
    image: Image.Image,
    near_white: int = 245,
    ring: int = 1,
) -> str:
    """Return the median colour of the non-white pixels on the image's outer ring.

    Used to pick a fill colour that continues the artwork when it is placed
    on a larger canvas. Pixels whose R, G and B are all ``>= near_white``
    count as background and are ignored; if nothing else remains the result
    is white.

    Args:
        image: Already flattened image (any mode; converted to RGB).
        near_white: Per-channel threshold for background-like pixels.
        ring: Number of pixel rings sampled from the outside in.

    Returns:
        Uppercase ``#RRGGBB`` string.
    """
    if ring < 1:
        raise ValueError(f"ring must be at least 1, got {ring}")
    pixels = np.asarray(image.convert("RGB"), dtype=np.uint8)
    if pixels.size == 0:
        return WHITE_HEX
    samples = _ring_pixels(pixels, ring)
    content = samples[~np.all(samples >= near_white, axis=1)]
    if len(content) == 0:
        return WHITE_HEX
    red, green, blue = (_median_channel(content[:, channel]) for channel in range(3))
    return rgb_to_hex((red, green, blue))
