from collections.abc import Callable

import pytest
from PIL import Image

from label_finishing.imaging.color import (
    WHITE_HEX,
    detect_first_content_color,
    hex_to_rgb,
    normalize_hex,
    rgb_to_hex,
)
from label_finishing.imaging.models import ImageBuffer
from label_finishing.imaging.trimmer import trim_border


def _framed(size: tuple[int, int], frame: tuple[int, int, int], inner: tuple[int, int, int]) -> Image.Image:
    image = Image.new("RGB", size, frame)
    image.paste(inner, (1, 1, size[0] - 1, size[1] - 1))
    return image


class TestHexHelpers:
    def test_normalize_adds_hash(self) -> None:
        assert normalize_hex("0a141e") == "#0a141e"

    def test_normalize_strips_whitespace(self) -> None:
        assert normalize_hex("  #FFAA00 ") == "#FFAA00"

    @pytest.mark.parametrize("value", ["", None, "#12", "#GGGGGG", "red"])
    def test_normalize_invalid_returns_empty(self, value: str | None) -> None:
        assert normalize_hex(value) == ""

    def test_hex_to_rgb(self) -> None:
        assert hex_to_rgb("#0A141E") == (10, 20, 30)

    def test_hex_to_rgb_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid hex colour"):
            hex_to_rgb("#12345")

    def test_rgb_to_hex_is_uppercase(self) -> None:
        assert rgb_to_hex((10, 20, 254)) == "#0A14FE"


class TestDetectFirstContentColor:
    def test_uniform_ring_colour(self) -> None:
        image = _framed((10, 10), frame=(10, 20, 30), inner=(255, 0, 0))
        assert detect_first_content_color(image) == "#0A141E"

    def test_all_white_returns_white(self) -> None:
        image = Image.new("RGB", (10, 10), (255, 255, 255))
        assert detect_first_content_color(image) == WHITE_HEX

    def test_near_white_counts_as_background(self) -> None:
        image = _framed((10, 10), frame=(250, 250, 250), inner=(0, 0, 0))
        assert detect_first_content_color(image) == WHITE_HEX

    def test_near_white_threshold_is_configurable(self) -> None:
        image = _framed((10, 10), frame=(250, 250, 250), inner=(0, 0, 0))
        assert detect_first_content_color(image, near_white=252) == "#FAFAFA"

    def test_white_pixels_on_ring_are_ignored(self) -> None:
        image = Image.new("RGB", (10, 10), (255, 255, 255))
        image.paste((10, 20, 30), (0, 0, 10, 1))
        assert detect_first_content_color(image) == "#0A141E"

    def test_even_median_rounds_up(self) -> None:
        image = Image.new("RGB", (2, 1))
        image.putpixel((0, 0), (10, 10, 10))
        image.putpixel((1, 0), (11, 11, 11))
        assert detect_first_content_color(image) == "#0B0B0B"

    def test_single_pixel_image(self) -> None:
        image = Image.new("RGB", (1, 1), (1, 2, 3))
        assert detect_first_content_color(image) == "#010203"

    def test_wider_ring_reaches_inner_pixels(self) -> None:
        image = _framed((10, 10), frame=(255, 255, 255), inner=(40, 50, 60))
        assert detect_first_content_color(image, ring=1) == WHITE_HEX
        assert detect_first_content_color(image, ring=2) == "#28323C"

    def test_rgba_input_is_converted(self) -> None:
        image = Image.new("RGBA", (4, 4), (10, 20, 30, 255))
        assert detect_first_content_color(image) == "#0A141E"

    def test_ring_must_be_positive(self) -> None:
        image = Image.new("RGB", (4, 4))
        with pytest.raises(ValueError, match="ring"):
            detect_first_content_color(image, ring=0)


class TestTrimThenDetect:
    def test_near_white_ring_is_trimmed_before_sampling(
        self,
        make_png: Callable[..., ImageBuffer],
        open_png: Callable[[ImageBuffer], Image.Image],
    ) -> None:
        ringed = make_png(size=(10, 10), background=(250, 250, 250), box=(1, 1, 9, 9), box_color=(10, 20, 30))
        trimmed = trim_border(ringed)
        assert (trimmed.cropped.width, trimmed.cropped.height) == (8, 8)
        assert detect_first_content_color(open_png(trimmed.buffer)) == "#0A141E"
