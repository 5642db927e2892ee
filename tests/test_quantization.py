"""Tests for pixelsketch.pipeline.quantization — nearest color and dithering."""

from __future__ import annotations

from image_helpers import all_pixels, make_image

from pixelsketch.models import RasterImage
from pixelsketch.palette import builtin_palette
from pixelsketch.pipeline.quantization import (
    count_unique_colors,
    dither,
    find_closest_color,
    quantize,
)

BLACK_WHITE = ((0, 0, 0), (255, 255, 255))
GRAY = (100, 100, 100, 255)

# ---------------------------------------------------------------------------
# find_closest_color
# ---------------------------------------------------------------------------


class TestFindClosestColor:
    """Tests for squared-distance nearest color search."""

    def test_red_maps_to_dark_gray_in_grayscale_4(self) -> None:
        # distances: black 195075, #555555 51275, #aaaaaa 57800, white 130050
        assert find_closest_color(255, 0, 0, builtin_palette(4)) == (85, 85, 85)

    def test_tie_goes_to_earliest_entry(self) -> None:
        palette = ((0, 0, 0), (2, 2, 2))
        assert find_closest_color(1, 1, 1, palette) == (0, 0, 0)
        assert find_closest_color(1, 1, 1, palette[::-1]) == (2, 2, 2)

    def test_exact_match(self) -> None:
        assert find_closest_color(255, 255, 255, BLACK_WHITE) == (255, 255, 255)


# ---------------------------------------------------------------------------
# quantize
# ---------------------------------------------------------------------------


class TestQuantize:
    """Tests for whole-image quantization."""

    def test_palette_colors_are_unchanged(self) -> None:
        palette = builtin_palette(16)
        row = [(*c, 255) for c in palette]
        img = make_image([row])
        assert quantize(img, palette) == img

    def test_quantize_is_idempotent(self, gradient_sketch: RasterImage) -> None:
        palette = builtin_palette(8)
        once = quantize(gradient_sketch, palette)
        assert quantize(once, palette) == once

    def test_transparent_pixels_pass_through(self) -> None:
        img = make_image([[(12, 34, 56, 0), (250, 250, 250, 255)]])
        out = quantize(img, BLACK_WHITE)
        assert all_pixels(out) == [(12, 34, 56, 0), (255, 255, 255, 255)]

    def test_alpha_is_kept(self) -> None:
        img = make_image([[(10, 10, 10, 128)]])
        assert quantize(img, BLACK_WHITE).pixel(0, 0) == (0, 0, 0, 128)


# ---------------------------------------------------------------------------
# dither
# ---------------------------------------------------------------------------


class TestDither:
    """Tests for Floyd–Steinberg error diffusion."""

    def test_flat_palette_image_unchanged(self) -> None:
        img = RasterImage.filled(4, 3, (85, 85, 85, 255))
        assert dither(img, builtin_palette(4)) == img

    def test_error_is_diffused_progressively(self) -> None:
        # 100 -> black, 7/16 of +100 pushes the neighbour to 144 -> white.
        img = make_image([[GRAY, GRAY]])
        out = dither(img, BLACK_WHITE)
        assert all_pixels(out) == [(0, 0, 0, 255), (255, 255, 255, 255)]

    def test_all_four_neighbours_receive_error(self) -> None:
        img = RasterImage.filled(2, 2, GRAY)
        out = dither(img, BLACK_WHITE)
        assert all_pixels(out) == [
            (0, 0, 0, 255),
            (255, 255, 255, 255),
            (0, 0, 0, 255),
            (0, 0, 0, 255),
        ]

    def test_transparent_neighbours_receive_no_error(self) -> None:
        img = make_image([[GRAY, (100, 100, 100, 0), GRAY]])
        out = dither(img, BLACK_WHITE)
        assert all_pixels(out) == [
            (0, 0, 0, 255),
            (100, 100, 100, 0),
            (0, 0, 0, 255),
        ]

    def test_does_not_mutate_input(self) -> None:
        img = make_image([[GRAY, GRAY]])
        before = img.data
        dither(img, BLACK_WHITE)
        assert img.data == before

    def test_output_uses_only_palette_colors(self, gradient_sketch: RasterImage) -> None:
        palette = builtin_palette(8)
        out = dither(gradient_sketch, palette)
        opaque = {p[:3] for p in all_pixels(out) if p[3] > 0}
        assert opaque <= set(palette)


class TestCountUniqueColors:
    """Tests for count_unique_colors."""

    def test_ignores_transparent_pixels(self) -> None:
        img = make_image([[(1, 1, 1, 255), (1, 1, 1, 255), (9, 9, 9, 0), (2, 2, 2, 10)]])
        assert count_unique_colors(img) == 2
