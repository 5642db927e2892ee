"""Tests for pixelsketch.palette — built-in tables, cube generator, and parsing."""

from __future__ import annotations

import pytest

from pixelsketch.errors import InvalidInputError, PaletteError
from pixelsketch.palette import (
    CURATED_32,
    GRAYSCALE_4,
    PICO_8,
    PICO_16,
    builtin_palette,
    generate_color_cube,
    hex_to_rgb,
    parse_palette,
    resolve_palette,
    rgb_to_hex,
)
from pixelsketch.styles import get_style_profile

# ---------------------------------------------------------------------------
# Hex helpers
# ---------------------------------------------------------------------------


class TestHexConversion:
    """Tests for hex_to_rgb / rgb_to_hex."""

    def test_parses_with_hash(self) -> None:
        assert hex_to_rgb("#555555") == (85, 85, 85)

    def test_parses_without_hash_and_uppercase(self) -> None:
        assert hex_to_rgb("FF004D") == (255, 0, 77)

    def test_formats_lowercase_padded(self) -> None:
        assert rgb_to_hex((0, 10, 255)) == "#000aff"

    @pytest.mark.parametrize("value", ["", "#fff", "#12345g", "red", "#1234567"])
    def test_invalid_hex_raises(self, value: str) -> None:
        with pytest.raises(PaletteError):
            hex_to_rgb(value)

    def test_palette_error_is_invalid_input(self) -> None:
        with pytest.raises(InvalidInputError):
            hex_to_rgb("nope")


# ---------------------------------------------------------------------------
# parse_palette
# ---------------------------------------------------------------------------


class TestParsePalette:
    """Tests for parse_palette."""

    def test_preserves_order(self) -> None:
        palette = parse_palette(["#ffffff", "#000000"])
        assert palette == ((255, 255, 255), (0, 0, 0))

    def test_accepts_rgb_triples(self) -> None:
        assert parse_palette([(1, 2, 3), [4, 5, 6]]) == ((1, 2, 3), (4, 5, 6))

    def test_empty_palette_raises(self) -> None:
        with pytest.raises(PaletteError, match="at least one"):
            parse_palette([])

    def test_out_of_range_channel_raises(self) -> None:
        with pytest.raises(PaletteError):
            parse_palette([(0, 0, 256)])

    def test_wrong_channel_count_raises(self) -> None:
        with pytest.raises(PaletteError):
            parse_palette([(0, 0)])


# ---------------------------------------------------------------------------
# Built-in palettes
# ---------------------------------------------------------------------------


class TestBuiltinPalette:
    """Tests for builtin_palette and generate_color_cube."""

    def test_curated_table_sizes(self) -> None:
        assert len(GRAYSCALE_4) == 4
        assert len(PICO_8) == 8
        assert len(PICO_16) == 16
        assert len(CURATED_32) == 32

    def test_size_4_is_grayscale(self) -> None:
        assert builtin_palette(4) == (
            (0, 0, 0),
            (85, 85, 85),
            (170, 170, 170),
            (255, 255, 255),
        )

    def test_size_16_extends_size_8(self) -> None:
        assert builtin_palette(16)[:8] == builtin_palette(8)
        assert rgb_to_hex(builtin_palette(16)[8]) == "#ff004d"
        assert rgb_to_hex(builtin_palette(16)[-1]) == "#ffccaa"

    def test_size_32_matches_curated_table(self) -> None:
        palette = builtin_palette(32)
        assert [rgb_to_hex(c) for c in palette] == list(CURATED_32)
        assert rgb_to_hex(palette[1]) == "#1a1c2c"
        assert rgb_to_hex(palette[-1]) == "#a5d8ff"

    def test_size_64_is_color_cube(self) -> None:
        assert builtin_palette(64) == generate_color_cube()

    @pytest.mark.parametrize("size", [1, 2, 12, 48, 128])
    def test_other_sizes_default_to_16(self, size: int) -> None:
        assert builtin_palette(size) == builtin_palette(16)

    def test_color_cube_layout(self) -> None:
        cube = generate_color_cube(4)
        assert len(cube) == 64
        assert cube[0] == (0, 0, 0)
        assert cube[1] == (0, 0, 85)
        assert cube[4] == (0, 85, 0)
        assert cube[16] == (85, 0, 0)
        assert cube[-1] == (255, 255, 255)
        assert {c[0] for c in cube} == {0, 85, 170, 255}

    def test_color_cube_truncates(self) -> None:
        # 1/4 * 255 = 63.75 -> 63
        assert generate_color_cube(5)[1] == (0, 0, 63)

    def test_color_cube_rejects_single_level(self) -> None:
        with pytest.raises(PaletteError):
            generate_color_cube(1)


class TestResolvePalette:
    """Tests for resolve_palette."""

    def test_explicit_palette_wins(self) -> None:
        profile = get_style_profile("low-res")
        assert resolve_palette(profile, ["#123456"]) == ((0x12, 0x34, 0x56),)

    def test_falls_back_to_style_size(self) -> None:
        profile = get_style_profile("retro-8bit")
        assert resolve_palette(profile) == builtin_palette(8)
