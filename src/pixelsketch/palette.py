"""Built-in palettes, the color-cube generator, and palette parsing."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from pixelsketch.errors import PaletteError
from pixelsketch.models import RGB, Palette, StyleProfile

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")

# ---------------------------------------------------------------------------
# Curated tables
# ---------------------------------------------------------------------------

GRAYSCALE_4: tuple[str, ...] = ("#000000", "#555555", "#aaaaaa", "#ffffff")

PICO_8: tuple[str, ...] = (
    "#000000",
    "#1d2b53",
    "#7e2553",
    "#008751",
    "#ab5236",
    "#5f574f",
    "#c2c3c7",
    "#fff1e8",
)

PICO_16: tuple[str, ...] = PICO_8 + (
    "#ff004d",
    "#ffa300",
    "#ffec27",
    "#00e436",
    "#29adff",
    "#83769c",
    "#ff77a8",
    "#ffccaa",
)

CURATED_32: tuple[str, ...] = (
    "#000000",
    "#1a1c2c",
    "#5d275d",
    "#b13e53",
    "#ef7d57",
    "#ffcd75",
    "#a7f070",
    "#38b764",
    "#257179",
    "#29366f",
    "#3b5dc9",
    "#41a6f6",
    "#73eff7",
    "#f4f4f4",
    "#94b0c2",
    "#566c86",
    "#333c57",
    "#8b4852",
    "#c25454",
    "#ed7b7b",
    "#ffa5a5",
    "#ffd4a3",
    "#ffe2bd",
    "#c2f970",
    "#8cd612",
    "#4d9121",
    "#2f5233",
    "#00467f",
    "#1b62ab",
    "#2c8fdf",
    "#5eb3ff",
    "#a5d8ff",
)

CUBE_LEVELS = 4
DEFAULT_PALETTE_SIZE = 16

# ---------------------------------------------------------------------------
# Hex helpers
# ---------------------------------------------------------------------------


def hex_to_rgb(value: str) -> RGB:
    """Parse ``"#rrggbb"`` (the ``#`` is optional) into an RGB tuple.

    Raises:
        PaletteError: If *value* is not a six-digit hex color.
    """
    match = _HEX_RE.match(value.strip())
    if match is None:
        raise PaletteError(f"Invalid hex color: {value!r}")
    r, g, b = (int(part, 16) for part in match.groups())
    return (r, g, b)


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """Format an RGB triple as lowercase ``"#rrggbb"``."""
    r, g, b = rgb[0], rgb[1], rgb[2]
    return f"#{r:02x}{g:02x}{b:02x}"


def _coerce_color(color: str | Sequence[int]) -> RGB:
    if isinstance(color, str):
        return hex_to_rgb(color)
    if len(color) != 3:
        raise PaletteError(f"Palette colors need 3 channels, got {tuple(color)!r}")
    channels = tuple(int(c) for c in color)
    if any(c < 0 or c > 255 for c in channels):
        raise PaletteError(f"Palette channel out of range 0-255: {channels!r}")
    r, g, b = channels
    return (r, g, b)


def parse_palette(colors: Iterable[str | Sequence[int]]) -> Palette:
    """Build an ordered palette from hex strings or RGB triples.

    Raises:
        PaletteError: If the palette is empty or any entry is malformed.
    """
    palette = tuple(_coerce_color(c) for c in colors)
    if not palette:
        raise PaletteError("Palette must contain at least one color")
    return palette


# ---------------------------------------------------------------------------
# Built-in palettes
# ---------------------------------------------------------------------------


def generate_color_cube(levels: int = CUBE_LEVELS) -> Palette:
    """Sample the RGB cube at *levels* evenly spaced values per channel.

    Channel values are ``int(i / (levels - 1) * 255)`` (truncated), with
    red varying slowest and blue fastest.  ``levels=4`` yields 64 colors.
    """
    if levels < 2:
        raise PaletteError(f"Color cube needs at least 2 levels, got {levels}")
    steps = [int(i / (levels - 1) * 255) for i in range(levels)]
    return tuple((r, g, b) for r in steps for g in steps for b in steps)


_CURATED: dict[int, Palette] = {
    4: parse_palette(GRAYSCALE_4),
    8: parse_palette(PICO_8),
    16: parse_palette(PICO_16),
    32: parse_palette(CURATED_32),
}
_CUBE_SIZE = CUBE_LEVELS**3


def builtin_palette(size: int) -> Palette:
    """Return the built-in palette for a target color count.

    Sizes 4, 8, 16 and 32 map to curated tables and 64 to the 4-level
    color cube; any other size falls back to the 16-entry table.
    """
    if size in _CURATED:
        return _CURATED[size]
    if size == _CUBE_SIZE:
        return generate_color_cube(CUBE_LEVELS)
    return _CURATED[DEFAULT_PALETTE_SIZE]


def resolve_palette(
    profile: StyleProfile,
    palette: Iterable[str | Sequence[int]] | None = None,
) -> Palette:
    """Pick the explicit *palette* if given, else the style's built-in one."""
    if palette is not None:
        return parse_palette(palette)
    return builtin_palette(profile.max_colors)
