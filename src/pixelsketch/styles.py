"""Style catalog: the fixed processing profile for each pixel-art style."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pixelsketch.errors import InvalidInputError
from pixelsketch.models import PixelArtStyle, StyleProfile

STYLE_PROFILES: Mapping[PixelArtStyle, StyleProfile] = MappingProxyType(
    {
        PixelArtStyle.RETRO_8BIT: StyleProfile(
            max_colors=8,
            dither_enabled=True,
            smoothing_enabled=False,
            contrast_boost=1.3,
        ),
        PixelArtStyle.RETRO_16BIT: StyleProfile(
            max_colors=16,
            dither_enabled=True,
            smoothing_enabled=False,
            contrast_boost=1.2,
        ),
        PixelArtStyle.PIXEL_MODERN: StyleProfile(
            max_colors=32,
            dither_enabled=False,
            smoothing_enabled=True,
            contrast_boost=1.0,
        ),
        PixelArtStyle.LOW_RES: StyleProfile(
            max_colors=4,
            dither_enabled=True,
            smoothing_enabled=False,
            contrast_boost=1.5,
        ),
        PixelArtStyle.HIGH_DETAIL: StyleProfile(
            max_colors=64,
            dither_enabled=False,
            smoothing_enabled=True,
            contrast_boost=1.1,
        ),
    }
)


def parse_style(value: PixelArtStyle | str) -> PixelArtStyle:
    """Coerce a style identifier string into a :class:`PixelArtStyle`.

    Raises:
        InvalidInputError: If *value* is not one of the known styles.
    """
    if isinstance(value, PixelArtStyle):
        return value
    try:
        return PixelArtStyle(value)
    except ValueError:
        known = ", ".join(s.value for s in PixelArtStyle)
        raise InvalidInputError(
            f"Unknown style {value!r} (expected one of: {known})"
        ) from None


def get_style_profile(style: PixelArtStyle | str) -> StyleProfile:
    """Return the immutable profile bound to *style*."""
    return STYLE_PROFILES[parse_style(style)]


def list_styles() -> list[tuple[PixelArtStyle, StyleProfile]]:
    """Return ``(style, profile)`` pairs in declaration order."""
    return [(style, STYLE_PROFILES[style]) for style in PixelArtStyle]
