"""Deterministic local sketch-to-pixel-art pipeline."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict

from pixelsketch.errors import InvalidInputError, SurfaceError
from pixelsketch.logging import get_logger
from pixelsketch.models import GenerationMetadata, PixelArtStyle, RasterImage
from pixelsketch.palette import resolve_palette
from pixelsketch.pipeline.filters import adjust_contrast, sharpen
from pixelsketch.pipeline.image_io import resize_nearest
from pixelsketch.pipeline.quantization import count_unique_colors, dither, quantize
from pixelsketch.styles import get_style_profile, parse_style

logger = get_logger("pipeline")


class LocalResult(BaseModel):
    """Output of :func:`process_locally`."""

    image: RasterImage
    metadata: GenerationMetadata

    model_config = ConfigDict(frozen=True)


def local_algorithm_tag(style: PixelArtStyle) -> str:
    """Return the metadata tag for a local run, e.g. ``"local-low-res"``."""
    return f"local-{style.value}"


def process_locally(
    sketch: RasterImage,
    target_width: int,
    target_height: int,
    style: PixelArtStyle | str,
    palette: Iterable[str | Sequence[int]] | None = None,
) -> LocalResult:
    """Turn *sketch* into pixel art with the fixed local step order.

    Steps: nearest resize, palette resolution, quantization, optional
    dithering, optional contrast, sharpening.  Pure function of its
    inputs; every call works on its own buffers.

    Args:
        sketch: Source RGBA image.
        target_width: Output width in pixels (> 0).
        target_height: Output height in pixels (> 0).
        style: Style identifier selecting the processing profile.
        palette: Optional explicit palette (hex strings or RGB triples).

    Returns:
        The processed image and its metadata.

    Raises:
        InvalidInputError: For non-positive sizes, an empty sketch, an
            unknown style, or a malformed palette.
        SurfaceError: If a working buffer cannot be allocated.
    """
    if target_width <= 0 or target_height <= 0:
        raise InvalidInputError(
            f"Target size must be positive, got {target_width}x{target_height}"
        )
    if sketch.is_empty:
        raise InvalidInputError("Sketch image is empty")

    style_id = parse_style(style)
    profile = get_style_profile(style_id)
    colors = resolve_palette(profile, palette)

    logger.debug(
        "Processing %dx%d sketch -> %dx%d (%s, %d colors)",
        sketch.width,
        sketch.height,
        target_width,
        target_height,
        style_id.value,
        len(colors),
    )

    try:
        image = resize_nearest(sketch, target_width, target_height)
        image = quantize(image, colors)
        if profile.dither_enabled:
            image = dither(image, colors)
        if profile.contrast_boost != 1.0:
            image = adjust_contrast(image, profile.contrast_boost)
        image = sharpen(image)
    except MemoryError as exc:
        raise SurfaceError(
            f"Out of memory processing {target_width}x{target_height} image"
        ) from exc

    metadata = GenerationMetadata(
        colors_used=count_unique_colors(image),
        pixel_count=target_width * target_height,
        algorithm=local_algorithm_tag(style_id),
    )
    return LocalResult(image=image, metadata=metadata)
