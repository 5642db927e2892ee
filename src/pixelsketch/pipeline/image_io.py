"""RasterImage conversion, resize, and encoding helpers."""

from __future__ import annotations

import base64
import io
from collections.abc import Sequence
from pathlib import Path

from PIL import Image

from pixelsketch.errors import InvalidInputError, PaletteError, SurfaceError
from pixelsketch.models import RasterImage
from pixelsketch.palette import hex_to_rgb, rgb_to_hex


def raster_from_pil(image: Image.Image) -> RasterImage:
    """Convert a PIL image (any mode) into an RGBA RasterImage."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    width, height = image.size
    return RasterImage(width=width, height=height, data=image.tobytes())


def raster_to_pil(image: RasterImage) -> Image.Image:
    """Wrap a RasterImage in a new PIL ``RGBA`` image.

    Raises:
        SurfaceError: If Pillow cannot allocate the image.
    """
    try:
        return Image.frombytes("RGBA", (image.width, image.height), image.data)
    except (ValueError, MemoryError) as exc:
        raise SurfaceError(
            f"Cannot create {image.width}x{image.height} working surface: {exc}"
        ) from exc


def resize_nearest(
    image: RasterImage,
    target_width: int,
    target_height: int,
) -> RasterImage:
    """Resize with nearest-neighbour sampling; never smoothed.

    Raises:
        SurfaceError: If the resampled surface cannot be allocated.
    """
    if (image.width, image.height) == (target_width, target_height):
        return image.model_copy()

    surface = raster_to_pil(image)
    try:
        resized = surface.resize(
            (target_width, target_height), resample=Image.Resampling.NEAREST
        )
    except (ValueError, MemoryError) as exc:
        raise SurfaceError(
            f"Cannot resize to {target_width}x{target_height}: {exc}"
        ) from exc
    return raster_from_pil(resized)


def load_raster(path: str | Path) -> RasterImage:
    """Load an image file from disk as RGBA.

    Raises:
        FileNotFoundError: If *path* does not exist.
        InvalidInputError: If the file cannot be decoded as an image.
    """
    resolved = Path(path)
    if not resolved.exists():
        raise FileNotFoundError(f"Image not found: {resolved}")
    try:
        with Image.open(resolved) as img:
            img.load()
            return raster_from_pil(img)
    except OSError as exc:
        raise InvalidInputError(f"Cannot open image: {resolved}") from exc


def save_raster(image: RasterImage, path: str | Path) -> Path:
    """Write *image* as PNG, creating parent directories as needed."""
    resolved = Path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    raster_to_pil(image).save(resolved, format="PNG")
    return resolved


def raster_to_png_bytes(image: RasterImage) -> bytes:
    """Encode *image* as PNG bytes."""
    with io.BytesIO() as buf:
        raster_to_pil(image).save(buf, format="PNG")
        return buf.getvalue()


def raster_to_data_url(image: RasterImage) -> str:
    """Encode *image* as a ``data:image/png;base64,...`` URL."""
    encoded = base64.b64encode(raster_to_png_bytes(image)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


# ---------------------------------------------------------------------------
# Layer buffers: one hex string per pixel, "" for transparent
# ---------------------------------------------------------------------------


def layer_buffer_to_raster(
    layer_buffer: Sequence[str],
    width: int,
    height: int,
) -> RasterImage:
    """Convert an editor layer buffer into an image.

    Non-empty entries become opaque pixels; empty or unparseable entries
    stay fully transparent.
    """
    if width < 0 or height < 0:
        raise InvalidInputError(f"Canvas size must not be negative, got {width}x{height}")
    if len(layer_buffer) < width * height:
        raise InvalidInputError(
            f"Layer buffer has {len(layer_buffer)} entries, need {width * height}"
        )
    out = bytearray(width * height * 4)
    for idx in range(width * height):
        color = layer_buffer[idx]
        if not color:
            continue
        try:
            r, g, b = hex_to_rgb(color)
        except PaletteError:
            continue
        base = idx * 4
        out[base : base + 4] = bytes((r, g, b, 255))
    return RasterImage(width=width, height=height, data=bytes(out))


def raster_to_layer_buffer(
    image: RasterImage,
    width: int,
    height: int,
) -> list[str]:
    """Convert an image into a ``width * height`` layer buffer.

    The image is copied into the top-left corner; pixels outside it and
    pixels with zero alpha are left as ``""``.
    """
    buffer = [""] * (width * height)
    data = image.data
    for y in range(min(image.height, height)):
        for x in range(min(image.width, width)):
            src = (y * image.width + x) * 4
            if data[src + 3] > 0:
                buffer[y * width + x] = rgb_to_hex(data[src : src + 3])
    return buffer
