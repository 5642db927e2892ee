"""Nearest-color quantization and Floyd–Steinberg dithering.

Both passes work on flat ``bytearray`` RGBA buffers and leave pixels
with zero alpha untouched.
"""

from __future__ import annotations

from collections.abc import Sequence

from pixelsketch.models import RGB, Palette, RasterImage

# (dx, dy, weight) in the order error is pushed to unvisited neighbours.
FLOYD_STEINBERG_WEIGHTS: tuple[tuple[int, int, float], ...] = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)


def find_closest_color(r: int, g: int, b: int, palette: Sequence[RGB]) -> RGB:
    """Return the palette entry with the smallest squared RGB distance.

    Ties go to the entry declared first.
    """
    best = palette[0]
    best_distance = -1
    for entry in palette:
        dr = r - entry[0]
        dg = g - entry[1]
        db = b - entry[2]
        distance = dr * dr + dg * dg + db * db
        if best_distance < 0 or distance < best_distance:
            best = entry
            best_distance = distance
    return best


def _clamp_byte(value: float) -> int:
    # Round half to even after clamping, matching 8-bit clamped storage.
    return round(min(255.0, max(0.0, value)))


def quantize(image: RasterImage, palette: Palette) -> RasterImage:
    """Map every opaque pixel to its nearest palette color."""
    out = bytearray(image.data)
    cache: dict[tuple[int, int, int], RGB] = {}
    for base in range(0, len(out), 4):
        if out[base + 3] == 0:
            continue
        key = (out[base], out[base + 1], out[base + 2])
        closest = cache.get(key)
        if closest is None:
            closest = find_closest_color(key[0], key[1], key[2], palette)
            cache[key] = closest
        out[base : base + 3] = bytes(closest)
    return RasterImage(width=image.width, height=image.height, data=bytes(out))


def dither(image: RasterImage, palette: Palette) -> RasterImage:
    """Apply Floyd–Steinberg error diffusion in raster-scan order.

    Each pixel is quantized from the working buffer, which already holds
    the error diffused by earlier pixels; the result is order-sensitive.
    Error only flows into in-bounds neighbours with nonzero alpha.
    """
    width, height = image.width, image.height
    work = bytearray(image.data)

    for y in range(height):
        for x in range(width):
            base = (y * width + x) * 4
            if work[base + 3] == 0:
                continue

            old_r, old_g, old_b = work[base], work[base + 1], work[base + 2]
            new_r, new_g, new_b = find_closest_color(old_r, old_g, old_b, palette)
            work[base] = new_r
            work[base + 1] = new_g
            work[base + 2] = new_b

            err_r = old_r - new_r
            err_g = old_g - new_g
            err_b = old_b - new_b
            if err_r == 0 and err_g == 0 and err_b == 0:
                continue

            for dx, dy, weight in FLOYD_STEINBERG_WEIGHTS:
                nx, ny = x + dx, y + dy
                if nx < 0 or nx >= width or ny >= height:
                    continue
                nbase = (ny * width + nx) * 4
                if work[nbase + 3] == 0:
                    continue
                work[nbase] = _clamp_byte(work[nbase] + err_r * weight)
                work[nbase + 1] = _clamp_byte(work[nbase + 1] + err_g * weight)
                work[nbase + 2] = _clamp_byte(work[nbase + 2] + err_b * weight)

    return RasterImage(width=width, height=height, data=bytes(work))


def count_unique_colors(image: RasterImage) -> int:
    """Count distinct RGB colors among pixels with nonzero alpha."""
    data = image.data
    colors = {
        bytes(data[base : base + 3])
        for base in range(0, len(data), 4)
        if data[base + 3] > 0
    }
    return len(colors)
