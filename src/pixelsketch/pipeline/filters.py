"""Per-pixel contrast adjustment and 3x3 sharpening."""

from __future__ import annotations

from pixelsketch.models import RasterImage

SHARPEN_KERNEL: tuple[tuple[int, int, int], ...] = (
    (0, -1, 0),
    (-1, 5, -1),
    (0, -1, 0),
)


def adjust_contrast(image: RasterImage, factor: float) -> RasterImage:
    """Scale RGB channels of opaque pixels around mid-gray (128).

    ``out = clamp(round((v - 128) * factor + 128), 0, 255)``; rounding is
    half to even, so 63.5 becomes 64.
    """
    # 256-entry lookup: same mapping for every channel.
    table = bytes(
        round(min(255.0, max(0.0, (v - 128) * factor + 128))) for v in range(256)
    )
    out = bytearray(image.data)
    for base in range(0, len(out), 4):
        if out[base + 3] == 0:
            continue
        out[base] = table[out[base]]
        out[base + 1] = table[out[base + 1]]
        out[base + 2] = table[out[base + 2]]
    return RasterImage(width=image.width, height=image.height, data=bytes(out))


def sharpen(image: RasterImage) -> RasterImage:
    """Convolve interior opaque pixels with :data:`SHARPEN_KERNEL`.

    Reads from the unmodified input. The outermost 1-pixel border and
    pixels with zero alpha keep their original values.
    """
    width, height = image.width, image.height
    src = image.data
    out = bytearray(src)
    taps = [
        (kx - 1, ky - 1, weight)
        for ky, row in enumerate(SHARPEN_KERNEL)
        for kx, weight in enumerate(row)
        if weight != 0
    ]

    for y in range(1, height - 1):
        for x in range(1, width - 1):
            base = (y * width + x) * 4
            if src[base + 3] == 0:
                continue
            for channel in range(3):
                total = 0
                for dx, dy, weight in taps:
                    total += src[((y + dy) * width + (x + dx)) * 4 + channel] * weight
                out[base + channel] = min(255, max(0, total))

    return RasterImage(width=width, height=height, data=bytes(out))
