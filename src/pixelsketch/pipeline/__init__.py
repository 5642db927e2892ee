"""Local processing pipeline modules split by concern."""

from pixelsketch.pipeline.filters import SHARPEN_KERNEL, adjust_contrast, sharpen
from pixelsketch.pipeline.image_io import (
    layer_buffer_to_raster,
    load_raster,
    raster_from_pil,
    raster_to_data_url,
    raster_to_layer_buffer,
    raster_to_pil,
    raster_to_png_bytes,
    resize_nearest,
    save_raster,
)
from pixelsketch.pipeline.pipeline import (
    LocalResult,
    local_algorithm_tag,
    process_locally,
)
from pixelsketch.pipeline.quantization import (
    FLOYD_STEINBERG_WEIGHTS,
    count_unique_colors,
    dither,
    find_closest_color,
    quantize,
)

__all__ = [
    "FLOYD_STEINBERG_WEIGHTS",
    "LocalResult",
    "SHARPEN_KERNEL",
    "adjust_contrast",
    "count_unique_colors",
    "dither",
    "find_closest_color",
    "layer_buffer_to_raster",
    "load_raster",
    "local_algorithm_tag",
    "process_locally",
    "quantize",
    "raster_from_pil",
    "raster_to_data_url",
    "raster_to_layer_buffer",
    "raster_to_pil",
    "raster_to_png_bytes",
    "resize_nearest",
    "save_raster",
    "sharpen",
]
