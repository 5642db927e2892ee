"""pixelsketch — sketch-to-pixel-art generation with a deterministic local pipeline."""

from pixelsketch.config import load_settings, settings_from_env
from pixelsketch.engine import GenerationEngine, GenerationRequest
from pixelsketch.errors import (
    BackendUnavailableError,
    ConfigError,
    InferenceRuntimeError,
    InvalidInputError,
    JobNotFoundError,
    PaletteError,
    PixelSketchError,
    SurfaceError,
)
from pixelsketch.loader import BackendLoader
from pixelsketch.logging import get_logger, setup_logging
from pixelsketch.models import (
    EngineSettings,
    GenerationJob,
    GenerationMetadata,
    GenerationMode,
    JobStatus,
    Palette,
    PixelArtStyle,
    RasterImage,
    StyleProfile,
)
from pixelsketch.palette import (
    builtin_palette,
    generate_color_cube,
    hex_to_rgb,
    parse_palette,
    resolve_palette,
    rgb_to_hex,
)
from pixelsketch.pipeline import LocalResult, process_locally
from pixelsketch.providers import InferenceBackend
from pixelsketch.styles import STYLE_PROFILES, get_style_profile, parse_style

__all__ = [
    "BackendLoader",
    "BackendUnavailableError",
    "ConfigError",
    "EngineSettings",
    "GenerationEngine",
    "GenerationJob",
    "GenerationMetadata",
    "GenerationMode",
    "GenerationRequest",
    "InferenceBackend",
    "InferenceRuntimeError",
    "InvalidInputError",
    "JobNotFoundError",
    "JobStatus",
    "LocalResult",
    "Palette",
    "PaletteError",
    "PixelArtStyle",
    "PixelSketchError",
    "RasterImage",
    "STYLE_PROFILES",
    "StyleProfile",
    "SurfaceError",
    "builtin_palette",
    "generate_color_cube",
    "get_logger",
    "get_style_profile",
    "hex_to_rgb",
    "load_settings",
    "parse_palette",
    "parse_style",
    "process_locally",
    "resolve_palette",
    "rgb_to_hex",
    "settings_from_env",
    "setup_logging",
]
