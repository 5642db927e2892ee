"""Pydantic data models for images, styles, jobs, and engine settings."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

RGB = tuple[int, int, int]
RGBA = tuple[int, int, int, int]

# Ordered palette; declaration order breaks nearest-color ties.
Palette = tuple[RGB, ...]


class PixelArtStyle(str, Enum):
    """Closed set of output styles, each bound to one StyleProfile."""

    RETRO_8BIT = "retro-8bit"
    RETRO_16BIT = "retro-16bit"
    PIXEL_MODERN = "pixel-modern"
    LOW_RES = "low-res"
    HIGH_DETAIL = "high-detail"


class GenerationMode(str, Enum):
    """Backend selection policy for the generation engine.

    * **AUTO**: use inference when it is already loaded, otherwise local.
    * **INFERENCE**: pin inference, loading it on demand; fall back to local.
    * **LOCAL**: always run the deterministic local pipeline.
    """

    AUTO = "auto"
    INFERENCE = "inference"
    LOCAL = "local"


class JobStatus(str, Enum):
    """Lifecycle state of a generation job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """True for states a job never leaves (completed or failed)."""
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class RasterImage(BaseModel):
    """Raw image of interleaved 8-bit RGBA samples.

    Attributes:
        width: Width in pixels.
        height: Height in pixels.
        data: ``width * height * 4`` bytes, row-major RGBA.
    """

    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    data: bytes

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _buffer_matches_dimensions(self) -> "RasterImage":
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise ValueError(
                f"RGBA buffer has {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height}"
            )
        return self

    @classmethod
    def filled(cls, width: int, height: int, rgba: RGBA) -> "RasterImage":
        """Build an image where every pixel is *rgba*."""
        return cls(width=width, height=height, data=bytes(rgba) * (width * height))

    @property
    def pixel_count(self) -> int:
        """Number of pixels (``width * height``)."""
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        """True when the image has no pixels."""
        return self.pixel_count == 0

    def pixel(self, x: int, y: int) -> RGBA:
        """Return the ``(R, G, B, A)`` sample at column *x*, row *y*."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height}")
        base = (y * self.width + x) * 4
        r, g, b, a = self.data[base : base + 4]
        return (r, g, b, a)


class StyleProfile(BaseModel):
    """Processing parameters for one style.

    Attributes:
        max_colors: Size of the built-in palette used when none is given.
        dither_enabled: Apply Floyd–Steinberg error diffusion.
        smoothing_enabled: Informational; the resize filter is always nearest.
        contrast_boost: Contrast factor around mid-gray (1.0 = unchanged).
    """

    max_colors: int = Field(..., gt=0)
    dither_enabled: bool
    smoothing_enabled: bool
    contrast_boost: float = Field(..., gt=0)

    model_config = ConfigDict(frozen=True)


class GenerationMetadata(BaseModel):
    """Summary of a finished generation.

    Attributes:
        colors_used: Distinct opaque RGB colors in the result.
        pixel_count: ``target_width * target_height``.
        algorithm: Backend tag, e.g. ``"local-low-res"``.
        fallback_reason: Inference failure that caused a local fallback, if any.
    """

    colors_used: int = Field(..., ge=0)
    pixel_count: int = Field(..., ge=0)
    algorithm: str
    fallback_reason: str | None = None

    model_config = ConfigDict(frozen=True)


class GenerationJob(BaseModel):
    """Snapshot of one tracked generation request.

    Records are immutable; the engine replaces whole records on every
    transition, so a snapshot returned by ``poll`` never changes under
    the caller.
    """

    id: str
    status: JobStatus = JobStatus.PENDING
    progress: int = Field(default=0, ge=0, le=100)
    result: RasterImage | None = None
    error: str | None = None
    metadata: GenerationMetadata | None = None
    processing_time_ms: float | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_terminal(self) -> bool:
        """True once the job has completed or failed."""
        return self.status.is_terminal


class EngineSettings(BaseModel):
    """Process-wide engine configuration.

    Attributes:
        mode: Backend selection policy.
        inference_enabled: Master switch for the inference backend.
        model_location: Location handed to ``InferenceBackend.load``.
        default_style: Style used when a request does not name one.
    """

    mode: GenerationMode = GenerationMode.AUTO
    inference_enabled: bool = True
    model_location: str = "models/pixel-art-generator.onnx"
    default_style: PixelArtStyle = PixelArtStyle.PIXEL_MODERN

    model_config = ConfigDict(extra="forbid")
