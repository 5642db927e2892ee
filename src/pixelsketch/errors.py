"""pixelsketch error hierarchy.

All custom exceptions inherit from PixelSketchError, enabling callers
to catch the base class for blanket error handling or specific
subclasses for targeted recovery.
"""


class PixelSketchError(Exception):
    """Base exception for all pixelsketch errors."""


class ConfigError(PixelSketchError):
    """Raised when engine configuration loading or validation fails."""


class InvalidInputError(PixelSketchError):
    """Raised for unusable requests (non-positive size, empty sketch, unknown style)."""


class PaletteError(InvalidInputError):
    """Raised when a palette is empty or contains a malformed color."""


class SurfaceError(PixelSketchError):
    """Raised when the local pipeline cannot obtain a working image buffer."""


class BackendUnavailableError(PixelSketchError):
    """Raised when the inference backend cannot be loaded or is not ready."""


class InferenceRuntimeError(PixelSketchError):
    """Raised when a dispatched inference run fails."""


class JobNotFoundError(PixelSketchError, KeyError):
    """Raised by poll/cancel when a job id is unknown."""

    def __init__(self, job_id: str) -> None:
        super().__init__(job_id)
        self.job_id = job_id

    def __str__(self) -> str:
        return f"Job not found: {self.job_id}"
