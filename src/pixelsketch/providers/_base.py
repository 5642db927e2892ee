"""Capability port for optional neural inference backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pixelsketch.models import PixelArtStyle, RasterImage


class InferenceBackend(ABC):
    """Abstract base for neural sketch-to-pixel-art backends.

    The engine only talks to this interface; model loading and tensor
    execution live in concrete implementations.
    """

    @abstractmethod
    def is_ready(self) -> bool:
        """Return True when a model is loaded and ``run`` may be called.

        Advisory only: the engine re-checks it right before dispatch.
        """

    @abstractmethod
    async def load(self, location: str) -> None:
        """Load the model found at *location*.

        Raises:
            BackendUnavailableError: If the model cannot be loaded.
        """

    @abstractmethod
    async def run(
        self,
        sketch: RasterImage,
        prompt: str,
        target_width: int,
        target_height: int,
        style: PixelArtStyle,
    ) -> RasterImage:
        """Generate a ``target_width`` x ``target_height`` image from *sketch*.

        Raises:
            InferenceRuntimeError: If execution fails.
        """

    async def close(self) -> None:
        """Release backend resources.

        Default implementation does nothing. Backends holding sessions
        should override this method.
        """
        pass
