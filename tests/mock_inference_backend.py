"""Mock inference backend for unit testing."""

from __future__ import annotations

import asyncio
from typing import Any

from pixelsketch.errors import BackendUnavailableError
from pixelsketch.models import PixelArtStyle, RasterImage
from pixelsketch.providers import InferenceBackend


class MockInferenceBackend(InferenceBackend):
    """An inference backend with scripted readiness, load, and run outcomes.

    Usage::

        backend = MockInferenceBackend(ready=False)
        await backend.load("model.onnx")
        assert backend.is_ready()
        image = await backend.run(sketch, "a cat", 8, 8, PixelArtStyle.LOW_RES)
    """

    def __init__(
        self,
        ready: bool = False,
        load_error: Exception | None = None,
        run_error: Exception | None = None,
        load_delay: float = 0.0,
        run_delay: float = 0.0,
        fill: tuple[int, int, int, int] = (10, 20, 30, 255),
    ) -> None:
        self._ready = ready
        self._load_error = load_error
        self._run_error = run_error
        self._load_delay = load_delay
        self._run_delay = run_delay
        self._fill = fill
        self.load_calls: list[str] = []
        self.run_calls: list[dict[str, Any]] = []
        self.closed = False

    def is_ready(self) -> bool:
        return self._ready

    async def load(self, location: str) -> None:
        self.load_calls.append(location)
        await asyncio.sleep(self._load_delay)
        if self._load_error is not None:
            raise self._load_error
        self._ready = True

    async def run(
        self,
        sketch: RasterImage,
        prompt: str,
        target_width: int,
        target_height: int,
        style: PixelArtStyle,
    ) -> RasterImage:
        self.run_calls.append(
            {
                "prompt": prompt,
                "target_width": target_width,
                "target_height": target_height,
                "style": style,
            }
        )
        await asyncio.sleep(self._run_delay)
        if self._run_error is not None:
            raise self._run_error
        return RasterImage.filled(target_width, target_height, self._fill)

    async def close(self) -> None:
        self.closed = True


def unavailable(message: str = "model missing") -> BackendUnavailableError:
    """Shorthand for a load failure."""
    return BackendUnavailableError(message)
