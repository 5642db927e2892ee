"""De-duplicated loading for the inference backend.

At most one ``InferenceBackend.load`` call is in flight at a time.
Concurrent callers await the same task and see the same outcome.
"""

from __future__ import annotations

import asyncio

from pixelsketch.errors import BackendUnavailableError
from pixelsketch.logging import get_logger
from pixelsketch.providers import InferenceBackend

logger = get_logger("loader")


class BackendLoader:
    """Single-flight loader wrapping an :class:`InferenceBackend`."""

    def __init__(self, backend: InferenceBackend) -> None:
        self.backend = backend
        self._inflight: asyncio.Task[None] | None = None
        self.load_attempts = 0
        self.last_error: str | None = None

    @property
    def is_loading(self) -> bool:
        """True while a load task is running."""
        return self._inflight is not None and not self._inflight.done()

    async def ensure_ready(self, location: str) -> None:
        """Return once the backend is ready, loading it if needed.

        Raises:
            BackendUnavailableError: If the shared load attempt fails or
                the backend still reports not ready afterwards.
        """
        if self.backend.is_ready():
            return

        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.create_task(self._load(location))
        # shield: a cancelled waiter must not cancel the shared load.
        await asyncio.shield(self._inflight)

        if not self.backend.is_ready():
            raise BackendUnavailableError(
                "Inference backend reported not ready after loading"
            )

    async def _load(self, location: str) -> None:
        self.load_attempts += 1
        self.last_error = None
        logger.info("Loading inference model from %s", location)
        try:
            await self.backend.load(location)
        except BackendUnavailableError as exc:
            self.last_error = str(exc)
            logger.error("Failed to load inference model: %s", exc)
            raise
        except Exception as exc:
            self.last_error = str(exc) or type(exc).__name__
            logger.error("Failed to load inference model: %s", exc)
            raise BackendUnavailableError(
                f"Failed to load model from {location}: {self.last_error}"
            ) from exc
        logger.info("Inference model loaded")
