"""Generation engine — job table, backend resolution, and async execution.

``submit`` records a job and schedules its work on the running event
loop; callers ``poll`` by id until a terminal state appears.  Each job
resolves its backend independently:

1. inference enabled, mode ``auto``/``inference``, backend ready → inference
2. inference enabled, mode ``inference``, not ready → load, then inference;
   a failed load or run falls back to the local pipeline
3. otherwise → local pipeline

A local failure is terminal.  When the mode is pinned to ``inference``
and the local fallback fails as well, the job reports the inference error.
"""

from __future__ import annotations

import asyncio
import threading
import time
import uuid
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from pixelsketch.errors import (
    InferenceRuntimeError,
    InvalidInputError,
    JobNotFoundError,
    PixelSketchError,
)
from pixelsketch.loader import BackendLoader
from pixelsketch.logging import get_logger
from pixelsketch.models import (
    EngineSettings,
    GenerationJob,
    GenerationMetadata,
    GenerationMode,
    JobStatus,
    Palette,
    PixelArtStyle,
    RasterImage,
)
from pixelsketch.palette import parse_palette
from pixelsketch.pipeline import (
    LocalResult,
    count_unique_colors,
    layer_buffer_to_raster,
    process_locally,
    raster_to_data_url,
    raster_to_layer_buffer,
)
from pixelsketch.providers import InferenceBackend
from pixelsketch.styles import parse_style

logger = get_logger("engine")

DISPATCHED_PROGRESS = 50

LocalProcessor = Callable[..., LocalResult]


@dataclass(frozen=True)
class GenerationRequest:
    """Validated inputs of one job, captured at submit time."""

    sketch: RasterImage
    prompt: str
    target_width: int
    target_height: int
    style: PixelArtStyle
    palette: Palette | None


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _new_job_id() -> str:
    return f"job-{uuid.uuid4().hex}"


def inference_algorithm_tag(style: PixelArtStyle) -> str:
    """Return the metadata tag for an inference run."""
    return f"inference-{style.value}"


class GenerationEngine:
    """Owns the job table and drives generation jobs asynchronously.

    The job table is the only shared mutable state.  Records are frozen
    models replaced wholesale under a lock, so ``poll`` never observes a
    half-updated job.  ``cancel`` only drops the record; work already
    scheduled keeps running and its result is discarded.
    """

    def __init__(
        self,
        backend: InferenceBackend | None = None,
        settings: EngineSettings | None = None,
        processor: LocalProcessor = process_locally,
    ) -> None:
        """Initialize the engine.

        Args:
            backend: Optional inference backend. Without one every job
                runs on the local pipeline.
            settings: Initial engine settings (defaults to ``EngineSettings()``).
            processor: Local pipeline callable, run in a worker thread.
        """
        self.settings = settings or EngineSettings()
        self.backend = backend
        self.loader = BackendLoader(backend) if backend is not None else None
        self._processor = processor
        self._jobs: dict[str, GenerationJob] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._lock = threading.Lock()
        self._closed = False

    async def __aenter__(self) -> "GenerationEngine":
        """Enter the async context manager. Returns self."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Exit the async context manager, closing all resources."""
        await self.close()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_mode(self, mode: GenerationMode | str) -> None:
        """Select the backend policy for subsequently submitted jobs."""
        try:
            resolved = GenerationMode(mode)
        except ValueError:
            raise InvalidInputError(f"Unknown generation mode: {mode!r}") from None
        self.settings = self.settings.model_copy(update={"mode": resolved})
        logger.info("Generation mode set to %s", resolved.value)

    def set_inference_enabled(self, enabled: bool) -> None:
        """Enable or disable inference for subsequently submitted jobs."""
        self.settings = self.settings.model_copy(
            update={"inference_enabled": bool(enabled)}
        )
        logger.info("Inference %s", "enabled" if enabled else "disabled")

    # ------------------------------------------------------------------
    # Public job API
    # ------------------------------------------------------------------

    def submit(
        self,
        sketch: RasterImage,
        prompt: str,
        target_width: int,
        target_height: int,
        style: PixelArtStyle | str | None = None,
        palette: Iterable[str | Sequence[int]] | None = None,
    ) -> str:
        """Create a job and schedule it; returns the job id immediately.

        Must be called from a running event loop.  Invalid input yields a
        job that is already ``failed`` and no backend is invoked.

        Raises:
            PixelSketchError: If the engine has been closed.
            RuntimeError: If no event loop is running.
        """
        self._check_open()
        loop = asyncio.get_running_loop()
        job_id = _new_job_id()
        settings = self.settings

        try:
            request = self._build_request(
                sketch,
                prompt,
                target_width,
                target_height,
                style or settings.default_style,
                palette,
            )
        except InvalidInputError as exc:
            return self._reject(job_id, exc)

        self._insert(GenerationJob(id=job_id, status=JobStatus.PROCESSING))
        task = loop.create_task(self._execute(job_id, request, settings))
        self._tasks[job_id] = task
        task.add_done_callback(lambda _t, jid=job_id: self._tasks.pop(jid, None))
        logger.debug(
            "Submitted job %s (%s, %dx%d, mode=%s)",
            job_id,
            request.style.value,
            target_width,
            target_height,
            settings.mode.value,
            extra={"job_id": job_id, "style": request.style.value},
        )
        return job_id

    def submit_layer_buffer(
        self,
        layer_buffer: Sequence[str],
        canvas_width: int,
        canvas_height: int,
        prompt: str,
        target_width: int,
        target_height: int,
        style: PixelArtStyle | str | None = None,
        palette: Iterable[str | Sequence[int]] | None = None,
    ) -> str:
        """Submit an editor layer buffer (one hex string per pixel) as the sketch.

        A buffer that cannot be converted yields an already ``failed`` job,
        the same as any other invalid input to :meth:`submit`.
        """
        self._check_open()
        try:
            sketch = layer_buffer_to_raster(layer_buffer, canvas_width, canvas_height)
        except InvalidInputError as exc:
            asyncio.get_running_loop()
            return self._reject(_new_job_id(), exc)
        return self.submit(sketch, prompt, target_width, target_height, style, palette)

    def poll(self, job_id: str) -> GenerationJob:
        """Return the current snapshot of a job.

        Raises:
            JobNotFoundError: If *job_id* is unknown or was cancelled.
        """
        with self._lock:
            job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def cancel(self, job_id: str) -> None:
        """Forget a job.  In-flight work is not interrupted.

        Raises:
            JobNotFoundError: If *job_id* is unknown.
        """
        with self._lock:
            removed = self._jobs.pop(job_id, None)
        if removed is None:
            raise JobNotFoundError(job_id)
        logger.info("Cancelled job %s", job_id, extra={"job_id": job_id})

    def jobs(self) -> list[GenerationJob]:
        """Return snapshots of all tracked jobs."""
        with self._lock:
            return list(self._jobs.values())

    @property
    def processing_count(self) -> int:
        """Number of tracked jobs that have not reached a terminal state."""
        return sum(1 for job in self.jobs() if not job.is_terminal)

    async def wait(self, job_id: str, timeout: float | None = None) -> GenerationJob:
        """Await the job's scheduled work and return its latest snapshot.

        Raises:
            JobNotFoundError: If the job is unknown or was cancelled.
            TimeoutError: If *timeout* elapses first.  The job keeps running.
        """
        self.poll(job_id)
        task = self._tasks.get(job_id)
        if task is not None:
            try:
                await asyncio.wait_for(asyncio.shield(task), timeout)
            except asyncio.TimeoutError as exc:
                # asyncio.TimeoutError is only an alias of the builtin from 3.11
                raise TimeoutError(
                    f"Job {job_id} still running after {timeout}s"
                ) from exc
        return self.poll(job_id)

    def result_image(self, job_id: str) -> RasterImage | None:
        """Return the result of a completed job, or None while it has none.

        Raises:
            JobNotFoundError: If *job_id* is unknown or was cancelled.
        """
        job = self.poll(job_id)
        if job.status is not JobStatus.COMPLETED:
            return None
        return job.result

    def result_as_layer_buffer(
        self,
        job_id: str,
        canvas_width: int,
        canvas_height: int,
    ) -> list[str] | None:
        """Return a completed job's result as a ``canvas_width * canvas_height`` layer buffer."""
        image = self.result_image(job_id)
        if image is None:
            return None
        return raster_to_layer_buffer(image, canvas_width, canvas_height)

    def result_as_data_url(self, job_id: str) -> str | None:
        """Return a completed job's result as a PNG data URL."""
        image = self.result_image(job_id)
        if image is None:
            return None
        return raster_to_data_url(image)

    async def drain(self) -> None:
        """Wait until every scheduled job task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()))

    async def close(self) -> None:
        """Finish in-flight work and close the backend.

        Safe to call multiple times.
        """
        if self._closed:
            return
        self._closed = True
        await self.drain()
        if self.backend is not None:
            try:
                await self.backend.close()
            except Exception as e:
                logger.warning("Failed to close inference backend: %s", e)

    # ------------------------------------------------------------------
    # Job table
    # ------------------------------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise PixelSketchError("Engine is closed")

    def _insert(self, job: GenerationJob) -> None:
        with self._lock:
            self._jobs[job.id] = job

    def _reject(self, job_id: str, exc: InvalidInputError) -> str:
        logger.warning("Rejected job %s: %s", job_id, exc, extra={"job_id": job_id})
        self._insert(GenerationJob(id=job_id, status=JobStatus.FAILED, error=str(exc)))
        return job_id

    def _replace(self, job: GenerationJob) -> bool:
        """Swap in a new record unless the job is gone or already terminal."""
        with self._lock:
            current = self._jobs.get(job.id)
            if current is None or current.is_terminal:
                return False
            self._jobs[job.id] = job
            return True

    def _advance(self, job_id: str, progress: int) -> None:
        with self._lock:
            current = self._jobs.get(job_id)
            if current is None or current.is_terminal:
                return
            self._jobs[job_id] = current.model_copy(update={"progress": progress})

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    @staticmethod
    def _build_request(
        sketch: RasterImage,
        prompt: str,
        target_width: int,
        target_height: int,
        style: PixelArtStyle | str,
        palette: Iterable[str | Sequence[int]] | None,
    ) -> GenerationRequest:
        if target_width <= 0 or target_height <= 0:
            raise InvalidInputError(
                f"Target size must be positive, got {target_width}x{target_height}"
            )
        if sketch.is_empty:
            raise InvalidInputError("Sketch image is empty")
        return GenerationRequest(
            sketch=sketch,
            prompt=prompt,
            target_width=target_width,
            target_height=target_height,
            style=parse_style(style),
            palette=parse_palette(palette) if palette is not None else None,
        )

    async def _execute(
        self,
        job_id: str,
        request: GenerationRequest,
        settings: EngineSettings,
    ) -> None:
        started = time.perf_counter()
        try:
            image, metadata = await self._generate(job_id, request, settings)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(
                "Job %s failed: %s", job_id, exc, extra={"job_id": job_id}
            )
            with self._lock:
                current = self._jobs.get(job_id)
            progress = current.progress if current is not None else 0
            self._replace(
                GenerationJob(
                    id=job_id,
                    status=JobStatus.FAILED,
                    progress=progress,
                    error=_describe(exc),
                    processing_time_ms=elapsed_ms,
                )
            )
            return

        elapsed_ms = (time.perf_counter() - started) * 1000
        stored = self._replace(
            GenerationJob(
                id=job_id,
                status=JobStatus.COMPLETED,
                progress=100,
                result=image,
                metadata=metadata,
                processing_time_ms=elapsed_ms,
            )
        )
        if stored:
            logger.info(
                "Job %s completed via %s in %.1f ms",
                job_id,
                metadata.algorithm,
                elapsed_ms,
                extra={"job_id": job_id, "backend": metadata.algorithm},
            )
        else:
            logger.debug("Discarded result of removed job %s", job_id)

    async def _generate(
        self,
        job_id: str,
        request: GenerationRequest,
        settings: EngineSettings,
    ) -> tuple[RasterImage, GenerationMetadata]:
        if (
            self.backend is None
            or self.loader is None
            or not settings.inference_enabled
            or settings.mode is GenerationMode.LOCAL
        ):
            return await self._run_local(job_id, request)

        if self.backend.is_ready():
            try:
                return await self._run_inference(job_id, request)
            except Exception as exc:
                inference_error: Exception = exc
        elif settings.mode is GenerationMode.INFERENCE:
            try:
                await self.loader.ensure_ready(settings.model_location)
                return await self._run_inference(job_id, request)
            except Exception as exc:
                inference_error = exc
        else:
            return await self._run_local(job_id, request)

        logger.warning(
            "Inference failed for job %s, falling back to local pipeline: %s",
            job_id,
            inference_error,
            extra={"job_id": job_id},
        )
        try:
            image, metadata = await self._run_local(job_id, request)
        except Exception as local_exc:
            if settings.mode is GenerationMode.INFERENCE:
                raise inference_error from local_exc
            raise
        return image, metadata.model_copy(
            update={"fallback_reason": _describe(inference_error)}
        )

    async def _run_local(
        self,
        job_id: str,
        request: GenerationRequest,
    ) -> tuple[RasterImage, GenerationMetadata]:
        self._advance(job_id, DISPATCHED_PROGRESS)
        result = await asyncio.to_thread(
            self._processor,
            request.sketch,
            request.target_width,
            request.target_height,
            request.style,
            request.palette,
        )
        return result.image, result.metadata

    async def _run_inference(
        self,
        job_id: str,
        request: GenerationRequest,
    ) -> tuple[RasterImage, GenerationMetadata]:
        assert self.backend is not None
        if not self.backend.is_ready():
            raise InferenceRuntimeError("Inference backend is not ready")
        self._advance(job_id, DISPATCHED_PROGRESS)
        try:
            image = await self.backend.run(
                request.sketch,
                request.prompt,
                request.target_width,
                request.target_height,
                request.style,
            )
        except InferenceRuntimeError:
            raise
        except Exception as exc:
            raise InferenceRuntimeError(
                f"Inference run failed: {_describe(exc)}"
            ) from exc

        if (image.width, image.height) != (request.target_width, request.target_height):
            raise InferenceRuntimeError(
                f"Inference returned {image.width}x{image.height}, expected "
                f"{request.target_width}x{request.target_height}"
            )
        metadata = GenerationMetadata(
            colors_used=count_unique_colors(image),
            pixel_count=request.target_width * request.target_height,
            algorithm=inference_algorithm_tag(request.style),
        )
        return image, metadata
