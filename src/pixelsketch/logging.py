"""Logging configuration for pixelsketch.

Provides a setup function for the ``pixelsketch`` logger tree and a
module-level logger factory.  Uses Python's built-in logging module.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER_NAME = "pixelsketch"
DEFAULT_FORMAT = "%(levelname)-5s | %(name)-20s | %(message)s"
VERBOSE_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)-20s | %(message)s"
_SETUP_LOCK = threading.Lock()

# Extra attributes the engine attaches to records (``extra={"job_id": ...}``).
_CONTEXT_FIELDS = ("job_id", "backend", "style")


class JsonFormatter(logging.Formatter):
    """JSON log formatter that also emits job context fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def parse_level(level: int | str) -> int:
    """Translate a level name such as ``"debug"`` into its numeric value.

    Raises:
        ValueError: If *level* is not a known logging level name.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def _make_formatter(json_logs: bool, fmt: str) -> logging.Formatter:
    return JsonFormatter() if json_logs else logging.Formatter(fmt)


def setup_logging(
    level: int | str = logging.INFO,
    verbose: bool = False,
    log_file: str | None = None,
    json_logs: bool = False,
) -> None:
    """Configure handlers on the ``pixelsketch`` logger.

    Repeated calls reuse the existing stderr/file handlers instead of
    stacking duplicates, so the CLI and tests may both call it.

    Args:
        level: Logging level, numeric or by name (default: INFO).
        verbose: If True, include timestamps in console output.
        log_file: Optional file path to write logs to (in addition to stderr).
        json_logs: Emit structured JSON log lines when True.
    """
    with _SETUP_LOCK:
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        logger.setLevel(parse_level(level))

        stream_handlers = [
            h
            for h in logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
            and getattr(h, "stream", None) is sys.stderr
        ]
        if stream_handlers:
            stream_handler = stream_handlers[0]
            for extra in stream_handlers[1:]:
                logger.removeHandler(extra)
        else:
            stream_handler = logging.StreamHandler(sys.stderr)
            logger.addHandler(stream_handler)
        stream_handler.setFormatter(
            _make_formatter(json_logs, VERBOSE_FORMAT if verbose else DEFAULT_FORMAT)
        )

        if log_file:
            target = os.path.abspath(str(log_file))
            existing = [
                h
                for h in logger.handlers
                if isinstance(h, logging.FileHandler)
                and getattr(h, "baseFilename", None) == target
            ]
            file_handler = existing[0] if existing else logging.FileHandler(log_file)
            if not existing:
                logger.addHandler(file_handler)
            file_handler.setFormatter(_make_formatter(json_logs, VERBOSE_FORMAT))


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``pixelsketch`` namespace.

    Accepts either a short name (``"engine"``) or a module ``__name__``
    (``"pixelsketch.engine"``); both resolve to the same logger.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
