"""Tests for pixelsketch.logging module."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from pixelsketch.logging import (
    DEFAULT_FORMAT,
    VERBOSE_FORMAT,
    JsonFormatter,
    get_logger,
    parse_level,
    setup_logging,
)


class TestGetLogger:
    """Tests for the get_logger factory function."""

    def test_returns_correct_namespace(self) -> None:
        """get_logger('engine') returns a logger named 'pixelsketch.engine'."""
        assert get_logger("engine").name == "pixelsketch.engine"

    def test_module_name_is_not_doubled(self) -> None:
        assert get_logger("pixelsketch.loader").name == "pixelsketch.loader"
        assert get_logger("pixelsketch").name == "pixelsketch"

    def test_child_of_pixelsketch(self) -> None:
        """Returned logger is a child of the 'pixelsketch' root logger."""
        _parent = logging.getLogger("pixelsketch")
        lg = get_logger("pipeline")
        assert lg.parent is not None
        assert lg.parent.name == "pixelsketch"


class TestParseLevel:
    def test_names_case_insensitive(self) -> None:
        assert parse_level("debug") == logging.DEBUG
        assert parse_level(" WARNING ") == logging.WARNING

    def test_int_passthrough(self) -> None:
        assert parse_level(15) == 15

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level"):
            parse_level("chatty")


class TestSetupLogging:
    """Tests for the setup_logging configuration function."""

    def test_default_info_level(self, clean_pixelsketch_logger: logging.Logger) -> None:
        setup_logging()
        assert clean_pixelsketch_logger.level == logging.INFO

    def test_level_by_name(self, clean_pixelsketch_logger: logging.Logger) -> None:
        setup_logging(level="debug")
        assert clean_pixelsketch_logger.level == logging.DEBUG

    def test_formats(self, clean_pixelsketch_logger: logging.Logger) -> None:
        setup_logging()
        assert clean_pixelsketch_logger.handlers[0].formatter._fmt == DEFAULT_FORMAT  # type: ignore[union-attr]
        setup_logging(verbose=True)
        assert clean_pixelsketch_logger.handlers[0].formatter._fmt == VERBOSE_FORMAT  # type: ignore[union-attr]

    def test_repeated_calls_do_not_stack_handlers(
        self, clean_pixelsketch_logger: logging.Logger
    ) -> None:
        setup_logging()
        setup_logging(level=logging.DEBUG)
        setup_logging(verbose=True)
        assert len(clean_pixelsketch_logger.handlers) == 1

    def test_log_file_handler(
        self, clean_pixelsketch_logger: logging.Logger, tmp_path: Path
    ) -> None:
        log_file = tmp_path / "pixelsketch.log"
        setup_logging(log_file=str(log_file))
        setup_logging(log_file=str(log_file))
        file_handlers = [
            h for h in clean_pixelsketch_logger.handlers if isinstance(h, logging.FileHandler)
        ]
        assert len(file_handlers) == 1

        get_logger("engine").info("hello file")
        for handler in file_handlers:
            handler.flush()
            handler.close()
        assert "hello file" in log_file.read_text(encoding="utf-8")

    def test_json_logs(self, clean_pixelsketch_logger: logging.Logger) -> None:
        setup_logging(json_logs=True)
        assert isinstance(clean_pixelsketch_logger.handlers[0].formatter, JsonFormatter)


class TestJsonFormatter:
    def _record(self, **extra: object) -> logging.LogRecord:
        record = logging.LogRecord(
            "pixelsketch.engine", logging.INFO, __file__, 1, "job %s done", ("x",), None
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_basic_fields(self) -> None:
        payload = json.loads(JsonFormatter().format(self._record()))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "pixelsketch.engine"
        assert payload["message"] == "job x done"
        assert "timestamp" in payload
        assert "job_id" not in payload

    def test_context_fields(self) -> None:
        record = self._record(job_id="job-1", backend="local-low-res", style="low-res")
        payload = json.loads(JsonFormatter().format(record))
        assert payload["job_id"] == "job-1"
        assert payload["backend"] == "local-low-res"
        assert payload["style"] == "low-res"
