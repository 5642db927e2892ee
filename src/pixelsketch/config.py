"""YAML and environment configuration for the generation engine."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from pixelsketch.errors import ConfigError
from pixelsketch.logging import get_logger
from pixelsketch.models import EngineSettings

logger = get_logger("config")

ENV_MODE = "PIXELSKETCH_MODE"
ENV_INFERENCE_ENABLED = "PIXELSKETCH_INFERENCE_ENABLED"
ENV_MODEL_LOCATION = "PIXELSKETCH_MODEL_LOCATION"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        ConfigError: If the YAML is malformed or not a mapping.
    """
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}"
        )
    return data


def _build_settings(data: Mapping[str, Any], source: str) -> EngineSettings:
    try:
        return EngineSettings(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid engine settings in {source}: {exc}") from exc


def load_settings(path: str | Path) -> EngineSettings:
    """Load engine settings from a YAML file.

    Expected YAML shape::

        engine:
          mode: inference
          inference_enabled: true
          model_location: models/pixel-art-generator.onnx
          default_style: retro-16bit

    The ``engine`` wrapper key is optional.

    Raises:
        ConfigError: If the file is missing, malformed, or fails validation.
    """
    resolved = Path(path)
    if not resolved.is_file():
        raise ConfigError(f"Config file not found: {resolved}")

    data = _parse_yaml(resolved)
    if "engine" in data:
        section = data["engine"]
        if not isinstance(section, dict):
            raise ConfigError("'engine' section must be a YAML mapping")
        data = section

    settings = _build_settings(data, str(resolved))
    logger.debug("Loaded settings from %s: %s", resolved, settings)
    return settings


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def settings_from_env(
    base: EngineSettings | None = None,
    environ: Mapping[str, str] | None = None,
) -> EngineSettings:
    """Apply ``PIXELSKETCH_*`` environment overrides on top of *base*."""
    env = os.environ if environ is None else environ
    data: dict[str, Any] = (base or EngineSettings()).model_dump()

    if env.get(ENV_MODE):
        data["mode"] = env[ENV_MODE].strip().lower()
    if env.get(ENV_INFERENCE_ENABLED):
        data["inference_enabled"] = _parse_bool(
            ENV_INFERENCE_ENABLED, env[ENV_INFERENCE_ENABLED]
        )
    if env.get(ENV_MODEL_LOCATION):
        data["model_location"] = env[ENV_MODEL_LOCATION]

    return _build_settings(data, "environment")
