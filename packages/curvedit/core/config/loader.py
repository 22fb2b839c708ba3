"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from curvedit.core.config.models import EditorConfig, LoggingConfig
from curvedit.core.utils.json import read_json
from curvedit.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "CURVEDIT_LOG_LEVEL"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("curvedit.json")
        'json'
        >>> detect_format("curvedit.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Supports both JSON and YAML formats. Format is auto-detected
    from file extension.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            return read_json(path)
        except ValueError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        with path.open("r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    # safe_load returns None for empty files
    if content is None:
        return {}
    if not isinstance(content, dict):
        kind = type(content).__name__
        raise ValueError(f"Invalid YAML in {path}: expected a mapping, got {kind}")
    return content


def load_editor_config(path: str | Path | None = None) -> EditorConfig:
    """Load and validate editor configuration.

    A missing file yields the defaults. The log level can be overridden
    with the CURVEDIT_LOG_LEVEL environment variable.

    Args:
        path: Path to config file; defaults to EditorConfig.default_path()

    Returns:
        Validated EditorConfig

    Raises:
        ValidationError: If config is invalid
    """
    config = EditorConfig.load_or_default(path)
    _load_env_vars_into_config(config)
    return config


def _load_env_vars_into_config(config: EditorConfig) -> None:
    """Fill environment overrides into the config (mutates it)."""
    level = os.getenv(LOG_LEVEL_ENV)
    if level:
        logger.debug(f"Loaded {LOG_LEVEL_ENV} from environment")
        config.logging = LoggingConfig.model_validate(
            {**config.logging.model_dump(), "level": level.upper()}
        )


def configure_logging(config: EditorConfig | None = None) -> None:
    """Configure Python logging from editor config.

    Args:
        config: EditorConfig instance (loads default if None)
    """
    if config is None:
        config = load_editor_config()

    _configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )
