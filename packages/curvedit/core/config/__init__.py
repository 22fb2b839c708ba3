"""Configuration management for curvedit."""

from curvedit.core.config.loader import (
    configure_logging,
    detect_format,
    load_config,
    load_editor_config,
)
from curvedit.core.config.models import (
    ConfigBase,
    CurveSettings,
    EditorConfig,
    GeometrySettings,
    LoggingConfig,
    RenderSettings,
)

__all__ = [
    # Loaders
    "configure_logging",
    "detect_format",
    "load_config",
    "load_editor_config",
    # Models
    "ConfigBase",
    "CurveSettings",
    "EditorConfig",
    "GeometrySettings",
    "LoggingConfig",
    "RenderSettings",
]
