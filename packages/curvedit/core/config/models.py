"""Configuration models for curvedit."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from curvedit.core.curves.geometry import HANDLE_SIZE
from curvedit.core.curves.models import CurveType


class ConfigBase(BaseModel):
    """Base class for curvedit configurations.

    Provides common functionality for loading from files with defaults.
    Subclasses must implement default_path() to specify their default location.
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type."""
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from path, falling back to defaults when it is missing.

        Raises:
            ValueError: If the file format is unsupported or content is invalid
            ValidationError: If config is invalid
        """
        from curvedit.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
        if not Path(path).exists():
            return cls()
        return cls.model_validate(load_config(path))


class CurveSettings(BaseModel):
    """Host-owned settings of one curve.

    The read-only flags lock the matching setting against changes made
    through the editor's configuration surface.
    """

    curve_type: CurveType = Field(default=CurveType.LINEAR, description="Interpolation mode")
    min_value: float = Field(default=0.0, description="Bottom of the value range")
    max_value: float = Field(default=1.0, description="Top of the value range")
    clamp_enabled: bool = Field(
        default=False, description="Clamp interpolated output to [min_value, max_value]"
    )
    range_enabled: bool = Field(default=False, description="Show and edit range values")

    read_only_type: bool = False
    read_only_clamp: bool = False
    read_only_range: bool = False

    @model_validator(mode="after")
    def _validate_range(self) -> CurveSettings:
        if self.min_value > self.max_value:
            raise ValueError(
                f"min_value ({self.min_value}) must be <= max_value ({self.max_value})"
            )
        return self


class GeometrySettings(BaseModel):
    """Widget geometry."""

    handle_size: float = Field(default=HANDLE_SIZE, gt=0, description="Handle glyph size (px)")
    default_width: float = Field(default=320.0, ge=0, description="Initial widget width (px)")
    default_height: float = Field(default=240.0, ge=0, description="Initial widget height (px)")


class RenderSettings(BaseModel):
    """Path and grid density."""

    divisions: int = Field(default=256, ge=1, description="Samples per curve segment")
    grid_divisions: int = Field(default=5, ge=1, description="Grid cells per axis")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False
    filename: str | None = None


class EditorConfig(ConfigBase):
    """Top-level editor configuration."""

    curve: CurveSettings = Field(default_factory=CurveSettings)
    geometry: GeometrySettings = Field(default_factory=GeometrySettings)
    render: RenderSettings = Field(default_factory=RenderSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def default_path(cls) -> Path:
        return Path("curvedit.yaml")
