"""Exceptions raised by the curve engine."""

from __future__ import annotations


class CurveEditorError(Exception):
    """Base class for curve editor domain errors."""


class PointNotFoundError(CurveEditorError, ValueError):
    """A control point is not part of the curve (identity lookup failed)."""


class SettingLockedError(CurveEditorError):
    """A read-only setting was changed through the host configuration surface."""

    def __init__(self, setting: str) -> None:
        super().__init__(f"Setting '{setting}' is read-only")
        self.setting = setting
