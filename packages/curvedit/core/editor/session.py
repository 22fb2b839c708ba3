"""Editor session: one curve wired to its host collection, input and settings."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from curvedit.core.config.models import CurveSettings, EditorConfig
from curvedit.core.curves.binding import ObservablePointList, bind
from curvedit.core.curves.errors import SettingLockedError
from curvedit.core.curves.geometry import CoordinateMapper
from curvedit.core.curves.model import CurveModel
from curvedit.core.curves.models import AreaSize, ControlPoint, CurveChange, CurveType
from curvedit.core.editor.interaction import InteractionController
from curvedit.core.editor.rendering import RenderFrame, build_frame
from curvedit.core.utils.logging import get_logger

logger = get_logger(__name__)

# setting name -> read-only flag guarding it
_LOCKS: dict[str, str | None] = {
    "curve_type": "read_only_type",
    "clamp_enabled": "read_only_clamp",
    "range_enabled": "read_only_range",
    "min_value": None,
    "max_value": None,
}


class EditorSession:
    """A curve editor instance.

    Owns the CurveModel, mirrors it from a host ObservablePointList and routes
    pointer input through an InteractionController. Settings changes go
    through ``apply_setting`` so the read-only flags are honoured.

    Args:
        config: Editor configuration (defaults when omitted).
        source: Host point collection; an empty one is created when omitted.
    """

    def __init__(
        self,
        config: EditorConfig | None = None,
        source: ObservablePointList | None = None,
    ) -> None:
        self.config = config or EditorConfig()
        self.settings: CurveSettings = self.config.curve.model_copy()

        geometry = self.config.geometry
        self.model = CurveModel.from_settings(
            self.settings,
            area_size=AreaSize(geometry.default_width, geometry.default_height),
            mapper=CoordinateMapper(geometry.handle_size),
        )
        self.controller = InteractionController(self.model)
        self._unwatch = self.model.subscribe(self._on_model_change)

        self._source = source if source is not None else ObservablePointList()
        self._unbind: Callable[[], None] | None = bind(self.model, self._source)
        logger.debug(f"Editor session bound to {len(self._source)} points")

    @classmethod
    def with_points(
        cls, points: Iterable[ControlPoint], config: EditorConfig | None = None
    ) -> EditorSession:
        """Create a session over a fresh host collection holding ``points``."""
        return cls(config, ObservablePointList(points))

    @property
    def source(self) -> ObservablePointList:
        return self._source

    def set_source(self, source: ObservablePointList) -> None:
        """Swap the host collection; the model is rebuilt from its contents."""
        if self._unbind is not None:
            self._unbind()
        self.controller.release_all()
        self._source = source
        self._unbind = bind(self.model, source)

    def apply_setting(self, name: str, value: Any) -> CurveChange:
        """Change one curve setting through the configuration surface.

        Args:
            name: One of curve_type, clamp_enabled, range_enabled,
                min_value, max_value.
            value: New value.

        Returns:
            The model change (empty fields when the value was unchanged).

        Raises:
            SettingLockedError: If the setting's read-only flag is set.
            ValueError: If the setting name is unknown.
            ValidationError: If the new settings are invalid.
        """
        if name not in _LOCKS:
            raise ValueError(f"Unknown setting: {name}")

        lock = _LOCKS[name]
        if lock is not None and getattr(self.settings, lock):
            raise SettingLockedError(name)

        settings = CurveSettings.model_validate({**self.settings.model_dump(), name: value})
        self.settings = settings

        if name == "curve_type":
            change = self.model.set_curve_type(CurveType(settings.curve_type))
        elif name == "clamp_enabled":
            change = self.model.set_clamped(settings.clamp_enabled)
        elif name == "range_enabled":
            change = self.model.set_range_enabled(settings.range_enabled)
        else:
            change = self.model.set_range(settings.min_value, settings.max_value)

        return change

    def resize(self, width: float, height: float) -> CurveChange:
        return self.model.resize(AreaSize(width, height))

    def _on_model_change(self, change: CurveChange) -> None:
        # Any curve change can move the value under an active scan
        self.controller.refresh()

    def frame(self) -> RenderFrame:
        """Render data for the current state."""
        return build_frame(
            self.model,
            self.controller.scan,
            divisions=self.config.render.divisions,
            grid_divisions=self.config.render.grid_divisions,
        )

    def close(self) -> None:
        """Detach from the host collection and drop any active session."""
        self.controller.release_all()
        if self._unbind is not None:
            self._unbind()
            self._unbind = None
        self._unwatch()
