"""Editor layer: pointer interaction, render data and session wiring."""

from curvedit.core.editor.interaction import InteractionController, PointerButton
from curvedit.core.editor.rendering import (
    HandleGlyph,
    Line,
    Rect,
    RenderFrame,
    ScanReadout,
    TextLabel,
    build_frame,
    curve_path,
)
from curvedit.core.editor.session import EditorSession

__all__ = [
    "EditorSession",
    "HandleGlyph",
    "InteractionController",
    "Line",
    "PointerButton",
    "Rect",
    "RenderFrame",
    "ScanReadout",
    "TextLabel",
    "build_frame",
    "curve_path",
]
