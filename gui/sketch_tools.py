"""
MashSketch - Sketch Tools Enums
Tool-Typen, Modi und Tastenkürzel für den Sketch-Editor
"""

from typing import Optional

from i18n import tr
from sketcher.primitives import ArcMode, CircleMode, RectMode
from sketcher.tools import SketchTool

__all__ = [
    "SketchTool", "ArcMode", "CircleMode", "RectMode",
    "TOOL_SHORTCUTS", "TOOL_LABELS", "tool_for_shortcut", "tool_label",
]

# Einbuchstabige Kürzel (Großbuchstaben, wie QKeyEvent.text().upper())
TOOL_SHORTCUTS = {
    " ": SketchTool.SELECT,
    "P": SketchTool.POINT,
    "L": SketchTool.LINE,
    "A": SketchTool.ARC,
    "C": SketchTool.CIRCLE,
    "R": SketchTool.RECTANGLE,
    "S": SketchTool.SPLINE,
}

TOOL_LABELS = {
    SketchTool.SELECT: "Select",
    SketchTool.POINT: "Point",
    SketchTool.LINE: "Line",
    SketchTool.ARC: "Arc",
    SketchTool.CIRCLE: "Circle",
    SketchTool.RECTANGLE: "Rectangle",
    SketchTool.SPLINE: "Spline",
}


def tool_for_shortcut(text: str) -> Optional[SketchTool]:
    if not text:
        return None
    return TOOL_SHORTCUTS.get(text if text == " " else text.upper())


def tool_label(tool: SketchTool) -> str:
    return tr(TOOL_LABELS[tool])
