"""
MashSketch - Qt Input Bridge
Übersetzt Qt-Maus- und Tastatur-Events in SketchSession-Aufrufe.

Die Punkte müssen bereits auf die aktive Ebene projiziert sein
(Raycasting erledigt der Viewport).
"""

from typing import Optional

from loguru import logger
from PySide6.QtCore import QObject, Qt, Signal

from config.feature_flags import is_enabled
from i18n import tr
from sketcher.plane_basis import Plane
from sketcher.primitives import ArcMode, CircleMode, Primitive, RectMode
from sketcher.render_handle import SketchScene
from sketcher.session import EventKind, SketchKey, SketchSession
from sketcher.sketch import Sketch
from .sketch_tools import SketchTool, tool_for_shortcut


class SketchInputBridge(QObject):
    """Verbindet Viewport-Events mit einer SketchSession und meldet Änderungen per Signal."""

    status_message = Signal(str)
    sketch_changed = Signal()
    primitive_finalized = Signal(object)
    tool_changed = Signal(object)

    def __init__(self, session: Optional[SketchSession] = None,
                 scene: Optional[SketchScene] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.session = session if session is not None else SketchSession(scene=scene)
        self.session.add_finalized_listener(self._on_finalized)
        # Qt: press, release, doubleClick, release. Das zweite release ist kein Klick.
        self._swallow_release = False

    # === Lebenszyklus ===

    def start_sketch(self, plane: Optional[Plane] = None, name: Optional[str] = None,
                     existing_names=()) -> Sketch:
        sketch = self.session.start_sketch(plane, name, existing_names)
        self._emit_status()
        self.sketch_changed.emit()
        return sketch

    def edit_sketch(self, sketch: Sketch) -> Sketch:
        sketch = self.session.edit_sketch(sketch)
        self._emit_status()
        self.sketch_changed.emit()
        return sketch

    def finish_sketch(self) -> Optional[Sketch]:
        sketch = self.session.finish_sketch()
        self.status_message.emit(tr("Sketch finished"))
        self.sketch_changed.emit()
        return sketch

    def cancel_sketch(self) -> None:
        self.session.cancel_sketch()
        self.status_message.emit(tr("Sketch cancelled"))
        self.sketch_changed.emit()

    # === Tools ===

    def set_tool(self, tool: SketchTool) -> None:
        self.session.set_tool(tool)
        self.tool_changed.emit(tool)
        self._emit_status()

    def set_rect_mode(self, mode: RectMode) -> None:
        self.session.set_rect_mode(mode)
        self.tool_changed.emit(SketchTool.RECTANGLE)
        self._emit_status()

    def set_circle_mode(self, mode: CircleMode) -> None:
        self.session.set_circle_mode(mode)
        self.tool_changed.emit(SketchTool.CIRCLE)
        self._emit_status()

    def set_arc_mode(self, mode: ArcMode) -> None:
        self.session.set_arc_mode(mode)
        self.tool_changed.emit(SketchTool.ARC)
        self._emit_status()

    def finish_spline_and_exit(self) -> Optional[Primitive]:
        result = self.session.finish_spline_and_exit()
        self.tool_changed.emit(SketchTool.SELECT)
        self._emit_status()
        return result

    # === Maus ===

    def mouse_move(self, point) -> None:
        self.session.handle_pointer(point, EventKind.MOVE)

    def mouse_press(self, point, button) -> None:
        if button == Qt.RightButton:
            self.session.handle_context_menu()
            self._emit_status()
            return
        if button == Qt.LeftButton:
            self.session.handle_pointer(point, EventKind.DOWN)

    def mouse_release(self, point, button) -> None:
        """Qt kennt kein Click-Event: Loslassen der linken Taste = UP + CLICK."""
        if button != Qt.LeftButton:
            return
        self.session.handle_pointer(point, EventKind.UP)
        if self._swallow_release:
            self._swallow_release = False
            if is_enabled("sketch_input_logging"):
                logger.debug("[SketchInputBridge] Release nach Doppelklick ignoriert")
            return
        self.session.handle_pointer(point, EventKind.CLICK)
        self._emit_status()

    def mouse_double_click(self, point, button) -> None:
        if button == Qt.LeftButton:
            self.session.handle_pointer(point, EventKind.DOUBLE_CLICK)
            self._swallow_release = True
            self._emit_status()

    # === Tastatur ===

    def key_press(self, key, text: str = "") -> bool:
        """Gibt True zurück, wenn die Taste verarbeitet wurde."""
        if key in (Qt.Key_Return, Qt.Key_Enter):
            self.session.handle_key(SketchKey.ENTER)
        elif key == Qt.Key_Escape:
            was_select = self.session.active_tool is SketchTool.SELECT
            self.session.handle_key(SketchKey.ESCAPE)
            if not was_select and self.session.active_tool is SketchTool.SELECT:
                self.tool_changed.emit(SketchTool.SELECT)
        else:
            tool = tool_for_shortcut(text)
            if tool is None or not self.session.is_sketching:
                return False
            self.set_tool(tool)
            return True

        self._emit_status()
        return True

    # --- intern ---

    def _on_finalized(self, primitive: Primitive) -> None:
        if is_enabled("sketch_debug"):
            logger.debug(f"[SketchInputBridge] {primitive.kind.value} finalisiert")
        self.primitive_finalized.emit(primitive)
        self.sketch_changed.emit()

    def _emit_status(self) -> None:
        self.status_message.emit(self.session.prompt())
