"""
MashSketch Sketcher - Sketch-Session
Nimmt auf die Ebene projizierte Pointer-Events entgegen, leitet sie an das
aktive Tool weiter und hängt finalisierte Primitive an den Sketch an.

Es gibt keinen globalen Zustand: wer zeichnen will, hält eine SketchSession.
"""

from enum import Enum, auto
from typing import Callable, Iterable, List, Optional

from loguru import logger

from config.feature_flags import is_enabled
from i18n import tr
from .interaction import InteractionState, InteractionTracker, find_handle
from .plane_basis import Plane
from .primitives import ArcMode, CircleMode, Primitive, RectMode, set_all_handles_visible
from .render_handle import SketchScene
from .sketch import Sketch, resolve_sketch_name
from .tools import PrimitiveTool, SketchTool, create_tool


class EventKind(Enum):
    MOVE = auto()
    DOWN = auto()
    UP = auto()
    CLICK = auto()
    DOUBLE_CLICK = auto()


class SketchKey(Enum):
    ENTER = auto()
    ESCAPE = auto()


class SketchSession:
    """
    Zustand einer laufenden Skizze: Ebene, aktives Tool, Modi und Drag-Zustand.

    Alle handle_*-Methoden liefern das dabei finalisierte Primitive (oder None).
    Fehler des Renderers werden geloggt, die Session zeichnet weiter.
    """

    def __init__(self, scene: Optional[SketchScene] = None, plane: Optional[Plane] = None):
        self.scene = scene
        self.active_plane: Optional[Plane] = plane
        self.sketch: Optional[Sketch] = None
        self._edit_baseline: Optional[int] = None
        self.is_sketching = False

        self.active_tool = SketchTool.SELECT
        self.tool: Optional[PrimitiveTool] = None
        self.rect_mode = RectMode.TWO_POINT
        self.circle_mode = CircleMode.TWO_POINT
        self.arc_mode = ArcMode.THREE_POINTS

        self.interaction = InteractionTracker()
        self._finalized_listeners: List[Callable[[Primitive], None]] = []

    # === Zustand ===

    @property
    def pending(self) -> Optional[Primitive]:
        return self.tool.preview if self.tool is not None else None

    @property
    def primitives(self) -> List[Primitive]:
        return self.sketch.primitives if self.sketch is not None else []

    def add_finalized_listener(self, callback: Callable[[Primitive], None]):
        self._finalized_listeners.append(callback)

    def prompt(self) -> str:
        if not self.is_sketching:
            return tr("Select a plane to start sketching")
        if self.tool is None:
            return tr("Select")
        return self.tool.prompt()

    # === Lebenszyklus ===

    def start_sketch(self, plane: Optional[Plane] = None, name: Optional[str] = None,
                     existing_names: Iterable[str] = ()) -> Sketch:
        if self.is_sketching:
            self.cancel_sketch()
        if plane is not None:
            self.active_plane = plane
        if self.active_plane is None:
            self.active_plane = Plane.xy()

        self.sketch = Sketch(name=resolve_sketch_name(name, existing_names), plane=self.active_plane)
        self._edit_baseline = None
        self.is_sketching = True
        self.set_tool(SketchTool.SELECT)
        logger.info(f"[SketchSession] Skizze '{self.sketch.name}' auf {self.active_plane.name} gestartet")
        return self.sketch

    def edit_sketch(self, sketch: Sketch) -> Sketch:
        """
        Öffnet einen gespeicherten Sketch erneut.

        Die Ebene kommt aus dem Sketch, neue Primitive werden an denselben
        Sketch angehängt und seine id bleibt erhalten. Abbrechen entfernt nur
        die in dieser Sitzung hinzugefügten Primitive.
        """
        if self.is_sketching:
            self.cancel_sketch()
        self.active_plane = sketch.plane
        self.sketch = sketch
        self._edit_baseline = len(sketch.primitives)
        self.is_sketching = True
        self.set_tool(SketchTool.SELECT)

        if self.scene is not None:
            for primitive in sketch.primitives:
                if not primitive.is_drawn:
                    self._safe(lambda p=primitive: p.draw(self.scene))
        logger.info(f"[SketchSession] Skizze '{sketch.name}' ({sketch.id}) zum Bearbeiten geöffnet: "
                    f"{len(sketch.primitives)} Elemente auf {sketch.plane.name}")
        return sketch

    @property
    def is_editing(self) -> bool:
        return self.is_sketching and self._edit_baseline is not None

    def select_plane(self, plane: Plane) -> None:
        """Wechselt die Ebene. Offene Eingaben werden verworfen."""
        self.active_plane = plane
        if self.sketch is not None and self.sketch.is_empty:
            self.sketch.plane = plane
        self.set_tool(self.active_tool)
        logger.debug(f"[SketchSession] Ebene {plane.name} gewählt")

    def finish_sketch(self) -> Optional[Sketch]:
        """Beendet die Skizze. Liefert sie nur, wenn sie Primitive enthält."""
        self._clear_tool()
        sketch = self.sketch
        self._reset()

        if sketch is None or sketch.is_empty:
            logger.info("[SketchSession] Skizze beendet (leer, verworfen)")
            return None
        self._safe(lambda: set_all_handles_visible(sketch.primitives, False))
        logger.info(f"[SketchSession] Skizze '{sketch.name}' beendet: {len(sketch.primitives)} Elemente")
        return sketch

    def cancel_sketch(self) -> None:
        """Verwirft die Skizze. Beim Bearbeiten bleiben die geladenen Primitive erhalten."""
        self._clear_tool()
        if self.sketch is not None:
            keep = self._edit_baseline or 0
            for primitive in self.sketch.primitives[keep:]:
                self._safe(lambda p=primitive: p.remove(self.scene))
            if self._edit_baseline is not None:
                del self.sketch.primitives[keep:]
            logger.info(f"[SketchSession] Skizze '{self.sketch.name}' abgebrochen")
        self._reset()

    def _reset(self) -> None:
        self.sketch = None
        self.is_sketching = False
        self._edit_baseline = None
        self.active_tool = SketchTool.SELECT
        self.tool = None
        self.interaction.reset()

    # === Tools & Modi ===

    def set_tool(self, tool: SketchTool) -> None:
        """Wechselt das Tool. Offene Eingaben des alten Tools werden verworfen."""
        self._clear_tool()
        self.interaction.reset()
        self.active_tool = tool
        self.tool = create_tool(tool, self.active_plane, arc_mode=self.arc_mode,
                                circle_mode=self.circle_mode, rect_mode=self.rect_mode)
        if is_enabled("sketch_debug"):
            logger.debug(f"[SketchSession] Tool -> {tool.name}")

    def set_rect_mode(self, mode: RectMode) -> None:
        self.rect_mode = mode
        self.set_tool(SketchTool.RECTANGLE)

    def set_circle_mode(self, mode: CircleMode) -> None:
        self.circle_mode = mode
        self.set_tool(SketchTool.CIRCLE)

    def set_arc_mode(self, mode: ArcMode) -> None:
        self.arc_mode = mode
        self.set_tool(SketchTool.ARC)

    def _clear_tool(self) -> None:
        if self.tool is not None:
            self._safe(self.tool.cancel)

    # === Input ===

    def handle_pointer(self, point, kind: EventKind) -> Optional[Primitive]:
        if not self.is_sketching:
            return None

        if is_enabled("sketch_input_logging") and kind is not EventKind.MOVE:
            logger.debug(f"[SketchSession] {kind.name} @ {point}")

        if kind is EventKind.MOVE:
            self._on_move(point)
            return None
        if kind is EventKind.DOWN:
            self._on_down(point)
            return None
        if kind is EventKind.UP:
            self.interaction.end_drag()
            return None
        if kind is EventKind.CLICK:
            return self._on_click(point)
        if kind is EventKind.DOUBLE_CLICK:
            if self.active_tool is SketchTool.SPLINE and self.tool is not None and self.tool.has_pending:
                return self._commit(self.tool.finish())
            return None
        raise ValueError(f"Unbekannter Event-Typ: {kind}")

    def handle_key(self, key: SketchKey) -> Optional[Primitive]:
        if not self.is_sketching:
            return None
        if key is SketchKey.ENTER:
            if self.tool is None:
                return None
            return self._commit(self.tool.finish())
        if key is SketchKey.ESCAPE:
            if self.tool is not None and self.tool.has_pending:
                return self._commit(self.tool.escape())
            if self.active_tool is not SketchTool.SELECT:
                self.set_tool(SketchTool.SELECT)
            return None
        raise ValueError(f"Unbekannte Taste: {key}")

    def handle_context_menu(self) -> Optional[Primitive]:
        """Rechtsklick beendet Linienzug bzw. Spline, sonst wird verworfen."""
        if not self.is_sketching or self.tool is None:
            return None
        return self._commit(self.tool.finish())

    def finish_spline_and_exit(self) -> Optional[Primitive]:
        """Versteckt alle Griffe, übernimmt oder verwirft den offenen Spline, wechselt zu SELECT."""
        pending = [self.pending] if self.active_tool is SketchTool.SPLINE else []
        self._safe(lambda: set_all_handles_visible(list(self.primitives) + pending, False))

        result = None
        if self.active_tool is SketchTool.SPLINE and self.tool is not None:
            result = self._commit(self.tool.finish())
        self.set_tool(SketchTool.SELECT)
        return result

    # --- intern ---

    def _on_move(self, point) -> None:
        if self.interaction.is_dragging:
            self._safe(lambda: self.interaction.drag_to(point, self.scene))
            return
        if self.tool is None:
            return
        preview = self.tool.on_pointer_move(point)
        if preview is not None and self.scene is not None:
            self._safe(lambda: preview.draw_preview(self.scene, self.tool.cursor))

    def _on_down(self, point) -> None:
        self.interaction.on_press()
        if self.active_tool is not SketchTool.SPLINE:
            return
        hit = find_handle(self.primitives, point)
        if hit is not None:
            self.interaction.begin_drag(hit)

    def _on_click(self, point) -> Optional[Primitive]:
        if self.interaction.consume_click():
            if is_enabled("sketch_debug"):
                logger.debug("[SketchSession] Klick nach Drag unterdrückt")
            return None
        if self.interaction.state is InteractionState.DRAGGING or self.tool is None:
            return None

        self.tool.on_click(point)
        if self.tool.wants_finalize():
            return self._commit(self.tool.finalize())

        preview = self.tool.preview
        if preview is not None and self.scene is not None:
            self._safe(lambda: preview.draw_preview(self.scene, None))
        return None

    def _commit(self, primitive: Optional[Primitive]) -> Optional[Primitive]:
        if primitive is None:
            return None
        if self.scene is not None:
            self._safe(lambda: primitive.draw(self.scene))
        if self.sketch is not None:
            self.sketch.add_primitive(primitive)
        logger.success(f"[SketchSession] {primitive.kind.value} {primitive.id} finalisiert")
        for callback in self._finalized_listeners:
            callback(primitive)
        return primitive

    def _safe(self, action: Callable[[], object]) -> None:
        try:
            action()
        except Exception as e:
            logger.error(f"[SketchSession] Rendering fehlgeschlagen: {e}")
