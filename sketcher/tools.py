"""
MashSketch Sketcher - Zeichen-Tools
Ein Zustandsautomat pro Primitive-Art: Klicks sammeln, Preview pflegen, finalisieren.

Gemeinsamer Ablauf:
- on_pointer_move(p): nur Preview (Cursor merken)
- on_click(p): Punkt übernehmen oder als degeneriert schlucken
- is_complete() / finalize(): fertiges Primitive abholen, Tool neu scharf machen
- cancel(): alles Offene verwerfen

Degenerierte Klicks (gleicher Punkt, kollinear, Null-Kante) werden gezählt,
ändern aber nichts. Das Tool wartet auf einen brauchbaren Punkt.
"""

from enum import Enum, auto
from typing import ClassVar, Optional

import numpy as np
from loguru import logger

from config.feature_flags import is_enabled
from config.tolerances import Tolerances
from i18n import tr
from .errors import SketchContractError
from .geometry import as_vec3, distance, points_are_coincident
from .plane_basis import Plane
from .primitives import (
    ArcMode, ArcPrimitive, CircleMode, CirclePrimitive, LinePrimitive, PointPrimitive,
    Primitive, PrimitiveKind, RectMode, RectPrimitive, SplinePrimitive,
)


class SketchTool(Enum):
    """Verfügbare Sketch-Tools"""
    SELECT = auto()
    POINT = auto()
    LINE = auto()
    ARC = auto()
    CIRCLE = auto()
    RECTANGLE = auto()
    SPLINE = auto()


class PrimitiveTool:
    """Basis aller Zeichen-Tools."""

    kind: ClassVar[PrimitiveKind]
    name: ClassVar[str] = "Tool"

    def __init__(self, plane: Optional[Plane] = None):
        self.plane = plane if plane is not None else Plane.xy()
        self.preview: Optional[Primitive] = None
        self.cursor: Optional[np.ndarray] = None
        self.click_count = 0
        self.degenerate_clicks = 0

    # --- Zustand ---

    @property
    def has_pending(self) -> bool:
        return self.preview is not None

    @property
    def step(self) -> int:
        """Anzahl übernommener Punkte des aktuellen Primitives."""
        return 0

    def is_complete(self) -> bool:
        return self.preview is not None and self.preview.is_complete()

    def wants_finalize(self) -> bool:
        """Nach einem Klick sofort finalisieren? (Spline wartet auf Enter)"""
        return self.is_complete()

    # --- Events ---

    def on_pointer_move(self, point) -> Optional[Primitive]:
        self.cursor = as_vec3(point)
        if is_enabled("sketch_input_logging"):
            c = self.cursor
            logger.trace(f"[{self.name}] move ({c[0]:.3f}, {c[1]:.3f}, {c[2]:.3f})")
        return self.preview

    def on_click(self, point) -> bool:
        """Übernimmt einen Klick. True, wenn der Punkt akzeptiert wurde."""
        point = as_vec3(point)
        self.click_count += 1
        self.cursor = point
        accepted = self._accept(point)
        if not accepted:
            self.degenerate_clicks += 1
            if is_enabled("sketch_debug"):
                logger.debug(f"[{self.name}] Klick {self.click_count} degeneriert, ignoriert")
        return accepted

    def _accept(self, point: np.ndarray) -> bool:
        raise NotImplementedError

    def finalize(self) -> Primitive:
        if not self.is_complete():
            raise SketchContractError(f"{self.name}: finalize() vor is_complete()")
        result = self.preview
        self.preview = None
        self._rearm(result)
        return result

    def _rearm(self, finished: Primitive) -> None:
        self._reset_counters()

    def cancel(self) -> Optional[Primitive]:
        """Verwirft das offene Primitive (inkl. Szenen-Objekte)."""
        dropped = self.preview
        self.preview = None
        self.cursor = None
        self._reset_counters()
        if dropped is not None:
            dropped.remove()
        return dropped

    def finish(self) -> Optional[Primitive]:
        """Enter / Rechtsklick. Standard: fertig -> finalisieren, sonst verwerfen."""
        if self.is_complete():
            return self.finalize()
        self.cancel()
        return None

    def escape(self) -> Optional[Primitive]:
        self.cancel()
        return None

    def _reset_counters(self):
        self.click_count = 0
        self.degenerate_clicks = 0

    def prompt(self) -> str:
        return tr("Select")


class PointTool(PrimitiveTool):
    kind = PrimitiveKind.POINT
    name = "PointTool"

    def _accept(self, point):
        self.preview = PointPrimitive(position=point)
        return True

    def prompt(self):
        return tr("Place point")


class LineTool(PrimitiveTool):
    """Linienzug: nach jedem Segment startet das nächste am letzten Endpunkt."""
    kind = PrimitiveKind.LINE
    name = "LineTool"

    def __init__(self, plane=None, continuous: Optional[bool] = None):
        super().__init__(plane)
        self.continuous = is_enabled("sketch_continuous_line") if continuous is None else continuous

    @property
    def step(self):
        if self.preview is None:
            return 0
        return 1 if self.preview.end is None else 2

    def _accept(self, point):
        if self.preview is None:
            self.preview = LinePrimitive(start=point)
            return True
        if points_are_coincident(self.preview.start, point):
            return False
        self.preview.end = point
        return True

    def _rearm(self, finished):
        self._reset_counters()
        if self.continuous:
            self.preview = LinePrimitive(start=finished.end.copy())
            self.click_count = 1

    def finish(self):
        # Der angefangene Folge-Abschnitt wird verworfen, fertige Segmente bleiben
        if self.is_complete():
            return self.finalize_and_stop()
        self.cancel()
        return None

    def finalize_and_stop(self) -> Primitive:
        result = self.finalize()
        self.cancel()
        return result

    def prompt(self):
        if self.step == 0:
            return tr("Start point")
        return tr("End point | Enter=Finish")


class ArcTool(PrimitiveTool):
    kind = PrimitiveKind.ARC
    name = "ArcTool"

    def __init__(self, plane=None, mode: ArcMode = ArcMode.THREE_POINTS):
        super().__init__(plane)
        self.mode = mode

    @property
    def step(self):
        return 0 if self.preview is None else len(self.preview.points)

    def _accept(self, point):
        if self.preview is None:
            self.preview = ArcPrimitive(mode=self.mode, points=[point], plane_normal=self.plane.normal)
            return True

        points = self.preview.points
        if len(points) == 1:
            if points_are_coincident(points[0], point):
                return False
            points.append(point)
            return True

        if len(points) == 2:
            if self.preview.resolve(points + [point]) is None:
                return False
            points.append(point)
            self.preview.update_geometry()
            return True
        return False

    def prompt(self):
        step = self.step
        if self.mode is ArcMode.THREE_POINTS:
            if step == 0:
                return tr("Start point")
            if step == 1:
                return tr("End point")
            return tr("Through point (defines arc curvature)")
        if step == 0:
            return tr("Center")
        if step == 1:
            return tr("Start point (defines radius)")
        return tr("End angle")


class CircleTool(PrimitiveTool):
    kind = PrimitiveKind.CIRCLE
    name = "CircleTool"

    def __init__(self, plane=None, mode: CircleMode = CircleMode.TWO_POINT):
        super().__init__(plane)
        self.mode = mode

    @property
    def step(self):
        c = self.preview
        if c is None:
            return 0
        return 1 + (c.point2 is not None) + (c.point3 is not None)

    def _accept(self, point):
        c = self.preview
        if c is None:
            self.preview = CirclePrimitive(mode=self.mode, point1=point, plane_normal=self.plane.normal)
            return True

        if self.mode is CircleMode.TWO_POINT or c.point2 is None:
            if points_are_coincident(c.point1, point):
                return False
            c.point2 = point
        else:
            if points_are_coincident(c.point2, point) or points_are_coincident(c.point1, point):
                return False
            c.point3 = point

        if self.mode is CircleMode.THREE_POINT and c.point3 is None:
            return True

        if not c.update_geometry() or not c.is_complete():
            # Kollinear / Radius 0: Punkt zurücknehmen
            if c.point3 is not None:
                c.point3 = None
            else:
                c.point2 = None
            c.update_geometry()
            return False
        return True

    def prompt(self):
        step = self.step
        if self.mode is CircleMode.TWO_POINT:
            return tr("Center") if step == 0 else tr("Radius")
        if step == 0:
            return tr("First point")
        if step == 1:
            return tr("Second point")
        return tr("Third point")


class RectTool(PrimitiveTool):
    kind = PrimitiveKind.RECT
    name = "RectTool"

    def __init__(self, plane=None, mode: RectMode = RectMode.TWO_POINT):
        super().__init__(plane)
        self.mode = mode

    @property
    def step(self):
        r = self.preview
        if r is None:
            return 0
        return 1 + (r.end is not None) + (r.p3 is not None)

    def _accept(self, point):
        r = self.preview
        if r is None:
            self.preview = RectPrimitive(mode=self.mode, start=point, plane_normal=self.plane.normal)
            return True

        if self.mode is RectMode.TWO_POINT:
            return self._try_complete(end=point, p3=None)

        if r.end is None:
            if distance(r.start, point) < Tolerances.SKETCH_RECT_MIN_EDGE:
                return False
            r.end = point
            return True
        return self._try_complete(end=r.end, p3=point)

    def _try_complete(self, end, p3) -> bool:
        r = self.preview
        old_end, old_p3 = r.end, r.p3
        r.end, r.p3 = end, p3
        r.compute_corners()
        if r.is_complete():
            return True
        r.end, r.p3 = old_end, old_p3
        r.corners = None
        return False

    def prompt(self):
        step = self.step
        if self.mode is RectMode.TWO_POINT:
            return tr("Corner") if step == 0 else tr("Opposite corner")
        if step == 0:
            return tr("Start point center line")
        if step == 1:
            return tr("Endpoint center line")
        return tr("Width")


class SplineTool(PrimitiveTool):
    """
    Klicks hängen Kontrollpunkte an. Enter / Doppelklick / Escape übernehmen
    die bestätigten Punkte als Spline (ab 2 Punkten), sonst wird verworfen.
    """
    kind = PrimitiveKind.SPLINE
    name = "SplineTool"

    def __init__(self, plane=None, close_snap: Optional[bool] = None):
        super().__init__(plane)
        self.close_snap = is_enabled("sketch_spline_close_snap") if close_snap is None else close_snap
        self._closing = False

    @property
    def step(self):
        return 0 if self.preview is None else len(self.preview.control_points)

    def wants_finalize(self) -> bool:
        return self._closing and self.is_complete()

    def _accept(self, point):
        s = self.preview
        if s is None:
            self.preview = SplinePrimitive(control_points=[point])
            return True
        if points_are_coincident(s.control_points[-1], point):
            return False
        if (self.close_snap and len(s.control_points) >= 3
                and distance(s.control_points[0], point) < Tolerances.SKETCH_SPLINE_CLOSE_SNAP):
            s.closed = True
            self._closing = True
            return True
        s.add_point(point)
        return True

    def _rearm(self, finished):
        self._reset_counters()
        self._closing = False

    def cancel(self):
        self._closing = False
        return super().cancel()

    def finish(self):
        if self.is_complete():
            return self.finalize()
        self.cancel()
        return None

    def escape(self):
        # Bestätigte Punkte bleiben als Spline erhalten
        return self.finish()

    def prompt(self):
        if self.step < 2:
            return tr("Next point")
        return tr("Next point | Enter=Finish")


def create_tool(tool: SketchTool, plane: Optional[Plane] = None,
                arc_mode: ArcMode = ArcMode.THREE_POINTS,
                circle_mode: CircleMode = CircleMode.TWO_POINT,
                rect_mode: RectMode = RectMode.TWO_POINT) -> Optional[PrimitiveTool]:
    """Tool-Instanz zum Enum. SELECT hat keinen Zustandsautomaten."""
    if tool is SketchTool.SELECT:
        return None
    if tool is SketchTool.POINT:
        return PointTool(plane)
    if tool is SketchTool.LINE:
        return LineTool(plane)
    if tool is SketchTool.ARC:
        return ArcTool(plane, arc_mode)
    if tool is SketchTool.CIRCLE:
        return CircleTool(plane, circle_mode)
    if tool is SketchTool.RECTANGLE:
        return RectTool(plane, rect_mode)
    if tool is SketchTool.SPLINE:
        return SplineTool(plane)
    raise ValueError(f"Unbekanntes Tool: {tool}")
