"""
MashSketch Sketcher - Primitive
Punkt, Linie, Bogen, Kreis, Rechteck und Spline als Tagged Union über PrimitiveKind.

Jedes Primitive ist entweder vollständig (darf finalisiert und gespeichert
werden) oder noch in Arbeit (nur Preview). Abgeleitete Größen (Mittelpunkt,
Radius, Winkel, Ecken) werden aus den geklickten Punkten berechnet und beim
Laden fehlender Werte deterministisch neu bestimmt.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple
import uuid

import numpy as np
from loguru import logger

from config.feature_flags import is_enabled
from config.tolerances import Tolerances
from .arc_resolver import ArcSweep, center_start_end_arc, sample_arc, three_point_arc
from .circle_fit import three_point, two_point
from .errors import SketchContractError, SketchDataError
from .geometry import (
    TWO_PI, WORLD_Z, as_vec3, catmull_rom_points, distance, is_vec3_json,
    normalize, optional_vec3_from_json, vec3_from_json, vec3_to_list,
)
from .plane_basis import PlaneBasis
from .rect_corners import is_degenerate_rect, three_point_corners, two_point_corners
from .render_handle import STYLE_FINAL, STYLE_HANDLE, STYLE_PREVIEW, RenderHandle, SketchScene


class PrimitiveKind(Enum):
    POINT = "point"
    LINE = "line"
    ARC = "arc"
    CIRCLE = "circle"
    RECT = "rect"
    SPLINE = "spline"


class ArcMode(Enum):
    THREE_POINTS = "threePoints"
    CENTER_START_END = "centerStartEnd"


class CircleMode(Enum):
    TWO_POINT = "two-point"
    THREE_POINT = "three-point"


class RectMode(Enum):
    TWO_POINT = "twoPoint"
    THREE_POINT = "threePoint"


# Ältere Dateien schreiben die Modi teilweise in der jeweils anderen Schreibweise
_CIRCLE_MODE_ALIASES = {
    "two-point": CircleMode.TWO_POINT, "twoPoint": CircleMode.TWO_POINT,
    "three-point": CircleMode.THREE_POINT, "threePoint": CircleMode.THREE_POINT,
}
_RECT_MODE_ALIASES = {
    "twoPoint": RectMode.TWO_POINT, "two-point": RectMode.TWO_POINT,
    "threePoint": RectMode.THREE_POINT, "three-point": RectMode.THREE_POINT,
}
_ARC_MODE_ALIASES = {
    "threePoints": ArcMode.THREE_POINTS, "three-point": ArcMode.THREE_POINTS,
    "centerStartEnd": ArcMode.CENTER_START_END,
}


def _short_id() -> str:
    return str(uuid.uuid4())[:8]


def _parse_mode(raw, aliases: Dict[str, Enum], default: Enum, kind: str) -> Enum:
    if raw is None:
        return default
    if isinstance(raw, Enum):
        return raw
    mode = aliases.get(str(raw))
    if mode is None:
        raise SketchDataError(f"{kind}: unbekannter Modus {raw!r}")
    return mode


def _optional_number(data: dict, key: str) -> Optional[float]:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def circle_polyline(center, radius: float, basis: PlaneBasis,
                    segments: int = Tolerances.SKETCH_CIRCLE_SEGMENTS) -> np.ndarray:
    """Geschlossener Kreis als segments Punkte (ohne doppelten Endpunkt)."""
    return sample_arc(center, radius, basis, 0.0, TWO_PI, segments)[:-1]


class Primitive:
    """
    Gemeinsame Basis aller Sketch-Primitive.

    Unterklassen liefern curve_points() (finale Geometrie) und
    preview_points(cursor). Zeichnen läuft immer über einen RenderHandle.
    """

    kind: ClassVar[PrimitiveKind]
    _handle: Optional[RenderHandle] = None
    _handle_is_preview: bool = False

    # --- Zustand ---

    def is_complete(self) -> bool:
        raise NotImplementedError

    def curve_points(self) -> Optional[np.ndarray]:
        raise NotImplementedError

    def preview_points(self, cursor=None) -> Optional[np.ndarray]:
        return self.curve_points() if self.is_complete() else None

    @property
    def is_closed_curve(self) -> bool:
        return False

    @property
    def is_drawn(self) -> bool:
        return self._handle is not None and not self._handle.released

    @property
    def render_handle(self) -> Optional[RenderHandle]:
        return self._handle

    # --- Rendering ---

    def draw(self, scene: SketchScene) -> None:
        """Finale Darstellung. Unvollständige Primitive werden nicht gezeichnet."""
        self.remove(scene)
        if not self.is_complete():
            return
        points = self.curve_points()
        if points is None:
            return
        self._handle = RenderHandle(scene, owner=f"{self.kind.value}:{self.id}")
        self._handle_is_preview = False
        self._render(self._handle, points, STYLE_FINAL)

    def draw_preview(self, scene: SketchScene, cursor=None) -> None:
        """Preview mit optionalem Cursor als nächstem (noch nicht geklickten) Punkt."""
        points = self.preview_points(None if cursor is None else as_vec3(cursor))
        handle = self._preview_handle(scene)
        if points is None:
            handle.drop("curve")
            return
        self._render(handle, points, STYLE_PREVIEW, cursor=cursor)

    def remove(self, scene: Optional[SketchScene] = None) -> None:
        if self._handle is None:
            return
        try:
            self._handle.release()
        finally:
            # Nicht freigegebene Reste bleiben für den nächsten remove() erhalten
            if self._handle.released:
                self._handle = None

    def _preview_handle(self, scene: SketchScene) -> RenderHandle:
        if (self._handle is None or self._handle.released
                or self._handle.scene is not scene or not self._handle_is_preview):
            self.remove(scene)
            self._handle = RenderHandle(scene, owner=f"{self.kind.value}:{self.id}:preview")
            self._handle_is_preview = True
        return self._handle

    def _render(self, handle: RenderHandle, points: np.ndarray, style: dict, cursor=None) -> None:
        handle.set_polyline("curve", points, self.is_closed_curve, style)

    # --- Persistenz ---

    def to_dict(self) -> Dict[str, Any]:
        if not self.is_complete():
            raise SketchContractError(f"{self.kind.value} ist unvollständig und kann nicht gespeichert werden")
        return self._to_dict()

    def _to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError


@dataclass(eq=False)
class PointPrimitive(Primitive):
    kind: ClassVar[PrimitiveKind] = PrimitiveKind.POINT

    position: np.ndarray
    id: str = field(default_factory=_short_id)

    def __post_init__(self):
        self.position = as_vec3(self.position)

    def is_complete(self) -> bool:
        return True

    def curve_points(self) -> Optional[np.ndarray]:
        return np.array([self.position])

    def preview_points(self, cursor=None) -> Optional[np.ndarray]:
        return np.array([cursor if cursor is not None else self.position])

    def _render(self, handle, points, style, cursor=None):
        handle.set_points("curve", points, style)

    def _to_dict(self):
        return {"type": "point", "position": vec3_to_list(self.position)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PointPrimitive':
        return cls(position=vec3_from_json(data.get("position"), "point.position"))


@dataclass(eq=False)
class LinePrimitive(Primitive):
    kind: ClassVar[PrimitiveKind] = PrimitiveKind.LINE

    start: np.ndarray
    end: Optional[np.ndarray] = None
    id: str = field(default_factory=_short_id)

    def __post_init__(self):
        self.start = as_vec3(self.start)
        if self.end is not None:
            self.end = as_vec3(self.end)

    @property
    def length(self) -> float:
        return 0.0 if self.end is None else distance(self.start, self.end)

    def is_complete(self) -> bool:
        return self.end is not None and self.length >= Tolerances.COMPARE_POINT

    def curve_points(self):
        if self.end is None:
            return None
        return np.array([self.start, self.end])

    def preview_points(self, cursor=None):
        if self.end is not None:
            return self.curve_points()
        if cursor is None:
            return None
        return np.array([self.start, cursor])

    def _to_dict(self):
        return {"type": "line", "start": vec3_to_list(self.start), "end": vec3_to_list(self.end)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LinePrimitive':
        return cls(start=vec3_from_json(data.get("start"), "line.start"),
                   end=optional_vec3_from_json(data.get("end"), "line.end"))


@dataclass(eq=False)
class ArcPrimitive(Primitive):
    """
    Kreisbogen.

    THREE_POINTS: points = [Endpunkt 1, Endpunkt 2, Durchgangspunkt]
    CENTER_START_END: points = [Mitte, Start, Ende]; Ende bestimmt nur den Winkel
    """
    kind: ClassVar[PrimitiveKind] = PrimitiveKind.ARC

    mode: ArcMode = ArcMode.THREE_POINTS
    points: List[np.ndarray] = field(default_factory=list)
    plane_normal: np.ndarray = field(default_factory=lambda: as_vec3(WORLD_Z))
    steps: int = Tolerances.SKETCH_ARC_STEPS
    center: Optional[np.ndarray] = None
    radius: Optional[float] = None
    start_angle: Optional[float] = None
    end_angle: Optional[float] = None
    reversed: bool = False
    id: str = field(default_factory=_short_id)

    def __post_init__(self):
        self.points = [as_vec3(p) for p in self.points]
        self.plane_normal = normalize(self.plane_normal, fallback=WORLD_Z)
        if self.center is not None:
            self.center = as_vec3(self.center)
        if len(self.points) == 3 and self.center is None:
            self.update_geometry()

    # --- Geometrie ---

    def basis(self) -> PlaneBasis:
        if self.mode is ArcMode.THREE_POINTS and len(self.points) == 3:
            return PlaneBasis.from_three_points(*self.points)
        return PlaneBasis.from_normal(self.plane_normal)

    def resolve(self, points=None, loose: bool = False) -> Optional[ArcSweep]:
        pts = self.points if points is None else points
        if len(pts) < 3:
            return None
        if self.mode is ArcMode.THREE_POINTS:
            return three_point_arc(pts[0], pts[1], pts[2], self.steps, loose=loose)
        return center_start_end_arc(pts[0], pts[1], pts[2], self.steps, normal=self.plane_normal)

    def update_geometry(self) -> bool:
        """Berechnet Mitte, Radius und Winkel aus den drei Punkten neu."""
        sweep = self.resolve()
        if sweep is None:
            self.center = self.radius = self.start_angle = self.end_angle = None
            self.reversed = False
            return False
        self.center = sweep.center
        self.radius = sweep.radius
        self.start_angle = sweep.start_angle
        self.end_angle = sweep.end_angle
        self.reversed = sweep.reversed
        return True

    @property
    def angle_range(self) -> Optional[Tuple[float, float]]:
        if self.start_angle is None or self.end_angle is None:
            return None
        return self.start_angle, self.end_angle

    @property
    def sweep(self) -> float:
        rng = self.angle_range
        return 0.0 if rng is None else rng[1] - rng[0]

    @property
    def arc_length(self) -> float:
        if self.radius is None or self.angle_range is None:
            return 0.0
        return abs(self.sweep) * self.radius

    def is_complete(self) -> bool:
        return (len(self.points) == 3 and self.center is not None
                and self.radius is not None and self.radius >= Tolerances.SKETCH_MIN_RADIUS
                and self.angle_range is not None)

    def curve_points(self):
        if not self.is_complete():
            return None
        return sample_arc(self.center, self.radius, self.basis(),
                          self.start_angle, self.end_angle, self.steps)

    def preview_points(self, cursor=None):
        if self.is_complete():
            return self.curve_points()
        if cursor is None or not self.points:
            return None
        if len(self.points) == 1:
            # Sehne bzw. Radiuslinie bis zum Cursor
            return np.array([self.points[0], cursor])
        sweep = self.resolve([self.points[0], self.points[1], cursor], loose=True)
        if sweep is None:
            return np.array([self.points[0], self.points[1]])
        return sweep.points

    def _to_dict(self):
        data = {
            "type": "arc",
            "mode": self.mode.value,
            "point1": vec3_to_list(self.points[0]),
            "point2": vec3_to_list(self.points[1]),
            "point3": vec3_to_list(self.points[2]),
            "center": vec3_to_list(self.center),
            "radius": float(self.radius),
            "startAngle": float(self.start_angle),
            "endAngle": float(self.end_angle),
            "arcLength": float(self.arc_length),
        }
        if self.mode is ArcMode.CENTER_START_END:
            data["planeNormal"] = vec3_to_list(self.plane_normal)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ArcPrimitive':
        legacy = data.get("points") if isinstance(data.get("points"), list) else []
        pts = []
        for i, key in enumerate(("point1", "point2", "point3")):
            raw = data.get(key)
            if not is_vec3_json(raw) and i < len(legacy):
                raw = legacy[i]
            if raw is not None:
                pts.append(vec3_from_json(raw, f"arc.{key}"))
        if len(pts) < 3:
            raise SketchDataError(f"arc: drei Punkte erwartet, {len(pts)} gefunden")

        mode = _parse_mode(data.get("mode"), _ARC_MODE_ALIASES, ArcMode.THREE_POINTS, "arc")
        normal = optional_vec3_from_json(data.get("planeNormal"), "arc.planeNormal")
        arc = cls(mode=mode, points=pts,
                  plane_normal=normal if normal is not None else WORLD_Z,
                  center=(vec3_from_json(data["center"], "arc.center")
                          if is_vec3_json(data.get("center")) else None),
                  radius=_optional_number(data, "radius"),
                  start_angle=_optional_number(data, "startAngle"),
                  end_angle=_optional_number(data, "endAngle"))

        if not arc.is_complete():
            # Gespeicherte Kreisparameter fehlen oder sind kaputt: aus den Punkten neu bestimmen
            if not arc.update_geometry():
                raise SketchDataError("arc: Punkte ergeben keinen gültigen Bogen")
        return arc


@dataclass(eq=False)
class CirclePrimitive(Primitive):
    kind: ClassVar[PrimitiveKind] = PrimitiveKind.CIRCLE

    mode: CircleMode
    point1: np.ndarray
    point2: Optional[np.ndarray] = None
    point3: Optional[np.ndarray] = None
    plane_normal: np.ndarray = field(default_factory=lambda: as_vec3(WORLD_Z))
    segments: int = Tolerances.SKETCH_CIRCLE_SEGMENTS
    center: Optional[np.ndarray] = None
    radius: float = 0.0
    id: str = field(default_factory=_short_id)

    def __post_init__(self):
        self.point1 = as_vec3(self.point1)
        if self.point2 is not None:
            self.point2 = as_vec3(self.point2)
        if self.point3 is not None:
            self.point3 = as_vec3(self.point3)
        self.plane_normal = normalize(self.plane_normal, fallback=WORLD_Z)
        if self.center is None:
            self.update_geometry()
        else:
            self.center = as_vec3(self.center)

    def basis(self) -> PlaneBasis:
        return PlaneBasis.from_normal(self.plane_normal)

    def fit(self, p2=None, p3=None, loose: bool = False):
        p2 = self.point2 if p2 is None else p2
        p3 = self.point3 if p3 is None else p3
        if self.mode is CircleMode.TWO_POINT:
            return two_point(self.point1, p2) if p2 is not None else None
        if p2 is None or p3 is None:
            return None
        return three_point(self.point1, p2, p3, self.plane_normal, loose=loose)

    def update_geometry(self) -> bool:
        result = self.fit()
        if result is None:
            self.center = self.point1.copy()
            self.radius = 0.0
            return False
        self.center = result.center
        self.radius = result.radius
        return True

    def is_complete(self) -> bool:
        if self.radius < Tolerances.SKETCH_MIN_RADIUS:
            return False
        if self.mode is CircleMode.TWO_POINT:
            return self.point2 is not None
        return self.point2 is not None and self.point3 is not None

    @property
    def is_closed_curve(self) -> bool:
        return True

    def curve_points(self):
        if not self.is_complete():
            return None
        return circle_polyline(self.center, self.radius, self.basis(), self.segments)

    def preview_points(self, cursor=None):
        if self.is_complete():
            return self.curve_points()
        if cursor is None:
            return None
        if self.mode is CircleMode.TWO_POINT:
            radius = distance(self.point1, cursor)
            if radius < Tolerances.SKETCH_MIN_RADIUS:
                return None
            return circle_polyline(self.point1, radius, self.basis(), self.segments)
        if self.point2 is None:
            return np.array([self.point1, cursor])
        result = self.fit(self.point2, cursor, loose=is_enabled("sketch_loose_circle_preview"))
        if result is None:
            return np.array([self.point1, self.point2])
        return circle_polyline(result.center, result.radius, self.basis(), self.segments)

    def _render(self, handle, points, style, cursor=None):
        # Preview-Kreise sind ebenfalls geschlossen, Hilfslinien nicht
        closed = len(points) > 2
        handle.set_polyline("curve", points, closed, style)

    def _to_dict(self):
        data = {
            "type": "circle",
            "mode": self.mode.value,
            "point1": vec3_to_list(self.point1),
            "point2": vec3_to_list(self.point2),
            "planeNormal": vec3_to_list(self.plane_normal),
            "radius": float(self.radius),
            "center": vec3_to_list(self.center),
        }
        if self.point3 is not None:
            data["point3"] = vec3_to_list(self.point3)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CirclePrimitive':
        mode = _parse_mode(data.get("mode"), _CIRCLE_MODE_ALIASES, CircleMode.TWO_POINT, "circle")
        normal = optional_vec3_from_json(data.get("planeNormal"), "circle.planeNormal")
        if normal is None:
            normal = as_vec3(WORLD_Z)
        radius = _optional_number(data, "radius")

        point1 = optional_vec3_from_json(data.get("point1"), "circle.point1")
        if point1 is None:
            # Altes Format: nur center + radius
            center = optional_vec3_from_json(data.get("center"), "circle.center")
            if center is None or radius is None:
                raise SketchDataError("circle: weder point1 noch center+radius vorhanden")
            mode = CircleMode.TWO_POINT
            point1 = center

        point2 = optional_vec3_from_json(data.get("point2"), "circle.point2")
        point3 = optional_vec3_from_json(data.get("point3"), "circle.point3")

        if mode is CircleMode.TWO_POINT and point2 is None:
            if radius is None:
                raise SketchDataError("circle: point2 und radius fehlen")
            point2 = point1 + PlaneBasis.from_normal(normal).u * radius

        circle = cls(mode=mode, point1=point1, point2=point2, point3=point3, plane_normal=normal)
        if not circle.is_complete():
            raise SketchDataError(f"circle ({mode.value}): Punkte ergeben keinen gültigen Kreis")
        return circle


@dataclass(eq=False)
class RectPrimitive(Primitive):
    """
    Rechteck.

    TWO_POINT: start/end sind gegenüberliegende Ecken (Kanten parallel zu u/v)
    THREE_POINT: start/end bilden die Mittellinie, p3 gibt die halbe Breite vor
    """
    kind: ClassVar[PrimitiveKind] = PrimitiveKind.RECT

    mode: RectMode
    start: np.ndarray
    end: Optional[np.ndarray] = None
    p3: Optional[np.ndarray] = None
    plane_normal: np.ndarray = field(default_factory=lambda: as_vec3(WORLD_Z))
    corners: Optional[List[np.ndarray]] = None
    id: str = field(default_factory=_short_id)

    def __post_init__(self):
        self.start = as_vec3(self.start)
        if self.end is not None:
            self.end = as_vec3(self.end)
        if self.p3 is not None:
            self.p3 = as_vec3(self.p3)
        self.plane_normal = normalize(self.plane_normal, fallback=WORLD_Z)
        if self.corners is None:
            self.compute_corners()
        else:
            self.corners = [as_vec3(c) for c in self.corners]

    def corners_for(self, end, p3=None) -> Optional[List[np.ndarray]]:
        if end is None:
            return None
        if self.mode is RectMode.TWO_POINT:
            return two_point_corners(self.start, end, PlaneBasis.from_normal(self.plane_normal))
        if p3 is None:
            return None
        return three_point_corners(self.start, end, p3, self.plane_normal)

    def compute_corners(self) -> Optional[List[np.ndarray]]:
        self.corners = self.corners_for(self.end, self.p3)
        return self.corners

    def is_complete(self) -> bool:
        return not is_degenerate_rect(self.corners)

    @property
    def is_closed_curve(self) -> bool:
        return True

    @property
    def width(self) -> float:
        return 0.0 if self.corners is None else distance(self.corners[0], self.corners[1])

    @property
    def height(self) -> float:
        return 0.0 if self.corners is None else distance(self.corners[1], self.corners[2])

    def curve_points(self):
        if self.corners is None:
            return None
        return np.array(self.corners)

    def preview_points(self, cursor=None):
        if self.is_complete():
            return self.curve_points()
        if cursor is None:
            return None
        if self.mode is RectMode.TWO_POINT or self.end is not None:
            corners = (self.corners_for(cursor) if self.mode is RectMode.TWO_POINT
                       else self.corners_for(self.end, cursor))
            if is_degenerate_rect(corners):
                return None
            return np.array(corners)
        # Drei-Punkt, erst Startpunkt: Mittellinie zeigen
        return np.array([self.start, cursor])

    def _render(self, handle, points, style, cursor=None):
        handle.set_polyline("curve", points, len(points) == 4, style)

    def _to_dict(self):
        return {
            "type": "rect",
            "mode": self.mode.value,
            "start": vec3_to_list(self.start),
            "end": vec3_to_list(self.end),
            "p3": vec3_to_list(self.p3),
            "planeNormal": vec3_to_list(self.plane_normal),
            "corners": [vec3_to_list(c) for c in self.corners],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RectPrimitive':
        mode = _parse_mode(data.get("mode"), _RECT_MODE_ALIASES, RectMode.TWO_POINT, "rect")
        start = vec3_from_json(data.get("start"), "rect.start")
        end = optional_vec3_from_json(data.get("end"), "rect.end")
        p3 = optional_vec3_from_json(data.get("p3"), "rect.p3")
        normal = optional_vec3_from_json(data.get("planeNormal"), "rect.planeNormal")

        rect = cls(mode=mode, start=start, end=end, p3=p3,
                   plane_normal=normal if normal is not None else WORLD_Z)
        if not rect.is_complete():
            # Nur Ecken gespeichert (ältere Dateien): diese übernehmen
            stored = data.get("corners")
            if isinstance(stored, list) and len(stored) == 4:
                rect.corners = [vec3_from_json(c, "rect.corners") for c in stored]
        if not rect.is_complete():
            raise SketchDataError(f"rect ({mode.value}): degeneriertes Rechteck")
        return rect


@dataclass(eq=False)
class SplinePrimitive(Primitive):
    """Catmull-Rom-Spline durch alle Kontrollpunkte, mit optionalen Griffen."""
    kind: ClassVar[PrimitiveKind] = PrimitiveKind.SPLINE

    control_points: List[np.ndarray] = field(default_factory=list)
    tension: float = Tolerances.SKETCH_SPLINE_TENSION
    closed: bool = False
    handles_visible: bool = True
    segments: int = Tolerances.SKETCH_SPLINE_SEGMENTS
    id: str = field(default_factory=_short_id)

    def __post_init__(self):
        self.control_points = [as_vec3(p) for p in self.control_points]

    def is_complete(self) -> bool:
        return len(self.control_points) >= 2

    def curve_points(self, extra=None):
        pts = list(self.control_points)
        if extra is not None:
            pts.append(as_vec3(extra))
        return catmull_rom_points(pts, self.closed, self.tension, self.segments)

    def preview_points(self, cursor=None):
        return self.curve_points(cursor)

    def handle_positions(self) -> List[np.ndarray]:
        """Kopien der Kontrollpunkte (für Hit-Tests der Griffe)."""
        return [p.copy() for p in self.control_points]

    def add_point(self, point) -> None:
        self.control_points.append(as_vec3(point))

    # --- Rendering ---

    def _render(self, handle, points, style, cursor=None):
        # Die Abtastung schließt geschlossene Kurven bereits selbst
        handle.set_polyline("curve", points, False, style)
        self._sync_handles(handle)

    def _sync_handles(self, handle: RenderHandle) -> None:
        """Ein Punkt-Slot pro Kontrollpunkt; vorhandene Griffe bleiben stehen."""
        wanted = {f"handle:{i}" for i in range(len(self.control_points))} if self.handles_visible else set()
        for slot in handle.slots:
            if slot.startswith("handle:") and slot not in wanted:
                handle.drop(slot)
        for i, p in enumerate(self.control_points):
            slot = f"handle:{i}"
            if slot in wanted and not handle.has(slot):
                handle.set_points(slot, np.array([p]), STYLE_HANDLE)

    def _refresh_curve(self) -> None:
        if not self.is_drawn or not self._handle.has("curve"):
            return
        points = self.curve_points()
        if points is not None:
            self._handle.set_polyline("curve", points, False)

    def set_point(self, index: int, pos, scene: Optional[SketchScene] = None) -> None:
        """
        Verschiebt einen Kontrollpunkt. Die Kurve wird aktualisiert, von den
        Griffen wird nur der verschobene neu gesetzt.
        """
        if index < 0 or index >= len(self.control_points):
            return
        self.control_points[index] = as_vec3(pos)

        if not self.is_drawn:
            if scene is not None:
                self.draw(scene)
            return

        self._refresh_curve()
        slot = f"handle:{index}"
        if self.handles_visible and self._handle.has(slot):
            self._handle.set_points(slot, np.array([self.control_points[index]]), STYLE_HANDLE)

    def set_handles_visible(self, visible: bool) -> None:
        self.handles_visible = bool(visible)
        if self.is_drawn:
            self._sync_handles(self._handle)

    def set_tension(self, tension: float) -> None:
        self.tension = float(tension)
        self._refresh_curve()

    def set_closed(self, closed: bool) -> None:
        self.closed = bool(closed)
        self._refresh_curve()

    def _to_dict(self):
        return {
            "type": "spline",
            "points": [vec3_to_list(p) for p in self.control_points],
            "tension": float(self.tension),
            "closed": bool(self.closed),
            "segments": int(self.segments),
            "handlesVisible": bool(self.handles_visible),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SplinePrimitive':
        raw_points = data.get("points")
        if not isinstance(raw_points, list):
            raise SketchDataError("spline: 'points' fehlt")
        points = [vec3_from_json(p, "spline.points") for p in raw_points]
        if len(points) < 2:
            raise SketchDataError(f"spline: mindestens 2 Punkte nötig, {len(points)} gefunden")

        spline = cls(control_points=points)
        tension = _optional_number(data, "tension")
        if tension is not None:
            spline.tension = tension
        if isinstance(data.get("closed"), bool):
            spline.closed = data["closed"]
        segments = _optional_number(data, "segments")
        if segments is not None and segments >= 1:
            spline.segments = int(segments)
        if isinstance(data.get("handlesVisible"), bool):
            spline.handles_visible = data["handlesVisible"]
        return spline


def set_all_handles_visible(primitives, visible: bool) -> int:
    """Schaltet die Griffe aller Splines in primitives. Gibt die Anzahl zurück."""
    count = 0
    for item in primitives:
        if item is not None and item.kind is PrimitiveKind.SPLINE:
            item.set_handles_visible(visible)
            count += 1
    if count and is_enabled("sketch_debug"):
        logger.debug(f"[Spline] Griffe {'sichtbar' if visible else 'versteckt'} für {count} Splines")
    return count


PRIMITIVE_CLASSES = {
    PrimitiveKind.POINT: PointPrimitive,
    PrimitiveKind.LINE: LinePrimitive,
    PrimitiveKind.ARC: ArcPrimitive,
    PrimitiveKind.CIRCLE: CirclePrimitive,
    PrimitiveKind.RECT: RectPrimitive,
    PrimitiveKind.SPLINE: SplinePrimitive,
}
