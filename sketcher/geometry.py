"""
MashSketch Sketcher - Vektor-Hilfsfunktionen
Vec3-Koerzierung, Normierung, Winkel und Catmull-Rom-Abtastung
"""

import math
from typing import Iterable, List, Optional, Sequence

import numpy as np

from config.tolerances import Tolerances
from .errors import SketchDataError

TWO_PI = 2.0 * math.pi

WORLD_X = (1.0, 0.0, 0.0)
WORLD_Y = (0.0, 1.0, 0.0)
WORLD_Z = (0.0, 0.0, 1.0)


def as_vec3(value) -> np.ndarray:
    """
    FIREWALL: Wandelt jede 3er-Sequenz in ein eigenes float64-Array (3,) um.
    Es wird immer kopiert, damit Aufrufer ihre Punkte weiterverwenden können.
    """
    arr = np.array(value, dtype=np.float64).reshape(3)
    return arr


def vec3_from_json(value, field_name: str = "point") -> np.ndarray:
    """Liest einen [x, y, z]-Eintrag aus persistierten Daten."""
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise SketchDataError(f"{field_name}: erwartet [x, y, z], erhalten {value!r}")
    try:
        arr = np.array([float(c) for c in value], dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise SketchDataError(f"{field_name}: keine Zahlen ({e})") from e
    if not np.all(np.isfinite(arr)):
        raise SketchDataError(f"{field_name}: nicht-endliche Koordinaten {value!r}")
    return arr


def optional_vec3_from_json(value, field_name: str = "point") -> Optional[np.ndarray]:
    """Wie vec3_from_json, aber None/fehlend bleibt None."""
    if value is None:
        return None
    return vec3_from_json(value, field_name)


def is_vec3_json(value) -> bool:
    """Prüft, ob value wie ein gültiges [x, y, z] aussieht."""
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        return False
    return all(isinstance(c, (int, float)) and not isinstance(c, bool) for c in value)


def vec3_to_list(v) -> Optional[List[float]]:
    """Serialisiert zu [x, y, z] mit nativen Python-Floats (JSON-tauglich)."""
    if v is None:
        return None
    return [float(v[0]), float(v[1]), float(v[2])]


def normalize(v, fallback: Sequence[float] = WORLD_X,
              eps: float = Tolerances.SKETCH_BASIS_DEGENERATE) -> np.ndarray:
    """Normiert v; liefert fallback, wenn |v| < eps."""
    v = np.asarray(v, dtype=np.float64)
    length = float(np.linalg.norm(v))
    if length < eps:
        return as_vec3(fallback)
    return v / length


def reject(v, normal) -> np.ndarray:
    """Anteil von v senkrecht zu normal (normal muss normiert sein)."""
    v = np.asarray(v, dtype=np.float64)
    normal = np.asarray(normal, dtype=np.float64)
    return v - normal * float(np.dot(v, normal))


def distance(a, b) -> float:
    return float(np.linalg.norm(np.asarray(b, dtype=np.float64) - np.asarray(a, dtype=np.float64)))


def midpoint(a, b) -> np.ndarray:
    return (np.asarray(a, dtype=np.float64) + np.asarray(b, dtype=np.float64)) * 0.5


def normalize_angle(angle: float) -> float:
    """Bringt einen Winkel nach [0, 2π)."""
    t = math.fmod(angle, TWO_PI)
    if t < 0:
        t += TWO_PI
    # fmod kann für winzige negative Werte exakt 2π liefern
    if t >= TWO_PI:
        t -= TWO_PI
    return t


def points_are_coincident(a, b, tolerance: float = Tolerances.COMPARE_POINT) -> bool:
    return distance(a, b) < tolerance


# === Catmull-Rom ===

def _catmull_rom_1d(x0: float, x1: float, x2: float, x3: float,
                    tension: float, t: float) -> float:
    """Kubisches Hermite-Polynom mit Tangenten tension * (Nachbar-Differenz)."""
    t0 = tension * (x2 - x0)
    t1 = tension * (x3 - x1)
    c0 = x1
    c1 = t0
    c2 = -3 * x1 + 3 * x2 - 2 * t0 - t1
    c3 = 2 * x1 - 2 * x2 + t0 + t1
    return c0 + c1 * t + c2 * t * t + c3 * t * t * t


def catmull_rom_point(points: np.ndarray, closed: bool, tension: float, t: float) -> np.ndarray:
    """
    Punkt auf der Catmull-Rom-Kurve bei Parameter t in [0, 1].

    Offene Kurven verlängern die Endsegmente durch Spiegelung des
    Nachbarpunkts, damit die Kurve exakt durch Start und Ende läuft.
    """
    count = len(points)
    p = (count - (0 if closed else 1)) * t
    int_point = int(math.floor(p))
    weight = p - int_point

    if closed:
        int_point %= count
    elif weight == 0 and int_point == count - 1:
        int_point = count - 2
        weight = 1.0

    if closed or int_point > 0:
        p0 = points[(int_point - 1) % count]
    else:
        p0 = points[0] - points[1] + points[0]

    p1 = points[int_point % count]
    p2 = points[(int_point + 1) % count]

    if closed or int_point + 2 < count:
        p3 = points[(int_point + 2) % count]
    else:
        p3 = points[count - 1] - points[count - 2] + points[count - 1]

    return np.array([
        _catmull_rom_1d(p0[i], p1[i], p2[i], p3[i], tension, weight)
        for i in range(3)
    ], dtype=np.float64)


def catmull_rom_points(control_points: Iterable, closed: bool = False,
                       tension: float = Tolerances.SKETCH_SPLINE_TENSION,
                       segments: int = Tolerances.SKETCH_SPLINE_SEGMENTS) -> Optional[np.ndarray]:
    """
    Tastet eine Catmull-Rom-Kurve durch alle Kontrollpunkte ab.

    Args:
        control_points: Punkte, durch die die Kurve verläuft
        closed: Kurve schließen (letzter -> erster Punkt)
        tension: Tangenten-Skalierung (0.5 = klassisch)
        segments: Anzahl Teilstücke über die gesamte Kurve

    Returns:
        Array (segments + 1, 3) oder None bei weniger als 2 Punkten
    """
    pts = np.array([as_vec3(p) for p in control_points], dtype=np.float64)
    if len(pts) < 2:
        return None
    segments = max(1, int(segments))
    return np.array([
        catmull_rom_point(pts, closed, tension, d / segments)
        for d in range(segments + 1)
    ], dtype=np.float64)
