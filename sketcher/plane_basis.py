"""
MashSketch Sketcher - Ebenen und lokale Basis
Orthonormale (u, v, normal)-Basis aus drei Punkten oder einer Normalen
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union
import math

import numpy as np

from config.tolerances import Tolerances
from .geometry import (
    WORLD_X, WORLD_Y, WORLD_Z, as_vec3, normalize, reject, vec3_from_json, vec3_to_list,
)


@dataclass(frozen=True)
class PlaneBasis:
    """
    Lokales Koordinatensystem einer Sketch-Ebene.

    Invarianten: normal, u, v sind normiert und paarweise orthogonal,
    v = normal x u. Wird nie gespeichert, sondern immer neu berechnet.
    """
    normal: np.ndarray
    u: np.ndarray
    v: np.ndarray

    @classmethod
    def from_three_points(cls, p1, p2, p3) -> 'PlaneBasis':
        """
        Basis der Ebene durch drei Punkte.

        u zeigt in Richtung p1 -> p2. Bei (fast) kollinearen Punkten wird
        (0, 0, 1) als Normale genommen, bei unbrauchbarem u die Welt-X-Achse.
        """
        p1, p2, p3 = as_vec3(p1), as_vec3(p2), as_vec3(p3)
        v12 = p2 - p1
        v13 = p3 - p1

        cross = np.cross(v12, v13)
        length = float(np.linalg.norm(cross))
        if length < Tolerances.SKETCH_BASIS_DEGENERATE:
            normal = as_vec3(WORLD_Z)
        else:
            normal = cross / length

        u_raw = reject(v12, normal)
        if float(np.dot(u_raw, u_raw)) < Tolerances.SKETCH_BASIS_DEGENERATE:
            u = as_vec3(WORLD_X)
        else:
            u = u_raw / float(np.linalg.norm(u_raw))

        v = np.cross(normal, u)
        return cls(normal=normal, u=u, v=v)

    @classmethod
    def from_normal(cls, normal) -> 'PlaneBasis':
        """
        Basis zu einer gegebenen Normalen.

        Referenzachse ist Welt-Z, außer die Normale liegt fast parallel dazu
        (|n.z| >= 0.99), dann Welt-Y.
        """
        n = normalize(normal, fallback=WORLD_Z)
        if abs(n[2]) < Tolerances.SKETCH_REFERENCE_AXIS_SWITCH:
            reference = as_vec3(WORLD_Z)
        else:
            reference = as_vec3(WORLD_Y)
        u = normalize(np.cross(n, reference))
        v = normalize(np.cross(n, u))
        return cls(normal=n, u=u, v=v)

    def to_2d(self, point, origin) -> Tuple[float, float]:
        """Lokale (x, y)-Koordinaten von point relativ zu origin."""
        offset = as_vec3(point) - as_vec3(origin)
        return float(np.dot(offset, self.u)), float(np.dot(offset, self.v))

    def to_3d(self, origin, x: float, y: float) -> np.ndarray:
        """Lokale Koordinaten zurück in den Raum."""
        return as_vec3(origin) + self.u * x + self.v * y

    def angle_of(self, center, point) -> float:
        """Winkel von point um center, gemessen von u Richtung v (atan2)."""
        x, y = self.to_2d(point, center)
        return math.atan2(y, x)

    def is_orthonormal(self, tolerance: float = Tolerances.EPSILON_NORMAL) -> bool:
        for vec in (self.normal, self.u, self.v):
            if abs(float(np.linalg.norm(vec)) - 1.0) > tolerance:
                return False
        return (abs(float(np.dot(self.u, self.v))) < tolerance
                and abs(float(np.dot(self.u, self.normal))) < tolerance
                and abs(float(np.dot(self.v, self.normal))) < tolerance)

    def __repr__(self):
        n, u = self.normal, self.u
        return (f"PlaneBasis(n=({n[0]:.3f}, {n[1]:.3f}, {n[2]:.3f}), "
                f"u=({u[0]:.3f}, {u[1]:.3f}, {u[2]:.3f}))")


# === Ebenen ===

PLANE_NAMES = ("XY", "YZ", "XZ")

_PLANE_NORMALS = {
    "XY": WORLD_Z,
    "YZ": WORLD_X,
    "XZ": WORLD_Y,
}


def plane_name_for_normal(normal) -> str:
    """Benennt eine Ebene nach ihrer dominanten Normalen-Achse."""
    n = normalize(normal, fallback=WORLD_Z)
    if abs(n[0]) > 0.9:
        return "YZ"
    if abs(n[1]) > 0.9:
        return "XZ"
    return "XY"


def determine_plane_name(src: Union[str, 'Plane', tuple, list, np.ndarray, None]) -> str:
    """
    Ebenenname aus einem Namen (beliebige Schreibweise), einer Plane oder
    einem Normalenvektor. Vektoren werden nach der größten Komponente
    klassifiziert, alles Unbekannte wird "XY".
    """
    if isinstance(src, str):
        upper = src.strip().upper()
        if upper in PLANE_NAMES:
            return upper
        return "XY"
    if isinstance(src, Plane):
        src = src.normal
    if src is None:
        return "XY"
    try:
        vec = as_vec3(src)
    except (TypeError, ValueError):
        return "XY"
    ax, ay, az = (abs(float(c)) for c in normalize(vec, fallback=WORLD_Z))
    if az >= ax and az >= ay:
        return "XY"
    if ax >= ay and ax >= az:
        return "YZ"
    return "XZ"


@dataclass
class Plane:
    """Sketch-Ebene: normierte Normale plus ein Punkt auf der Ebene."""
    normal: np.ndarray = field(default_factory=lambda: as_vec3(WORLD_Z))
    origin: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.normal = normalize(self.normal, fallback=WORLD_Z)
        self.origin = as_vec3(self.origin)

    @classmethod
    def xy(cls, offset: float = 0.0) -> 'Plane':
        return cls(normal=WORLD_Z, origin=(0.0, 0.0, offset))

    @classmethod
    def yz(cls, offset: float = 0.0) -> 'Plane':
        return cls(normal=WORLD_X, origin=(offset, 0.0, 0.0))

    @classmethod
    def xz(cls, offset: float = 0.0) -> 'Plane':
        return cls(normal=WORLD_Y, origin=(0.0, offset, 0.0))

    @classmethod
    def from_name(cls, name: str, origin=None) -> 'Plane':
        """Standardebene "XY" / "YZ" / "XZ" (unbekannte Namen -> XY)."""
        key = determine_plane_name(name)
        return cls(normal=_PLANE_NORMALS[key],
                   origin=origin if origin is not None else (0.0, 0.0, 0.0))

    @property
    def name(self) -> str:
        return plane_name_for_normal(self.normal)

    @property
    def basis(self) -> PlaneBasis:
        return PlaneBasis.from_normal(self.normal)

    def signed_distance(self, point) -> float:
        return float(np.dot(as_vec3(point) - self.origin, self.normal))

    def contains(self, point, tolerance: float = Tolerances.SKETCH_PLANE_CONTAINS) -> bool:
        return abs(self.signed_distance(point)) < tolerance

    def project(self, point) -> np.ndarray:
        """Orthogonale Projektion auf die Ebene."""
        p = as_vec3(point)
        return p - self.normal * self.signed_distance(p)

    def to_dict(self) -> dict:
        return {
            "normal": vec3_to_list(self.normal),
            "origin": vec3_to_list(self.origin),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'Plane':
        if not data:
            return cls.xy()
        return cls(normal=vec3_from_json(data.get("normal"), "normal"),
                   origin=vec3_from_json(data.get("origin", [0.0, 0.0, 0.0]), "origin"))

    def __repr__(self):
        o = self.origin
        return f"Plane({self.name}, origin=({o[0]:.2f}, {o[1]:.2f}, {o[2]:.2f}))"
