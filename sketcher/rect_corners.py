"""
MashSketch Sketcher - Rechteck-Ecken
Diagonal-Rechteck (zwei Punkte) und Mittellinien-Rechteck (drei Punkte)
"""

from typing import List, Optional, Sequence

import numpy as np

from config.tolerances import Tolerances
from .geometry import as_vec3, distance
from .plane_basis import PlaneBasis


def two_point_corners(a, c, basis: PlaneBasis) -> List[np.ndarray]:
    """
    Achsparallele Ecken (bzgl. basis.u / basis.v) aus der Diagonale a -> c.

    Reihenfolge [mid-U-V, mid+U-V, mid+U+V, mid-U+V]: Ecke 0 ist die
    Projektion von a in die Ebene, Ecke 2 die von c.
    """
    a, c = as_vec3(a), as_vec3(c)
    mid = (a + c) * 0.5
    half = (c - a) * 0.5
    U = basis.u * float(np.dot(half, basis.u))
    V = basis.v * float(np.dot(half, basis.v))
    return [mid - U - V, mid + U - V, mid + U + V, mid - U + V]


def three_point_corners(p1, p2, p3, normal) -> List[np.ndarray]:
    """
    Rechteck aus Mittellinie p1 -> p2; p3 gibt die halbe Breite vor.

    Ecken [p1+off, p2+off, p2-off, p1-off]. Ist die Mittellinie kürzer als
    die Rechteck-Toleranz, kommen vier identische Ecken zurück.
    """
    p1, p2, p3 = as_vec3(p1), as_vec3(p2), as_vec3(p3)
    tangent = p2 - p1
    length = float(np.linalg.norm(tangent))
    if length < Tolerances.SKETCH_RECT_MIN_EDGE:
        return [p1.copy() for _ in range(4)]

    mid = (p1 + p2) * 0.5
    n = as_vec3(normal)
    axis = np.cross(n, tangent / length)
    axis_len = float(np.linalg.norm(axis))
    if axis_len < Tolerances.SKETCH_BASIS_DEGENERATE:
        # Mittellinie parallel zur Normalen: irgendeine Achse in der Ebene
        axis_u = PlaneBasis.from_normal(n).u
    else:
        axis_u = axis / axis_len

    half_width = float(np.dot(p3 - mid, axis_u))
    off = axis_u * half_width
    return [p1 + off, p2 + off, p2 - off, p1 - off]


def edge_lengths(corners: Sequence) -> List[float]:
    return [distance(corners[i], corners[(i + 1) % 4]) for i in range(4)]


def is_degenerate_rect(corners: Optional[Sequence],
                       tolerance: float = Tolerances.SKETCH_RECT_MIN_EDGE) -> bool:
    """True, wenn Ecken fehlen oder eine Kante kürzer als tolerance ist."""
    if corners is None or len(corners) != 4:
        return True
    return any(length < tolerance for length in edge_lengths(corners))
