"""
MashSketch Sketcher - Kreis-Fitting
Zwei-Punkt-Kreis (Mitte + Radiuspunkt) und Umkreis durch drei Punkte
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from config.tolerances import Tolerances, circle_determinant_tolerance
from .geometry import as_vec3, distance
from .plane_basis import PlaneBasis


@dataclass(frozen=True)
class CircleFitResult:
    center: np.ndarray
    radius: float
    basis: Optional[PlaneBasis] = None

    def residual(self, point) -> float:
        """Abweichung |dist(center, point) - radius|."""
        return abs(distance(self.center, point) - self.radius)

    def passes_through(self, point, tolerance: float = Tolerances.SKETCH_CIRCLE_FIT) -> bool:
        return self.residual(point) < tolerance * max(self.radius, 1.0)


def two_point(p1, p2) -> CircleFitResult:
    """Kreis mit Mittelpunkt p1 durch p2. Radius 0 ist erlaubt (Aufrufer prüft)."""
    center = as_vec3(p1)
    return CircleFitResult(center=center, radius=distance(center, p2))


def _circumcenter_2d(bx: float, by: float, cx: float, cy: float, eps: float):
    """
    Umkreismittelpunkt mit A im Ursprung.

    D = 2(Ax(By-Cy) + Bx(Cy-Ay) + Cx(Ay-By)) vereinfacht sich für A = (0, 0).
    """
    d = 2.0 * (bx * cy - cx * by)
    if abs(d) < eps:
        return None
    b_sq = bx * bx + by * by
    c_sq = cx * cx + cy * cy
    ux = (b_sq * cy - c_sq * by) / d
    uy = (c_sq * bx - b_sq * cx) / d
    return ux, uy


def _fit_in_basis(p1, p2, p3, basis: PlaneBasis, loose: bool) -> Optional[CircleFitResult]:
    p1 = as_vec3(p1)
    bx, by = basis.to_2d(p2, p1)
    cx, cy = basis.to_2d(p3, p1)

    local = _circumcenter_2d(bx, by, cx, cy, circle_determinant_tolerance(loose))
    if local is None:
        return None

    center = basis.to_3d(p1, local[0], local[1])
    radius = distance(center, p1)
    if radius < Tolerances.SKETCH_MIN_RADIUS:
        return None
    return CircleFitResult(center=center, radius=radius, basis=basis)


def three_point(p1, p2, p3, normal=(0.0, 0.0, 1.0), loose: bool = False) -> Optional[CircleFitResult]:
    """
    Umkreis durch drei Punkte in der Ebene mit Normale normal.

    Args:
        p1, p2, p3: Punkte auf dem Kreis (p1 ist lokaler Ursprung)
        normal: Ebenennormale der Skizze
        loose: Lose Determinanten-Toleranz (1e-6) für Live-Previews

    Returns:
        CircleFitResult oder None bei (fast) kollinearen Punkten
    """
    return _fit_in_basis(p1, p2, p3, PlaneBasis.from_normal(normal), loose)


def three_point_on_own_plane(p1, p2, p3, loose: bool = False) -> Optional[CircleFitResult]:
    """Wie three_point, aber in der Ebene, die die drei Punkte selbst aufspannen."""
    return _fit_in_basis(p1, p2, p3, PlaneBasis.from_three_points(p1, p2, p3), loose)
