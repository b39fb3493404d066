"""
MashSketch Sketcher - Bogen-Auflösung
Drei-Punkt-Bogen (Endpunkte + Durchgangspunkt) und Mitte-Start-Ende-Bogen.

Winkel werden immer so normalisiert, dass end_angle >= start_angle gilt.
Der Bogen läuft dann monoton gegen den Uhrzeigersinn (bzgl. basis.normal)
von start_angle nach end_angle.
"""

from dataclasses import dataclass
from typing import Optional
import math

import numpy as np
from loguru import logger

from config.feature_flags import is_enabled
from config.tolerances import Tolerances
from .circle_fit import three_point_on_own_plane
from .geometry import TWO_PI, as_vec3, distance, normalize_angle
from .plane_basis import PlaneBasis


@dataclass(frozen=True)
class ArcSweep:
    center: np.ndarray
    radius: float
    start_angle: float
    end_angle: float
    basis: PlaneBasis
    points: np.ndarray
    reversed: bool = False

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def arc_length(self) -> float:
        return self.radius * self.sweep

    @property
    def start_point(self) -> np.ndarray:
        return self.points[0]

    @property
    def end_point(self) -> np.ndarray:
        return self.points[-1]


def point_at_angle(center, radius: float, basis: PlaneBasis, angle: float) -> np.ndarray:
    return (as_vec3(center)
            + basis.u * (radius * math.cos(angle))
            + basis.v * (radius * math.sin(angle)))


def sample_arc(center, radius: float, basis: PlaneBasis,
               start_angle: float, end_angle: float,
               steps: int = Tolerances.SKETCH_ARC_STEPS) -> np.ndarray:
    """
    steps + 1 gleichmäßig verteilte Punkte von start_angle bis end_angle.
    Deterministisch: gleiche Winkel liefern exakt die gleiche Polylinie.
    """
    steps = max(1, int(steps))
    center = as_vec3(center)
    span = end_angle - start_angle
    return np.array([
        point_at_angle(center, radius, basis, start_angle + span * (i / steps))
        for i in range(steps + 1)
    ], dtype=np.float64)


def _ccw_contains(start: float, end: float, probe: float) -> bool:
    """Liegt probe auf dem CCW-Bogen von start nach end (modulo 2π)?"""
    return normalize_angle(probe - start) <= normalize_angle(end - start)


def three_point_arc(p1, p2, p3, steps: int = Tolerances.SKETCH_ARC_STEPS,
                    loose: bool = False) -> Optional[ArcSweep]:
    """
    Bogen mit den Endpunkten p1, p2, der durch p3 läuft.

    Zuerst wird der CCW-Bogen p1 -> p2 probiert. Liegt p3 nicht darauf,
    werden Start und Ende getauscht (reversed=True).

    Returns:
        ArcSweep oder None bei kollinearen Punkten / unauflösbarer Richtung
    """
    fit = three_point_on_own_plane(p1, p2, p3, loose=loose)
    if fit is None:
        return None

    basis = fit.basis
    center = fit.center
    a1 = basis.angle_of(center, p1)
    a2 = basis.angle_of(center, p2)
    a3 = basis.angle_of(center, p3)

    if _ccw_contains(a1, a2, a3):
        start, end, flipped = a1, a2, False
    elif _ccw_contains(a2, a1, a3):
        start, end, flipped = a2, a1, True
    else:
        if is_enabled("sketch_debug"):
            logger.debug("[ArcResolver] Durchgangspunkt liegt auf keinem der beiden Bögen")
        return None

    if end < start:
        end += TWO_PI

    if end - start <= Tolerances.SKETCH_ARC_MIN_SWEEP:
        return None

    points = sample_arc(center, fit.radius, basis, start, end, steps)
    return ArcSweep(center=center, radius=fit.radius, start_angle=start, end_angle=end,
                    basis=basis, points=points, reversed=flipped)


def center_start_end_arc(center, start, end, steps: int = Tolerances.SKETCH_ARC_STEPS,
                         normal=None) -> Optional[ArcSweep]:
    """
    Bogen um center, beginnend bei start, CCW bis zur Richtung von end.

    Der Radius kommt allein aus |start - center|; end bestimmt nur den Winkel.
    Ein Öffnungswinkel von (fast) 0 oder (fast) 2π ergibt keinen Bogen.
    """
    center = as_vec3(center)
    radius = distance(center, start)
    if radius < Tolerances.SKETCH_MIN_RADIUS:
        return None

    basis = PlaneBasis.from_normal(normal if normal is not None else (0.0, 0.0, 1.0))
    a_start = basis.angle_of(center, start)
    a_end = basis.angle_of(center, end)

    delta = math.fmod(math.fmod(a_end - a_start, TWO_PI) + TWO_PI, TWO_PI)
    eps = Tolerances.SKETCH_ARC_MIN_SWEEP
    if delta <= eps or delta >= TWO_PI - eps:
        return None

    end_angle = a_start + delta
    points = sample_arc(center, radius, basis, a_start, end_angle, steps)
    return ArcSweep(center=center, radius=radius, start_angle=a_start, end_angle=end_angle,
                    basis=basis, points=points)
