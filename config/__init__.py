"""
MashSketch - Configuration Module
=================================

Zentrale Konfiguration für alle globalen Einstellungen.
"""

from .tolerances import (
    Tolerances, circle_determinant_tolerance, basis_tolerance,
    rect_tolerance, arc_sweep_tolerance,
)
from .feature_flags import is_enabled, set_flag, get_all_flags, FEATURE_FLAGS
