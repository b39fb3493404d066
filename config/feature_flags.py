"""
MashSketch - Feature Flags
==========================

Feature Flags ermöglichen inkrementelle Rollouts und einfaches Rollback.
Diese Datei enthält Debug-Flags und Verhaltensschalter der Sketch-Tools.
"""

from typing import Dict

# Feature Flag Registry
# =====================
# Die Defaults müssen mit test/conftest.py (FEATURE_FLAG_DEFAULTS) synchron bleiben.

FEATURE_FLAGS: Dict[str, bool] = {
    # Debug-Modi
    "sketch_input_logging": False,  # Jedes Pointer-Event loggen (sehr verbose)
    "sketch_debug": False,  # Tool-Übergänge und Degenerations-Entscheidungen loggen

    # Tool-Verhalten
    "sketch_continuous_line": True,  # Linien-Tool startet nach jedem Segment am letzten Endpunkt neu
    "sketch_loose_circle_preview": True,  # Previews nutzen die lose Umkreis-Determinante (1e-6)
    "sketch_spline_close_snap": False,  # Spline schließt sich, wenn letzter Punkt auf erstem liegt
}


def is_enabled(flag: str) -> bool:
    """
    Prüft ob ein Feature-Flag aktiviert ist.

    Args:
        flag: Name des Feature-Flags

    Returns:
        True wenn aktiviert, False wenn nicht aktiviert oder unbekannt
    """
    return FEATURE_FLAGS.get(flag, False)


def set_flag(flag: str, value: bool) -> None:
    """
    Setzt ein Feature-Flag zur Laufzeit.
    Nützlich für Tests und Debugging.

    Args:
        flag: Name des Feature-Flags
        value: Neuer Wert
    """
    FEATURE_FLAGS[flag] = value


def get_all_flags() -> Dict[str, bool]:
    """Gibt alle Feature-Flags zurück."""
    return FEATURE_FLAGS.copy()
