"""
MashSketch - Zentralisierte Toleranz-Konfiguration
===================================================

Alle numerischen Epsilon-Werte der Sketch-Geometrie an einem Ort.

Toleranz-Philosophie:
- Basis/Normalen: 1e-12 - nur echte Degeneration abfangen
- Umkreis (strikt): 1e-12 - Finalisieren und Laden
- Umkreis (lose): 1e-6 - Live-Preview, verhindert Flackern bei fast kollinearen Punkten
- Rechteck-Kanten: 1e-6 - Null-Kanten werden nicht finalisiert

Verwendung:
    from config.tolerances import Tolerances

    eps = Tolerances.SKETCH_CIRCLE_DETERMINANT

    # Oder via Convenience-Funktionen
    from config.tolerances import circle_determinant_tolerance
    eps = circle_determinant_tolerance(loose=True)
"""


class Tolerances:
    """
    Zentrale Toleranz-Konstanten für MashSketch.

    Kategorien:
    - SKETCH_*: Interaktive Sketch-Geometrie (Basis, Kreis, Bogen, Rechteck)
    - EPSILON_*: Numerische Stabilität
    - COMPARE_*: Vergleiche in Tests und beim Laden
    """

    # =========================================================================
    # Ebenen-Basis
    # =========================================================================

    # Kreuzprodukt-Länge / Projektion unterhalb dieses Werts = degeneriert
    SKETCH_BASIS_DEGENERATE = 1e-12

    # Ab |normal.z| >= 0.99 wird Welt-Y statt Welt-Z als Referenzachse genommen
    SKETCH_REFERENCE_AXIS_SWITCH = 0.99

    # Punkt liegt "auf der Ebene"
    SKETCH_PLANE_CONTAINS = 1e-6

    # =========================================================================
    # Kreis / Bogen
    # =========================================================================

    # Determinante des Umkreis-Gleichungssystems (strikt)
    SKETCH_CIRCLE_DETERMINANT = 1e-12

    # Lockere Variante für UI-Previews
    SKETCH_CIRCLE_DETERMINANT_LOOSE = 1e-6

    # Minimaler Radius (darunter kein Kreis/Bogen)
    SKETCH_MIN_RADIUS = 1e-12

    # Minimaler Öffnungswinkel eines Bogens (Radians)
    # delta <= eps: kein Bogen, delta >= 2π - eps: Vollkreis
    SKETCH_ARC_MIN_SWEEP = 1e-9

    # Standard-Abtastung für Bogen-Polylinien
    SKETCH_ARC_STEPS = 64

    # Segmente für Kreis-Polylinien
    SKETCH_CIRCLE_SEGMENTS = 64

    # Genauigkeit des Umkreises (relativ zu max(radius, 1))
    SKETCH_CIRCLE_FIT = 1e-4

    # =========================================================================
    # Rechteck
    # =========================================================================

    # Mittellinie / Kante kürzer als das = degeneriert
    SKETCH_RECT_MIN_EDGE = 1e-6

    # =========================================================================
    # Spline
    # =========================================================================

    # Catmull-Rom Spannung (THREE.CatmullRomCurve3 Default)
    SKETCH_SPLINE_TENSION = 0.5

    # Abtastung der gesamten Kurve
    SKETCH_SPLINE_SEGMENTS = 128

    # Schließ-Fangradius (letzter Punkt nahe erstem Punkt)
    SKETCH_SPLINE_CLOSE_SNAP = 1e-3

    # Fangradius der Spline-Griffe (Welt-Einheiten, entspricht der Griff-Kugel)
    SKETCH_HANDLE_PICK_RADIUS = 1.2

    # =========================================================================
    # Mathematische Epsilon-Werte (Numerische Stabilität)
    # =========================================================================

    # Vermeidet Division durch Null
    EPSILON_MATH = 1e-9

    # Normal-Vektor Validierung
    EPSILON_NORMAL = 1e-6

    # =========================================================================
    # Vergleichs-Toleranzen
    # =========================================================================

    # Punkt-Vergleich (sind zwei Punkte "gleich"?)
    COMPARE_POINT = 1e-6

    # Winkel-Vergleich (Radians)
    COMPARE_ANGLE = 1e-6

    # Längen-Vergleich
    COMPARE_LENGTH = 1e-6


# =============================================================================
# Convenience-Funktionen
# =============================================================================

def circle_determinant_tolerance(loose: bool = False) -> float:
    """Gibt die Determinanten-Toleranz für den Umkreis zurück."""
    if loose:
        return Tolerances.SKETCH_CIRCLE_DETERMINANT_LOOSE
    return Tolerances.SKETCH_CIRCLE_DETERMINANT


def basis_tolerance() -> float:
    """Gibt die Degenerations-Toleranz der Ebenen-Basis zurück."""
    return Tolerances.SKETCH_BASIS_DEGENERATE


def rect_tolerance() -> float:
    """Gibt die minimale Rechteck-Kantenlänge zurück."""
    return Tolerances.SKETCH_RECT_MIN_EDGE


def arc_sweep_tolerance() -> float:
    """Gibt den minimalen Bogen-Öffnungswinkel zurück."""
    return Tolerances.SKETCH_ARC_MIN_SWEEP


# =============================================================================
# Toleranz-Validierung (für Debugging)
# =============================================================================

def validate_tolerances():
    """
    Validiert dass alle Toleranzen sinnvolle Werte haben.
    Nützlich für Tests und Debugging.
    """
    issues = []

    # Lose Determinante darf nicht strenger sein als die strikte
    if Tolerances.SKETCH_CIRCLE_DETERMINANT_LOOSE < Tolerances.SKETCH_CIRCLE_DETERMINANT:
        issues.append(
            f"SKETCH_CIRCLE_DETERMINANT_LOOSE ({Tolerances.SKETCH_CIRCLE_DETERMINANT_LOOSE}) "
            f"strenger als SKETCH_CIRCLE_DETERMINANT ({Tolerances.SKETCH_CIRCLE_DETERMINANT})"
        )

    # Referenzachsen-Umschaltung muss knapp unter 1 liegen
    if not (0.5 < Tolerances.SKETCH_REFERENCE_AXIS_SWITCH < 1.0):
        issues.append(
            f"SKETCH_REFERENCE_AXIS_SWITCH außerhalb sinnvoller Grenzen: {Tolerances.SKETCH_REFERENCE_AXIS_SWITCH}"
        )

    if Tolerances.SKETCH_ARC_STEPS < 1 or Tolerances.SKETCH_CIRCLE_SEGMENTS < 3:
        issues.append("Abtastung für Bogen/Kreis zu grob")

    return issues


# Automatische Validierung beim Import (nur Warnung, kein Fehler)
_validation_issues = validate_tolerances()
if _validation_issues:
    from loguru import logger
    for issue in _validation_issues:
        logger.warning(f"Toleranz-Validierung: {issue}")
