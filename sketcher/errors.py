"""
MashSketch - Sketcher Fehlerklassen

Degenerierte Geometrie ist KEIN Fehler (Builder liefern None).
Exceptions gibt es nur für kaputte Persistenz-Daten und Aufrufer-Bugs.
"""


class SketchError(Exception):
    """Basisklasse aller Sketcher-Fehler"""


class SketchDataError(SketchError, ValueError):
    """Persistierte Primitive-Daten sind unvollständig oder unbekannt."""


class SketchContractError(SketchError, RuntimeError):
    """Aufrufer hat einen Vertrag verletzt (z.B. finalize() vor is_complete())."""
