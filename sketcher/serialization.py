"""
MashSketch Sketcher - Serialisierung
Dispatch von JSON-Objekten auf die Primitive-Klassen, Sketch-Export/-Import
"""

import json
from typing import Any, Dict, Iterable, List

from loguru import logger

from .errors import SketchDataError
from .primitives import PRIMITIVE_CLASSES, Primitive, PrimitiveKind
from .sketch import Sketch


def primitive_from_dict(data: Dict[str, Any]) -> Primitive:
    """
    Ein Primitive aus seinem JSON-Objekt.

    Raises:
        SketchDataError: kein Objekt, fehlender/unbekannter "type" oder kaputte Felder
    """
    if not isinstance(data, dict):
        raise SketchDataError(f"Element ist kein Objekt: {type(data).__name__}")
    raw_type = data.get("type")
    try:
        kind = PrimitiveKind(raw_type)
    except ValueError:
        raise SketchDataError(f"Unbekannter Element-Typ: {raw_type!r}") from None
    return PRIMITIVE_CLASSES[kind].from_dict(data)


def primitive_list_from_dicts(items: Iterable[Any]) -> List[Primitive]:
    """
    Lädt alle Elemente, die sich laden lassen. Kaputte oder unvollständige
    Einträge werden geloggt und übersprungen.
    """
    result = []
    for i, item in enumerate(items):
        try:
            primitive = primitive_from_dict(item)
        except SketchDataError as e:
            logger.warning(f"[Serialization] Element {i} übersprungen: {e}")
            continue
        if not primitive.is_complete():
            logger.warning(f"[Serialization] Element {i} ({primitive.kind.value}) unvollständig, übersprungen")
            continue
        result.append(primitive)
    return result


def primitives_to_dicts(primitives: Iterable[Primitive]) -> List[Dict[str, Any]]:
    """Nur vollständige Primitive werden geschrieben."""
    return [p.to_dict() for p in primitives if p.is_complete()]


def export_sketch_json(sketch: Sketch) -> str:
    return json.dumps(sketch.to_dict(), indent=2)


def import_sketch_json(text: str) -> Sketch:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SketchDataError(f"Ungültiges Sketch-JSON: {e}") from e
    if not isinstance(data, dict) or data.get("type", "Sketch") != "Sketch":
        raise SketchDataError("JSON enthält keinen Sketch")
    return Sketch.from_dict(data)
