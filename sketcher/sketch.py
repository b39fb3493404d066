"""
MashSketch Sketcher - Sketch Objekt
Fasst finalisierte Primitive, Ebene und Constraint-Einträge zusammen
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
import re
import uuid

from loguru import logger

from .errors import SketchContractError, SketchDataError
from .geometry import vec3_from_json, vec3_to_list
from .plane_basis import Plane
from .primitives import Primitive, PrimitiveKind

DEFAULT_SKETCH_NAMES = ("", "sketch", "skizze")

_NUMBERED_NAME = re.compile(r"^Sketch (\d+)$")


def resolve_sketch_name(name: Optional[str], existing: Iterable[str] = ()) -> str:
    """
    Leerer oder Standard-Name -> nächster freier "Sketch N".
    Alles andere wird nur getrimmt übernommen.
    """
    stripped = (name or "").strip()
    if stripped.lower() not in DEFAULT_SKETCH_NAMES:
        return stripped

    highest = 0
    for other in existing:
        match = _NUMBERED_NAME.match((other or "").strip())
        if match:
            highest = max(highest, int(match.group(1)))
    return f"Sketch {highest + 1}"


@dataclass
class ConstraintRecord:
    """Gespeicherter Constraint-Eintrag (wird nicht gelöst)."""
    type: str
    entities: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "entities": list(self.entities)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConstraintRecord':
        ctype = data.get("type")
        if not isinstance(ctype, str) or not ctype:
            raise SketchDataError(f"Constraint ohne Typ: {data!r}")
        entities = data.get("entities", [])
        if not isinstance(entities, list):
            raise SketchDataError(f"Constraint '{ctype}': entities ist keine Liste")
        return cls(type=ctype, entities=[int(e) for e in entities])


@dataclass(eq=False)
class Sketch:
    """
    2D-Sketch auf einer Ebene.

    Enthält nur vollständige Primitive. Constraints sind reine Einträge
    (Typ + Element-Indizes), ein Solver läuft nicht.
    """

    name: str = "Sketch"
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    plane: Plane = field(default_factory=Plane.xy)
    primitives: List[Primitive] = field(default_factory=list)
    constraints: List[ConstraintRecord] = field(default_factory=list)

    # === Primitive ===

    def add_primitive(self, primitive: Primitive) -> Primitive:
        if not primitive.is_complete():
            raise SketchContractError(f"Unvollständiges {primitive.kind.value} kann nicht in den Sketch")
        self.primitives.append(primitive)
        return primitive

    def remove_primitive(self, primitive: Primitive) -> bool:
        for i, item in enumerate(self.primitives):
            if item is primitive:
                del self.primitives[i]
                return True
        return False

    def primitives_of(self, kind: PrimitiveKind) -> List[Primitive]:
        return [p for p in self.primitives if p.kind is kind]

    def clear(self):
        self.primitives.clear()
        self.constraints.clear()

    @property
    def is_empty(self) -> bool:
        return not self.primitives

    # === Constraints ===

    def add_constraint(self, ctype: str, entities: Iterable[int]) -> ConstraintRecord:
        record = ConstraintRecord(type=ctype, entities=[int(e) for e in entities])
        self.constraints.append(record)
        return record

    def remove_constraint(self, index: int) -> Optional[ConstraintRecord]:
        if 0 <= index < len(self.constraints):
            return self.constraints.pop(index)
        return None

    def clear_constraints(self):
        self.constraints.clear()

    # === Serialisierung ===

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "Sketch",
            "id": self.id,
            "name": self.name,
            "plane": self.plane.name,
            "planeNormal": vec3_to_list(self.plane.normal),
            "origin": vec3_to_list(self.plane.origin),
            "items": [p.to_dict() for p in self.primitives if p.is_complete()],
            "constraints": [c.to_dict() for c in self.constraints],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Sketch':
        """Lädt einen Sketch. Kaputte Elemente und Constraints werden übersprungen."""
        from .serialization import primitive_list_from_dicts

        if not isinstance(data, dict):
            raise SketchDataError(f"Sketch-Daten sind kein Objekt: {type(data).__name__}")

        origin_raw = data.get("origin")
        origin = vec3_from_json(origin_raw, "sketch.origin") if origin_raw is not None else None
        if data.get("planeNormal") is not None:
            plane = Plane(normal=vec3_from_json(data["planeNormal"], "sketch.planeNormal"),
                          origin=origin if origin is not None else (0.0, 0.0, 0.0))
        else:
            plane = Plane.from_name(str(data.get("plane", "XY")), origin=origin)

        sketch = cls(name=str(data.get("name", "Sketch")), plane=plane)
        if data.get("id") is not None:
            sketch.id = str(data["id"])

        items = data.get("items")
        if items is None:
            items = []
        if not isinstance(items, list):
            raise SketchDataError(f"sketch.items ist keine Liste: {type(items).__name__}")
        sketch.primitives = primitive_list_from_dicts(items)

        constraints = data.get("constraints")
        if constraints is None:
            constraints = []
        if not isinstance(constraints, list):
            raise SketchDataError(f"sketch.constraints ist keine Liste: {type(constraints).__name__}")
        for c_data in constraints:
            try:
                sketch.constraints.append(ConstraintRecord.from_dict(c_data))
            except (SketchDataError, AttributeError, TypeError, ValueError) as e:
                logger.debug(f"Constraint-Wiederherstellung übersprungen: {e}")

        logger.debug(f"[Sketch.from_dict] '{sketch.name}': {len(sketch.primitives)} Elemente, "
                     f"{len(sketch.constraints)} Constraints")
        return sketch

    def __repr__(self):
        return (f"Sketch('{self.name}', {self.plane.name}, "
                f"{len(self.primitives)} Elemente, {len(self.constraints)} Constraints)")
