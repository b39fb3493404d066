"""
MashSketch Sketcher - Interaktions-Zustand
Ziehen von Spline-Griffen und Unterdrücken des Klicks nach dem Loslassen.

    IDLE --begin_drag--> DRAGGING --end_drag--> SUPPRESSED_CLICK --Klick--> IDLE

Nach einem Drag liefert das Fenster-System beim Loslassen noch einen Klick.
Genau dieser eine Klick wird geschluckt, damit er keinen Kontrollpunkt anlegt.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional

from loguru import logger

from config.feature_flags import is_enabled
from config.tolerances import Tolerances
from .geometry import as_vec3, distance
from .primitives import PrimitiveKind, SplinePrimitive


class InteractionState(Enum):
    IDLE = auto()
    DRAGGING = auto()
    SUPPRESSED_CLICK = auto()


@dataclass
class HandleHit:
    spline: SplinePrimitive
    index: int
    distance: float


def find_handle(primitives: Iterable, point,
                radius: float = Tolerances.SKETCH_HANDLE_PICK_RADIUS) -> Optional[HandleHit]:
    """Nächster sichtbarer Spline-Griff innerhalb von radius um point."""
    point = as_vec3(point)
    best = None
    for item in primitives:
        if item is None or item.kind is not PrimitiveKind.SPLINE or not item.handles_visible:
            continue
        for i, pos in enumerate(item.control_points):
            d = distance(pos, point)
            if d <= radius and (best is None or d < best.distance):
                best = HandleHit(spline=item, index=i, distance=d)
    return best


class InteractionTracker:
    """Explizite Zustandsmaschine statt loser suppress-Flags."""

    def __init__(self):
        self.state = InteractionState.IDLE
        self.drag: Optional[HandleHit] = None

    @property
    def is_dragging(self) -> bool:
        return self.state is InteractionState.DRAGGING

    def begin_drag(self, hit: HandleHit) -> bool:
        if self.state is InteractionState.DRAGGING:
            return False
        self.state = InteractionState.DRAGGING
        self.drag = hit
        if is_enabled("sketch_debug"):
            logger.debug(f"[Interaction] Drag Griff {hit.index} von Spline {hit.spline.id}")
        return True

    def drag_to(self, point, scene=None) -> bool:
        """Verschiebt den gezogenen Griff. False, wenn kein Drag aktiv ist."""
        if self.state is not InteractionState.DRAGGING or self.drag is None:
            return False
        self.drag.spline.set_point(self.drag.index, point, scene)
        return True

    def end_drag(self) -> bool:
        if self.state is not InteractionState.DRAGGING:
            return False
        self.state = InteractionState.SUPPRESSED_CLICK
        self.drag = None
        return True

    def consume_click(self) -> bool:
        """True, wenn der Klick geschluckt werden soll (genau einmal nach einem Drag)."""
        if self.state is InteractionState.SUPPRESSED_CLICK:
            self.state = InteractionState.IDLE
            return True
        return False

    def on_press(self) -> None:
        # Neuer Tastendruck ohne vorherigen Klick: die Unterdrückung verfällt
        if self.state is InteractionState.SUPPRESSED_CLICK:
            self.state = InteractionState.IDLE

    def reset(self) -> None:
        self.state = InteractionState.IDLE
        self.drag = None
