"""
MashSketch Sketcher - Render-Anbindung
Abstrakte Szene (Rendering-Kollaborateur) und RenderHandle pro Primitive.

Ein RenderHandle sammelt alle Szenen-Tokens eines Primitives und gibt sie
genau einmal wieder frei. Danach ist er verbraucht.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

from loguru import logger

from .errors import SketchContractError

STYLE_FINAL = {"color": "#e0e0e0", "line_width": 2.0, "opacity": 1.0}
STYLE_PREVIEW = {"color": "#4a9eff", "line_width": 1.5, "opacity": 0.7}
STYLE_HANDLE = {"color": "#ffb000", "point_size": 8.0, "opacity": 1.0}


class SketchScene(ABC):
    """Vertrag des Rendering-Kollaborateurs. Tokens sind für den Core opak."""

    @abstractmethod
    def add_polyline(self, points: Sequence, closed: bool = False,
                     style: Optional[Dict[str, Any]] = None) -> Any:
        ...

    @abstractmethod
    def add_points(self, points: Sequence, style: Optional[Dict[str, Any]] = None) -> Any:
        ...

    @abstractmethod
    def update_polyline(self, token: Any, points: Sequence) -> None:
        ...

    @abstractmethod
    def remove(self, token: Any) -> None:
        ...


class RenderHandle:
    """
    Szenen-Objekte eines Primitives, adressiert über Slot-Namen
    ("curve", "handles", ...).
    """

    def __init__(self, scene: SketchScene, owner: str = ""):
        self.scene = scene
        self.owner = owner
        self._tokens: Dict[str, Any] = {}
        self._closed: Dict[str, bool] = {}
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def slots(self):
        return list(self._tokens.keys())

    def has(self, slot: str) -> bool:
        return slot in self._tokens

    def set_polyline(self, slot: str, points: Sequence, closed: bool = False,
                     style: Optional[Dict[str, Any]] = None) -> Any:
        """Legt eine Polylinie an oder aktualisiert die bestehende im Slot."""
        self._ensure_alive()
        token = self._tokens.get(slot)
        if token is not None and self._closed.get(slot) == closed:
            self.scene.update_polyline(token, points)
            return token
        if token is not None:
            self.scene.remove(token)
        token = self.scene.add_polyline(points, closed, style)
        self._tokens[slot] = token
        self._closed[slot] = closed
        return token

    def set_points(self, slot: str, points: Sequence,
                   style: Optional[Dict[str, Any]] = None) -> Any:
        """Punktwolken haben kein Update im Szenen-Vertrag: ersetzen."""
        self._ensure_alive()
        self.drop(slot)
        token = self.scene.add_points(points, style)
        self._tokens[slot] = token
        return token

    def drop(self, slot: str) -> None:
        token = self._tokens.pop(slot, None)
        self._closed.pop(slot, None)
        if token is not None:
            self.scene.remove(token)

    def release(self) -> None:
        """
        Entfernt alle Szenen-Objekte. Ein zweiter Aufruf tut nichts.

        Scheitert die Szene an einzelnen Tokens, werden trotzdem alle übrigen
        entfernt. Die gescheiterten bleiben im Handle (erneuter release()
        versucht es wieder) und der erste Fehler wird weitergereicht.
        """
        if self._released:
            return
        failed: Dict[str, Any] = {}
        first_error: Optional[Exception] = None
        for slot, token in list(self._tokens.items()):
            try:
                self.scene.remove(token)
            except Exception as e:
                logger.error(f"[RenderHandle] {self.owner}: Entfernen von '{slot}' fehlgeschlagen: {e}")
                failed[slot] = token
                if first_error is None:
                    first_error = e
        removed = len(self._tokens) - len(failed)
        self._closed = {slot: self._closed[slot] for slot in failed if slot in self._closed}
        self._tokens = failed
        if first_error is not None:
            raise first_error
        self._released = True
        logger.trace(f"[RenderHandle] {self.owner}: {removed} Objekte freigegeben")

    def _ensure_alive(self):
        if self._released:
            raise SketchContractError(f"RenderHandle von {self.owner or 'Primitive'} bereits freigegeben")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

    def __repr__(self):
        state = "released" if self._released else f"{len(self._tokens)} slots"
        return f"RenderHandle({self.owner}, {state})"
