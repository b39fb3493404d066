import itertools

import numpy as np
import pytest

from config.feature_flags import set_flag
from sketcher.render_handle import SketchScene


# Global Feature Flag Defaults - Single Source of Truth for Test Isolation
# ========================================================================
# WICHTIG: Jeder Test muss mit sauberen Feature-Flags starten.
# Diese Defaults müssen mit config/feature_flags.py synchron gehalten werden.
FEATURE_FLAG_DEFAULTS = {
    # Debug-Modi
    "sketch_input_logging": False,
    "sketch_debug": False,

    # Tool-Verhalten
    "sketch_continuous_line": True,
    "sketch_loose_circle_preview": True,
    "sketch_spline_close_snap": False,
}


@pytest.fixture(autouse=True)
def _global_feature_flag_isolation():
    """
    Globale Feature-Flag-Isolation.

    Stellt sicher, dass jeder Test mit sauberen, deterministischen
    Feature-Flags startet und Mutationen nicht in andere Tests leaken.
    """
    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)

    yield

    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)


class RecordingScene(SketchScene):
    """Fake-Renderer: merkt sich alle Objekte und Aufrufe."""

    def __init__(self):
        self._ids = itertools.count(1)
        self.objects = {}
        self.calls = []

    def add_polyline(self, points, closed=False, style=None):
        token = next(self._ids)
        self.objects[token] = {"kind": "polyline", "points": np.array(points, dtype=float),
                               "closed": closed, "style": style}
        self.calls.append(("add_polyline", token))
        return token

    def add_points(self, points, style=None):
        token = next(self._ids)
        self.objects[token] = {"kind": "points", "points": np.array(points, dtype=float),
                               "closed": False, "style": style}
        self.calls.append(("add_points", token))
        return token

    def update_polyline(self, token, points):
        assert token in self.objects, f"update auf entferntes Token {token}"
        self.objects[token]["points"] = np.array(points, dtype=float)
        self.calls.append(("update_polyline", token))

    def remove(self, token):
        assert token in self.objects, f"Token {token} doppelt entfernt"
        del self.objects[token]
        self.calls.append(("remove", token))

    def count(self, name):
        return sum(1 for call, _ in self.calls if call == name)

    def polylines(self):
        return [o for o in self.objects.values() if o["kind"] == "polyline"]


class FailingScene(RecordingScene):
    """Renderer, der beim Anlegen von Polylinien scheitert."""

    def add_polyline(self, points, closed=False, style=None):
        raise RuntimeError("GPU weg")


class FlakyRemoveScene(RecordingScene):
    """Renderer, dessen erstes remove() scheitert."""

    def __init__(self, failures=1):
        super().__init__()
        self.failures = failures

    def remove(self, token):
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("Actor gesperrt")
        super().remove(token)


@pytest.fixture
def scene():
    return RecordingScene()


@pytest.fixture
def failing_scene():
    return FailingScene()


@pytest.fixture
def english():
    from i18n import get_language, set_language
    previous = get_language()
    set_language("en")
    yield
    set_language(previous)


@pytest.fixture
def flaky_scene():
    return FlakyRemoveScene()
