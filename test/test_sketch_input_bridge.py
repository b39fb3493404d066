"""
SketchInputBridge: Qt-Events -> SketchSession, Signale nach außen.
"""

import os

import pytest

# Headless-Setup VOR Qt-Imports
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

pytest.importorskip("PySide6")

from PySide6.QtCore import QCoreApplication, Qt

from gui.sketch_input_bridge import SketchInputBridge
from gui.sketch_tools import SketchTool, tool_for_shortcut, tool_label
from sketcher.plane_basis import Plane
from sketcher.primitives import PrimitiveKind, RectMode


@pytest.fixture(scope="module")
def qt_app():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture
def bridge(qt_app, scene, english):
    b = SketchInputBridge(scene=scene)
    b.start_sketch(Plane.xy())
    return b


def _collect(signal):
    received = []
    signal.connect(lambda *args: received.append(args[0] if args else None))
    return received


def _click(bridge, point):
    bridge.mouse_move(point)
    bridge.mouse_press(point, Qt.LeftButton)
    bridge.mouse_release(point, Qt.LeftButton)


def test_shortcuts_select_tools(bridge):
    tools = _collect(bridge.tool_changed)
    assert bridge.key_press(Qt.Key_L, "l")
    assert bridge.session.active_tool is SketchTool.LINE
    assert tools == [SketchTool.LINE]


def test_unknown_key_not_handled(bridge):
    assert not bridge.key_press(Qt.Key_Q, "q")


def test_shortcuts_need_running_sketch(qt_app, scene):
    b = SketchInputBridge(scene=scene)
    assert not b.key_press(Qt.Key_L, "L")


def test_line_clicks_emit_finalized(bridge):
    finalized = _collect(bridge.primitive_finalized)
    bridge.set_tool(SketchTool.LINE)
    _click(bridge, (0, 0, 0))
    _click(bridge, (2, 0, 0))
    assert [p.kind for p in finalized] == [PrimitiveKind.LINE]


def test_status_message_follows_tool(bridge):
    messages = _collect(bridge.status_message)
    bridge.set_tool(SketchTool.LINE)
    _click(bridge, (0, 0, 0))
    assert messages[0] == "Start point"
    assert messages[-1] == "End point | Enter=Finish"


def test_right_click_finishes_spline(bridge):
    bridge.set_tool(SketchTool.SPLINE)
    _click(bridge, (0, 0, 0))
    _click(bridge, (3, 2, 0))
    bridge.mouse_press((3, 2, 0), Qt.RightButton)
    assert len(bridge.session.primitives) == 1


def test_double_click_finishes_spline_without_new_one(bridge):
    """Qt-Reihenfolge: press, release, doubleClick, release."""
    finalized = _collect(bridge.primitive_finalized)
    bridge.set_tool(SketchTool.SPLINE)
    _click(bridge, (0, 0, 0))
    _click(bridge, (3, 1, 0))

    end = (5, 0, 0)
    bridge.mouse_move(end)
    bridge.mouse_press(end, Qt.LeftButton)
    bridge.mouse_release(end, Qt.LeftButton)
    bridge.mouse_double_click(end, Qt.LeftButton)
    bridge.mouse_release(end, Qt.LeftButton)

    assert len(finalized) == 1
    assert len(finalized[0].control_points) == 3
    assert bridge.session.pending is None

    _click(bridge, (7, 7, 0))
    assert bridge.session.pending is not None


def test_enter_and_escape(bridge):
    tools = _collect(bridge.tool_changed)
    bridge.set_tool(SketchTool.SPLINE)
    _click(bridge, (0, 0, 0))
    _click(bridge, (1, 1, 0))
    assert bridge.key_press(Qt.Key_Return)
    assert len(bridge.session.primitives) == 1

    assert bridge.key_press(Qt.Key_Escape)
    assert bridge.session.active_tool is SketchTool.SELECT
    assert tools[-1] is SketchTool.SELECT


def test_mode_switch_emits_tool(bridge):
    tools = _collect(bridge.tool_changed)
    bridge.set_rect_mode(RectMode.THREE_POINT)
    assert tools == [SketchTool.RECTANGLE]
    assert bridge.session.rect_mode is RectMode.THREE_POINT


def test_finish_sketch(bridge):
    messages = _collect(bridge.status_message)
    bridge.set_tool(SketchTool.POINT)
    _click(bridge, (1, 1, 0))
    sketch = bridge.finish_sketch()
    assert len(sketch.primitives) == 1
    assert messages[-1] == "Sketch finished"


def test_edit_sketch_appends_to_loaded(qt_app, scene, english):
    b = SketchInputBridge(scene=scene)
    b.start_sketch(Plane.xy())
    b.set_tool(SketchTool.POINT)
    _click(b, (1, 1, 0))
    saved = b.finish_sketch()

    changed = _collect(b.sketch_changed)
    assert b.edit_sketch(saved) is saved
    assert changed
    b.set_tool(SketchTool.POINT)
    _click(b, (2, 2, 0))
    assert b.finish_sketch() is saved
    assert len(saved.primitives) == 2


def test_tool_shortcut_helpers(english):
    assert tool_for_shortcut("r") is SketchTool.RECTANGLE
    assert tool_for_shortcut(" ") is SketchTool.SELECT
    assert tool_for_shortcut("") is None
    assert tool_label(SketchTool.ARC) == "Arc"
