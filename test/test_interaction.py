from sketcher.interaction import HandleHit, InteractionState, InteractionTracker, find_handle
from sketcher.primitives import LinePrimitive, SplinePrimitive


def _spline():
    return SplinePrimitive(control_points=[(0, 0, 0), (5, 5, 0), (10, 0, 0)])


class TestFindHandle:
    def test_nearest_handle(self):
        spline = _spline()
        hit = find_handle([spline], (5.3, 4.9, 0))
        assert hit.spline is spline
        assert hit.index == 1

    def test_outside_radius(self):
        assert find_handle([_spline()], (5, 7, 0)) is None
        assert find_handle([_spline()], (5, 7, 0), radius=3.0) is not None

    def test_ignores_other_kinds_and_hidden_handles(self):
        hidden = _spline()
        hidden.handles_visible = False
        line = LinePrimitive(start=(0, 0, 0), end=(1, 0, 0))
        assert find_handle([line, hidden, None], (0, 0, 0)) is None

    def test_closest_across_splines(self):
        a, b = _spline(), SplinePrimitive(control_points=[(0.5, 0, 0), (3, 3, 0)])
        hit = find_handle([a, b], (0.4, 0, 0))
        assert hit.spline is b


class TestTracker:
    def test_full_cycle(self):
        tracker = InteractionTracker()
        spline = _spline()
        assert tracker.begin_drag(HandleHit(spline, 2, 0.0))
        assert tracker.is_dragging
        assert not tracker.begin_drag(HandleHit(spline, 0, 0.0))

        assert tracker.drag_to((11, 1, 0))
        assert tuple(spline.control_points[2]) == (11.0, 1.0, 0.0)

        assert tracker.end_drag()
        assert tracker.state is InteractionState.SUPPRESSED_CLICK
        assert tracker.consume_click()
        assert not tracker.consume_click()
        assert tracker.state is InteractionState.IDLE

    def test_no_drag_without_begin(self):
        tracker = InteractionTracker()
        assert not tracker.drag_to((1, 1, 0))
        assert not tracker.end_drag()
        assert not tracker.consume_click()

    def test_new_press_clears_suppression(self):
        tracker = InteractionTracker()
        tracker.begin_drag(HandleHit(_spline(), 0, 0.0))
        tracker.end_drag()
        tracker.on_press()
        assert tracker.state is InteractionState.IDLE
        assert not tracker.consume_click()

    def test_reset(self):
        tracker = InteractionTracker()
        tracker.begin_drag(HandleHit(_spline(), 0, 0.0))
        tracker.reset()
        assert tracker.state is InteractionState.IDLE
        assert tracker.drag is None
