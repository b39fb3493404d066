"""
Tests für die Bogen-Auflösung (Drei-Punkt und Mitte-Start-Ende)
"""

import math

import numpy as np
import pytest

from config.feature_flags import set_flag
from sketcher.arc_resolver import center_start_end_arc, sample_arc, three_point_arc


def _closest_distance(points, target):
    return float(np.min(np.linalg.norm(np.asarray(points) - np.asarray(target, dtype=float), axis=1)))


class TestThreePointArc:
    def test_half_circle_through_top(self):
        arc = three_point_arc((1, 0, 0), (-1, 0, 0), (0, 1, 0))
        assert arc is not None
        np.testing.assert_allclose(arc.center, (0, 0, 0), atol=1e-12)
        assert abs(arc.radius - 1.0) < 1e-12
        assert abs(arc.sweep - math.pi) < 1e-9
        # Mitte der Abtastung liegt auf dem Durchgangspunkt
        np.testing.assert_allclose(arc.points[32], (0, 1, 0), atol=1e-9)

    def test_endpoints_are_clicked_points(self):
        arc = three_point_arc((1, 0, 0), (-1, 0, 0), (0, 1, 0))
        ends = {tuple(np.round(arc.start_point, 9)), tuple(np.round(arc.end_point, 9))}
        assert ends == {(1.0, 0.0, 0.0), (-1.0, 0.0, 0.0)}

    def test_long_way_round(self):
        """Durchgangspunkt gegenüber: der Bogen nimmt den 270°-Weg"""
        arc = three_point_arc((1, 0, 0), (0, 1, 0), (-1, 0, 0))
        assert arc is not None
        assert abs(arc.sweep - 1.5 * math.pi) < 1e-9
        assert abs(arc.arc_length - 1.5 * math.pi) < 1e-9

        direction = np.array([-1.0, 0.0, 0.0])
        rel = arc.points - arc.center
        cosines = rel @ direction / np.linalg.norm(rel, axis=1)
        assert float(np.max(cosines)) > 1.0 - 1e-3

    def test_through_point_on_polyline(self):
        arc = three_point_arc((1, 0, 0), (0, 1, 0), (-1, 0, 0), steps=96)
        assert _closest_distance(arc.points, (-1, 0, 0)) < 1e-3

    def test_angles_are_ordered(self):
        for pts in [((1, 0, 0), (0, 1, 0), (-1, 0, 0)),
                    ((1, 0, 0), (-1, 0, 0), (0, -1, 0)),
                    ((2, 3, 1), (5, -1, 0), (4, 4, 2))]:
            arc = three_point_arc(*pts)
            assert arc is not None
            assert arc.end_angle >= arc.start_angle
            assert arc.sweep < 2 * math.pi

    def test_sample_count(self):
        arc = three_point_arc((1, 0, 0), (-1, 0, 0), (0, 1, 0), steps=10)
        assert len(arc.points) == 11

    def test_points_lie_on_circle(self):
        arc = three_point_arc((2, 3, 1), (5, -1, 0), (4, 4, 2))
        radii = np.linalg.norm(arc.points - arc.center, axis=1)
        np.testing.assert_allclose(radii, arc.radius, atol=1e-9)

    def test_collinear_rejected(self):
        assert three_point_arc((0, 0, 0), (1, 0, 0), (2, 0, 0)) is None

    def test_coincident_rejected(self):
        assert three_point_arc((1, 1, 0), (1, 1, 0), (2, 0, 0)) is None

    def test_debug_flag_does_not_change_result(self):
        set_flag("sketch_debug", True)
        arc = three_point_arc((1, 0, 0), (-1, 0, 0), (0, 1, 0))
        assert arc is not None


class TestCenterStartEnd:
    def test_quarter_arc(self):
        arc = center_start_end_arc((0, 0, 0), (1, 0, 0), (0, 1, 0))
        assert arc is not None
        assert abs(arc.radius - 1.0) < 1e-12
        assert abs(arc.sweep - math.pi / 2) < 1e-9
        assert not arc.reversed
        np.testing.assert_allclose(arc.start_point, (1, 0, 0), atol=1e-12)
        np.testing.assert_allclose(arc.end_point, (0, 1, 0), atol=1e-12)
        np.testing.assert_allclose(arc.points[32], (math.sqrt(0.5), math.sqrt(0.5), 0), atol=1e-12)

    def test_counter_clockwise_wraps(self):
        """Ende im Uhrzeigersinn neben dem Start ergibt den großen Bogen"""
        arc = center_start_end_arc((0, 0, 0), (0, 1, 0), (1, 0, 0))
        assert abs(arc.sweep - 1.5 * math.pi) < 1e-9

    def test_radius_from_start_only(self):
        arc = center_start_end_arc((0, 0, 0), (2, 0, 0), (0, 7, 0))
        assert abs(arc.radius - 2.0) < 1e-12
        np.testing.assert_allclose(arc.end_point, (0, 2, 0), atol=1e-12)

    def test_zero_sweep_rejected(self):
        assert center_start_end_arc((0, 0, 0), (1, 0, 0), (3, 0, 0)) is None

    def test_zero_radius_rejected(self):
        assert center_start_end_arc((1, 1, 0), (1, 1, 0), (0, 1, 0)) is None

    def test_other_plane(self):
        arc = center_start_end_arc((0, 0, 0), (0, 1, 0), (0, 0, 1), normal=(1, 0, 0))
        assert arc is not None
        np.testing.assert_allclose(arc.points[:, 0], 0.0, atol=1e-12)
        assert abs(arc.sweep - math.pi / 2) < 1e-9


@pytest.mark.parametrize("build", [
    lambda: three_point_arc((2, 3, 1), (5, -1, 0), (4, 4, 2)),
    lambda: center_start_end_arc((1, 1, 0), (3, 1, 0), (1, -4, 0)),
])
def test_resampling_reproduces_polyline(build):
    arc = build()
    again = sample_arc(arc.center, arc.radius, arc.basis, arc.start_angle, arc.end_angle, len(arc.points) - 1)
    assert np.array_equal(again, arc.points)
