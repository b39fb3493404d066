"""
Tests für Vektor-Hilfen und die Catmull-Rom-Abtastung
"""

import math

import numpy as np
import pytest

from sketcher.errors import SketchDataError
from sketcher.geometry import (
    TWO_PI, as_vec3, catmull_rom_points, normalize, normalize_angle,
    points_are_coincident, vec3_from_json, vec3_to_list,
)


class TestVectors:
    def test_as_vec3_copies(self):
        src = np.array([1.0, 2.0, 3.0])
        v = as_vec3(src)
        v[0] = 99.0
        assert src[0] == 1.0

    def test_normalize_fallback(self):
        np.testing.assert_allclose(normalize((0, 0, 0)), (1, 0, 0))
        np.testing.assert_allclose(normalize((0, 0, 0), fallback=(0, 0, 1)), (0, 0, 1))
        np.testing.assert_allclose(normalize((0, 3, 4)), (0, 0.6, 0.8))

    def test_coincident(self):
        assert points_are_coincident((1, 1, 1), (1, 1, 1 + 1e-8))
        assert not points_are_coincident((1, 1, 1), (1, 1, 1.001))

    def test_json_round_trip(self):
        assert vec3_to_list(None) is None
        assert vec3_from_json(vec3_to_list((1.5, -2, 0)), "p").tolist() == [1.5, -2.0, 0.0]

    @pytest.mark.parametrize("bad", [None, "1,2,3", [1, 2], [1, 2, "x"], [1, 2, float("nan")], {"x": 1}])
    def test_json_rejects(self, bad):
        with pytest.raises(SketchDataError):
            vec3_from_json(bad, "p")

    def test_json_error_is_value_error(self):
        with pytest.raises(ValueError):
            vec3_from_json([1, 2], "p")


class TestAngles:
    def test_normalize_angle(self):
        assert abs(normalize_angle(-0.1) - (TWO_PI - 0.1)) < 1e-12
        assert normalize_angle(TWO_PI) == 0.0
        assert abs(normalize_angle(5 * math.pi) - math.pi) < 1e-12
        assert 0.0 <= normalize_angle(-1e-20) < TWO_PI


class TestCatmullRom:
    def test_too_few_points(self):
        assert catmull_rom_points([]) is None
        assert catmull_rom_points([(0, 0, 0)]) is None

    def test_sample_count(self):
        pts = catmull_rom_points([(0, 0, 0), (1, 1, 0), (2, 0, 0)], segments=16)
        assert pts.shape == (17, 3)

    def test_open_curve_hits_endpoints(self):
        control = [(0, 0, 0), (1, 2, 0), (3, 1, 0), (4, 4, 1)]
        pts = catmull_rom_points(control)
        np.testing.assert_allclose(pts[0], control[0], atol=1e-12)
        np.testing.assert_allclose(pts[-1], control[-1], atol=1e-9)

    def test_passes_through_control_points(self):
        control = [(0, 0, 0), (2, 3, 0), (5, 0, 0)]
        pts = catmull_rom_points(control, segments=128)
        np.testing.assert_allclose(pts[64], control[1], atol=1e-12)

    def test_two_points_give_straight_line(self):
        pts = catmull_rom_points([(0, 0, 0), (4, 2, 0)], segments=8)
        np.testing.assert_allclose(pts[4], (2, 1, 0), atol=1e-9)
        direction = np.array([4.0, 2.0, 0.0]) / np.linalg.norm([4.0, 2.0, 0.0])
        for p in pts:
            assert abs(float(np.cross(p, direction)[2])) < 1e-9

    def test_closed_curve_returns_to_start(self):
        control = [(0, 0, 0), (2, 0, 0), (2, 2, 0), (0, 2, 0)]
        pts = catmull_rom_points(control, closed=True, segments=8)
        np.testing.assert_allclose(pts[0], control[0], atol=1e-12)
        np.testing.assert_allclose(pts[-1], control[0], atol=1e-12)
        np.testing.assert_allclose(pts[4], control[2], atol=1e-12)

    def test_tension_changes_shape(self):
        control = [(0, 0, 0), (2, 3, 0), (5, 0, 0)]
        a = catmull_rom_points(control, tension=0.5, segments=16)
        b = catmull_rom_points(control, tension=0.1, segments=16)
        assert not np.allclose(a[3], b[3])
