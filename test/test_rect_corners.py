import numpy as np
import pytest

from sketcher.plane_basis import PlaneBasis
from sketcher.rect_corners import edge_lengths, is_degenerate_rect, three_point_corners, two_point_corners


def _assert_rectangle(corners, normal):
    """Rechtwinklig und planar (senkrecht zur Normalen)"""
    n = np.asarray(normal, dtype=float)
    for i in range(4):
        e1 = corners[(i + 1) % 4] - corners[i]
        e2 = corners[(i + 2) % 4] - corners[(i + 1) % 4]
        assert abs(float(np.dot(e1, e2))) < 1e-9
        assert abs(float(np.dot(e1, n))) < 1e-9


class TestTwoPoint:
    def test_axis_aligned_corners(self):
        corners = two_point_corners((0, 0, 0), (4, 2, 0), PlaneBasis.from_normal((0, 0, 1)))
        expected = [(0, 0, 0), (4, 0, 0), (4, 2, 0), (0, 2, 0)]
        for c, e in zip(corners, expected):
            np.testing.assert_allclose(c, e, atol=1e-12)

    def test_first_and_third_corner_are_diagonal(self):
        a, c = np.array([-3.0, 1.5, 0.0]), np.array([2.0, -4.0, 0.0])
        corners = two_point_corners(a, c, PlaneBasis.from_normal((0, 0, 1)))
        np.testing.assert_allclose(corners[0], a, atol=1e-12)
        np.testing.assert_allclose(corners[2], c, atol=1e-12)
        _assert_rectangle(corners, (0, 0, 1))

    def test_off_plane_input_is_projected(self):
        corners = two_point_corners((0, 0, 1), (4, 2, -1), PlaneBasis.from_normal((0, 0, 1)))
        for c in corners:
            assert abs(c[2]) < 1e-12
        np.testing.assert_allclose(corners[0], (0, 0, 0), atol=1e-12)

    def test_tilted_plane(self):
        normal = np.array([1.0, 1.0, 1.0]) / np.sqrt(3)
        basis = PlaneBasis.from_normal(normal)
        a = np.zeros(3)
        c = basis.u * 3.0 + basis.v * 1.5
        corners = two_point_corners(a, c, basis)
        _assert_rectangle(corners, normal)
        lengths = edge_lengths(corners)
        assert abs(lengths[0] - 3.0) < 1e-9
        assert abs(lengths[1] - 1.5) < 1e-9


class TestThreePoint:
    def test_centerline_rectangle(self):
        corners = three_point_corners((0, 0, 0), (4, 0, 0), (2, 3, 0), (0, 0, 1))
        expected = [(0, 3, 0), (4, 3, 0), (4, -3, 0), (0, -3, 0)]
        for c, e in zip(corners, expected):
            np.testing.assert_allclose(c, e, atol=1e-12)
        _assert_rectangle(corners, (0, 0, 1))

    def test_width_uses_only_perpendicular_offset(self):
        corners = three_point_corners((0, 0, 0), (4, 0, 0), (10, -2, 0), (0, 0, 1))
        lengths = edge_lengths(corners)
        assert abs(lengths[0] - 4.0) < 1e-12
        assert abs(lengths[1] - 4.0) < 1e-12

    def test_short_centerline_gives_identical_corners(self):
        corners = three_point_corners((1, 1, 0), (1, 1, 0), (3, 3, 0), (0, 0, 1))
        assert len(corners) == 4
        for c in corners:
            np.testing.assert_allclose(c, (1, 1, 0))
        assert is_degenerate_rect(corners)

    def test_centerline_along_normal(self):
        corners = three_point_corners((0, 0, 0), (0, 0, 2), (1, 0, 1), (0, 0, 1))
        assert len(corners) == 4
        assert all(np.all(np.isfinite(c)) for c in corners)


class TestDegenerate:
    def test_zero_width(self):
        corners = three_point_corners((0, 0, 0), (4, 0, 0), (2, 0, 0), (0, 0, 1))
        assert is_degenerate_rect(corners)

    def test_zero_height_two_point(self):
        corners = two_point_corners((0, 0, 0), (4, 0, 0), PlaneBasis.from_normal((0, 0, 1)))
        assert is_degenerate_rect(corners)

    @pytest.mark.parametrize("corners", [None, [], [np.zeros(3)] * 3])
    def test_missing_corners(self, corners):
        assert is_degenerate_rect(corners)

    def test_valid(self):
        corners = two_point_corners((0, 0, 0), (1, 1, 0), PlaneBasis.from_normal((0, 0, 1)))
        assert not is_degenerate_rect(corners)
