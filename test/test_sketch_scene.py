"""
PyVistaSketchScene gegen einen Plotter-Mock (kein Rendering nötig).
"""

from unittest.mock import MagicMock

import pytest

pv = pytest.importorskip("pyvista")

from gui.sketch_scene import PyVistaSketchScene, points_to_polydata, polyline_to_polydata
from sketcher.primitives import LinePrimitive, SplinePrimitive


def test_polyline_to_polydata():
    pts = [(0, 0, 0), (1, 0, 0), (1, 1, 0)]
    open_line = polyline_to_polydata(pts)
    closed_line = polyline_to_polydata(pts, closed=True)
    assert open_line.n_points == 3
    assert open_line.n_cells == 2
    assert closed_line.n_cells == 3


def test_single_point_polydata():
    assert polyline_to_polydata([(1, 2, 3)]).n_points == 1
    assert points_to_polydata([(0, 0, 0), (1, 1, 1)]).n_points == 2


@pytest.fixture
def plotter():
    return MagicMock()


def test_add_and_remove(plotter):
    scene = PyVistaSketchScene(plotter)
    token = scene.add_polyline([(0, 0, 0), (1, 0, 0)])
    kwargs = plotter.add_mesh.call_args.kwargs
    assert kwargs["name"] == token
    assert kwargs["render"] is False
    assert scene.tokens == [token]

    scene.remove(token)
    plotter.remove_actor.assert_called_once_with(token, render=False)
    scene.remove(token)
    assert plotter.remove_actor.call_count == 1


def test_update_in_place(plotter):
    scene = PyVistaSketchScene(plotter)
    token = scene.add_polyline([(0, 0, 0), (1, 0, 0)])
    mesh = plotter.add_mesh.call_args.args[0]
    scene.update_polyline(token, [(0, 0, 0), (1, 0, 0), (2, 1, 0)])
    assert mesh.n_points == 3
    assert plotter.add_mesh.call_count == 1


def test_names_are_unique(plotter):
    scene = PyVistaSketchScene(plotter, prefix="skizze")
    a = scene.add_polyline([(0, 0, 0), (1, 0, 0)])
    b = scene.add_points([(0, 0, 0)])
    assert a != b
    assert a.startswith("skizze_")


def test_primitives_draw_through_scene(plotter):
    scene = PyVistaSketchScene(plotter)
    line = LinePrimitive(start=(0, 0, 0), end=(1, 0, 0))
    spline = SplinePrimitive(control_points=[(0, 0, 0), (1, 1, 0), (2, 0, 0)])
    line.draw(scene)
    spline.draw(scene)
    assert len(scene.tokens) == 1 + 1 + 3

    spline.remove(scene)
    line.remove(scene)
    assert scene.tokens == []
    assert plotter.remove_actor.call_count == 5
