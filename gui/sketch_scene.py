"""
MashSketch - PyVista Sketch-Szene
SketchScene-Implementierung auf einem pyvista Plotter (z.B. pyvistaqt.QtInteractor)
"""

import itertools
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
import pyvista as pv
from loguru import logger

from sketcher.render_handle import STYLE_FINAL, STYLE_HANDLE, SketchScene


def polyline_to_polydata(points: Sequence, closed: bool = False) -> pv.PolyData:
    """Polylinie als PolyData. Ein einzelner Punkt wird zur Punktwolke."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if len(pts) < 2:
        return pv.PolyData(pts)
    return pv.lines_from_points(pts, close=closed)


def points_to_polydata(points: Sequence) -> pv.PolyData:
    return pv.PolyData(np.asarray(points, dtype=np.float64).reshape(-1, 3))


class PyVistaSketchScene(SketchScene):
    """
    Jedes Szenen-Objekt ist ein benannter Actor im Plotter.
    Token = Actor-Name, damit remove_actor(name) direkt funktioniert.
    """

    def __init__(self, plotter, prefix: str = "sketch"):
        self.plotter = plotter
        self.prefix = prefix
        self._counter = itertools.count()
        self._meshes: Dict[str, Tuple[pv.PolyData, bool]] = {}

    def _next_name(self, kind: str) -> str:
        return f"{self.prefix}_{kind}_{next(self._counter)}"

    def add_polyline(self, points, closed: bool = False, style: Optional[Dict[str, Any]] = None) -> str:
        style = style or STYLE_FINAL
        name = self._next_name("line")
        mesh = polyline_to_polydata(points, closed)
        self.plotter.add_mesh(
            mesh,
            color=style.get("color", STYLE_FINAL["color"]),
            line_width=style.get("line_width", STYLE_FINAL["line_width"]),
            opacity=style.get("opacity", 1.0),
            name=name,
            pickable=False,
            render=False,
        )
        self._meshes[name] = (mesh, closed)
        return name

    def add_points(self, points, style: Optional[Dict[str, Any]] = None) -> str:
        style = style or STYLE_HANDLE
        name = self._next_name("points")
        mesh = points_to_polydata(points)
        self.plotter.add_mesh(
            mesh,
            color=style.get("color", STYLE_HANDLE["color"]),
            point_size=style.get("point_size", STYLE_HANDLE["point_size"]),
            render_points_as_spheres=True,
            name=name,
            pickable=False,
            render=False,
        )
        self._meshes[name] = (mesh, False)
        return name

    def update_polyline(self, token: str, points) -> None:
        entry = self._meshes.get(token)
        if entry is None:
            logger.warning(f"[PyVistaSketchScene] Unbekanntes Token {token}")
            return
        mesh, closed = entry
        mesh.copy_from(polyline_to_polydata(points, closed))

    def remove(self, token: str) -> None:
        if self._meshes.pop(token, None) is None:
            return
        self.plotter.remove_actor(token, render=False)

    @property
    def tokens(self):
        return list(self._meshes.keys())

    def render(self) -> None:
        self.plotter.render()
