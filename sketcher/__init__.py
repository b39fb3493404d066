"""
MashSketch Sketcher Module
"""

from .errors import SketchError, SketchDataError, SketchContractError

from .plane_basis import (
    Plane, PlaneBasis, PLANE_NAMES,
    plane_name_for_normal, determine_plane_name,
)
from .circle_fit import CircleFitResult, two_point, three_point, three_point_on_own_plane
from .arc_resolver import ArcSweep, three_point_arc, center_start_end_arc, sample_arc
from .rect_corners import two_point_corners, three_point_corners, is_degenerate_rect

from .render_handle import RenderHandle, SketchScene

from .primitives import (
    PrimitiveKind, ArcMode, CircleMode, RectMode,
    Primitive, PointPrimitive, LinePrimitive, ArcPrimitive,
    CirclePrimitive, RectPrimitive, SplinePrimitive,
    set_all_handles_visible,
)

from .tools import (
    SketchTool, PrimitiveTool, PointTool, LineTool, ArcTool,
    CircleTool, RectTool, SplineTool, create_tool,
)

from .interaction import InteractionState, InteractionTracker, find_handle

from .sketch import Sketch, ConstraintRecord, resolve_sketch_name

from .serialization import (
    primitive_from_dict, primitive_list_from_dicts, primitives_to_dicts,
    export_sketch_json, import_sketch_json,
)

from .session import SketchSession, EventKind, SketchKey
