"""Museo brush engine: freehand brush rendering for the Museo 3D mural editor."""

from museo_brush.engine import BrushEngine
from museo_brush.errors import (
    BrushEngineError,
    ConfigurationError,
    RenderingFailure,
    SurfaceBusyError,
    ThreadAffinityError,
)
from museo_brush.events import PointerAdapter
from museo_brush.history import SnapshotHistory
from museo_brush.renderers import RendererRegistry, build_default_registry
from museo_brush.surface import CompositeMode, Surface
from museo_brush.types import (
    BRUSH_PRESETS,
    BrushConfig,
    BrushKind,
    Point,
    PointerEvent,
    PointerEventType,
    StrokeRecord,
    StrokeSegment,
    StrokeState,
    SurfaceRect,
)

__version__ = "0.1.0"

__all__ = [
    "BRUSH_PRESETS",
    "BrushConfig",
    "BrushEngine",
    "BrushEngineError",
    "BrushKind",
    "CompositeMode",
    "ConfigurationError",
    "Point",
    "PointerAdapter",
    "PointerEvent",
    "PointerEventType",
    "RendererRegistry",
    "RenderingFailure",
    "SnapshotHistory",
    "StrokeRecord",
    "StrokeSegment",
    "StrokeState",
    "Surface",
    "SurfaceBusyError",
    "SurfaceRect",
    "ThreadAffinityError",
    "build_default_registry",
]
