"""Type definitions for the brush engine.

This package contains all type definitions organized into focused modules:
- geometry: Core geometry types (Point, StrokeSegment)
- brushes: Brush kinds, presets and the active brush configuration
- strokes: Stroke state and recorded stroke history
- events: Pointer events and the displayed surface rectangle
"""

from museo_brush.types.brushes import (
    BRUSH_PRESETS,
    DEFAULT_BRUSH,
    DEFAULT_COLOR,
    KIND_ALIASES,
    MAX_BRUSH_SIZE,
    MIN_BRUSH_SIZE,
    BrushCategory,
    BrushConfig,
    BrushKind,
    BrushPreset,
    get_brush_preset,
    parse_brush_config,
    resolve_kind,
)
from museo_brush.types.events import PointerEvent, PointerEventType, SurfaceRect
from museo_brush.types.geometry import Point, PointDict, StrokeSegment, clamp_value
from museo_brush.types.strokes import StrokeRecord, StrokeState

__all__ = [
    # Geometry
    "Point",
    "PointDict",
    "StrokeSegment",
    "clamp_value",
    # Brushes
    "BRUSH_PRESETS",
    "DEFAULT_BRUSH",
    "DEFAULT_COLOR",
    "KIND_ALIASES",
    "MAX_BRUSH_SIZE",
    "MIN_BRUSH_SIZE",
    "BrushCategory",
    "BrushConfig",
    "BrushKind",
    "BrushPreset",
    "get_brush_preset",
    "parse_brush_config",
    "resolve_kind",
    # Strokes
    "StrokeRecord",
    "StrokeState",
    # Events
    "PointerEvent",
    "PointerEventType",
    "SurfaceRect",
]
