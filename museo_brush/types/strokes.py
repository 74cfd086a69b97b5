"""Stroke state and recorded stroke history."""

from enum import Enum

from pydantic import BaseModel

from museo_brush.types.brushes import BrushConfig
from museo_brush.types.geometry import StrokeSegment


class StrokeState(str, Enum):
    """Whether the engine is between strokes or inside one."""

    IDLE = "idle"
    ACTIVE = "active"


class StrokeRecord(BaseModel):
    """Segments drawn with one configuration during one stroke.

    A configuration change in the middle of a stroke closes the current record
    and opens a new one with the same ``stroke_id``, so replaying records in
    order reproduces exactly which config painted which segment.
    """

    stroke_id: int
    config: BrushConfig
    segments: list[StrokeSegment] = []

    @property
    def point_count(self) -> int:
        return len(self.segments)
