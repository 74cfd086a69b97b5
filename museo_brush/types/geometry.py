"""Core geometry types."""

import math
from typing import TypedDict

from pydantic import BaseModel, ConfigDict


class PointDict(TypedDict):
    """Dictionary representation of a point."""

    x: float
    y: float


class Point(BaseModel):
    """A 2D point in surface pixel space."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


class StrokeSegment(BaseModel):
    """One incremental draw call within a stroke.

    ``last_point`` is None for the first segment of a stroke, in which case
    the renderer paints a single dot at ``point``.
    """

    model_config = ConfigDict(frozen=True)

    last_point: Point | None = None
    point: Point

    @property
    def length(self) -> float:
        if self.last_point is None:
            return 0.0
        return math.hypot(self.point.x - self.last_point.x, self.point.y - self.last_point.y)

    @property
    def is_dot(self) -> bool:
        """True for the first segment of a stroke or a zero-length segment."""
        return self.last_point is None or self.length == 0.0

    @property
    def start(self) -> Point:
        return self.last_point if self.last_point is not None else self.point


def clamp_value(value: float, low: float, high: float) -> float:
    """Clamp a value to a range [low, high]."""
    return max(low, min(high, value))
