"""Flat-nib calligraphy brush."""

import math

from museo_brush.renderers.base import BrushRenderer, StrokeContext, StrokeLayer
from museo_brush.types import BrushConfig, Point


class CalligraphyBrush(BrushRenderer):
    """A flat nib held at a fixed angle.

    Strokes across the nib are wide, strokes along it are hairlines.

    Params:
        angle: nib angle in degrees (0 = horizontal)
        nib_ratio: nib thickness as a fraction of size
    """

    family = "calligraphy"
    defaults = {"angle": 45.0, "nib_ratio": 0.2}

    def _nib(self, config: BrushConfig) -> tuple[float, float, float]:
        """(half-length vector x, y, thickness)."""
        angle = math.radians(self.param(config, "angle"))
        half = config.size / 2
        thickness = max(1.0, config.size * self.param(config, "nib_ratio"))
        return (math.cos(angle) * half, math.sin(angle) * half, thickness)

    def _nib_polygon(self, point: Point, config: BrushConfig) -> list[tuple[float, float]]:
        nx, ny, thickness = self._nib(config)
        length = math.hypot(nx, ny) or 1.0
        # Perpendicular to the nib, half the thickness long
        px = -ny / length * thickness / 2
        py = nx / length * thickness / 2
        return [
            (point.x - nx - px, point.y - ny - py),
            (point.x + nx - px, point.y + ny - py),
            (point.x + nx + px, point.y + ny + py),
            (point.x - nx + px, point.y - ny + py),
        ]

    def paint_dot(
        self, layer: StrokeLayer, point: Point, config: BrushConfig, context: StrokeContext
    ) -> None:
        layer.polygon(self._nib_polygon(point, config))

    def paint_segment(
        self,
        layer: StrokeLayer,
        start: Point,
        end: Point,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        nx, ny, thickness = self._nib(config)
        # Area swept by the nib edge between the two positions
        layer.polygon(
            [
                (start.x - nx, start.y - ny),
                (start.x + nx, start.y + ny),
                (end.x + nx, end.y + ny),
                (end.x - nx, end.y - ny),
            ]
        )
        # Strokes parallel to the nib sweep no area; the thickness keeps them visible
        layer.line([start, end], thickness)
        layer.polygon(self._nib_polygon(start, config))
        layer.polygon(self._nib_polygon(end, config))
