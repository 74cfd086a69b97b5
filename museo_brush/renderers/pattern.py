"""Pattern brushes: pixel grid and radial mirror symmetry."""

import math

from museo_brush.interpolation import reflect_point, rotate_point, subdivide_segment
from museo_brush.renderers.base import Box, BrushRenderer, StrokeContext, StrokeLayer
from museo_brush.surface import Surface
from museo_brush.types import BrushConfig, Point, StrokeSegment


class PixelBrush(BrushRenderer):
    """Paints whole cells of a grid anchored at the surface origin.

    Params:
        cell: cell edge as a fraction of size (minimum 2 px)
        gap: 0-1 grout between cells, as a fraction of the cell edge
    """

    family = "pixel"
    defaults = {"cell": 0.17, "gap": 0.0}

    def _cell(self, config: BrushConfig) -> float:
        return max(2.0, config.size * self.param(config, "cell"))

    def reach(self, config: BrushConfig) -> float | None:
        return config.size / 2 + self._cell(config) * 1.5

    def _cells_near(self, point: Point, radius: float, cell: float) -> set[tuple[int, int]]:
        """Cells whose centers fall within the radius, plus the cell under the point."""
        ci = math.floor(point.x / cell)
        cj = math.floor(point.y / cell)
        cells = {(ci, cj)}
        span = math.ceil(radius / cell) + 1
        for i in range(ci - span, ci + span + 1):
            for j in range(cj - span, cj + span + 1):
                cx = (i + 0.5) * cell
                cy = (j + 0.5) * cell
                if math.hypot(cx - point.x, cy - point.y) <= radius:
                    cells.add((i, j))
        return cells

    def _fill(self, layer: StrokeLayer, cells: set[tuple[int, int]], config: BrushConfig) -> None:
        cell = self._cell(config)
        gap = cell * min(0.9, max(0.0, self.param(config, "gap")))
        for i, j in cells:
            left, top = layer.local((i * cell + gap / 2, j * cell + gap / 2))
            edge = cell - gap
            # Rectangle bounds are inclusive
            layer.draw.rectangle((left, top, left + edge - 1, top + edge - 1), fill=255)

    def paint_dot(
        self, layer: StrokeLayer, point: Point, config: BrushConfig, context: StrokeContext
    ) -> None:
        self._fill(layer, self._cells_near(point, config.size / 2, self._cell(config)), config)

    def paint_segment(
        self,
        layer: StrokeLayer,
        start: Point,
        end: Point,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        cell = self._cell(config)
        cells: set[tuple[int, int]] = set()
        for sample in subdivide_segment(start, end, cell / 2):
            cells |= self._cells_near(sample, config.size / 2, cell)
        self._fill(layer, cells, config)


class MirrorBrush(BrushRenderer):
    """Round brush repeated with rotational symmetry around the surface center.

    Params:
        symmetry: number of rotated copies
        reflect: 1 to also paint the mirror image of every copy
    """

    family = "mirror"
    defaults = {"symmetry": 6, "reflect": 0.0}

    def _copies(self, points: list[Point], center: Point, config: BrushConfig) -> list[list[Point]]:
        symmetry = max(1, int(self.param(config, "symmetry")))
        sources = [points]
        if self.param(config, "reflect") > 0:
            sources.append([reflect_point(p, center) for p in points])
        copies = []
        for k in range(symmetry):
            angle = 2 * math.pi * k / symmetry
            for source in sources:
                copies.append([rotate_point(p, center, angle) for p in source])
        return copies

    def bounds(self, surface: Surface, segment: StrokeSegment, config: BrushConfig) -> Box | None:
        """Union of the boxes around every symmetric copy of the segment."""
        copies = self._copies([segment.start, segment.point], _center(surface), config)
        xs = [p.x for copy in copies for p in copy]
        ys = [p.y for copy in copies for p in copy]
        margin = math.ceil(config.size / 2) + 2
        left = max(0, math.floor(min(xs)) - margin)
        top = max(0, math.floor(min(ys)) - margin)
        right = min(surface.width, math.ceil(max(xs)) + margin + 1)
        bottom = min(surface.height, math.ceil(max(ys)) + margin + 1)
        if right <= left or bottom <= top:
            return None
        return (left, top, right, bottom)

    def render(
        self,
        surface: Surface,
        segment: StrokeSegment,
        config: BrushConfig,
        context: StrokeContext | None = None,
    ) -> None:
        if context is None:
            context = StrokeContext()
        context.scratch["mirror_center"] = _center(surface)
        super().render(surface, segment, config, context)

    def paint_dot(
        self, layer: StrokeLayer, point: Point, config: BrushConfig, context: StrokeContext
    ) -> None:
        for copy in self._copies([point], context.scratch["mirror_center"], config):
            layer.circle(copy[0], config.size / 2)

    def paint_segment(
        self,
        layer: StrokeLayer,
        start: Point,
        end: Point,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        for copy in self._copies([start, end], context.scratch["mirror_center"], config):
            layer.line(copy, config.size)


def _center(surface: Surface) -> Point:
    return Point(x=surface.width / 2, y=surface.height / 2)
