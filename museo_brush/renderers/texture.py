"""Textured brushes: charcoal grain, bristle strands and hair strands."""

import math

from PIL import ImageDraw

from museo_brush.config import settings
from museo_brush.interpolation import direction, offset_path, sample_along
from museo_brush.renderers.base import BrushRenderer, StrokeContext, StrokeLayer
from museo_brush.types import BrushConfig, Point

# Intensity range for individual bristles (fraction of full coverage)
BRISTLE_INTENSITY_RANGE = (0.55, 0.9)
# Randomness factor for bristle offsets
BRISTLE_OFFSET_RANDOMNESS = 0.1
# Intensity range for charcoal grains
GRAIN_INTENSITY_RANGE = (60, 200)


class CharcoalBrush(BrushRenderer):
    """Solid core with faint offset layers and granular dust.

    Params:
        grain: grain density, 0 for none
        layers: number of faint offset strokes around the core
        spread: how far grains scatter, as a multiple of size
        core: core width as a fraction of size
    """

    family = "charcoal"
    defaults = {"grain": 0.3, "layers": 5, "spread": 1.2, "core": 0.6}

    def reach(self, config: BrushConfig) -> float | None:
        spread = config.size * self.param(config, "spread") / 2
        grain_radius = 1.2 * max(1.0, config.size * 0.05)
        layered = config.size / 2 + config.size * 0.06 * self._layers(config)
        return max(layered, spread + grain_radius)

    def _layers(self, config: BrushConfig) -> int:
        return max(0, int(self.param(config, "layers")))

    def _paint(
        self,
        layer: StrokeLayer,
        points: list[Point],
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        size = config.size
        layers = self._layers(config)
        layer.line(points, max(1.0, size * self.param(config, "core")))

        with layer.overlay() as draw:
            for i in range(layers):
                value = round(255 * (1 - (i + 1) / (layers + 1)) * 0.6)
                side = 1 if i % 2 == 0 else -1
                offset = side * (i + 1) * size * 0.06
                shifted = (
                    offset_path(points, offset)
                    if len(points) > 1
                    else [Point(x=points[0].x, y=points[0].y + offset)]
                )
                width = max(1.0, size * (1 - i * 0.1))
                local = layer.local_points(shifted)
                if len(local) == 1:
                    x, y = local[0]
                    r = width / 2
                    draw.ellipse((x - r, y - r, x + r, y + r), fill=value)
                else:
                    draw.line(local, fill=value, width=max(1, round(width)))

            grain = self.param(config, "grain")
            if grain > 0:
                self._scatter_grains(draw, layer, points, config, context, grain)

    def _scatter_grains(
        self,
        draw: ImageDraw.ImageDraw,
        layer: StrokeLayer,
        points: list[Point],
        config: BrushConfig,
        context: StrokeContext,
        grain: float,
    ) -> None:
        size = config.size
        start, end = points[0], points[-1]
        travel = math.hypot(end.x - start.x, end.y - start.y)
        count = int(size * grain * (1 + travel / size))
        radius = size * self.param(config, "spread") / 2
        rng = context.rng
        for _ in range(count):
            t = rng.random()
            x, y = layer.local(
                (
                    start.x + (end.x - start.x) * t + rng.uniform(-radius, radius),
                    start.y + (end.y - start.y) * t + rng.uniform(-radius, radius),
                )
            )
            r = rng.uniform(0.3, 1.2) * max(1.0, size * 0.05)
            draw.ellipse((x - r, y - r, x + r, y + r), fill=rng.randint(*GRAIN_INTENSITY_RANGE))

    def paint_dot(
        self, layer: StrokeLayer, point: Point, config: BrushConfig, context: StrokeContext
    ) -> None:
        self._paint(layer, [point], config, context)

    def paint_segment(
        self,
        layer: StrokeLayer,
        start: Point,
        end: Point,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        self._paint(layer, [start, end], config, context)


class BristleBrush(BrushRenderer):
    """Main stroke plus parallel bristle strands offset across its width.

    Bristle offsets and intensities are chosen once per stroke so strands stay
    continuous from segment to segment.

    Params:
        bristle_count: number of strands
        spread: total strand spread as a multiple of size
        bristle_width: strand width as a fraction of size
        main_width: main stroke width as a fraction of size, 0 for none
        jitter: extra random offset per strand
    """

    family = "bristle"
    defaults = {
        "bristle_count": 5,
        "spread": 0.7,
        "bristle_width": 0.35,
        "main_width": 0.75,
        "jitter": 0.0,
    }

    def reach(self, config: BrushConfig) -> float | None:
        spread = config.size * self.param(config, "spread")
        jitter = self.param(config, "jitter") + BRISTLE_OFFSET_RANDOMNESS
        widest = max(self.param(config, "bristle_width"), self.param(config, "main_width"))
        return spread / 2 + spread * jitter + config.size * widest / 2

    def _bristles(
        self, config: BrushConfig, context: StrokeContext
    ) -> list[tuple[float, int]]:
        """(offset ratio, intensity) per strand, fixed for the whole stroke."""
        key = f"bristles:{self.kind}"
        if key not in context.scratch:
            count = max(0, int(self.param(config, "bristle_count")))
            randomness = BRISTLE_OFFSET_RANDOMNESS + self.param(config, "jitter")
            rng = context.rng
            bristles = []
            for i in range(count):
                # Distribute evenly from -0.5 to 0.5 with slight randomness
                ratio = 0.0 if count == 1 else (i / (count - 1)) - 0.5
                ratio += rng.uniform(-randomness, randomness)
                intensity = round(255 * rng.uniform(*BRISTLE_INTENSITY_RANGE))
                bristles.append((ratio, intensity))
            context.scratch[key] = bristles
        return context.scratch[key]

    def _paint(
        self,
        layer: StrokeLayer,
        points: list[Point],
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        size = config.size
        spread = size * self.param(config, "spread")
        bristle_width = max(1.0, size * self.param(config, "bristle_width"))

        main_width = self.param(config, "main_width")
        if main_width > 0:
            layer.line(points, max(1.0, size * main_width))

        with layer.overlay() as draw:
            for ratio, intensity in self._bristles(config, context):
                offset = ratio * spread
                if len(points) == 1:
                    # No direction yet: fan the bristles vertically
                    strand = [Point(x=points[0].x, y=points[0].y + offset)]
                else:
                    strand = offset_path(points, offset)
                local = layer.local_points(strand)
                if len(local) == 1:
                    x, y = local[0]
                    r = bristle_width / 2
                    draw.ellipse((x - r, y - r, x + r, y + r), fill=intensity)
                else:
                    draw.line(local, fill=intensity, width=max(1, round(bristle_width)))
                    for x, y in (local[0], local[-1]):
                        r = bristle_width / 2
                        draw.ellipse((x - r, y - r, x + r, y + r), fill=intensity)

    def paint_dot(
        self, layer: StrokeLayer, point: Point, config: BrushConfig, context: StrokeContext
    ) -> None:
        self._paint(layer, [point], config, context)

    def paint_segment(
        self,
        layer: StrokeLayer,
        start: Point,
        end: Point,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        self._paint(layer, [start, end], config, context)


class StrandBrush(BrushRenderer):
    """Short hairs sprouting from points along the stroke (fur, grass, rain).

    Params:
        angle: hair direction in degrees (0 = right, -90 = up), or "normal"
            to grow perpendicular to the stroke
        length: hair length as a multiple of size
        count: hairs per sample point
    """

    family = "strand"
    defaults = {"angle": "normal", "length": 1.0, "count": 3}

    ANGLE_JITTER = math.radians(15)

    def reach(self, config: BrushConfig) -> float | None:
        return config.size / 2 + config.size * self.param(config, "length") + 2

    def _angle(self, config: BrushConfig, start: Point, end: Point) -> float:
        if self.param_str(config, "angle") == "normal":
            dx, dy = direction(start, end)
            return math.atan2(dx, -dy)
        return math.radians(self.param(config, "angle"))

    def _sprout(
        self,
        layer: StrokeLayer,
        samples: list[Point],
        angle: float,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        size = config.size
        count = max(1, int(self.param(config, "count")))
        length = size * self.param(config, "length")
        width = max(1.0, size * 0.08)
        rng = context.rng
        for sample in samples:
            for _ in range(count):
                base = Point(
                    x=sample.x + rng.uniform(-size / 2, size / 2),
                    y=sample.y + rng.uniform(-size / 2, size / 2),
                )
                a = angle + rng.uniform(-self.ANGLE_JITTER, self.ANGLE_JITTER)
                reach = length * rng.uniform(0.6, 1.0)
                tip = Point(x=base.x + math.cos(a) * reach, y=base.y + math.sin(a) * reach)
                layer.line([base, tip], width)

    def _spacing(self, config: BrushConfig) -> float:
        return max(1.0, config.size * settings.stamp_spacing * 2)

    def paint_dot(
        self, layer: StrokeLayer, point: Point, config: BrushConfig, context: StrokeContext
    ) -> None:
        self._sprout(layer, [point], self._angle(config, point, point), config, context)
        context.carry = self._spacing(config)

    def paint_segment(
        self,
        layer: StrokeLayer,
        start: Point,
        end: Point,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        samples, context.carry = sample_along(start, end, self._spacing(config), context.carry)
        self._sprout(layer, samples, self._angle(config, start, end), config, context)
