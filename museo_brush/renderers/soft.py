"""Feathered brushes: soft round, watercolor, glow and fire."""

import math

from PIL import Image, ImageOps

from museo_brush.colors import darken, hex_to_rgb, lighten, mix
from museo_brush.interpolation import jagged_path, offset_path
from museo_brush.renderers.base import BrushRenderer, StrokeContext, StrokeLayer
from museo_brush.types import BrushConfig, Point, StrokeSegment

# Gaussian blur reaches ~3 sigma before it drops below one alpha level
BLUR_EXTENT = 3.0
# Displacement scale for watercolor edge noise
EDGE_NOISE_SCALE = 0.3


class SoftBrush(BrushRenderer):
    """Round brush with a hard core and a feathered falloff.

    Params:
        hardness: 0-1, fraction of the footprint painted at full strength
        scale: footprint diameter as a multiple of size
    """

    family = "soft"
    defaults = {"hardness": 0.5, "scale": 1.0}

    def _blur(self, config: BrushConfig) -> float:
        hardness = min(1.0, max(0.0, self.param(config, "hardness")))
        return max(0.5, config.size * self.param(config, "scale") * (1.0 - hardness) * 0.25)

    def reach(self, config: BrushConfig) -> float | None:
        return config.size * self.param(config, "scale") / 2 + self._blur(config) * BLUR_EXTENT

    def _paint(self, layer: StrokeLayer, points: list[Point], config: BrushConfig) -> None:
        hardness = min(1.0, max(0.0, self.param(config, "hardness")))
        diameter = config.size * self.param(config, "scale")
        layer.soft_line(points, diameter * 0.8, self._blur(config))
        layer.line(points, max(1.0, diameter * hardness))

    def paint_dot(
        self, layer: StrokeLayer, point: Point, config: BrushConfig, context: StrokeContext
    ) -> None:
        self._paint(layer, [point], config)

    def paint_segment(
        self,
        layer: StrokeLayer,
        start: Point,
        end: Point,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        self._paint(layer, [start, end], config)


class WatercolorBrush(BrushRenderer):
    """Pigment core surrounded by translucent bleeding rings.

    Params:
        rings: number of bleed rings around the core
        bleed: how far each ring spreads, as a fraction of size
        edge_noise: 0-1, random displacement of the ring edges
        wet_edge: 0-1 coverage of the dried rim around the outer ring
    """

    family = "watercolor"
    defaults = {"rings": 4, "bleed": 0.5, "edge_noise": 0.15, "wet_edge": 0.35}

    def _ring_width(self, config: BrushConfig, ring: int) -> float:
        return config.size * (0.5 + ring * self.param(config, "bleed") * 0.35)

    def reach(self, config: BrushConfig) -> float | None:
        rings = max(0, int(self.param(config, "rings")))
        noise = config.size * self.param(config, "edge_noise") * EDGE_NOISE_SCALE
        return self._ring_width(config, rings) / 2 + noise + config.size * 0.12 * BLUR_EXTENT

    def _paint(
        self,
        layer: StrokeLayer,
        points: list[Point],
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        rings = max(0, int(self.param(config, "rings")))
        max_displacement = config.size * self.param(config, "edge_noise") * EDGE_NOISE_SCALE
        blur = config.size * 0.12

        # Pigment pools in the core; the rings never move it
        layer.line(points, max(1.0, config.size * 0.5))
        for ring in range(1, rings + 1):
            value = round(255 * (1.0 - ring / (rings + 1)) * 0.85)
            noisy = [
                Point(
                    x=p.x + context.rng.uniform(-max_displacement, max_displacement),
                    y=p.y + context.rng.uniform(-max_displacement, max_displacement),
                )
                for p in points
            ]
            layer.soft_line(noisy, self._ring_width(config, ring), blur, value)

        wet_edge = self.param(config, "wet_edge")
        if wet_edge > 0 and rings > 0:
            self._paint_wet_edge(layer, points, config, round(255 * min(1.0, wet_edge)))

    def _paint_wet_edge(
        self, layer: StrokeLayer, points: list[Point], config: BrushConfig, value: int
    ) -> None:
        """Darker rim where pigment collects as the outer ring dries."""
        half = self._ring_width(config, max(0, int(self.param(config, "rings")))) / 2
        edge_width = max(1.0, config.size * 0.08)
        if len(points) == 1:
            cx, cy = layer.local(points[0])
            with layer.overlay() as draw:
                draw.ellipse(
                    (cx - half, cy - half, cx + half, cy + half),
                    outline=value,
                    width=max(1, round(edge_width)),
                )
            return
        for side in (-half, half):
            layer.line(offset_path(points, side), edge_width, value)

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


class GlowBrush(BrushRenderer):
    """Bright core with a blurred halo.

    Params:
        halo: halo width as a multiple of size
        core: core width as a fraction of size
        halo_strength: 0-1 peak coverage of the halo
        jagged: 0-1 zigzag displacement (lightning)
        core_tint: 0-1 how far the core is lightened toward white
        sparkle: sparkle particles per unit of travel
    """

    family = "glow"
    defaults = {
        "halo": 1.2,
        "core": 0.5,
        "halo_strength": 0.6,
        "jagged": 0.0,
        "core_tint": 0.0,
        "sparkle": 0.0,
    }

    def _halo_blur(self, config: BrushConfig) -> float:
        return max(0.5, config.size * self.param(config, "halo") * 0.3)

    def reach(self, config: BrushConfig) -> float | None:
        halo = config.size * max(self.param(config, "halo"), self.param(config, "core")) / 2
        jagged = config.size * self.param(config, "jagged")
        return halo + jagged + self._halo_blur(config) * BLUR_EXTENT

    def _paint(
        self,
        layer: StrokeLayer,
        points: list[Point],
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        size = config.size
        strength = min(1.0, max(0.0, self.param(config, "halo_strength")))
        halo_width = size * self.param(config, "halo")
        if halo_width > 0 and strength > 0:
            layer.soft_line(
                points, halo_width * 0.5, self._halo_blur(config), round(255 * strength)
            )
        layer.line(points, max(1.0, size * self.param(config, "core")))

        sparkle = self.param(config, "sparkle")
        if sparkle > 0:
            self._paint_sparkles(layer, points, config, context, sparkle)

    def _paint_sparkles(
        self,
        layer: StrokeLayer,
        points: list[Point],
        config: BrushConfig,
        context: StrokeContext,
        sparkle: float,
    ) -> None:
        size = config.size
        start, end = points[0], points[-1]
        travel = math.hypot(end.x - start.x, end.y - start.y)
        count = int(sparkle * (1 + travel / size) * 3)
        rng = context.rng
        radius = size * self.param(config, "halo") / 2
        for _ in range(count):
            t = rng.random()
            angle = rng.uniform(0, 2 * math.pi)
            r = radius * math.sqrt(rng.random())
            center = Point(
                x=start.x + (end.x - start.x) * t + math.cos(angle) * r,
                y=start.y + (end.y - start.y) * t + math.sin(angle) * r,
            )
            layer.circle(center, max(0.5, size * rng.uniform(0.03, 0.08)))

    def _path(
        self, start: Point, end: Point, config: BrushConfig, context: StrokeContext
    ) -> list[Point]:
        jagged = self.param(config, "jagged")
        if jagged <= 0:
            return [start, end]
        return jagged_path(start, end, config.size * jagged, context.rng)

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
        self._paint(layer, self._path(start, end, config, context), config, context)

    def colorize(
        self,
        layer: StrokeLayer,
        segment: StrokeSegment,
        config: BrushConfig,
        context: StrokeContext,
    ) -> Image.Image | None:
        tint = self.param(config, "core_tint")
        if tint <= 0:
            return None
        # Full-coverage pixels (the core) get the lightened color
        base = hex_to_rgb(config.color)
        return ImageOps.colorize(layer.mask, black=base, white=lighten(base, tint), blackpoint=128)


class FireBrush(GlowBrush):
    """Glow whose color runs from a hot core to a dark red rim."""

    family = "fire"

    def colorize(
        self,
        layer: StrokeLayer,
        segment: StrokeSegment,
        config: BrushConfig,
        context: StrokeContext,
    ) -> Image.Image | None:
        # The brush color tints the flame without replacing it
        base = hex_to_rgb(config.color)
        rim = mix((200, 30, 0), darken(base, 0.3), 0.25)
        body = mix((255, 100, 0), base, 0.25)
        core = mix((255, 230, 120), lighten(base, 0.8), 0.25)
        return ImageOps.colorize(layer.mask, black=rim, white=core, mid=body)
