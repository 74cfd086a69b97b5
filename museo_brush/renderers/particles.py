"""Scatter brushes: spray particles and shape stamps."""

import math

from museo_brush.config import settings
from museo_brush.errors import ConfigurationError
from museo_brush.interpolation import direction, sample_along
from museo_brush.renderers.base import BrushRenderer, StrokeContext, StrokeLayer
from museo_brush.types import BrushConfig, Point

Polygon = list[tuple[float, float]]


class SprayBrush(BrushRenderer):
    """Airbrush: random particles inside a disc around each sample point.

    Params:
        density: particles per sample, relative to size
        particle: particle radius as a fraction of size
        spread: spray disc diameter as a multiple of size
        size_jitter: 0-1 random variation of particle radius
    """

    family = "spray"
    defaults = {"density": 1.0, "particle": 0.05, "spread": 1.0, "size_jitter": 0.3}

    def _particle_radius(self, config: BrushConfig) -> float:
        return max(0.5, config.size * self.param(config, "particle"))

    def reach(self, config: BrushConfig) -> float | None:
        jitter = 1 + abs(self.param(config, "size_jitter"))
        disc = config.size * self.param(config, "spread") / 2
        return disc + self._particle_radius(config) * jitter

    def _spacing(self, config: BrushConfig) -> float:
        return max(1.0, config.size * settings.stamp_spacing)

    def _spray(
        self,
        layer: StrokeLayer,
        samples: list[Point],
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        rng = context.rng
        disc = config.size * self.param(config, "spread") / 2
        count = max(1, int(self.param(config, "density") * config.size * 0.3))
        base_radius = self._particle_radius(config)
        jitter = abs(self.param(config, "size_jitter"))
        for sample in samples:
            for _ in range(count):
                # Uniform over the disc
                r = disc * math.sqrt(rng.random())
                angle = rng.uniform(0, 2 * math.pi)
                radius = max(0.5, base_radius * (1 + rng.uniform(-jitter, jitter)))
                layer.circle(
                    (sample.x + math.cos(angle) * r, sample.y + math.sin(angle) * r),
                    radius,
                )

    def paint_dot(
        self, layer: StrokeLayer, point: Point, config: BrushConfig, context: StrokeContext
    ) -> None:
        # One particle always lands under the pointer so a tap is visible
        layer.circle(point, self._particle_radius(config))
        self._spray(layer, [point], config, context)
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
        self._spray(layer, samples, config, context)


# ============================================================================
# STAMP SHAPES
# ============================================================================


def star_polygon(
    center: tuple[float, float],
    outer_radius: float,
    inner_radius: float,
    points: int,
    rotation: float = 0.0,
) -> Polygon:
    """Star outline starting at the top point."""
    cx, cy = center
    vertices: Polygon = []
    step = math.pi / points
    for i in range(points * 2):
        radius = outer_radius if i % 2 == 0 else inner_radius
        angle = rotation - math.pi / 2 + i * step
        vertices.append((cx + math.cos(angle) * radius, cy + math.sin(angle) * radius))
    return vertices


def _transform(
    shape: Polygon, center: tuple[float, float], radius: float, rotation: float
) -> Polygon:
    """Scale a unit shape, rotate it and move it to the center."""
    cx, cy = center
    cos_r = math.cos(rotation)
    sin_r = math.sin(rotation)
    return [
        (cx + (x * cos_r - y * sin_r) * radius, cy + (x * sin_r + y * cos_r) * radius)
        for x, y in shape
    ]


def _unit_heart() -> Polygon:
    vertices: Polygon = []
    for i in range(32):
        t = 2 * math.pi * i / 32
        x = 16 * math.sin(t) ** 3
        y = -(13 * math.cos(t) - 5 * math.cos(2 * t) - 2 * math.cos(3 * t) - math.cos(4 * t))
        vertices.append((x / 17, y / 17))
    return vertices


def _unit_leaf() -> Polygon:
    # Pointed lens along the x axis
    upper = [(math.cos(t), 0.45 * math.sin(t)) for t in (math.pi * i / 12 for i in range(13))]
    return upper + [(x, -y) for x, y in reversed(upper[1:-1])]


def _unit_ellipse(ratio: float) -> Polygon:
    return [
        (math.cos(2 * math.pi * i / 24), ratio * math.sin(2 * math.pi * i / 24)) for i in range(24)
    ]


UNIT_SHAPES: dict[str, Polygon] = {
    "heart": _unit_heart(),
    "leaf": _unit_leaf(),
    "dab": _unit_ellipse(0.45),
    "diamond": [(0.0, -1.0), (0.6, 0.0), (0.0, 1.0), (-0.6, 0.0)],
    "triangle": [(0.0, -1.0), (0.866, 0.5), (-0.866, 0.5)],
    "square": [(-0.75, -0.75), (0.75, -0.75), (0.75, 0.75), (-0.75, 0.75)],
}

STAMP_SHAPES = frozenset({"circle", "ring", "star", "spark", "flower", *UNIT_SHAPES})


class StampBrush(BrushRenderer):
    """Places shape stamps at even arc-length spacing along the stroke.

    Params:
        shape: one of STAMP_SHAPES
        spacing: distance between stamps as a multiple of size
        scale: stamp radius as a fraction of size
        rotation_jitter: 0-1 random rotation (1 = any angle)
        scale_jitter: 0-1 random variation of stamp size
        scatter: 0-1 random displacement from the path, as a fraction of size
        orient: 1 to rotate stamps to the stroke direction
    """

    family = "stamp"
    defaults = {
        "shape": "circle",
        "spacing": 1.5,
        "scale": 0.5,
        "rotation_jitter": 0.0,
        "scale_jitter": 0.0,
        "scatter": 0.0,
        "orient": 0.0,
    }

    def reach(self, config: BrushConfig) -> float | None:
        scale = self.param(config, "scale") * (1 + abs(self.param(config, "scale_jitter")))
        return config.size * (scale + abs(self.param(config, "scatter")))

    def _shape(self, config: BrushConfig) -> str:
        shape = self.param_str(config, "shape")
        if shape not in STAMP_SHAPES:
            raise ConfigurationError(
                f"Brush '{self.kind}' shape must be one of {sorted(STAMP_SHAPES)}, got {shape!r}"
            )
        return shape

    def _spacing(self, config: BrushConfig) -> float:
        return max(1.0, config.size * self.param(config, "spacing"))

    def _place(
        self,
        layer: StrokeLayer,
        samples: list[Point],
        heading: float,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        shape = self._shape(config)
        rng = context.rng
        size = config.size
        base_radius = size * self.param(config, "scale")
        scale_jitter = abs(self.param(config, "scale_jitter"))
        rotation_jitter = self.param(config, "rotation_jitter")
        scatter = size * abs(self.param(config, "scatter"))
        orient = self.param(config, "orient") > 0
        for sample in samples:
            radius = max(0.5, base_radius * (1 + rng.uniform(-scale_jitter, scale_jitter)))
            rotation = (heading if orient else 0.0) + rng.uniform(-1, 1) * rotation_jitter * math.pi
            dx = rng.uniform(-scatter, scatter)
            dy = rng.uniform(-scatter, scatter)
            center = layer.local((sample.x + dx, sample.y + dy))
            self._stamp_shape(layer, shape, center, radius, rotation)

    def _stamp_shape(
        self,
        layer: StrokeLayer,
        shape: str,
        center: tuple[float, float],
        radius: float,
        rotation: float,
    ) -> None:
        draw = layer.draw
        cx, cy = center
        if shape == "circle":
            draw.ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=255)
        elif shape == "ring":
            draw.ellipse(
                (cx - radius, cy - radius, cx + radius, cy + radius),
                outline=255,
                width=max(1, round(radius * 0.25)),
            )
        elif shape == "star":
            draw.polygon(star_polygon(center, radius, radius * 0.45, 5, rotation), fill=255)
        elif shape == "spark":
            draw.polygon(star_polygon(center, radius, radius * 0.25, 6, rotation), fill=255)
        elif shape == "flower":
            petal = radius * 0.4
            for i in range(5):
                angle = rotation + 2 * math.pi * i / 5
                px = cx + math.cos(angle) * radius * 0.55
                py = cy + math.sin(angle) * radius * 0.55
                draw.ellipse((px - petal, py - petal, px + petal, py + petal), fill=255)
            core = radius * 0.3
            draw.ellipse((cx - core, cy - core, cx + core, cy + core), fill=255)
        else:
            draw.polygon(_transform(UNIT_SHAPES[shape], center, radius, rotation), fill=255)
        if shape != "ring":
            # Tiny stamps can rasterize to nothing
            draw.point((cx, cy), fill=255)

    def paint_dot(
        self, layer: StrokeLayer, point: Point, config: BrushConfig, context: StrokeContext
    ) -> None:
        self._place(layer, [point], 0.0, config, context)
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
        if not samples:
            return
        dx, dy = direction(start, end)
        self._place(layer, samples, math.atan2(dy, dx), config, context)
