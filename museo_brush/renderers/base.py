"""Renderer base class and the per-segment coverage layer.

Every renderer paints into a ``StrokeLayer``: an "L" coverage mask covering
just the segment's footprint. Overlapping primitives within one segment are
combined with max (``ImageChops.lighter``), never summed, and the mask is
composited onto the surface once with the configured opacity. This keeps a
single segment's alpha at or below the configured opacity no matter how many
primitives a brush stacks.
"""

import logging
import math
import random
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, ClassVar

from PIL import Image, ImageChops, ImageDraw, ImageFilter

from museo_brush.colors import hex_to_rgb
from museo_brush.errors import ConfigurationError
from museo_brush.surface import CompositeMode, Surface
from museo_brush.types import BrushConfig, Point, StrokeSegment

logger = logging.getLogger(__name__)

# Exponential smoothing factor for stroke velocity (0-1, higher = more reactive)
VELOCITY_SMOOTHING = 0.5

Coordinate = Point | tuple[float, float]
Box = tuple[int, int, int, int]


def _xy(point: Coordinate) -> tuple[float, float]:
    if isinstance(point, Point):
        return (point.x, point.y)
    return point


@dataclass
class StrokeContext:
    """Accumulators carried across the segments of one stroke.

    Attributes:
        rng: Random source for jitter, grain and scatter
        distance: Path length travelled before the current segment
        velocity: Smoothed segment length (pixels per draw call)
        carry: Arc length into the next segment where the next stamp lands
        segment_index: Number of segments already rendered
        scratch: Renderer-specific per-stroke data (e.g. bristle offsets)
    """

    rng: random.Random = field(default_factory=random.Random)
    distance: float = 0.0
    velocity: float = 0.0
    carry: float = 0.0
    segment_index: int = 0
    scratch: dict[str, Any] = field(default_factory=dict)

    def advance(self, segment: StrokeSegment) -> None:
        """Fold a rendered segment into the accumulators."""
        length = segment.length
        self.distance += length
        if self.segment_index == 0:
            self.velocity = length
        else:
            self.velocity += (length - self.velocity) * VELOCITY_SMOOTHING
        self.segment_index += 1


class StrokeLayer:
    """Coverage mask for one segment, positioned in surface coordinates."""

    def __init__(self, box: Box) -> None:
        self.left, self.top, right, bottom = box
        self.mask = Image.new("L", (right - self.left, bottom - self.top), 0)
        self.draw = ImageDraw.Draw(self.mask)

    @property
    def size(self) -> tuple[int, int]:
        return self.mask.size

    @property
    def is_empty(self) -> bool:
        return self.mask.getbbox() is None

    def local(self, point: Coordinate) -> tuple[float, float]:
        """Convert a surface coordinate to mask coordinates."""
        x, y = _xy(point)
        return (x - self.left, y - self.top)

    def local_points(self, points: Sequence[Coordinate]) -> list[tuple[float, float]]:
        return [self.local(p) for p in points]

    def blank(self) -> Image.Image:
        return Image.new("L", self.mask.size, 0)

    def merge(self, image: Image.Image) -> None:
        """Max-combine another coverage image into the mask."""
        self.mask.paste(ImageChops.lighter(self.mask, image))

    @contextmanager
    def overlay(self) -> Iterator[ImageDraw.ImageDraw]:
        """Draw partial-intensity primitives on a scratch mask, merged on exit.

        Drawing straight onto the mask would overwrite stronger coverage with
        weaker values; the overlay keeps the max.
        """
        scratch = self.blank()
        yield ImageDraw.Draw(scratch)
        self.merge(scratch)

    # =========================================================================
    # Primitives (full-intensity unless a value is given)
    # =========================================================================

    def circle(self, center: Coordinate, radius: float, value: int = 255) -> None:
        if value < 255:
            with self.overlay() as draw:
                _circle(draw, self.local(center), radius, value)
            return
        _circle(self.draw, self.local(center), radius, value)

    def line(
        self,
        points: Sequence[Coordinate],
        width: float,
        value: int = 255,
        *,
        round_caps: bool = True,
    ) -> None:
        """Polyline of the given width. A single point draws a dot."""
        if value < 255:
            with self.overlay() as draw:
                _line(draw, self.local_points(points), width, value, round_caps)
            return
        _line(self.draw, self.local_points(points), width, value, round_caps)

    def polygon(self, points: Sequence[Coordinate], value: int = 255) -> None:
        if value < 255:
            with self.overlay() as draw:
                draw.polygon(self.local_points(points), fill=value)
            return
        self.draw.polygon(self.local_points(points), fill=value)

    def soft_line(
        self,
        points: Sequence[Coordinate],
        width: float,
        blur: float,
        value: int = 255,
    ) -> None:
        """Polyline with a Gaussian-feathered edge."""
        scratch = self.blank()
        _line(ImageDraw.Draw(scratch), self.local_points(points), width, value, True)
        if blur > 0:
            scratch = scratch.filter(ImageFilter.GaussianBlur(blur))
        self.merge(scratch)

    def stamp(self, image: Image.Image, center: Coordinate) -> None:
        """Max-combine a prepared "L" stamp centered on a point."""
        cx, cy = self.local(center)
        x = round(cx - image.width / 2)
        y = round(cy - image.height / 2)
        scratch = self.blank()
        scratch.paste(image, (x, y))
        self.merge(scratch)


def _circle(
    draw: ImageDraw.ImageDraw, center: tuple[float, float], radius: float, value: int
) -> None:
    x, y = center
    r = max(radius, 0.5)
    draw.ellipse((x - r, y - r, x + r, y + r), fill=value)
    # Sub-pixel ellipses can rasterize to nothing
    draw.point((x, y), fill=value)


def _line(
    draw: ImageDraw.ImageDraw,
    points: list[tuple[float, float]],
    width: float,
    value: int,
    round_caps: bool,
) -> None:
    if len(points) == 1:
        _circle(draw, points[0], width / 2, value)
        return
    draw.line(points, fill=value, width=max(1, round(width)), joint="curve")
    if round_caps:
        _circle(draw, points[0], width / 2, value)
        _circle(draw, points[-1], width / 2, value)


class BrushRenderer(ABC):
    """Base class for a family of brushes.

    Subclasses implement ``paint_dot`` and ``paint_segment`` against a
    ``StrokeLayer``; ``render`` handles bounds, colorizing and compositing.
    One instance is shared by every engine, so per-stroke state belongs in
    the ``StrokeContext``.
    """

    family: ClassVar[str]
    composite_mode: ClassVar[CompositeMode] = CompositeMode.PAINT
    defaults: ClassVar[dict[str, float | str]] = {}

    def __init__(self, kind: str, params: Mapping[str, float | str] | None = None) -> None:
        self.kind = kind
        self.params: dict[str, float | str] = {**self.defaults, **(params or {})}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r})"

    # =========================================================================
    # Parameters
    # =========================================================================

    def _raw_param(self, config: BrushConfig, name: str) -> float | str:
        if name in config.params:
            return config.params[name]
        if name in self.params:
            return self.params[name]
        raise ConfigurationError(f"Brush '{self.kind}' has no parameter '{name}'")

    def param(self, config: BrushConfig, name: str) -> float:
        """Numeric parameter: config override, else preset default."""
        value = self._raw_param(config, name)
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Brush '{self.kind}' parameter '{name}' must be numeric, got {value!r}"
            ) from None
        if not math.isfinite(number):
            raise ConfigurationError(f"Brush '{self.kind}' parameter '{name}' must be finite")
        return number

    def param_str(self, config: BrushConfig, name: str) -> str:
        return str(self._raw_param(config, name))

    # =========================================================================
    # Rendering
    # =========================================================================

    def reach(self, config: BrushConfig) -> float | None:
        """How far paint may land from the segment, or None for anywhere."""
        return config.size / 2

    def bounds(self, surface: Surface, segment: StrokeSegment, config: BrushConfig) -> Box | None:
        """Surface box the segment can touch, or None if it is off-surface."""
        reach = self.reach(config)
        if reach is None:
            return (0, 0, surface.width, surface.height)
        start, end = segment.start, segment.point
        margin = math.ceil(reach) + 2
        left = max(0, math.floor(min(start.x, end.x)) - margin)
        top = max(0, math.floor(min(start.y, end.y)) - margin)
        right = min(surface.width, math.ceil(max(start.x, end.x)) + margin + 1)
        bottom = min(surface.height, math.ceil(max(start.y, end.y)) + margin + 1)
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
        """Paint one segment onto the surface.

        A segment without ``last_point`` (or with zero length) paints a dot.
        """
        if context is None:
            context = StrokeContext()
        box = self.bounds(surface, segment, config)
        if box is None:
            return

        layer = StrokeLayer(box)
        if segment.is_dot:
            self.paint_dot(layer, segment.point, config, context)
        else:
            assert segment.last_point is not None
            self.paint_segment(layer, segment.last_point, segment.point, config, context)
        if layer.is_empty:
            return

        surface.composite(
            layer.mask,
            (layer.left, layer.top),
            color=hex_to_rgb(config.color),
            opacity=config.opacity,
            mode=self.composite_mode,
            color_tile=self.colorize(layer, segment, config, context),
        )

    def colorize(
        self,
        layer: StrokeLayer,
        segment: StrokeSegment,
        config: BrushConfig,
        context: StrokeContext,
    ) -> Image.Image | None:
        """Per-pixel RGB colors for the layer, or None for the flat brush color."""
        return None

    @abstractmethod
    def paint_dot(
        self,
        layer: StrokeLayer,
        point: Point,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        """Paint the mark left by a press without movement."""

    @abstractmethod
    def paint_segment(
        self,
        layer: StrokeLayer,
        start: Point,
        end: Point,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        """Paint the stroke between two consecutive pointer positions."""
