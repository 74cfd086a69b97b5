"""Round hard brushes: the basic brush, marker, ink, eraser and color cycling."""

import math

from PIL import Image

from museo_brush.colors import hex_to_rgb, is_valid_hex, mix, rotate_hue
from museo_brush.errors import ConfigurationError
from museo_brush.interpolation import direction, distance
from museo_brush.renderers.base import BrushRenderer, StrokeContext, StrokeLayer
from museo_brush.surface import CompositeMode
from museo_brush.types import BrushConfig, Point, StrokeSegment

# Segment length (in brush sizes) treated as full speed
VELOCITY_REFERENCE = 2.0
# Width ratios at rest and at full speed for pressure_response = 1
SLOW_WIDTH_RATIO = 1.3
FAST_WIDTH_RATIO = 0.5
MIN_STROKE_WIDTH = 1.0


class RoundBrush(BrushRenderer):
    """Solid round brush.

    Params:
        cap: "round" or "square" line ends
        width_scale: stroke width as a fraction of size
        pressure_response: 0-1, how much velocity thins the stroke
    """

    family = "round"
    defaults = {"cap": "round", "width_scale": 1.0, "pressure_response": 0.0}

    def reach(self, config: BrushConfig) -> float | None:
        ratio = max(1.0, 1.0 + (SLOW_WIDTH_RATIO - 1.0) * self.param(config, "pressure_response"))
        # Square caps reach out to the corner
        return config.size * self.param(config, "width_scale") * ratio * math.sqrt(2) / 2

    def stroke_width(
        self,
        config: BrushConfig,
        context: StrokeContext,
        segment_length: float | None = None,
    ) -> float:
        """Stroke width for the next segment.

        Slower movement = wider stroke (more paint deposited).
        Faster movement = thinner stroke (paint spread thin).
        """
        width = config.size * self.param(config, "width_scale")
        response = self.param(config, "pressure_response")
        if response > 0:
            if segment_length is None:
                # Press without movement deposits the most ink
                ratio = 1.0 + (SLOW_WIDTH_RATIO - 1.0) * response
            else:
                speed = segment_length
                if context.segment_index > 0:
                    speed = (context.velocity + segment_length) / 2
                normalized = min(1.0, speed / (config.size * VELOCITY_REFERENCE))
                max_ratio = 1.0 + (SLOW_WIDTH_RATIO - 1.0) * response
                min_ratio = 1.0 - (1.0 - FAST_WIDTH_RATIO) * response
                ratio = max_ratio - normalized * (max_ratio - min_ratio)
            width *= ratio
        return max(MIN_STROKE_WIDTH, width)

    def _cap(self, config: BrushConfig) -> str:
        cap = self.param_str(config, "cap")
        if cap not in ("round", "square"):
            raise ConfigurationError(
                f"Brush '{self.kind}' cap must be 'round' or 'square', got {cap!r}"
            )
        return cap

    def paint_dot(
        self, layer: StrokeLayer, point: Point, config: BrushConfig, context: StrokeContext
    ) -> None:
        width = self.stroke_width(config, context)
        if self._cap(config) == "square":
            half = width / 2
            layer.polygon(
                [
                    (point.x - half, point.y - half),
                    (point.x + half, point.y - half),
                    (point.x + half, point.y + half),
                    (point.x - half, point.y + half),
                ]
            )
        else:
            layer.circle(point, width / 2)

    def paint_segment(
        self,
        layer: StrokeLayer,
        start: Point,
        end: Point,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        width = self.stroke_width(config, context, distance(start, end))
        if self._cap(config) == "round":
            layer.line([start, end], width)
            return
        # Square caps extend half a width past each end
        dx, dy = direction(start, end)
        half = width / 2
        layer.polygon(
            [
                (start.x - dx * half - dy * half, start.y - dy * half + dx * half),
                (end.x + dx * half - dy * half, end.y + dy * half + dx * half),
                (end.x + dx * half + dy * half, end.y + dy * half - dx * half),
                (start.x - dx * half + dy * half, start.y - dy * half - dx * half),
            ]
        )


class EraserBrush(RoundBrush):
    """Round brush geometry that removes paint instead of adding it."""

    family = "eraser"
    composite_mode = CompositeMode.ERASE


class ColorCycleBrush(RoundBrush):
    """Round brush whose color changes with distance travelled.

    Params:
        mode: "rainbow" (hue rotation) or "gradient" (ping-pong between the
            brush color and ``secondary_color``)
        period: pixels of travel per full cycle
        secondary_color: gradient end color
    """

    family = "color_cycle"
    defaults = {
        **RoundBrush.defaults,
        "mode": "rainbow",
        "period": 200.0,
        "secondary_color": "#ffffff",
    }

    def color_at(self, config: BrushConfig, travelled: float) -> tuple[int, int, int]:
        base = hex_to_rgb(config.color)
        period = max(1.0, self.param(config, "period"))
        mode = self.param_str(config, "mode")
        if mode == "rainbow":
            return rotate_hue(base, travelled / period, min_saturation=0.85)
        if mode == "gradient":
            secondary = self.param_str(config, "secondary_color")
            if not is_valid_hex(secondary):
                raise ConfigurationError(
                    f"Brush '{self.kind}' secondary_color must be a hex color, got {secondary!r}"
                )
            phase = (travelled / period) % 2.0
            t = phase if phase <= 1.0 else 2.0 - phase
            return mix(base, hex_to_rgb(secondary), t)
        raise ConfigurationError(
            f"Brush '{self.kind}' mode must be 'rainbow' or 'gradient', got {mode!r}"
        )

    def colorize(
        self,
        layer: StrokeLayer,
        segment: StrokeSegment,
        config: BrushConfig,
        context: StrokeContext,
    ) -> Image.Image | None:
        # One color per segment, sampled at its midpoint
        rgb = self.color_at(config, context.distance + segment.length / 2)
        return Image.new("RGB", layer.size, rgb)
