"""Replay recorded strokes into images.

This module provides a unified API for rendering a serialized stroke history
with configurable options for background, dimensions, scaling, and output
format (mural thumbnails, previews, exports).
"""

from __future__ import annotations

import asyncio
import base64
import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from PIL import Image
from pydantic import TypeAdapter, ValidationError

from museo_brush.engine import BrushEngine
from museo_brush.errors import ConfigurationError
from museo_brush.surface import Background, Surface
from museo_brush.types import MAX_BRUSH_SIZE, MIN_BRUSH_SIZE, Point, StrokeRecord, StrokeSegment

logger = logging.getLogger(__name__)

_HISTORY_ADAPTER = TypeAdapter(list[StrokeRecord])


def image_to_base64(img: Image.Image) -> str:
    """Convert PIL Image to base64 string."""
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return base64.standard_b64encode(buffer.getvalue()).decode("utf-8")


def load_history(data: str | bytes) -> list[StrokeRecord]:
    """Parse a JSON stroke history.

    Raises:
        ConfigurationError: If the JSON is not a valid stroke history.
    """
    try:
        return _HISTORY_ADAPTER.validate_json(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid stroke history: {e}") from e


def dump_history(records: Iterable[StrokeRecord], indent: int | None = None) -> str:
    return _HISTORY_ADAPTER.dump_json(list(records), indent=indent).decode("utf-8")


@dataclass(frozen=True)
class RenderOptions:
    """Configuration for stroke replay.

    Attributes:
        width: Output image width in pixels
        height: Output image height in pixels
        background_color: Background as hex string or RGBA tuple, None for transparent
        scale_from: Source dimensions (w, h) for scaling strokes
        scale_padding: Padding when scaling
        seed: Random seed for textured brushes (same seed = same pixels)
        output_format: Return type - "image" (PIL), "bytes", or "base64"
        optimize_png: Enable PNG optimization (slower but smaller)
    """

    width: int = 800
    height: int = 600
    background_color: Background = "#FFFFFF"
    scale_from: tuple[int, int] | None = None
    scale_padding: int = 0
    seed: int | None = 0
    output_format: Literal["image", "bytes", "base64"] = "bytes"
    optimize_png: bool = False


@dataclass
class _ScaleTransform:
    """Computed scale and offset for transforming coordinates."""

    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    @property
    def is_identity(self) -> bool:
        return self.scale == 1.0 and self.offset_x == 0.0 and self.offset_y == 0.0

    def apply(self, point: Point) -> Point:
        if self.is_identity:
            return point
        return Point(x=point.x * self.scale + self.offset_x, y=point.y * self.scale + self.offset_y)

    def apply_segment(self, segment: StrokeSegment) -> StrokeSegment:
        if self.is_identity:
            return segment
        last = self.apply(segment.last_point) if segment.last_point is not None else None
        return StrokeSegment(last_point=last, point=self.apply(segment.point))


def _compute_transform(options: RenderOptions) -> _ScaleTransform:
    """Compute scale transform from options."""
    if options.scale_from is None:
        return _ScaleTransform()

    src_w, src_h = options.scale_from
    target_w = options.width - 2 * options.scale_padding
    target_h = options.height - 2 * options.scale_padding

    scale = min(target_w / src_w, target_h / src_h)
    offset_x = (options.width - src_w * scale) / 2
    offset_y = (options.height - src_h * scale) / 2

    return _ScaleTransform(scale=scale, offset_x=offset_x, offset_y=offset_y)


def replay_strokes(
    engine: BrushEngine,
    records: Iterable[StrokeRecord],
    transform: _ScaleTransform | None = None,
) -> int:
    """Draw recorded strokes with an engine. Returns the number of segments drawn.

    Records sharing a stroke_id continue the same stroke, so a mid-stroke
    brush change replays as one stroke.
    """
    transform = transform or _ScaleTransform()
    drawn = 0
    previous_stroke: int | None = None
    for record in records:
        if record.stroke_id != previous_stroke:
            engine.end_stroke()
            previous_stroke = record.stroke_id
        config = record.config
        if not transform.is_identity:
            size = min(MAX_BRUSH_SIZE, max(MIN_BRUSH_SIZE, config.size * transform.scale))
            config = config.model_copy(update={"size": size})
        engine.configure(config)
        for segment in record.segments:
            scaled = transform.apply_segment(segment)
            if engine.draw(scaled.point, scaled.last_point):
                drawn += 1
    engine.end_stroke()
    return drawn


def render_strokes(
    records: Iterable[StrokeRecord],
    options: RenderOptions | None = None,
) -> Image.Image | bytes | str:
    """Core sync function to replay strokes onto a fresh surface.

    Args:
        records: Stroke records in drawing order
        options: Render configuration (uses defaults if None)

    Returns:
        PIL Image, PNG bytes, or base64 string depending on options.output_format

    Raises:
        ConfigurationError: If a record uses a brush kind with no renderer.
    """
    if options is None:
        options = RenderOptions()

    surface = Surface.new(options.width, options.height, options.background_color)
    with BrushEngine(surface, seed=options.seed, record_history=False) as engine:
        drawn = replay_strokes(engine, records, _compute_transform(options))
    logger.debug(f"Replayed {drawn} segments onto {options.width}x{options.height}")

    img = surface.image
    if options.background_color is not None:
        img = img.convert("RGB")

    # Return in requested format
    if options.output_format == "image":
        return img

    buffer = io.BytesIO()
    img.save(buffer, format="PNG", optimize=options.optimize_png)
    png_bytes = buffer.getvalue()

    if options.output_format == "base64":
        return base64.standard_b64encode(png_bytes).decode("utf-8")

    return png_bytes


async def render_strokes_async(
    records: Iterable[StrokeRecord],
    options: RenderOptions | None = None,
) -> Image.Image | bytes | str:
    """Async wrapper for render_strokes (runs in thread pool).

    The engine is created inside the worker thread, so thread affinity holds.
    """
    return await asyncio.to_thread(render_strokes, list(records), options)


# =============================================================================
# Convenience option factories
# =============================================================================


def options_for_thumbnail(source_size: tuple[int, int] = (800, 600)) -> RenderOptions:
    """Small mural thumbnail for gallery listings."""
    return RenderOptions(
        width=400,
        height=300,
        scale_from=source_size,
        scale_padding=8,
        output_format="bytes",
        optimize_png=True,
    )


def options_for_preview(source_size: tuple[int, int] = (800, 600)) -> RenderOptions:
    """Full-size preview for sharing."""
    return RenderOptions(
        width=source_size[0],
        height=source_size[1],
        output_format="base64",
    )
