"""Stroke session manager: the brush engine bound to one surface."""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Mapping
from types import TracebackType
from typing import Any

from museo_brush.config import settings
from museo_brush.errors import ConfigurationError, RenderingFailure, ThreadAffinityError
from museo_brush.renderers import RendererRegistry, StrokeContext, default_registry
from museo_brush.surface import Background, Surface
from museo_brush.types import (
    BrushConfig,
    Point,
    PointDict,
    StrokeRecord,
    StrokeSegment,
    StrokeState,
    parse_brush_config,
    resolve_kind,
)

logger = logging.getLogger(__name__)

PointLike = Point | PointDict | Mapping[str, float] | tuple[float, float]


def _as_point(value: PointLike) -> Point:
    if isinstance(value, Point):
        return value
    if isinstance(value, tuple):
        x, y = value
        return Point(x=x, y=y)
    return Point(x=value["x"], y=value["y"])


def default_config() -> BrushConfig:
    """Initial brush configuration from settings."""
    return parse_brush_config(
        {
            "type": settings.default_brush,
            "color": settings.default_color,
            "size": settings.default_size,
            "opacity": settings.default_opacity,
        }
    )


class BrushEngine:
    """Turns brush configuration plus pointer positions into paint.

    One engine owns one surface until ``release``. The engine is Idle between
    strokes and Active inside one:

        Idle   --draw(p, None)-->   Active  (dot at p)
        Active --draw(p, prev)-->   Active  (segment prev -> p)
        Active --end_stroke()-->    Idle

    ``configure`` is accepted in any state and applies from the next draw.
    All calls must come from the thread that created the engine.
    """

    def __init__(
        self,
        surface: Surface,
        config: BrushConfig | Mapping[str, Any] | None = None,
        *,
        registry: RendererRegistry | None = None,
        seed: int | None = None,
        record_history: bool | None = None,
        max_recorded_segments: int | None = None,
    ) -> None:
        surface.claim(self)
        self._surface: Surface | None = surface
        self._surface_id = surface.surface_id
        self._registry = registry if registry is not None else default_registry
        if config is None:
            self._config = default_config()
        else:
            self._config = parse_brush_config(config).model_copy(deep=True)
        self._rng = random.Random(seed)
        self._thread_id = threading.get_ident()

        # Stroke state
        self._state = StrokeState.IDLE
        self._last_point: Point | None = None
        self._context: StrokeContext | None = None

        # Stroke history
        self._record_history = settings.record_strokes if record_history is None else record_history
        if max_recorded_segments is None:
            max_recorded_segments = settings.max_recorded_segments
        self._max_recorded_segments = max(1, max_recorded_segments)
        self._history: list[StrokeRecord] = []
        self._recorded_segments = 0
        self._current_record: StrokeRecord | None = None
        self._stroke_id = 0

        logger.info(
            f"Brush engine bound to surface {self._surface_id} ({surface.width}x{surface.height})",
            extra={"surface_id": self._surface_id},
        )

    def __repr__(self) -> str:
        return f"BrushEngine(surface={self._surface_id!r}, state={self._state.value!r})"

    def __enter__(self) -> BrushEngine:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def surface(self) -> Surface:
        if self._surface is None:
            raise RenderingFailure(
                self._config.type, f"engine for surface {self._surface_id} was released"
            )
        return self._surface

    @property
    def is_released(self) -> bool:
        return self._surface is None

    @property
    def config(self) -> BrushConfig:
        """The active configuration, by value."""
        return self._config.model_copy(deep=True)

    @property
    def state(self) -> StrokeState:
        return self._state

    @property
    def is_drawing(self) -> bool:
        return self._state is StrokeState.ACTIVE

    @property
    def last_point(self) -> Point | None:
        return self._last_point

    @property
    def registry(self) -> RendererRegistry:
        return self._registry

    @property
    def history(self) -> list[StrokeRecord]:
        """Recorded strokes, oldest first (copies)."""
        return [record.model_copy(deep=True) for record in self._history]

    def export_history(self) -> list[dict[str, Any]]:
        """History as JSON-compatible dicts."""
        return [record.model_dump(mode="json") for record in self._history]

    def clear_history(self) -> None:
        self._history.clear()
        self._recorded_segments = 0
        self._current_record = None

    def _check_thread(self) -> None:
        if threading.get_ident() != self._thread_id:
            raise ThreadAffinityError(
                f"Engine for surface {self._surface_id} used from a thread other than its creator"
            )

    # =========================================================================
    # Operations
    # =========================================================================

    def configure(self, config: BrushConfig | Mapping[str, Any]) -> BrushConfig:
        """Replace the active brush configuration.

        A mapping with only some fields is merged over the current config.
        Never ends or alters the current stroke; the new config is used from
        the next ``draw``.

        Raises:
            ConfigurationError: If a value cannot be clamped into range.
        """
        self._check_thread()
        if isinstance(config, BrushConfig):
            # params is a plain dict; keep a private copy
            new_config = config.model_copy(deep=True)
        else:
            new_config = parse_brush_config(self._merge(config))

        if new_config.type not in self._registry:
            # Only a warning here: the kind may be registered before the next draw
            logger.warning(
                f"No renderer registered for brush '{new_config.type}'",
                extra={"surface_id": self._surface_id},
            )
        if new_config != self._config:
            self._config = new_config
            # Segments after a mid-stroke change go into a new record
            self._current_record = None
            logger.debug(
                f"Brush configured: {new_config.type} {new_config.color} "
                f"size={new_config.size} opacity={new_config.opacity}",
                extra={"surface_id": self._surface_id},
            )
        return self.config

    def draw(self, point: PointLike, last_point: PointLike | None = None) -> bool:
        """Paint at ``point``, continuing from ``last_point`` if given.

        ``last_point=None`` starts a new stroke with a dot (ending any active
        one). Returns False without changing stroke state when the point is
        unusable or the renderer fails.

        Raises:
            ConfigurationError: If the active brush kind has no renderer or
                its parameters are invalid. The surface is left untouched.
        """
        self._check_thread()
        current = _as_point(point)
        previous = _as_point(last_point) if last_point is not None else None
        if not current.is_finite() or (previous is not None and not previous.is_finite()):
            logger.warning(
                f"Ignoring non-finite draw point {current.x},{current.y}",
                extra={"surface_id": self._surface_id},
            )
            return False

        config = self._config
        try:
            renderer = self._registry.get(config.type)
        except ConfigurationError:
            logger.warning(
                f"Cannot draw with unknown brush '{config.type}'",
                extra={"surface_id": self._surface_id},
            )
            raise

        starting = previous is None or self._state is StrokeState.IDLE
        context = StrokeContext(rng=self._rng) if starting else self._context
        assert context is not None
        segment = StrokeSegment(last_point=previous, point=current)

        try:
            renderer.render(self.surface, segment, config, context)
        except ConfigurationError as e:
            logger.warning(
                f"Brush '{config.type}' misconfigured: {e}",
                extra={"surface_id": self._surface_id},
            )
            raise
        except RenderingFailure:
            logger.exception(
                f"Brush '{config.type}' could not draw",
                extra={"surface_id": self._surface_id},
            )
            return False
        except Exception as e:
            failure = RenderingFailure(config.type, str(e))
            logger.exception(str(failure), extra={"surface_id": self._surface_id})
            return False

        if starting:
            if self._state is StrokeState.ACTIVE:
                self._finish_stroke()
            self._stroke_id += 1
            self._context = context
            self._current_record = None
            self._state = StrokeState.ACTIVE
            logger.debug(
                f"Stroke {self._stroke_id} started", extra={"surface_id": self._surface_id}
            )

        context.advance(segment)
        self._last_point = current
        self._record(segment, config)
        return True

    def end_stroke(self) -> None:
        """Finish the current stroke. Safe to call when no stroke is active."""
        self._check_thread()
        if self._state is StrokeState.IDLE:
            return
        self._finish_stroke()

    def clear(self, background: Background = None) -> None:
        """Clear the surface. An active stroke continues on the cleared surface."""
        self._check_thread()
        self.surface.clear(background)

    def release(self) -> None:
        """End any stroke and unbind from the surface. Idempotent."""
        if self._surface is None:
            return
        self._check_thread()
        if self._state is StrokeState.ACTIVE:
            self._finish_stroke()
        self._surface.release(self)
        self._surface = None
        logger.info(
            f"Brush engine released surface {self._surface_id}",
            extra={"surface_id": self._surface_id},
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _merge(self, updates: Mapping[str, Any]) -> dict[str, Any]:
        """Merge a partial update over the current config.

        Brush params belong to a kind: switching kinds without passing params
        starts from the new kind's preset defaults. Unknown keys are params.
        """
        merged = self._config.model_dump()
        fields = BrushConfig.model_fields
        extras = {key: value for key, value in updates.items() if key not in fields}
        new_type = updates.get("type")
        type_changed = isinstance(new_type, str) and resolve_kind(new_type) != self._config.type
        if "params" in updates:
            params = dict(updates["params"] or {})
        else:
            params = {} if type_changed else merged["params"]
        merged.update({key: value for key, value in updates.items() if key in fields})
        merged["params"] = {**params, **extras}
        return merged

    def _finish_stroke(self) -> None:
        segments = self._context.segment_index if self._context is not None else 0
        logger.debug(
            f"Stroke {self._stroke_id} ended after {segments} segments",
            extra={"surface_id": self._surface_id},
        )
        self._state = StrokeState.IDLE
        self._last_point = None
        self._context = None
        self._current_record = None

    def _record(self, segment: StrokeSegment, config: BrushConfig) -> None:
        if not self._record_history:
            return
        if self._current_record is None:
            self._current_record = StrokeRecord(stroke_id=self._stroke_id, config=config)
            self._history.append(self._current_record)
        self._current_record.segments.append(segment)
        self._recorded_segments += 1

        # Evict whole strokes, oldest first; the record being drawn always stays
        while self._recorded_segments > self._max_recorded_segments and len(self._history) > 1:
            evicted = self._history.pop(0)
            self._recorded_segments -= evicted.point_count
            logger.debug(
                f"Dropped stroke {evicted.stroke_id} from history",
                extra={"surface_id": self._surface_id},
            )
