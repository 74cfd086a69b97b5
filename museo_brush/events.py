"""Pointer event adapter: translates host UI pointer events into engine calls."""

import logging
from collections.abc import Callable

from museo_brush.coordinates import normalize_event
from museo_brush.engine import BrushEngine
from museo_brush.types import Point, PointerEvent, PointerEventType, SurfaceRect

logger = logging.getLogger(__name__)

StrokeEndCallback = Callable[[], None]


class PointerAdapter:
    """Feeds pointer events for one surface into its engine.

    - pointerdown: exactly one ``draw(p, None)``
    - pointermove while down: exactly one ``draw(p, last_point)``
    - pointerup / pointerleave: exactly one ``end_stroke()``, even with no
      moves in between

    Events are delivered in order on the engine's thread.
    """

    def __init__(
        self,
        engine: BrushEngine,
        rect: SurfaceRect | None = None,
        on_stroke_end: StrokeEndCallback | None = None,
    ) -> None:
        self.engine = engine
        surface = engine.surface
        self.rect = rect or SurfaceRect(width=surface.width, height=surface.height)
        self._is_drawing = False
        self._last_point: Point | None = None
        # Client position for the brush preview, None while outside the surface
        self.cursor_pos: tuple[float, float] | None = None
        self._stroke_end_callbacks: list[StrokeEndCallback] = []
        if on_stroke_end is not None:
            self._stroke_end_callbacks.append(on_stroke_end)

    @property
    def is_drawing(self) -> bool:
        return self._is_drawing

    @property
    def last_point(self) -> Point | None:
        return self._last_point

    def add_stroke_end_callback(self, callback: StrokeEndCallback) -> None:
        """Call ``callback`` after every stroke (e.g. to save a history snapshot)."""
        self._stroke_end_callbacks.append(callback)

    def update_rect(self, rect: SurfaceRect) -> None:
        """Track the displayed rect after a resize or scroll."""
        self.rect = rect

    def _surface_point(self, event: PointerEvent) -> Point | None:
        if not self.rect.is_visible:
            logger.debug("Pointer event on a surface with no displayed area ignored")
            return None
        surface = self.engine.surface
        return normalize_event(event, self.rect, surface.width, surface.height)

    # =========================================================================
    # Handlers
    # =========================================================================

    def pointer_down(self, event: PointerEvent) -> bool:
        """Start a stroke. Returns whether anything was drawn."""
        self._is_drawing = True
        self.cursor_pos = (event.client_x, event.client_y)
        point = self._surface_point(event)
        self._last_point = point
        if point is None:
            return False
        return self.engine.draw(point, None)

    def pointer_move(self, event: PointerEvent) -> bool:
        """Continue the stroke if the pointer is down."""
        self.cursor_pos = (event.client_x, event.client_y)
        if not self._is_drawing:
            return False
        point = self._surface_point(event)
        if point is None:
            return False
        previous = self._last_point
        self._last_point = point
        return self.engine.draw(point, previous)

    def pointer_up(self, event: PointerEvent | None = None) -> None:
        self._finish()

    def pointer_leave(self, event: PointerEvent | None = None) -> None:
        self.cursor_pos = None
        self._finish()

    def dispatch(self, event: PointerEvent) -> bool:
        """Route an event to its handler. Returns whether anything was drawn."""
        if event.type is PointerEventType.DOWN:
            return self.pointer_down(event)
        if event.type is PointerEventType.MOVE:
            return self.pointer_move(event)
        if event.type is PointerEventType.UP:
            self.pointer_up(event)
        else:
            self.pointer_leave(event)
        return False

    def _finish(self) -> None:
        was_drawing = self._is_drawing
        self._is_drawing = False
        self._last_point = None
        self.engine.end_stroke()
        if was_drawing:
            for callback in self._stroke_end_callbacks:
                callback()
