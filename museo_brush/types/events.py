"""Pointer event types delivered by the host UI."""

from enum import Enum

from pydantic import BaseModel


class PointerEventType(str, Enum):
    DOWN = "pointerdown"
    MOVE = "pointermove"
    UP = "pointerup"
    LEAVE = "pointerleave"


class PointerEvent(BaseModel):
    """Raw pointer event in client (display) coordinates."""

    type: PointerEventType
    client_x: float
    client_y: float
    pointer_id: int = 0


class SurfaceRect(BaseModel):
    """Displayed bounding box of the surface in client coordinates."""

    left: float = 0.0
    top: float = 0.0
    width: float
    height: float

    @property
    def is_visible(self) -> bool:
        """False when the surface has no displayed area (e.g. hidden or collapsed)."""
        return self.width > 0 and self.height > 0
