"""Client (display) to surface (intrinsic pixel) coordinate conversion."""

from museo_brush.types import Point, PointerEvent, SurfaceRect


def normalize(
    client_x: float,
    client_y: float,
    rect: SurfaceRect,
    intrinsic_width: int,
    intrinsic_height: int,
) -> Point:
    """Map a client position onto the surface's pixel grid.

    The surface may be displayed scaled (CSS size differs from pixel size);
    the offset from the displayed origin is rescaled per axis. No rounding is
    applied, and positions outside the rect map outside the surface.

    Raises:
        ZeroDivisionError: If the rect has no displayed area. Check
            ``rect.is_visible`` first.
    """
    x = (client_x - rect.left) * intrinsic_width / rect.width
    y = (client_y - rect.top) * intrinsic_height / rect.height
    return Point(x=x, y=y)


def normalize_event(
    event: PointerEvent,
    rect: SurfaceRect,
    intrinsic_width: int,
    intrinsic_height: int,
) -> Point:
    return normalize(event.client_x, event.client_y, rect, intrinsic_width, intrinsic_height)
