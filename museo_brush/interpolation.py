"""Pure functions for segment interpolation.

This module contains stateless math used by the renderers to walk a segment:
even subdivision, arc-length sampling with a carried offset, perpendicular
offsets and jagged displacement. No side effects or I/O.
"""

import math
import random

from museo_brush.types import Point


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between two values."""
    return a + (b - a) * t


def lerp_point(p1: Point, p2: Point, t: float) -> Point:
    """Linear interpolation between two points."""
    return Point(x=lerp(p1.x, p2.x, t), y=lerp(p1.y, p2.y, t))


def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def direction(p1: Point, p2: Point) -> tuple[float, float]:
    """Unit vector from p1 to p2, or (1, 0) when the points coincide."""
    length = distance(p1, p2)
    if length == 0:
        return (1.0, 0.0)
    return ((p2.x - p1.x) / length, (p2.y - p1.y) / length)


def subdivide_segment(start: Point, end: Point, spacing: float) -> list[Point]:
    """Split a segment into evenly spaced points, endpoints included.

    Consecutive points are never more than ``spacing`` apart.
    """
    length = distance(start, end)
    if length == 0:
        return [start]
    steps = max(1, math.ceil(length / max(spacing, 1e-6)))
    return [lerp_point(start, end, i / steps) for i in range(steps + 1)]


def sample_along(
    start: Point,
    end: Point,
    spacing: float,
    offset: float = 0.0,
) -> tuple[list[Point], float]:
    """Sample points every ``spacing`` pixels along a segment.

    Args:
        start: Segment start
        end: Segment end
        spacing: Arc length between samples
        offset: Distance into the segment of the first sample (the carry left
            over from the previous segment of the same stroke)

    Returns:
        (samples, carry) where carry is the offset of the first sample into
        the next segment, so spacing stays even across segment joins.
    """
    spacing = max(spacing, 1e-6)
    length = distance(start, end)
    samples: list[Point] = []
    position = max(0.0, offset)
    while position <= length:
        t = position / length if length > 0 else 0.0
        samples.append(lerp_point(start, end, t))
        position += spacing
    return samples, position - length


def offset_path(points: list[Point], offset: float) -> list[Point]:
    """Offset a path perpendicular to its direction.

    Args:
        points: Original path points
        offset: Perpendicular offset distance (positive = left, negative = right)

    Returns:
        Offset path points
    """
    if len(points) < 2 or offset == 0:
        return points

    offset_points: list[Point] = []
    for i, point in enumerate(points):
        if i == 0:
            prev, nxt = point, points[1]
        elif i == len(points) - 1:
            prev, nxt = points[i - 1], point
        else:
            # Average of neighbouring directions
            prev, nxt = points[i - 1], points[i + 1]
        dx, dy = direction(prev, nxt)
        # Perpendicular is (-dy, dx)
        offset_points.append(Point(x=point.x - dy * offset, y=point.y + dx * offset))
    return offset_points


def jagged_path(
    start: Point,
    end: Point,
    displacement: float,
    rng: random.Random,
    depth: int = 4,
) -> list[Point]:
    """Midpoint-displacement zigzag between two fixed endpoints.

    Each level halves the displacement, so the path stays within
    ``displacement`` of the straight segment.
    """
    points = [start, end]
    amount = displacement / 2
    for _ in range(depth):
        refined: list[Point] = [points[0]]
        for a, b in zip(points, points[1:], strict=False):
            dx, dy = direction(a, b)
            shift = rng.uniform(-amount, amount)
            mid = lerp_point(a, b, 0.5)
            refined.append(Point(x=mid.x - dy * shift, y=mid.y + dx * shift))
            refined.append(b)
        points = refined
        amount /= 2
    return points


def rotate_point(point: Point, center: Point, angle: float) -> Point:
    """Rotate a point around a center by ``angle`` radians."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = point.x - center.x
    dy = point.y - center.y
    return Point(x=center.x + dx * cos_a - dy * sin_a, y=center.y + dx * sin_a + dy * cos_a)


def reflect_point(point: Point, center: Point) -> Point:
    """Mirror a point across the horizontal axis through ``center``."""
    return Point(x=point.x, y=2 * center.y - point.y)
