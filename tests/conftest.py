"""Shared fixtures for brush engine tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from museo_brush.engine import BrushEngine
from museo_brush.surface import Surface
from museo_brush.types import Point


@pytest.fixture
def surface() -> Surface:
    """Transparent 120x120 surface."""
    return Surface.new(120, 120, surface_id="test")


@pytest.fixture
def white_surface() -> Surface:
    """Opaque white 200x200 surface."""
    return Surface.new(200, 200, background="#FFFFFF", surface_id="white")


@pytest.fixture
def engine(surface: Surface) -> Iterator[BrushEngine]:
    """Seeded engine bound to the transparent surface."""
    with BrushEngine(surface, seed=42, record_history=True) as eng:
        yield eng


@pytest.fixture
def horizontal() -> tuple[Point, Point]:
    """A horizontal segment across the middle of the 120x120 surface."""
    return (Point(x=30, y=60), Point(x=90, y=60))
