"""Tests for the raster drawing surface."""

import base64
import io

import pytest
from PIL import Image

from museo_brush.errors import SurfaceBusyError
from museo_brush.surface import MAX_SURFACE_SIZE, CompositeMode, Surface


class TestSurfaceCreation:
    """Tests for Surface.new."""

    def test_transparent_by_default(self) -> None:
        surface = Surface.new(10, 20)
        assert surface.size == (10, 20)
        assert surface.pixel(0, 0) == (0, 0, 0, 0)
        assert surface.painted_bbox() is None

    def test_background(self) -> None:
        surface = Surface.new(4, 4, background="#FFFFFF")
        assert surface.pixel(3, 3) == (255, 255, 255, 255)

    def test_rgba_background(self) -> None:
        surface = Surface.new(4, 4, background=(10, 20, 30, 40))
        assert surface.pixel(0, 0) == (10, 20, 30, 40)

    def test_dimensions_clamped(self, caplog: pytest.LogCaptureFixture) -> None:
        surface = Surface.new(0, MAX_SURFACE_SIZE + 100)
        assert surface.size == (1, MAX_SURFACE_SIZE)
        assert "clamped" in caplog.text

    def test_converts_to_rgba(self) -> None:
        surface = Surface(Image.new("RGB", (5, 5), (1, 2, 3)))
        assert surface.image.mode == "RGBA"
        assert surface.pixel(0, 0) == (1, 2, 3, 255)

    def test_surface_id(self) -> None:
        assert Surface.new(5, 5, surface_id="mural").surface_id == "mural"
        assert len(Surface.new(5, 5).surface_id) == 8


class TestOwnership:
    """Tests for claim/release."""

    def test_claim_twice_by_same_owner(self) -> None:
        surface = Surface.new(5, 5)
        owner = object()
        surface.claim(owner)
        surface.claim(owner)
        assert surface.owner is owner

    def test_claim_by_other_owner(self) -> None:
        surface = Surface.new(5, 5)
        surface.claim(object())
        with pytest.raises(SurfaceBusyError):
            surface.claim(object())

    def test_release_by_non_owner_ignored(self) -> None:
        surface = Surface.new(5, 5)
        owner = object()
        surface.claim(owner)
        surface.release(object())
        assert surface.owner is owner


class TestComposite:
    """Tests for mask compositing."""

    def test_paint(self) -> None:
        surface = Surface.new(10, 10)
        mask = Image.new("L", (4, 4), 255)
        surface.composite(mask, (2, 2), color=(255, 0, 0), opacity=1.0)
        assert surface.pixel(3, 3) == (255, 0, 0, 255)
        assert surface.pixel(0, 0) == (0, 0, 0, 0)
        assert surface.painted_bbox() == (2, 2, 6, 6)

    def test_opacity_scales_alpha(self) -> None:
        surface = Surface.new(10, 10)
        mask = Image.new("L", (4, 4), 255)
        surface.composite(mask, (0, 0), color=(0, 0, 0), opacity=0.25)
        assert surface.alpha_at(1, 1) == round(255 * 0.25)

    def test_clips_negative_offset(self) -> None:
        surface = Surface.new(10, 10)
        mask = Image.new("L", (4, 4), 255)
        surface.composite(mask, (-2, -2), color=(0, 0, 255), opacity=1.0)
        assert surface.painted_bbox() == (0, 0, 2, 2)

    def test_fully_outside_is_ignored(self) -> None:
        surface = Surface.new(10, 10)
        mask = Image.new("L", (4, 4), 255)
        surface.composite(mask, (20, 20), color=(0, 0, 255), opacity=1.0)
        assert surface.painted_bbox() is None

    def test_color_tile(self) -> None:
        surface = Surface.new(10, 10)
        mask = Image.new("L", (2, 2), 255)
        tile = Image.new("RGB", (2, 2), (0, 255, 0))
        surface.composite(mask, (0, 0), color=(255, 0, 0), opacity=1.0, color_tile=tile)
        assert surface.pixel(0, 0) == (0, 255, 0, 255)

    def test_erase(self) -> None:
        surface = Surface.new(10, 10, background="#FFFFFF")
        mask = Image.new("L", (4, 4), 255)
        surface.composite(mask, (0, 0), color=(0, 0, 0), opacity=1.0, mode=CompositeMode.ERASE)
        assert surface.alpha_at(0, 0) == 0
        assert surface.alpha_at(5, 5) == 255


class TestImageIO:
    """Tests for clear, load, export and snapshots."""

    def test_clear(self) -> None:
        surface = Surface.new(4, 4, background="#000000")
        surface.clear()
        assert surface.painted_bbox() is None
        surface.clear("#FF0000")
        assert surface.pixel(2, 2) == (255, 0, 0, 255)

    def test_load_image_scales_to_fit(self) -> None:
        surface = Surface.new(20, 20)
        surface.load_image(Image.new("RGB", (10, 10), (0, 0, 255)))
        assert surface.pixel(10, 10) == (0, 0, 255, 255)

    def test_load_image_from_bytes(self) -> None:
        buffer = io.BytesIO()
        Image.new("RGBA", (4, 4), (9, 9, 9, 255)).save(buffer, format="PNG")
        surface = Surface.new(4, 4)
        surface.load_image(buffer.getvalue())
        assert surface.pixel(0, 0) == (9, 9, 9, 255)

    def test_load_image_invalid_bytes(self) -> None:
        surface = Surface.new(4, 4)
        with pytest.raises(OSError):
            surface.load_image(b"not an image")

    def test_to_png_and_base64(self) -> None:
        surface = Surface.new(4, 4, background="#FFFFFF")
        png = surface.to_png()
        assert png.startswith(b"\x89PNG")
        assert base64.standard_b64decode(surface.to_base64()) == png

    def test_snapshot_restore(self) -> None:
        surface = Surface.new(4, 4, background="#FFFFFF")
        snapshot = surface.snapshot()
        surface.clear("#000000")
        surface.restore(snapshot)
        assert surface.pixel(1, 1) == (255, 255, 255, 255)
