"""Raster drawing surface backed by a Pillow RGBA image."""

import base64
import io
import logging
import uuid
from enum import Enum
from pathlib import Path

from PIL import Image, ImageChops

from museo_brush.colors import RGB, hex_to_rgba
from museo_brush.errors import SurfaceBusyError
from museo_brush.types import clamp_value

logger = logging.getLogger(__name__)

MIN_SURFACE_SIZE = 1
MAX_SURFACE_SIZE = 8192

TRANSPARENT = (0, 0, 0, 0)

Background = str | tuple[int, int, int, int] | None


class CompositeMode(str, Enum):
    """How a coverage mask is applied to the surface."""

    PAINT = "paint"  # Source-over with the brush color
    ERASE = "erase"  # Reduce existing alpha toward transparency


def _parse_background(background: Background) -> tuple[int, int, int, int]:
    if background is None:
        return TRANSPARENT
    if isinstance(background, tuple):
        return background
    return hex_to_rgba(background, 1.0)


def _opacity_table(opacity: float) -> list[int]:
    """Lookup table scaling mask coverage by opacity."""
    return [round(i * opacity) for i in range(256)]


class Surface:
    """A drawing surface with pixel storage and compositing.

    Pixels are never read back by renderers; they paint masks and the surface
    applies them. A surface is bound to at most one engine at a time.
    """

    def __init__(self, image: Image.Image, surface_id: str | None = None) -> None:
        self.image = image if image.mode == "RGBA" else image.convert("RGBA")
        self.surface_id = surface_id or uuid.uuid4().hex[:8]
        self._owner: object | None = None

    @classmethod
    def new(
        cls,
        width: int,
        height: int,
        background: Background = None,
        surface_id: str | None = None,
    ) -> "Surface":
        """Create a surface, clamping dimensions to the supported range.

        ``background=None`` gives a fully transparent surface.
        """
        safe_width = int(clamp_value(width, MIN_SURFACE_SIZE, MAX_SURFACE_SIZE))
        safe_height = int(clamp_value(height, MIN_SURFACE_SIZE, MAX_SURFACE_SIZE))
        if (safe_width, safe_height) != (width, height):
            logger.warning(f"Surface size {width}x{height} clamped to {safe_width}x{safe_height}")
        image = Image.new("RGBA", (safe_width, safe_height), _parse_background(background))
        return cls(image, surface_id=surface_id)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    # =========================================================================
    # Ownership
    # =========================================================================

    @property
    def owner(self) -> object | None:
        return self._owner

    def claim(self, owner: object) -> None:
        """Bind the surface to an engine.

        Raises:
            SurfaceBusyError: If another owner already holds the surface.
        """
        if self._owner is not None and self._owner is not owner:
            raise SurfaceBusyError(f"Surface {self.surface_id} is already bound to another engine")
        self._owner = owner

    def release(self, owner: object) -> None:
        if self._owner is owner:
            self._owner = None

    # =========================================================================
    # Pixel access
    # =========================================================================

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        value = self.image.getpixel((x, y))
        assert isinstance(value, tuple)
        return value  # type: ignore[return-value]

    def alpha_at(self, x: int, y: int) -> int:
        return self.pixel(x, y)[3]

    def painted_bbox(self) -> tuple[int, int, int, int] | None:
        """Bounding box of non-transparent pixels, or None if nothing is painted."""
        return self.image.getchannel("A").getbbox()

    # =========================================================================
    # Whole-surface operations
    # =========================================================================

    def clear(self, background: Background = None) -> None:
        """Fill the whole surface with a background (transparent by default)."""
        self.image.paste(_parse_background(background), (0, 0, self.width, self.height))
        logger.debug(f"Surface {self.surface_id} cleared", extra={"surface_id": self.surface_id})

    def load_image(self, source: str | Path | bytes | Image.Image) -> None:
        """Draw an image over the surface, scaled to fill it.

        Raises:
            OSError: If the source cannot be read or decoded.
        """
        if isinstance(source, Image.Image):
            loaded = source
        elif isinstance(source, bytes):
            loaded = Image.open(io.BytesIO(source))
        else:
            loaded = Image.open(source)
        loaded = loaded.convert("RGBA")
        if loaded.size != self.size:
            loaded = loaded.resize(self.size, Image.Resampling.LANCZOS)
        self.image.alpha_composite(loaded)
        logger.info(
            f"Loaded image onto surface {self.surface_id}",
            extra={"surface_id": self.surface_id},
        )

    def to_png(self, optimize: bool = False) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format="PNG", optimize=optimize)
        return buffer.getvalue()

    def to_base64(self) -> str:
        """PNG encoded as base64."""
        return base64.standard_b64encode(self.to_png()).decode("utf-8")

    def snapshot(self) -> bytes:
        """Capture the current pixels as PNG bytes."""
        return self.to_png()

    def restore(self, data: bytes) -> None:
        """Replace the pixels with a snapshot taken by ``snapshot``.

        Raises:
            OSError: If the snapshot cannot be decoded.
        """
        restored = Image.open(io.BytesIO(data)).convert("RGBA")
        if restored.size != self.size:
            restored = restored.resize(self.size, Image.Resampling.LANCZOS)
        self.image.paste(restored, (0, 0))

    # =========================================================================
    # Compositing
    # =========================================================================

    def composite(
        self,
        mask: Image.Image,
        offset: tuple[int, int],
        *,
        color: RGB,
        opacity: float,
        mode: CompositeMode = CompositeMode.PAINT,
        color_tile: Image.Image | None = None,
    ) -> None:
        """Apply a coverage mask to the surface in a single pass.

        Args:
            mask: "L" image, 255 = full coverage
            offset: Surface position of the mask's top-left corner
            color: Paint color, ignored when ``color_tile`` is given
            opacity: Applied once to the whole mask
            mode: Paint (source-over) or erase
            color_tile: Optional per-pixel RGB colors, same size as ``mask``
        """
        left, top = offset
        right = min(self.width, left + mask.width)
        bottom = min(self.height, top + mask.height)
        clip_left = max(0, left)
        clip_top = max(0, top)
        if right <= clip_left or bottom <= clip_top:
            return

        crop = (clip_left - left, clip_top - top, right - left, bottom - top)
        if crop != (0, 0, mask.width, mask.height):
            mask = mask.crop(crop)
            if color_tile is not None:
                color_tile = color_tile.crop(crop)

        alpha = mask.point(_opacity_table(opacity))

        if mode is CompositeMode.ERASE:
            region = (clip_left, clip_top, right, bottom)
            current = self.image.crop(region)
            remaining = ImageChops.multiply(current.getchannel("A"), ImageChops.invert(alpha))
            current.putalpha(remaining)
            self.image.paste(current, (clip_left, clip_top))
            return

        if color_tile is not None:
            tile = color_tile.convert("RGBA")
        else:
            tile = Image.new("RGBA", alpha.size, (*color, 255))
        tile.putalpha(alpha)
        self.image.alpha_composite(tile, dest=(clip_left, clip_top))
