"""Brush renderers and the kind -> renderer registry.

Each renderer family implements one drawing technique; brush kinds are
presets that bind a family to parameters. Adding a kind only needs a
``register`` call (or a new preset).
"""

import logging
from collections.abc import Iterable

from museo_brush.errors import ConfigurationError
from museo_brush.renderers.base import BrushRenderer, StrokeContext, StrokeLayer
from museo_brush.renderers.calligraphy import CalligraphyBrush
from museo_brush.renderers.particles import STAMP_SHAPES, SprayBrush, StampBrush
from museo_brush.renderers.pattern import MirrorBrush, PixelBrush
from museo_brush.renderers.round import ColorCycleBrush, EraserBrush, RoundBrush
from museo_brush.renderers.soft import FireBrush, GlowBrush, SoftBrush, WatercolorBrush
from museo_brush.renderers.texture import BristleBrush, CharcoalBrush, StrandBrush
from museo_brush.types import BRUSH_PRESETS, BrushPreset, resolve_kind

logger = logging.getLogger(__name__)

RENDERER_FAMILIES: dict[str, type[BrushRenderer]] = {
    cls.family: cls
    for cls in (
        RoundBrush,
        EraserBrush,
        ColorCycleBrush,
        SoftBrush,
        WatercolorBrush,
        GlowBrush,
        FireBrush,
        CharcoalBrush,
        BristleBrush,
        StrandBrush,
        SprayBrush,
        StampBrush,
        PixelBrush,
        MirrorBrush,
        CalligraphyBrush,
    )
}


class RendererRegistry:
    """Maps brush kinds to renderer instances."""

    def __init__(self, presets: Iterable[BrushPreset] = ()) -> None:
        self._renderers: dict[str, BrushRenderer] = {}
        self._presets: dict[str, BrushPreset] = {}
        for preset in presets:
            self.register_preset(preset)

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, str) and resolve_kind(kind) in self._renderers

    def __len__(self) -> int:
        return len(self._renderers)

    def kinds(self) -> list[str]:
        return list(self._renderers)

    def register(self, kind: str, renderer: BrushRenderer) -> None:
        """Register (or replace) the renderer for a kind."""
        kind = resolve_kind(kind)
        if kind in self._renderers:
            logger.info(f"Replacing renderer for brush '{kind}'")
        self._renderers[kind] = renderer

    def register_preset(self, preset: BrushPreset) -> BrushRenderer:
        """Instantiate the preset's renderer family and register it."""
        family = RENDERER_FAMILIES.get(preset.renderer)
        if family is None:
            raise ConfigurationError(
                f"Brush '{preset.kind}' uses unknown renderer family '{preset.renderer}'"
            )
        renderer = family(preset.kind, preset.params)
        self.register(preset.kind, renderer)
        self._presets[resolve_kind(preset.kind)] = preset
        return renderer

    def get(self, kind: str) -> BrushRenderer:
        """Renderer for a kind.

        Raises:
            ConfigurationError: If no renderer is registered for the kind.
        """
        renderer = self._renderers.get(resolve_kind(kind))
        if renderer is None:
            raise ConfigurationError(f"Unknown brush kind: {kind!r}")
        return renderer

    def preset(self, kind: str) -> BrushPreset | None:
        return self._presets.get(resolve_kind(kind))


def build_default_registry() -> RendererRegistry:
    """Registry with every built-in preset."""
    return RendererRegistry(BRUSH_PRESETS.values())


# Shared by engines that do not bring their own; renderers keep no stroke state
default_registry = build_default_registry()

__all__ = [
    "RENDERER_FAMILIES",
    "STAMP_SHAPES",
    "BrushRenderer",
    "RendererRegistry",
    "StrokeContext",
    "StrokeLayer",
    "build_default_registry",
    "default_registry",
]
