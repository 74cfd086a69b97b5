"""Brush kinds, presets and the live brush configuration."""

import logging
import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from museo_brush.colors import is_valid_hex
from museo_brush.errors import ConfigurationError
from museo_brush.types.geometry import clamp_value

logger = logging.getLogger(__name__)

MIN_BRUSH_SIZE = 1.0
MAX_BRUSH_SIZE = 200.0
DEFAULT_COLOR = "#000000"

ParamValue = float | str


class BrushKind(str, Enum):
    """Built-in brush kinds.

    The roster is open: any kind registered with a renderer registry can be
    drawn, these are just the ones shipped with the engine.
    """

    # Basic
    BRUSH = "brush"
    BRUSH_SOFT = "brush-soft"
    ERASER = "eraser"

    # Artistic
    CHARCOAL = "charcoal"
    WATERCOLOR = "watercolor"
    CHALK = "chalk"
    MARKER = "marker"
    OIL = "oil"
    CALLIGRAPHY = "calligraphy"
    INK = "ink"

    # Effects
    GLOW = "glow"
    NEON = "neon"
    FIRE = "fire"
    LIGHTNING = "lightning"
    ELECTRIC = "electric"
    PLASMA = "plasma"
    MAGIC = "magic"
    GALAXY = "galaxy"

    # Patterns
    PIXEL = "pixel"
    DOTS = "dots"
    LINES = "lines"
    GEOMETRIC = "geometric"
    MOSAIC = "mosaic"

    # Stamps
    STARS = "stars"
    HEARTS = "hearts"
    FLOWERS = "flowers"
    BUBBLES = "bubbles"
    MANDALA = "mandala"
    KALEIDOSCOPE = "kaleidoscope"
    CRYSTAL = "crystal"
    FRACTAL = "fractal"

    # Nature
    LEAVES = "leaves"
    RAIN = "rain"
    SNOW = "snow"
    GRASS = "grass"
    WATER = "water"
    CLOUD = "cloud"

    # Textures
    SPLATTER = "splatter"
    SPRAY = "spray"
    TEXTURED = "textured"
    FABRIC = "fabric"
    WOOD = "wood"
    METAL = "metal"
    STONE = "stone"
    SAND = "sand"
    GLASS = "glass"
    SMOKE = "smoke"
    FUR = "fur"

    # Styles
    IMPRESSIONIST = "impressionist"
    POINTILLIST = "pointillist"
    ABSTRACT = "abstract"
    SURREAL = "surreal"
    MINIMALIST = "minimalist"
    VINTAGE = "vintage"
    GRUNGE = "grunge"
    DIGITAL = "digital"
    TRIBAL = "tribal"
    CELTIC = "celtic"
    ORGANIC = "organic"
    RAINBOW = "rainbow"
    GRADIENT = "gradient"
    SKETCH = "sketch"


# Spanish type names used by the mural editor toolbar
KIND_ALIASES: dict[str, str] = {
    "carboncillo": BrushKind.CHARCOAL.value,
    "acuarela": BrushKind.WATERCOLOR.value,
    "tiza": BrushKind.CHALK.value,
    "marcador": BrushKind.MARKER.value,
    "oleo": BrushKind.OIL.value,
    "fuego": BrushKind.FIRE.value,
    "puntos": BrushKind.DOTS.value,
    "lineas": BrushKind.LINES.value,
}


def resolve_kind(name: str) -> str:
    """Normalize a brush kind name, resolving toolbar aliases."""
    kind = name.strip().lower()
    return KIND_ALIASES.get(kind, kind)


class BrushCategory(str, Enum):
    """Toolbar grouping for brushes."""

    BASIC = "basic"
    ARTISTIC = "artistic"
    EFFECTS = "effects"
    PATTERNS = "patterns"
    STAMP = "stamp"
    NATURE = "nature"
    TEXTURE = "texture"
    STYLES = "styles"


class BrushPreset(BaseModel):
    """Preset binding a brush kind to a renderer family and its parameters."""

    kind: str  # Unique identifier (e.g., "watercolor")
    display_name: str  # Human-readable name shown in the toolbar
    description: str
    category: BrushCategory
    renderer: str  # Renderer family (e.g., "soft", "spray")
    params: dict[str, ParamValue] = {}

    # False for brushes that scatter marks around the path (spray, stamps,
    # strands) rather than painting a continuous band over it
    continuous: bool = True


# ============================================================================
# BRUSH PRESETS
# ============================================================================

_PRESETS: list[BrushPreset] = [
    # Basic
    BrushPreset(
        kind=BrushKind.BRUSH.value,
        display_name="Pincel",
        description="Round hard brush. Solid color with round caps.",
        category=BrushCategory.BASIC,
        renderer="round",
    ),
    BrushPreset(
        kind=BrushKind.BRUSH_SOFT.value,
        display_name="Pincel Suave",
        description="Round brush with a soft feathered edge.",
        category=BrushCategory.BASIC,
        renderer="soft",
        params={"hardness": 0.5},
    ),
    BrushPreset(
        kind=BrushKind.ERASER.value,
        display_name="Borrador",
        description="Erases to transparency with the round brush footprint.",
        category=BrushCategory.BASIC,
        renderer="eraser",
    ),
    # Artistic
    BrushPreset(
        kind=BrushKind.CHARCOAL.value,
        display_name="Carboncillo",
        description="Soft charcoal. Layered offset strokes with granular texture.",
        category=BrushCategory.ARTISTIC,
        renderer="charcoal",
        params={"grain": 0.3, "layers": 5, "spread": 1.2},
    ),
    BrushPreset(
        kind=BrushKind.WATERCOLOR.value,
        display_name="Acuarela",
        description="Wet watercolor. Pigment core with bleeding translucent rings.",
        category=BrushCategory.ARTISTIC,
        renderer="watercolor",
        params={"rings": 4, "bleed": 0.5, "edge_noise": 0.15},
    ),
    BrushPreset(
        kind=BrushKind.CHALK.value,
        display_name="Tiza",
        description="Dusty chalk. Narrow core with heavy grain.",
        category=BrushCategory.ARTISTIC,
        renderer="charcoal",
        params={"grain": 0.6, "layers": 2, "spread": 0.9, "core": 0.8},
    ),
    BrushPreset(
        kind=BrushKind.MARKER.value,
        display_name="Marcador",
        description="Flat marker with square ends.",
        category=BrushCategory.ARTISTIC,
        renderer="round",
        params={"cap": "square"},
    ),
    BrushPreset(
        kind=BrushKind.OIL.value,
        display_name="Óleo",
        description="Oil brush. Main stroke with visible bristle marks.",
        category=BrushCategory.ARTISTIC,
        renderer="bristle",
        params={"bristle_count": 5, "spread": 0.7, "bristle_width": 0.35, "main_width": 0.75},
    ),
    BrushPreset(
        kind=BrushKind.CALLIGRAPHY.value,
        display_name="Caligrafía",
        description="Angled flat nib. Width follows stroke direction.",
        category=BrushCategory.ARTISTIC,
        renderer="calligraphy",
        params={"angle": 45.0, "nib_ratio": 0.2},
    ),
    BrushPreset(
        kind=BrushKind.INK.value,
        display_name="Tinta",
        description="Ink brush. Thins out on fast strokes, swells on slow ones.",
        category=BrushCategory.ARTISTIC,
        renderer="round",
        params={"pressure_response": 0.8},
    ),
    # Effects
    BrushPreset(
        kind=BrushKind.GLOW.value,
        display_name="Resplandor",
        description="Bright core surrounded by a soft halo.",
        category=BrushCategory.EFFECTS,
        renderer="glow",
        params={"halo": 1.2, "core": 0.5, "halo_strength": 0.6},
    ),
    BrushPreset(
        kind=BrushKind.NEON.value,
        display_name="Neón",
        description="Thin near-white tube with a saturated halo.",
        category=BrushCategory.EFFECTS,
        renderer="glow",
        params={"halo": 0.8, "core": 0.35, "halo_strength": 0.8, "core_tint": 0.75},
    ),
    BrushPreset(
        kind=BrushKind.FIRE.value,
        display_name="Fuego",
        description="Flame gradient from hot yellow core to red edges.",
        category=BrushCategory.EFFECTS,
        renderer="fire",
        params={"halo": 1.0, "core": 0.45, "halo_strength": 0.7},
    ),
    BrushPreset(
        kind=BrushKind.LIGHTNING.value,
        display_name="Rayo",
        description="Jagged bolt with a bright core.",
        category=BrushCategory.EFFECTS,
        renderer="glow",
        params={"jagged": 0.6, "core": 0.2, "halo": 1.0, "core_tint": 0.8},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.ELECTRIC.value,
        display_name="Eléctrico",
        description="Crackling line with small zigzags.",
        category=BrushCategory.EFFECTS,
        renderer="glow",
        params={"jagged": 0.3, "core": 0.25, "halo": 0.7, "core_tint": 0.5},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.PLASMA.value,
        display_name="Plasma",
        description="Wide diffuse glow.",
        category=BrushCategory.EFFECTS,
        renderer="glow",
        params={"halo": 1.8, "core": 0.6, "halo_strength": 0.5},
    ),
    BrushPreset(
        kind=BrushKind.MAGIC.value,
        display_name="Mágico",
        description="Glowing trail scattered with sparkles.",
        category=BrushCategory.EFFECTS,
        renderer="glow",
        params={"halo": 1.4, "core": 0.3, "sparkle": 0.5, "core_tint": 0.4},
    ),
    BrushPreset(
        kind=BrushKind.GALAXY.value,
        display_name="Galaxia",
        description="Dense field of tiny star particles.",
        category=BrushCategory.EFFECTS,
        renderer="spray",
        params={"density": 1.6, "particle": 0.08, "spread": 1.4},
        continuous=False,
    ),
    # Patterns
    BrushPreset(
        kind=BrushKind.PIXEL.value,
        display_name="Pixel",
        description="Snaps paint to a coarse pixel grid.",
        category=BrushCategory.PATTERNS,
        renderer="pixel",
        params={"cell": 0.17},
    ),
    BrushPreset(
        kind=BrushKind.DOTS.value,
        display_name="Puntos",
        description="Evenly spaced round dots.",
        category=BrushCategory.PATTERNS,
        renderer="stamp",
        params={"shape": "circle", "spacing": 1.6, "scale": 0.5},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.LINES.value,
        display_name="Líneas",
        description="Three thin parallel lines.",
        category=BrushCategory.PATTERNS,
        renderer="bristle",
        params={"bristle_count": 3, "spread": 1.0, "bristle_width": 0.15, "main_width": 0.0},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.GEOMETRIC.value,
        display_name="Geométrico",
        description="Chain of triangles along the stroke.",
        category=BrushCategory.PATTERNS,
        renderer="stamp",
        params={"shape": "triangle", "spacing": 1.3, "scale": 0.5, "orient": 1.0},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.MOSAIC.value,
        display_name="Mosaico",
        description="Grid tiles separated by grout lines.",
        category=BrushCategory.PATTERNS,
        renderer="pixel",
        params={"cell": 0.33, "gap": 0.2},
        continuous=False,
    ),
    # Stamps
    BrushPreset(
        kind=BrushKind.STARS.value,
        display_name="Estrellas",
        description="Five-pointed stars with random rotation.",
        category=BrushCategory.STAMP,
        renderer="stamp",
        params={
            "shape": "star",
            "spacing": 1.8,
            "scale": 0.6,
            "rotation_jitter": 1.0,
            "scale_jitter": 0.3,
        },
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.HEARTS.value,
        display_name="Corazones",
        description="Heart stamps.",
        category=BrushCategory.STAMP,
        renderer="stamp",
        params={"shape": "heart", "spacing": 1.8, "scale": 0.6, "scale_jitter": 0.2},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.FLOWERS.value,
        display_name="Flores",
        description="Five-petal flowers.",
        category=BrushCategory.STAMP,
        renderer="stamp",
        params={"shape": "flower", "spacing": 2.0, "scale": 0.7, "rotation_jitter": 1.0},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.BUBBLES.value,
        display_name="Burbujas",
        description="Hollow rings of varying size.",
        category=BrushCategory.STAMP,
        renderer="stamp",
        params={"shape": "ring", "spacing": 1.5, "scale": 0.6, "scale_jitter": 0.5, "scatter": 0.5},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.MANDALA.value,
        display_name="Mandala",
        description="Eightfold rotational symmetry around the canvas center.",
        category=BrushCategory.STAMP,
        renderer="mirror",
        params={"symmetry": 8, "reflect": 0.0},
    ),
    BrushPreset(
        kind=BrushKind.KALEIDOSCOPE.value,
        display_name="Caleidoscopio",
        description="Sixfold mirrored symmetry around the canvas center.",
        category=BrushCategory.STAMP,
        renderer="mirror",
        params={"symmetry": 6, "reflect": 1.0},
    ),
    BrushPreset(
        kind=BrushKind.CRYSTAL.value,
        display_name="Cristal",
        description="Faceted diamond stamps.",
        category=BrushCategory.STAMP,
        renderer="stamp",
        params={"shape": "diamond", "spacing": 1.2, "scale": 0.55, "rotation_jitter": 0.3},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.FRACTAL.value,
        display_name="Fractal",
        description="Six-point sparks at wildly varying scales.",
        category=BrushCategory.STAMP,
        renderer="stamp",
        params={
            "shape": "spark",
            "spacing": 1.4,
            "scale": 0.6,
            "scale_jitter": 0.8,
            "rotation_jitter": 1.0,
        },
        continuous=False,
    ),
    # Nature
    BrushPreset(
        kind=BrushKind.LEAVES.value,
        display_name="Hojas",
        description="Leaves oriented along the stroke direction.",
        category=BrushCategory.NATURE,
        renderer="stamp",
        params={
            "shape": "leaf",
            "spacing": 1.6,
            "scale": 0.7,
            "orient": 1.0,
            "rotation_jitter": 0.25,
        },
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.RAIN.value,
        display_name="Lluvia",
        description="Slanted falling streaks.",
        category=BrushCategory.NATURE,
        renderer="strand",
        params={"angle": 100.0, "length": 1.2, "count": 2},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.SNOW.value,
        display_name="Nieve",
        description="Sparse soft flakes.",
        category=BrushCategory.NATURE,
        renderer="spray",
        params={"density": 0.25, "particle": 0.12, "spread": 1.5},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.GRASS.value,
        display_name="Pasto",
        description="Upright blades growing from the stroke.",
        category=BrushCategory.NATURE,
        renderer="strand",
        params={"angle": -90.0, "length": 1.5, "count": 3},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.WATER.value,
        display_name="Agua",
        description="Very wet wash with wide bleeding.",
        category=BrushCategory.NATURE,
        renderer="watercolor",
        params={"rings": 3, "bleed": 0.8, "edge_noise": 0.05},
    ),
    BrushPreset(
        kind=BrushKind.CLOUD.value,
        display_name="Nube",
        description="Large, very soft puffs.",
        category=BrushCategory.NATURE,
        renderer="soft",
        params={"hardness": 0.15, "scale": 1.6},
    ),
    # Textures
    BrushPreset(
        kind=BrushKind.SPLATTER.value,
        display_name="Salpicadura",
        description="Large random droplets thrown around the stroke.",
        category=BrushCategory.TEXTURE,
        renderer="spray",
        params={"density": 0.35, "particle": 0.18, "spread": 2.0, "size_jitter": 0.8},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.SPRAY.value,
        display_name="Aerosol",
        description="Fine airbrush spray.",
        category=BrushCategory.TEXTURE,
        renderer="spray",
        params={"density": 1.0, "particle": 0.05, "spread": 1.0},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.TEXTURED.value,
        display_name="Texturado",
        description="Rough paper texture.",
        category=BrushCategory.TEXTURE,
        renderer="charcoal",
        params={"grain": 0.5, "layers": 3, "spread": 1.0},
    ),
    BrushPreset(
        kind=BrushKind.FABRIC.value,
        display_name="Tela",
        description="Woven threads under a light base stroke.",
        category=BrushCategory.TEXTURE,
        renderer="bristle",
        params={"bristle_count": 6, "spread": 0.9, "bristle_width": 0.2, "main_width": 0.4},
    ),
    BrushPreset(
        kind=BrushKind.WOOD.value,
        display_name="Madera",
        description="Fine parallel grain lines.",
        category=BrushCategory.TEXTURE,
        renderer="bristle",
        params={
            "bristle_count": 7,
            "spread": 1.0,
            "bristle_width": 0.1,
            "main_width": 0.5,
            "jitter": 0.05,
        },
    ),
    BrushPreset(
        kind=BrushKind.METAL.value,
        display_name="Metal",
        description="Solid stroke with a bright specular center.",
        category=BrushCategory.TEXTURE,
        renderer="glow",
        params={"halo": 0.4, "core": 0.8, "halo_strength": 0.4, "core_tint": 0.5},
    ),
    BrushPreset(
        kind=BrushKind.STONE.value,
        display_name="Piedra",
        description="Coarse grit over a solid core.",
        category=BrushCategory.TEXTURE,
        renderer="charcoal",
        params={"grain": 0.8, "layers": 3, "spread": 1.4},
    ),
    BrushPreset(
        kind=BrushKind.SAND.value,
        display_name="Arena",
        description="Dense fine grains.",
        category=BrushCategory.TEXTURE,
        renderer="spray",
        params={"density": 2.0, "particle": 0.03, "spread": 1.0},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.GLASS.value,
        display_name="Vidrio",
        description="Mostly hard brush with a thin soft rim.",
        category=BrushCategory.TEXTURE,
        renderer="soft",
        params={"hardness": 0.8},
    ),
    BrushPreset(
        kind=BrushKind.SMOKE.value,
        display_name="Humo",
        description="Wispy, almost edgeless haze.",
        category=BrushCategory.TEXTURE,
        renderer="soft",
        params={"hardness": 0.05, "scale": 1.4},
    ),
    BrushPreset(
        kind=BrushKind.FUR.value,
        display_name="Pelaje",
        description="Short hairs sprouting across the stroke.",
        category=BrushCategory.TEXTURE,
        renderer="strand",
        params={"angle": "normal", "length": 0.9, "count": 4},
        continuous=False,
    ),
    # Styles
    BrushPreset(
        kind=BrushKind.IMPRESSIONIST.value,
        display_name="Impresionista",
        description="Short oriented dabs with loose placement.",
        category=BrushCategory.STYLES,
        renderer="stamp",
        params={"shape": "dab", "spacing": 1.0, "scale": 0.6, "scatter": 0.4, "orient": 1.0},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.POINTILLIST.value,
        display_name="Puntillista",
        description="Coarse separate points.",
        category=BrushCategory.STYLES,
        renderer="spray",
        params={"density": 0.2, "particle": 0.2, "spread": 0.9},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.ABSTRACT.value,
        display_name="Abstracto",
        description="Broad soft brush.",
        category=BrushCategory.STYLES,
        renderer="soft",
        params={"hardness": 0.6, "scale": 1.2},
    ),
    BrushPreset(
        kind=BrushKind.SURREAL.value,
        display_name="Surrealista",
        description="Dreamy wide haze around a thin core.",
        category=BrushCategory.STYLES,
        renderer="soft",
        params={"hardness": 0.3, "scale": 1.3},
    ),
    BrushPreset(
        kind=BrushKind.MINIMALIST.value,
        display_name="Minimalista",
        description="Thin clean line.",
        category=BrushCategory.STYLES,
        renderer="round",
        params={"width_scale": 0.4},
    ),
    BrushPreset(
        kind=BrushKind.VINTAGE.value,
        display_name="Vintage",
        description="Faded textured stroke.",
        category=BrushCategory.STYLES,
        renderer="charcoal",
        params={"grain": 0.2, "layers": 4, "spread": 1.0},
    ),
    BrushPreset(
        kind=BrushKind.GRUNGE.value,
        display_name="Grunge",
        description="Dirty stroke with heavy scattered grit.",
        category=BrushCategory.STYLES,
        renderer="charcoal",
        params={"grain": 1.0, "layers": 5, "spread": 1.6},
    ),
    BrushPreset(
        kind=BrushKind.DIGITAL.value,
        display_name="Digital",
        description="Fine pixel grid.",
        category=BrushCategory.STYLES,
        renderer="pixel",
        params={"cell": 0.25},
    ),
    BrushPreset(
        kind=BrushKind.TRIBAL.value,
        display_name="Tribal",
        description="Bold angled nib.",
        category=BrushCategory.STYLES,
        renderer="calligraphy",
        params={"angle": -30.0, "nib_ratio": 0.3},
    ),
    BrushPreset(
        kind=BrushKind.CELTIC.value,
        display_name="Celta",
        description="Twin parallel bands.",
        category=BrushCategory.STYLES,
        renderer="bristle",
        params={"bristle_count": 2, "spread": 0.6, "bristle_width": 0.25, "main_width": 0.0},
        continuous=False,
    ),
    BrushPreset(
        kind=BrushKind.ORGANIC.value,
        display_name="Orgánico",
        description="Medium soft brush.",
        category=BrushCategory.STYLES,
        renderer="soft",
        params={"hardness": 0.4},
    ),
    BrushPreset(
        kind=BrushKind.RAINBOW.value,
        display_name="Arcoíris",
        description="Hue cycles along the stroke.",
        category=BrushCategory.STYLES,
        renderer="color_cycle",
        params={"mode": "rainbow", "period": 200.0},
    ),
    BrushPreset(
        kind=BrushKind.GRADIENT.value,
        display_name="Degradado",
        description="Fades between the brush color and a second color.",
        category=BrushCategory.STYLES,
        renderer="color_cycle",
        params={"mode": "gradient", "period": 300.0, "secondary_color": "#ffffff"},
    ),
    BrushPreset(
        kind=BrushKind.SKETCH.value,
        display_name="Boceto",
        description="Loose pencil strands.",
        category=BrushCategory.STYLES,
        renderer="bristle",
        params={
            "bristle_count": 4,
            "spread": 0.6,
            "bristle_width": 0.12,
            "main_width": 0.0,
            "jitter": 0.35,
        },
        continuous=False,
    ),
]

# Registry of all brush presets
BRUSH_PRESETS: dict[str, BrushPreset] = {preset.kind: preset for preset in _PRESETS}

DEFAULT_BRUSH = BrushKind.BRUSH.value


def get_brush_preset(name: str) -> BrushPreset | None:
    """Get a brush preset by kind or toolbar alias."""
    return BRUSH_PRESETS.get(resolve_kind(name))


# ============================================================================
# BRUSH CONFIGURATION
# ============================================================================


def _as_number(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be numeric, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be numeric, got {value!r}") from None
    if math.isnan(number):
        raise ValueError(f"{field} must be numeric, got NaN")
    return number


class BrushConfig(BaseModel):
    """Active brush configuration.

    Replaced wholesale on every change. Out-of-range size and opacity are
    clamped rather than rejected so live slider drags never fail; only values
    that cannot be clamped (non-numeric, NaN) are invalid. Keys that are not
    fields are collected into ``params``.
    """

    model_config = ConfigDict(frozen=True)

    type: str = DEFAULT_BRUSH
    color: str = DEFAULT_COLOR
    size: float = 15.0
    opacity: float = 1.0
    params: dict[str, ParamValue] = {}

    @model_validator(mode="before")
    @classmethod
    def _collect_params(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        extras = {key: value for key, value in data.items() if key not in cls.model_fields}
        if not extras:
            return data
        known = {key: value for key, value in data.items() if key in cls.model_fields}
        known["params"] = {**dict(known.get("params") or {}), **extras}
        return known

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> str:
        if isinstance(value, BrushKind):
            return value.value
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"brush type must be a non-empty string, got {value!r}")
        return resolve_kind(value)

    @field_validator("color", mode="before")
    @classmethod
    def _validate_color(cls, value: Any) -> str:
        if not is_valid_hex(value):
            logger.warning(f"Invalid color: {value!r}, using default {DEFAULT_COLOR}")
            return DEFAULT_COLOR
        return str(value)

    @field_validator("size", mode="before")
    @classmethod
    def _clamp_size(cls, value: Any) -> float:
        return clamp_value(_as_number(value, "size"), MIN_BRUSH_SIZE, MAX_BRUSH_SIZE)

    @field_validator("opacity", mode="before")
    @classmethod
    def _clamp_opacity(cls, value: Any) -> float:
        return clamp_value(_as_number(value, "opacity"), 0.0, 1.0)


def parse_brush_config(data: BrushConfig | Mapping[str, Any]) -> BrushConfig:
    """Validate configuration data, raising ConfigurationError on failure."""
    if isinstance(data, BrushConfig):
        return data
    try:
        return BrushConfig.model_validate(dict(data))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid brush configuration: {e}") from e
