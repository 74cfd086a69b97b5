"""Color parsing and manipulation helpers.

Colors travel through the engine as hex strings (``#rgb`` or ``#rrggbb``) and
are converted to RGB tuples only at composite time.
"""

import colorsys
import re
from functools import lru_cache
from typing import Any

HEX_COLOR_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")

RGB = tuple[int, int, int]

# Default palette offered by the mural editor
DEFAULT_COLORS = [
    "#000000",
    "#FFFFFF",
    "#FF0000",
    "#00FF00",
    "#0000FF",
    "#FFFF00",
    "#FF00FF",
    "#00FFFF",
    "#FFA500",
    "#800080",
    "#FFC0CB",
    "#A52A2A",
    "#808080",
    "#000080",
    "#008000",
    "#800000",
]


def is_valid_hex(value: Any) -> bool:
    """Check whether a value is a ``#rgb`` or ``#rrggbb`` hex color string."""
    return isinstance(value, str) and HEX_COLOR_RE.match(value) is not None


@lru_cache(maxsize=256)
def hex_to_rgb(hex_color: str) -> RGB:
    """Convert a hex color to an RGB tuple.

    Raises:
        ValueError: If the string is not a valid hex color.
    """
    if not is_valid_hex(hex_color):
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    digits = hex_color[1:]
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def hex_to_rgba(hex_color: str, opacity: float = 1.0) -> tuple[int, int, int, int]:
    """Convert hex color and opacity to RGBA tuple."""
    r, g, b = hex_to_rgb(hex_color)
    alpha = max(0.0, min(1.0, opacity))
    return (r, g, b, round(alpha * 255))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB components (clamped to 0-255) to a ``#rrggbb`` string."""
    return "#" + "".join(f"{max(0, min(255, int(c))):02x}" for c in (r, g, b))


def mix(a: RGB, b: RGB, t: float) -> RGB:
    """Linear blend from ``a`` (t=0) to ``b`` (t=1)."""
    t = max(0.0, min(1.0, t))
    return (
        round(a[0] + (b[0] - a[0]) * t),
        round(a[1] + (b[1] - a[1]) * t),
        round(a[2] + (b[2] - a[2]) * t),
    )


def lighten(rgb: RGB, amount: float) -> RGB:
    return mix(rgb, (255, 255, 255), amount)


def darken(rgb: RGB, amount: float) -> RGB:
    return mix(rgb, (0, 0, 0), amount)


def rotate_hue(rgb: RGB, turns: float, *, min_saturation: float = 0.0) -> RGB:
    """Rotate the hue of a color by a fraction of the color wheel.

    ``min_saturation`` lifts greys so a rotation is actually visible; black and
    white brushes would otherwise never change color.
    """
    h, lightness, s = colorsys.rgb_to_hls(rgb[0] / 255, rgb[1] / 255, rgb[2] / 255)
    if s < min_saturation:
        s = min_saturation
        lightness = min(max(lightness, 0.35), 0.65)
    r, g, b = colorsys.hls_to_rgb((h + turns) % 1.0, lightness, s)
    return (round(r * 255), round(g * 255), round(b * 255))
