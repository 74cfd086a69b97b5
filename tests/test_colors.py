"""Tests for color helpers."""

import pytest

from museo_brush.colors import (
    DEFAULT_COLORS,
    darken,
    hex_to_rgb,
    hex_to_rgba,
    is_valid_hex,
    lighten,
    mix,
    rgb_to_hex,
    rotate_hue,
)


class TestHexParsing:
    """Tests for hex color validation and parsing."""

    @pytest.mark.parametrize("value", ["#000000", "#FFffFF", "#abc", "#3366ff"])
    def test_valid_hex(self, value: str) -> None:
        assert is_valid_hex(value)

    @pytest.mark.parametrize("value", ["000000", "#12345", "#ggg", "red", "", None, 0xFF0000])
    def test_invalid_hex(self, value: object) -> None:
        assert not is_valid_hex(value)

    def test_hex_to_rgb(self) -> None:
        assert hex_to_rgb("#FF8000") == (255, 128, 0)

    def test_short_hex_expands(self) -> None:
        assert hex_to_rgb("#f80") == (255, 136, 0)

    def test_hex_to_rgb_rejects_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid hex color"):
            hex_to_rgb("blue")

    def test_hex_to_rgba_clamps_opacity(self) -> None:
        assert hex_to_rgba("#000000", 0.5) == (0, 0, 0, 128)
        assert hex_to_rgba("#000000", 2.0)[3] == 255
        assert hex_to_rgba("#000000", -1.0)[3] == 0

    def test_default_palette_is_valid(self) -> None:
        assert len(DEFAULT_COLORS) == 16
        assert all(is_valid_hex(color) for color in DEFAULT_COLORS)


class TestColorMath:
    """Tests for blending and hue rotation."""

    def test_rgb_to_hex_clamps(self) -> None:
        assert rgb_to_hex(300, -5, 16) == "#ff0010"

    def test_mix_endpoints(self) -> None:
        assert mix((0, 0, 0), (255, 255, 255), 0.0) == (0, 0, 0)
        assert mix((0, 0, 0), (255, 255, 255), 1.0) == (255, 255, 255)
        assert mix((0, 0, 0), (200, 100, 50), 0.5) == (100, 50, 25)

    def test_lighten_and_darken(self) -> None:
        assert lighten((0, 0, 0), 1.0) == (255, 255, 255)
        assert darken((255, 255, 255), 1.0) == (0, 0, 0)

    def test_full_turn_keeps_hue(self) -> None:
        assert rotate_hue((255, 0, 0), 1.0) == (255, 0, 0)

    def test_third_turn_moves_red_to_green(self) -> None:
        assert rotate_hue((255, 0, 0), 1 / 3) == (0, 255, 0)

    def test_min_saturation_colors_black(self) -> None:
        rotated = rotate_hue((0, 0, 0), 0.0, min_saturation=0.85)
        assert rotated != (0, 0, 0)
        assert max(rotated) - min(rotated) > 100
