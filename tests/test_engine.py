"""Tests for the brush engine stroke session."""

from __future__ import annotations

import math
import threading

import pytest

from museo_brush.engine import BrushEngine
from museo_brush.errors import (
    BrushEngineError,
    ConfigurationError,
    SurfaceBusyError,
    ThreadAffinityError,
)
from museo_brush.renderers import (
    BrushRenderer,
    StrokeContext,
    StrokeLayer,
    build_default_registry,
)
from museo_brush.surface import Surface
from museo_brush.types import BRUSH_PRESETS, BrushConfig, Point, StrokeState


class _ExplodingBrush(BrushRenderer):
    family = "exploding"

    def paint_dot(
        self, layer: StrokeLayer, point: Point, config: BrushConfig, context: StrokeContext
    ) -> None:
        raise RuntimeError("boom")

    def paint_segment(
        self,
        layer: StrokeLayer,
        start: Point,
        end: Point,
        config: BrushConfig,
        context: StrokeContext,
    ) -> None:
        raise RuntimeError("boom")


class TestStrokeStateMachine:
    """Idle/Active transitions driven by draw and end_stroke."""

    def test_starts_idle(self, engine: BrushEngine) -> None:
        assert engine.state is StrokeState.IDLE
        assert not engine.is_drawing
        assert engine.last_point is None

    def test_first_draw_starts_stroke(self, engine: BrushEngine) -> None:
        assert engine.draw(Point(x=50, y=50))
        assert engine.state is StrokeState.ACTIVE
        assert engine.last_point == Point(x=50, y=50)

    def test_first_draw_paints_dot(self, engine: BrushEngine, surface: Surface) -> None:
        engine.draw(Point(x=50, y=50))
        assert surface.alpha_at(50, 50) == 255

    @pytest.mark.parametrize("size", [10, 40])
    def test_dot_diameter_follows_size(
        self, engine: BrushEngine, surface: Surface, size: float
    ) -> None:
        engine.configure({"size": size})
        engine.draw(Point(x=60, y=60))
        bbox = surface.painted_bbox()
        assert bbox is not None
        assert abs((bbox[2] - bbox[0]) - size) <= 2
        assert abs((bbox[3] - bbox[1]) - size) <= 2

    @pytest.mark.parametrize("kind", sorted(k for k in BRUSH_PRESETS if k != "eraser"))
    def test_identical_points_paint_dot(
        self, engine: BrushEngine, surface: Surface, kind: str
    ) -> None:
        engine.configure({"type": kind, "size": 20})
        point = Point(x=60, y=60)
        assert engine.draw(point, point)
        assert engine.is_drawing
        assert surface.painted_bbox() is not None

    def test_identical_points_erase(self, white_surface: Surface) -> None:
        with BrushEngine(white_surface) as engine:
            engine.configure({"type": "eraser", "size": 20})
            point = Point(x=100, y=100)
            assert engine.draw(point, point)
        assert white_surface.alpha_at(100, 100) == 0

    def test_continue_stroke(self, engine: BrushEngine) -> None:
        engine.draw(Point(x=10, y=10))
        assert engine.draw(Point(x=40, y=10), Point(x=10, y=10))
        assert engine.state is StrokeState.ACTIVE
        assert engine.last_point == Point(x=40, y=10)

    def test_end_stroke_returns_to_idle(self, engine: BrushEngine) -> None:
        engine.draw(Point(x=10, y=10))
        engine.end_stroke()
        assert engine.state is StrokeState.IDLE
        assert engine.last_point is None

    def test_end_stroke_idempotent(self, engine: BrushEngine) -> None:
        engine.end_stroke()
        engine.draw(Point(x=10, y=10))
        engine.end_stroke()
        engine.end_stroke()
        assert engine.state is StrokeState.IDLE

    def test_draw_with_last_point_while_idle_starts_stroke(
        self, engine: BrushEngine, surface: Surface
    ) -> None:
        assert engine.draw(Point(x=60, y=20), Point(x=20, y=20))
        assert engine.state is StrokeState.ACTIVE
        assert surface.alpha_at(40, 20) == 255

    def test_new_dot_while_active_starts_new_stroke(self, engine: BrushEngine) -> None:
        engine.draw(Point(x=10, y=10))
        engine.draw(Point(x=20, y=10), Point(x=10, y=10))
        engine.draw(Point(x=80, y=80))
        ids = [record.stroke_id for record in engine.history]
        assert ids == [1, 2]
        assert engine.state is StrokeState.ACTIVE

    def test_accepts_tuples_and_dicts(self, engine: BrushEngine) -> None:
        assert engine.draw((10, 10))
        assert engine.draw({"x": 20, "y": 10}, (10, 10))
        assert engine.last_point == Point(x=20, y=10)

    def test_non_finite_point_ignored(self, engine: BrushEngine, surface: Surface) -> None:
        assert not engine.draw(Point(x=math.nan, y=10))
        assert not engine.draw(Point(x=10, y=10), Point(x=math.inf, y=0))
        assert engine.state is StrokeState.IDLE
        assert surface.painted_bbox() is None


class TestDrawing:
    """Pixels produced through the engine."""

    def test_red_horizontal_stroke_on_white(self, white_surface: Surface) -> None:
        with BrushEngine(white_surface) as engine:
            engine.configure({"type": "brush", "color": "#FF0000", "size": 10, "opacity": 1})
            engine.draw(Point(x=50, y=100))
            engine.draw(Point(x=150, y=100), Point(x=50, y=100))
            engine.end_stroke()
        assert white_surface.pixel(100, 100) == (255, 0, 0, 255)
        assert white_surface.pixel(100, 20) == (255, 255, 255, 255)

    def test_config_change_does_not_alter_past_segments(
        self, engine: BrushEngine, surface: Surface
    ) -> None:
        engine.configure({"color": "#0000FF", "size": 6})
        engine.draw(Point(x=10, y=20))
        engine.draw(Point(x=50, y=20), Point(x=10, y=20))
        before = surface.pixel(30, 20)

        engine.configure({"color": "#00FF00"})
        assert engine.is_drawing
        engine.draw(Point(x=50, y=80), Point(x=50, y=20))

        assert surface.pixel(30, 20) == before == (0, 0, 255, 255)
        assert surface.pixel(50, 70) == (0, 255, 0, 255)

    def test_opacity_applies_per_segment(self, engine: BrushEngine, surface: Surface) -> None:
        engine.configure({"opacity": 0.5, "size": 4})
        engine.draw(Point(x=10, y=60))
        engine.draw(Point(x=100, y=60), Point(x=10, y=60))
        assert surface.alpha_at(55, 60) == 128

    def test_eraser_through_engine(self, white_surface: Surface) -> None:
        with BrushEngine(white_surface) as engine:
            engine.configure({"type": "eraser", "size": 20})
            engine.draw(Point(x=100, y=100))
        assert white_surface.alpha_at(100, 100) == 0

    def test_clear(self, engine: BrushEngine, surface: Surface) -> None:
        engine.draw(Point(x=50, y=50))
        engine.clear()
        assert surface.painted_bbox() is None
        engine.clear("#336699")
        assert surface.pixel(0, 0) == (0x33, 0x66, 0x99, 255)

    def test_clear_keeps_stroke_active(self, engine: BrushEngine) -> None:
        engine.draw(Point(x=50, y=50))
        engine.clear()
        assert engine.is_drawing


class TestConfigure:
    """Configuration replacement and merging."""

    def test_default_config(self, engine: BrushEngine) -> None:
        config = engine.config
        assert config.type == "brush"
        assert config.color == "#000000"
        assert config.size == 15.0
        assert config.opacity == 1.0

    def test_partial_update_merges(self, engine: BrushEngine) -> None:
        engine.configure({"color": "#FF0000"})
        config = engine.configure({"size": 30})
        assert config.color == "#FF0000"
        assert config.size == 30

    def test_configure_clamps(self, engine: BrushEngine) -> None:
        config = engine.configure({"size": 999, "opacity": -1})
        assert config.size == 200
        assert config.opacity == 0

    def test_alias_resolved(self, engine: BrushEngine) -> None:
        assert engine.configure({"type": "acuarela"}).type == "watercolor"

    def test_invalid_value_rejected(self, engine: BrushEngine) -> None:
        engine.configure({"size": 20})
        with pytest.raises(ConfigurationError):
            engine.configure({"size": "huge"})
        assert engine.config.size == 20

    def test_extra_keys_merge_into_params(self, engine: BrushEngine) -> None:
        engine.configure({"type": "charcoal", "grain": 0.1})
        config = engine.configure({"layers": 2})
        assert config.params == {"grain": 0.1, "layers": 2}

    def test_type_change_resets_params(self, engine: BrushEngine) -> None:
        engine.configure({"type": "charcoal", "grain": 0.1})
        assert engine.configure({"type": "stars"}).params == {}

    def test_type_change_with_params(self, engine: BrushEngine) -> None:
        engine.configure({"type": "charcoal", "grain": 0.1})
        config = engine.configure({"type": "stars", "scale": 0.8})
        assert config.params == {"scale": 0.8}

    def test_full_config_object(self, engine: BrushEngine) -> None:
        new = BrushConfig(type="neon", color="#00FFFF", size=12)
        assert engine.configure(new) == new

    def test_config_returned_by_value(self, engine: BrushEngine) -> None:
        engine.configure({"type": "charcoal", "grain": 0.1})
        snapshot = engine.config
        snapshot.params["grain"] = 99
        assert engine.config.params["grain"] == 0.1

    def test_configured_object_copied(self, engine: BrushEngine) -> None:
        config = BrushConfig(type="charcoal", params={"grain": 0.1})
        engine.configure(config)
        config.params["grain"] = 99
        assert engine.config.params["grain"] == 0.1

    def test_constructor_config_copied(self) -> None:
        config = BrushConfig(type="spray", params={"density": 5})
        with BrushEngine(Surface.new(20, 20), config) as engine:
            config.params["density"] = 50
            assert engine.config.params["density"] == 5

    def test_unknown_kind_accepted_with_warning(
        self, engine: BrushEngine, caplog: pytest.LogCaptureFixture
    ) -> None:
        config = engine.configure({"type": "nonexistent"})
        assert config.type == "nonexistent"
        assert "No renderer registered" in caplog.text


class TestErrors:
    """Failure handling during draw."""

    def test_unknown_kind_raises_and_leaves_surface(
        self, engine: BrushEngine, surface: Surface
    ) -> None:
        engine.configure({"type": "nonexistent"})
        before = surface.image.tobytes()
        with pytest.raises(ConfigurationError, match="Unknown brush kind"):
            engine.draw(Point(x=50, y=50))
        assert surface.image.tobytes() == before
        assert engine.state is StrokeState.IDLE
        assert engine.last_point is None

    def test_unknown_kind_keeps_active_stroke(self, engine: BrushEngine) -> None:
        engine.draw(Point(x=10, y=10))
        engine.configure({"type": "nonexistent"})
        with pytest.raises(ConfigurationError):
            engine.draw(Point(x=20, y=10), Point(x=10, y=10))
        assert engine.is_drawing
        assert engine.last_point == Point(x=10, y=10)

    def test_invalid_params_raise(self, engine: BrushEngine) -> None:
        engine.configure({"type": "stars", "shape": "unicorn"})
        with pytest.raises(ConfigurationError):
            engine.draw(Point(x=50, y=50))
        assert engine.state is StrokeState.IDLE

    def test_renderer_failure_returns_false(self, surface: Surface) -> None:
        registry = build_default_registry()
        registry.register("exploding", _ExplodingBrush("exploding"))
        with BrushEngine(surface, registry=registry) as engine:
            engine.configure({"type": "exploding"})
            assert not engine.draw(Point(x=10, y=10))
            assert engine.state is StrokeState.IDLE
            engine.configure({"type": "brush"})
            assert engine.draw(Point(x=10, y=10))

    def test_errors_share_base_class(self) -> None:
        for error in (ConfigurationError, SurfaceBusyError, ThreadAffinityError):
            assert issubclass(error, BrushEngineError)


class TestSurfaceBinding:
    """Engine ownership of its surface."""

    def test_second_engine_rejected(self, engine: BrushEngine, surface: Surface) -> None:
        with pytest.raises(SurfaceBusyError):
            BrushEngine(surface)

    def test_release_frees_surface(self, surface: Surface) -> None:
        first = BrushEngine(surface)
        first.release()
        assert first.is_released
        assert surface.owner is None
        with BrushEngine(surface) as second:
            assert surface.owner is second

    def test_release_idempotent(self, surface: Surface) -> None:
        engine = BrushEngine(surface)
        engine.draw(Point(x=10, y=10))
        engine.release()
        engine.release()
        assert engine.state is StrokeState.IDLE

    def test_draw_after_release_fails(self, surface: Surface) -> None:
        engine = BrushEngine(surface)
        engine.release()
        assert not engine.draw(Point(x=10, y=10))
        assert surface.painted_bbox() is None

    def test_context_manager_releases(self, surface: Surface) -> None:
        with BrushEngine(surface) as engine:
            assert surface.owner is engine
        assert surface.owner is None


class TestThreadAffinity:
    """Engines may only be used from their creating thread."""

    def test_draw_from_other_thread(self, engine: BrushEngine) -> None:
        errors: list[Exception] = []

        def worker() -> None:
            try:
                engine.draw(Point(x=10, y=10))
            except ThreadAffinityError as e:
                errors.append(e)

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()
        assert len(errors) == 1
        assert engine.state is StrokeState.IDLE

    def test_configure_from_other_thread(self, engine: BrushEngine) -> None:
        errors: list[Exception] = []

        def worker() -> None:
            try:
                engine.configure({"size": 40})
            except ThreadAffinityError as e:
                errors.append(e)

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()
        assert len(errors) == 1
        assert engine.config.size == 15


class TestStrokeHistory:
    """Recorded stroke history."""

    def test_records_segments(self, engine: BrushEngine) -> None:
        engine.draw(Point(x=10, y=10))
        engine.draw(Point(x=20, y=10), Point(x=10, y=10))
        engine.end_stroke()
        history = engine.history
        assert len(history) == 1
        assert history[0].stroke_id == 1
        assert history[0].point_count == 2
        assert history[0].segments[0].last_point is None

    def test_mid_stroke_config_change_opens_new_record(self, engine: BrushEngine) -> None:
        engine.draw(Point(x=10, y=10))
        engine.configure({"color": "#FF0000"})
        engine.draw(Point(x=20, y=10), Point(x=10, y=10))
        history = engine.history
        assert [r.stroke_id for r in history] == [1, 1]
        assert [r.config.color for r in history] == ["#000000", "#FF0000"]

    def test_failed_draws_not_recorded(self, engine: BrushEngine) -> None:
        engine.draw(Point(x=math.nan, y=0))
        assert engine.history == []

    def test_export_history_is_json_compatible(self, engine: BrushEngine) -> None:
        engine.draw(Point(x=10, y=10))
        exported = engine.export_history()
        assert exported[0]["config"]["type"] == "brush"
        assert exported[0]["segments"][0]["point"] == {"x": 10.0, "y": 10.0}

    def test_clear_history(self, engine: BrushEngine) -> None:
        engine.draw(Point(x=10, y=10))
        engine.clear_history()
        assert engine.history == []

    def test_history_disabled(self, surface: Surface) -> None:
        with BrushEngine(surface, record_history=False) as engine:
            engine.draw(Point(x=10, y=10))
            assert engine.history == []

    def test_oldest_strokes_evicted_past_segment_limit(self, surface: Surface) -> None:
        with BrushEngine(surface, record_history=True, max_recorded_segments=5) as engine:
            for stroke in range(4):
                y = 10 + stroke * 20
                engine.draw(Point(x=10, y=y))
                engine.draw(Point(x=50, y=y), Point(x=10, y=y))
                engine.end_stroke()
            history = engine.history
        assert [record.stroke_id for record in history] == [3, 4]
        assert sum(record.point_count for record in history) == 4

    def test_stroke_being_drawn_never_evicted(self, surface: Surface) -> None:
        with BrushEngine(surface, record_history=True, max_recorded_segments=2) as engine:
            engine.draw(Point(x=10, y=10))
            for x in range(20, 60, 10):
                engine.draw(Point(x=x, y=10), Point(x=x - 10, y=10))
            history = engine.history
        assert len(history) == 1
        assert history[0].point_count == 5

    def test_segment_count_resets_on_clear(self, surface: Surface) -> None:
        with BrushEngine(surface, record_history=True, max_recorded_segments=2) as engine:
            engine.draw(Point(x=10, y=10))
            engine.draw(Point(x=20, y=10), Point(x=10, y=10))
            engine.clear_history()
            engine.end_stroke()
            engine.draw(Point(x=30, y=30))
            engine.end_stroke()
            engine.draw(Point(x=60, y=60))
            assert [record.stroke_id for record in engine.history] == [2, 3]
