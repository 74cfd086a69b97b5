"""CLI for the Museo brush engine.

Usage:
    museo-brush brushes
    museo-brush brushes --category effects
    museo-brush demo --brush watercolor --color "#3366ff" --out wave.png
    museo-brush render history.json --out mural.png
"""

import logging
import math
from pathlib import Path as FilePath

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from museo_brush.config import settings
from museo_brush.engine import BrushEngine
from museo_brush.errors import BrushEngineError
from museo_brush.logging_config import configure_logging
from museo_brush.rendering import RenderOptions, dump_history, load_history, render_strokes
from museo_brush.surface import Surface
from museo_brush.types import BRUSH_PRESETS, KIND_ALIASES, BrushCategory, Point

app = typer.Typer(
    name="museo-brush",
    help="CLI for the Museo brush engine",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
) -> None:
    """Set up logging for every command."""
    level = logging.DEBUG if verbose else logging.getLevelName(settings.log_level.upper())
    configure_logging(json_format=settings.log_json, log_level=level, log_file=settings.log_file)


# =============================================================================
# Brush roster
# =============================================================================


@app.command("brushes")
def list_brushes(
    category: BrushCategory | None = typer.Option(
        None, "--category", "-c", help="Only show brushes in this category"
    ),
) -> None:
    """List available brushes.

    Examples:
        museo-brush brushes
        museo-brush brushes -c stamp
    """
    aliases = {kind: alias for alias, kind in KIND_ALIASES.items()}
    presets = [p for p in BRUSH_PRESETS.values() if category is None or p.category == category]

    if not presets:
        console.print("[yellow]No brushes found[/yellow]")
        return

    table = Table(title="Brushes", box=box.ROUNDED)
    table.add_column("Kind", style="cyan")
    table.add_column("Alias", style="magenta")
    table.add_column("Name", style="green")
    table.add_column("Category", style="yellow")
    table.add_column("Renderer")
    table.add_column("Description")

    for preset in presets:
        table.add_row(
            preset.kind,
            aliases.get(preset.kind, ""),
            preset.display_name,
            preset.category.value,
            preset.renderer,
            preset.description,
        )

    console.print(table)
    console.print(f"\nTotal: {len(presets)} brush(es)")


# =============================================================================
# Drawing
# =============================================================================


def _wave_points(width: int, height: int, count: int = 40) -> list[Point]:
    """Sample points along a sine wave across the middle of the surface."""
    margin = width * 0.1
    span = width - 2 * margin
    amplitude = height * 0.25
    return [
        Point(
            x=margin + span * i / (count - 1),
            y=height / 2 + amplitude * math.sin(2 * math.pi * i / (count - 1)),
        )
        for i in range(count)
    ]


@app.command("demo")
def demo(
    brush: str = typer.Option("brush", "--brush", "-b", help="Brush kind or alias"),
    color: str = typer.Option("#000000", "--color", help="Hex color"),
    size: float = typer.Option(15.0, "--size", "-s", help="Brush size in pixels"),
    opacity: float = typer.Option(1.0, "--opacity", "-o", help="Opacity 0-1"),
    width: int = typer.Option(settings.canvas_width, "--width", help="Surface width"),
    height: int = typer.Option(settings.canvas_height, "--height", help="Surface height"),
    seed: int | None = typer.Option(None, "--seed", help="Random seed for textured brushes"),
    out: FilePath = typer.Option(FilePath("demo.png"), "--out", help="Output PNG path"),
    history: FilePath | None = typer.Option(
        None, "--history", help="Also write the stroke history as JSON"
    ),
) -> None:
    """Draw a sample wave stroke with a brush and save it as PNG.

    Examples:
        museo-brush demo -b acuarela --color "#2255cc" -s 30
        museo-brush demo -b stars --out stars.png --history stars.json
    """
    surface = Surface.new(width, height, background=settings.background_color)
    try:
        with BrushEngine(surface, seed=seed, record_history=True) as engine:
            engine.configure({"type": brush, "color": color, "size": size, "opacity": opacity})
            points = _wave_points(surface.width, surface.height)
            previous: Point | None = None
            for point in points:
                engine.draw(point, previous)
                previous = point
            engine.end_stroke()
            records = engine.history
    except BrushEngineError as e:
        console.print(f"[red]Failed to draw: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    out.write_bytes(surface.to_png())
    console.print(f"[green]Wrote {out}[/green] ({surface.width}x{surface.height}, brush {brush})")

    if history is not None:
        history.write_text(dump_history(records, indent=2))
        console.print(f"[green]Wrote {history}[/green] ({len(records)} record(s))")


def _parse_size(value: str) -> tuple[int, int]:
    """Parse "WxH" into (width, height)."""
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise typer.BadParameter(f"Expected WxH, got {value!r}") from None
    if width < 1 or height < 1:
        raise typer.BadParameter(f"Size must be positive, got {value!r}")
    return (width, height)


@app.command("render")
def render(
    history_file: FilePath = typer.Argument(..., help="Stroke history JSON", exists=True),
    out: FilePath = typer.Option(FilePath("render.png"), "--out", help="Output PNG path"),
    width: int = typer.Option(settings.canvas_width, "--width", help="Output width"),
    height: int = typer.Option(settings.canvas_height, "--height", help="Output height"),
    scale_from: str | None = typer.Option(
        None, "--scale-from", help="Source surface size WxH to scale strokes from"
    ),
    seed: int = typer.Option(0, "--seed", help="Random seed for textured brushes"),
) -> None:
    """Replay a stroke history into a PNG.

    Examples:
        museo-brush render stars.json --out replay.png
        museo-brush render mural.json --width 400 --height 300 --scale-from 800x600
    """
    source_size = _parse_size(scale_from) if scale_from else None
    try:
        records = load_history(history_file.read_bytes())
        png = render_strokes(
            records,
            RenderOptions(
                width=width,
                height=height,
                background_color=settings.background_color,
                scale_from=source_size,
                seed=seed,
                output_format="bytes",
            ),
        )
    except BrushEngineError as e:
        console.print(f"[red]Failed to render: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    assert isinstance(png, bytes)
    out.write_bytes(png)
    strokes = len({record.stroke_id for record in records})
    console.print(f"[green]Wrote {out}[/green] ({strokes} stroke(s))")


if __name__ == "__main__":
    app()
