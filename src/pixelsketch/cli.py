"""Command-line interface for pixelsketch.

Provides commands for converting a sketch into pixel art and for
inspecting the built-in styles and palettes.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from pixelsketch.config import load_settings, settings_from_env
from pixelsketch.engine import GenerationEngine
from pixelsketch.errors import PixelSketchError
from pixelsketch.logging import setup_logging
from pixelsketch.models import EngineSettings, GenerationJob, JobStatus, PixelArtStyle
from pixelsketch.palette import builtin_palette, rgb_to_hex
from pixelsketch.pipeline import load_raster, save_raster
from pixelsketch.styles import list_styles

console = Console()

_STYLE_CHOICES = [s.value for s in PixelArtStyle]


def _setup_logging(verbose: bool) -> None:
    """Configure logging based on verbose flag."""
    if verbose:
        setup_logging(level=logging.DEBUG, verbose=True)
    else:
        setup_logging(level=logging.WARNING)


async def _run_job(
    settings: EngineSettings,
    sketch_path: Path,
    prompt: str,
    width: int,
    height: int,
    style: str | None,
    palette: list[str] | None,
) -> GenerationJob:
    sketch = load_raster(sketch_path)
    async with GenerationEngine(settings=settings) as engine:
        job_id = engine.submit(sketch, prompt, width, height, style, palette)
        return await engine.wait(job_id)


@click.group()
@click.version_option(package_name="pixelsketch")
def main() -> None:
    """pixelsketch — turn raster sketches into low-color pixel art."""
    pass


@main.command()
@click.argument(
    "sketch_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Output PNG path",
)
@click.option("--width", "-W", type=int, required=True, help="Target width in pixels")
@click.option("--height", "-H", type=int, required=True, help="Target height in pixels")
@click.option(
    "--style",
    "-s",
    type=click.Choice(_STYLE_CHOICES),
    default=None,
    help="Pixel-art style (default: from config)",
)
@click.option(
    "--palette",
    "-p",
    "palette",
    multiple=True,
    help="Explicit palette color as #rrggbb (repeatable)",
)
@click.option("--prompt", default="", help="Text prompt forwarded to the backend")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML engine settings",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable detailed logging")
def generate(
    sketch_path: Path,
    output: Path,
    width: int,
    height: int,
    style: str | None,
    palette: tuple[str, ...],
    prompt: str,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Convert a sketch image into pixel art.

    SKETCH_PATH: Path to the source sketch image.

    Example:

        \b
        pixelsketch generate sketch.png -o out.png -W 32 -H 32 --style retro-8bit
    """
    _setup_logging(verbose)

    try:
        base = load_settings(config_path) if config_path else None
        settings = settings_from_env(base)
        job = asyncio.run(
            _run_job(
                settings,
                sketch_path,
                prompt,
                width,
                height,
                style,
                list(palette) or None,
            )
        )
    except (PixelSketchError, OSError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)

    if job.status is not JobStatus.COMPLETED or job.result is None:
        console.print(f"[red]Generation failed:[/red] {job.error}")
        raise SystemExit(1)

    save_raster(job.result, output)
    meta = job.metadata
    if meta is not None:
        console.print(
            f"[green]✓[/green] Saved {output} "
            f"({meta.algorithm}, {meta.colors_used} colors, {meta.pixel_count} px)"
        )
        if meta.fallback_reason:
            console.print(f"[yellow]Inference fallback:[/yellow] {meta.fallback_reason}")


@main.command()
def styles() -> None:
    """List the available pixel-art styles."""
    table = Table(title="Styles")
    table.add_column("Style", style="cyan")
    table.add_column("Colors", justify="right")
    table.add_column("Dither")
    table.add_column("Smoothing")
    table.add_column("Contrast", justify="right")
    for style, profile in list_styles():
        table.add_row(
            style.value,
            str(profile.max_colors),
            "yes" if profile.dither_enabled else "no",
            "yes" if profile.smoothing_enabled else "no",
            f"{profile.contrast_boost:.1f}",
        )
    console.print(table)


@main.command()
@click.argument("size", type=click.IntRange(min=1))
def palette(size: int) -> None:
    """Print the built-in palette used for SIZE colors."""
    for color in builtin_palette(size):
        click.echo(rgb_to_hex(color))


if __name__ == "__main__":
    main()
