"""Entry point de la CLI.

Comandos:
- `generate`: URL -> PNG (archivo) o data URI (stdout).
- `inspect`: URL -> metadata og + degradado (sin render).
- `doctor`: diagnósticos y configuración.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from ogstory.adapters.http_client import build_async_client
from ogstory.adapters.json_exporter import export_story_json
from ogstory.cli import doctor
from ogstory.cli.ui_components import (
    build_gradient_panel,
    build_metadata_table,
    print_banner,
)
from ogstory.core.config import AppSettings
from ogstory.core.domain.errors import OGStoryError
from ogstory.core.services.story_pipeline import generate_story, load_page_content

app = typer.Typer(no_args_is_help=True, help="Turn a page's Open Graph tags into a story image.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

logger = logging.getLogger("ogstory.cli")


def _configure_logging(settings: AppSettings, verbose: bool) -> None:
    level = logging.DEBUG if verbose else settings.log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


def _load_settings() -> AppSettings:
    try:
        return AppSettings()
    except ValidationError as exc:
        _err_console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _fail(exc: OGStoryError) -> NoReturn:
    logger.error("%s: %s", exc.__class__.__name__, exc)
    _err_console.print(f"[red]Error:[/red] {exc}")
    raise typer.Exit(code=1)


@app.command()
def generate(
    url: str = typer.Argument(..., help="Page whose og:title/og:description/og:image are used."),
    output: Path = typer.Option(Path("story.png"), "--output", "-o", help="PNG destination."),
    data_uri: bool = typer.Option(False, "--data-uri", help="Print the data URI instead of writing a file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Render the 1080×1920 story image for URL."""

    settings = _load_settings()
    _configure_logging(settings, verbose)

    try:
        result = asyncio.run(generate_story(url, settings=settings))
    except OGStoryError as exc:
        _fail(exc)

    if data_uri:
        typer.echo(result.image.data_uri)
        return

    print_banner(_console)
    _console.print(build_metadata_table(result.metadata))
    _console.print(build_gradient_panel(result.gradient))

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.image.data)
    _console.print(f"[green]Saved story image to:[/green] {output}")


async def _inspect(url: str, settings: AppSettings):
    async with build_async_client(settings) as client:
        return await load_page_content(url, client=client)


@app.command()
def inspect(
    url: str = typer.Argument(..., help="Page to inspect."),
    json_out: Path | None = typer.Option(None, "--json-out", help="Also export metadata + gradient as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Show the extracted og tags and derived gradient without rendering."""

    settings = _load_settings()
    _configure_logging(settings, verbose)

    try:
        content = asyncio.run(_inspect(url, settings))
    except OGStoryError as exc:
        _fail(exc)

    _console.print(build_metadata_table(content.metadata))
    _console.print(build_gradient_panel(content.gradient))

    if json_out is not None:
        path = export_story_json(metadata=content.metadata, gradient=content.gradient, output_path=json_out)
        _console.print(f"[green]Saved JSON to:[/green] {path}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
