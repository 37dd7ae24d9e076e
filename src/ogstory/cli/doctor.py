"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ogstory.adapters.font_loader import LocalFontSource, resolve_font_source
from ogstory.adapters.http_client import build_async_client
from ogstory.adapters.rasterizer import rasterize
from ogstory.core.config import AppSettings, write_user_env_vars
from ogstory.core.domain.errors import OGStoryError
from ogstory.core.domain.models import RenderedDocument

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_PROBE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="4" height="4">'
    '<rect width="4" height="4" fill="#ff0000"/></svg>'
)


async def _check_fonts(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            fonts = await resolve_font_source(settings).load(client)
    except OGStoryError as exc:
        return False, str(exc)
    sizes = ", ".join(f"{font.weight}: {len(font.data)} B" for font in fonts)
    return True, sizes


def _check_rasterizer() -> tuple[bool, str]:
    """Rasterize a 4x4 document to detect a missing Cairo library."""

    try:
        encoded = rasterize(RenderedDocument(svg=_PROBE_SVG, width=4, height=4))
    except OGStoryError as exc:
        return False, str(exc)
    return True, f"{len(encoded.data)} B PNG"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="og-story Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    if settings.font_dir is not None:
        table.add_row("Font source", "LOCAL", str(settings.font_dir))
    else:
        table.add_row("Font source", "CDN", settings.font_cdn_base_url)

    ok_fonts, detail_fonts = asyncio.run(_check_fonts(settings))
    table.add_row("Fonts", "OK" if ok_fonts else "FAIL", detail_fonts)

    ok_png, detail_png = _check_rasterizer()
    table.add_row("CairoSVG PNG", "OK" if ok_png else "FAIL", detail_png)

    _console.print(table)

    if not ok_fonts and settings.font_dir is None:
        _console.print(
            "\n[yellow]Note:[/yellow] download the fonts once and run "
            "`og-story doctor setup-fonts <dir>` to work without the CDN."
        )
    if not (ok_fonts and ok_png):
        raise typer.Exit(code=1)


@app.command(name="setup-fonts")
def setup_fonts(
    font_dir: Path = typer.Argument(..., help="Directory holding the regular and medium font files."),
) -> None:
    """Store a local font directory in the user config .env."""

    font_dir = font_dir.expanduser().resolve()
    settings = AppSettings()
    source = LocalFontSource(font_dir, settings)
    try:
        asyncio.run(_load_local(source, settings))
    except OGStoryError as exc:
        raise typer.BadParameter(str(exc)) from exc

    env_path = write_user_env_vars({"OG_STORY_FONT_DIR": str(font_dir)})
    _console.print(f"[green]Saved font directory to:[/green] {env_path}")


async def _load_local(source: LocalFontSource, settings: AppSettings) -> None:
    async with build_async_client(settings) as client:
        await source.load(client)
