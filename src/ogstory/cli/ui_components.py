"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ogstory.core.domain.color import Color
from ogstory.core.domain.models import GradientSpec, OGMetadata


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (--data-uri).
    """

    title = Text("OG-STORY", style="bold cyan")
    subtitle = Text("Open Graph • Color dominante • Story 1080×1920", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_metadata_table(metadata: OGMetadata) -> Table:
    """Tabla con los campos og extraídos; los vacíos se marcan en gris."""

    table = Table(title="Open Graph")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for field in ("title", "description", "image", "host"):
        value = getattr(metadata, field)
        table.add_row(field, value if value else Text("(empty)", style="dim"))
    return table


def _swatch(color: Color) -> Text:
    text = Text("  ██  ", style=color.hex())
    text.append(f"{color.css()}  hsl({color.hue:.1f}, {color.saturation:.1f}%, {color.lightness:.1f}%)")
    return text


def build_gradient_panel(gradient: GradientSpec) -> Panel:
    """Panel con los dos colores del degradado."""

    body = Text()
    body.append("start ", style="bold")
    body.append_text(_swatch(gradient.start))
    body.append("\nend   ", style="bold")
    body.append_text(_swatch(gradient.end))
    body.append(f"\n\n{gradient.css()}", style="dim")
    return Panel(body, title=Text("Gradient", style="bold yellow"), border_style="yellow")
