"""Layout del "story" 1080×1920 como documento SVG.

Por qué está en adapters:
- El SVG (Jinja2 + contornos de fontTools) es un detalle de infraestructura.
- El Core solo conoce `OGMetadata`, `GradientSpec` y `FontAsset`.

Plantilla fija: fondo degradado, tarjeta centrada al 80 % con esquinas
redondeadas, imagen en modo "contain" y un panel blanco con título,
descripción (una línea) y host.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from ogstory.adapters.font_loader import MEDIUM_WEIGHT, REGULAR_WEIGHT
from ogstory.adapters.text_layout import (
    FontFace,
    TextLine,
    format_number,
    truncate_line,
    wrap_lines,
)
from ogstory.core.domain.errors import RenderFailure
from ogstory.core.domain.models import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    FontAsset,
    GradientSpec,
    ImageAsset,
    OGMetadata,
    RenderedDocument,
)

logger = logging.getLogger("ogstory.renderer")

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

CARD_WIDTH = CANVAS_WIDTH * 4 // 5
CARD_RADIUS = 40
CANVAS_MARGIN = 96

PANEL_PADDING_X = 40
PANEL_PADDING_TOP = 28
PANEL_PADDING_BOTTOM = 36


@dataclass(frozen=True)
class TextStyle:
    size: float
    leading: float
    color: str
    weight: int
    margin_bottom: float

    @property
    def line_height(self) -> float:
        return self.size * self.leading


TITLE_STYLE = TextStyle(size=36, leading=1.375, color="#08090A", weight=MEDIUM_WEIGHT, margin_bottom=4)
DESCRIPTION_STYLE = TextStyle(size=30, leading=1.25, color="#3E4951", weight=REGULAR_WEIGHT, margin_bottom=24)
HOST_STYLE = TextStyle(size=24, leading=1.0, color="#97A1A9", weight=REGULAR_WEIGHT, margin_bottom=0)

# Approximates a 0 25px 50px -12px rgba(0, 0, 0, 0.25) drop shadow.
_SHADOW_OFFSET_Y = 25
_SHADOW_STEPS = ((-12, 0.05), (-6, 0.05), (0, 0.05), (6, 0.04), (12, 0.03), (18, 0.02))


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float
    radius: float = 0


def _get_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml", "svg.j2"]),
    )
    env.filters["num"] = format_number
    return env


def _faces_by_weight(fonts: Sequence[FontAsset]) -> dict[int, FontFace]:
    by_weight = {font.weight: font for font in fonts}
    missing = [w for w in (REGULAR_WEIGHT, MEDIUM_WEIGHT) if w not in by_weight]
    if missing:
        raise RenderFailure(f"Missing font weights: {', '.join(map(str, missing))}")
    return {weight: FontFace(by_weight[weight]) for weight in (REGULAR_WEIGHT, MEDIUM_WEIGHT)}


def _layout_block(
    texts: list[str],
    style: TextStyle,
    face: FontFace,
    *,
    x: float,
    top: float,
) -> tuple[list[TextLine], float]:
    """Place one line per text; returns the lines and the block height incl. margin."""

    lines = [
        TextLine(
            text=text,
            x=x,
            top=top + index * style.line_height,
            size=style.size,
            line_height=style.line_height,
            color=style.color,
            face=face,
        )
        for index, text in enumerate(texts)
    ]
    return lines, len(texts) * style.line_height + style.margin_bottom


def _image_height(image: ImageAsset | None, panel_height: float) -> float:
    if image is None:
        return 0.0
    natural = CARD_WIDTH * image.height / image.width
    available = CANVAS_HEIGHT - 2 * CANVAS_MARGIN - panel_height
    return max(0.0, min(natural, available))


def _shadow_layers(card: Box) -> list[dict[str, float]]:
    layers = []
    for spread, opacity in _SHADOW_STEPS:
        layers.append(
            {
                "x": card.x - spread,
                "y": card.y + _SHADOW_OFFSET_Y - spread,
                "width": card.width + 2 * spread,
                "height": card.height + 2 * spread,
                "radius": max(0, card.radius + spread),
                "opacity": opacity,
            }
        )
    return layers


def render(
    metadata: OGMetadata,
    gradient: GradientSpec,
    fonts: Sequence[FontAsset],
    *,
    image: ImageAsset | None = None,
) -> RenderedDocument:
    """Lay out the story template and return it as an SVG document."""

    faces = _faces_by_weight(fonts)
    text_width = CARD_WIDTH - 2 * PANEL_PADDING_X

    title_face = faces[TITLE_STYLE.weight]
    description_face = faces[DESCRIPTION_STYLE.weight]
    host_face = faces[HOST_STYLE.weight]

    title_lines = wrap_lines(title_face, metadata.title, TITLE_STYLE.size, text_width)
    description = truncate_line(description_face, metadata.description, DESCRIPTION_STYLE.size, text_width)
    host = truncate_line(host_face, metadata.host, HOST_STYLE.size, text_width)

    # Heights first: the card is vertically centered on the canvas.
    text_height = (
        len(title_lines) * TITLE_STYLE.line_height
        + TITLE_STYLE.margin_bottom
        + (DESCRIPTION_STYLE.line_height if description else 0)
        + DESCRIPTION_STYLE.margin_bottom
        + (HOST_STYLE.line_height if host else 0)
    )
    panel_height = PANEL_PADDING_TOP + text_height + PANEL_PADDING_BOTTOM
    image_height = _image_height(image, panel_height)
    card_height = image_height + panel_height

    card = Box(
        x=(CANVAS_WIDTH - CARD_WIDTH) / 2,
        y=(CANVAS_HEIGHT - card_height) / 2,
        width=CARD_WIDTH,
        height=card_height,
        radius=CARD_RADIUS,
    )
    panel = Box(x=card.x, y=card.y + image_height, width=CARD_WIDTH, height=panel_height)

    text_x = panel.x + PANEL_PADDING_X
    cursor = panel.y + PANEL_PADDING_TOP
    lines: list[TextLine] = []
    for texts, style, face in (
        (title_lines, TITLE_STYLE, title_face),
        ([description] if description else [], DESCRIPTION_STYLE, description_face),
        ([host] if host else [], HOST_STYLE, host_face),
    ):
        block, height = _layout_block(texts, style, face, x=text_x, top=cursor)
        lines.extend(block)
        cursor += height

    image_box = None
    if image is not None and image_height > 0:
        image_box = {
            "x": card.x,
            "y": card.y,
            "width": CARD_WIDTH,
            "height": image_height,
            "href": image.data_uri,
        }

    try:
        svg = (
            _get_env()
            .get_template("story.svg.j2")
            .render(
                width=CANVAS_WIDTH,
                height=CANVAS_HEIGHT,
                gradient=gradient,
                card=card,
                panel=panel,
                shadow=_shadow_layers(card),
                image=image_box,
                lines=lines,
            )
        )
    except TemplateError as exc:
        raise RenderFailure(f"Story template failed: {exc}") from exc

    logger.debug(
        "Rendered story (title_lines=%d, image_height=%.1f, svg=%d chars)",
        len(title_lines),
        image_height,
        len(svg),
    )
    return RenderedDocument(svg=svg, width=CANVAS_WIDTH, height=CANVAS_HEIGHT)
