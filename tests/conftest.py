from __future__ import annotations

import io
from typing import Callable

import httpx
import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from PIL import Image

from ogstory.core.config import DEFAULT_FONT_CDN_BASE_URL, AppSettings
from ogstory.core.domain.models import FontAsset

GLYPH_ADVANCE = 500
UNITS_PER_EM = 1000

Route = tuple[int, dict[str, str], bytes]


def build_test_font(style: str = "Regular") -> bytes:
    """TrueType font with a box glyph for every printable ASCII char and '…'."""

    chars = [chr(code) for code in range(33, 127)] + ["…"]
    names = {char: f"uni{ord(char):04X}" for char in chars}
    glyph_order = [".notdef", "space", *names.values()]

    def box():
        pen = TTGlyphPen(None)
        pen.moveTo((50, 0))
        pen.lineTo((50, 700))
        pen.lineTo((450, 700))
        pen.lineTo((450, 0))
        pen.closePath()
        return pen.glyph()

    glyphs = {name: box() for name in glyph_order}
    glyphs["space"] = TTGlyphPen(None).glyph()
    metrics = {name: (GLYPH_ADVANCE, 50) for name in glyph_order}
    metrics["space"] = (GLYPH_ADVANCE, 0)

    cmap = {ord(char): name for char, name in names.items()}
    cmap[ord(" ")] = "space"

    fb = FontBuilder(UNITS_PER_EM, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap(cmap)
    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics(metrics)
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Test Sans", "styleName": style})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()

    buffer = io.BytesIO()
    fb.save(buffer)
    return buffer.getvalue()


def solid_png(color: tuple[int, int, int], size: tuple[int, int] = (120, 60)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def og_page(*, title: str | None = None, description: str | None = None, image: str | None = None) -> bytes:
    tags = []
    for prop, value in (("og:title", title), ("og:description", description), ("og:image", image)):
        if value is not None:
            tags.append(f'<meta property="{prop}" content="{value}">')
    head = "\n".join(tags)
    return f"<!doctype html><html><head>{head}</head><body><p>hi</p></body></html>".encode()


def make_transport(routes: dict[str, Route | Callable[[httpx.Request], httpx.Response]]) -> httpx.MockTransport:
    """Serve fixed responses by absolute URL; anything else is a 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="not found")
        if callable(route):
            return route(request)
        status, headers, body = route
        return httpx.Response(status, headers=headers, content=body)

    return httpx.MockTransport(handler)


def html_route(body: bytes) -> Route:
    return (200, {"Content-Type": "text/html; charset=utf-8"}, body)


def png_route(body: bytes) -> Route:
    return (200, {"Content-Type": "image/png"}, body)


def font_routes(font: bytes) -> dict[str, Route]:
    return {
        f"{DEFAULT_FONT_CDN_BASE_URL}/WantedSans-Regular.otf": (200, {"Content-Type": "font/otf"}, font),
        f"{DEFAULT_FONT_CDN_BASE_URL}/WantedSans-Medium.otf": (200, {"Content-Type": "font/otf"}, font),
    }


@pytest.fixture(scope="session")
def font_bytes() -> bytes:
    return build_test_font()


@pytest.fixture()
def fonts(font_bytes: bytes) -> list[FontAsset]:
    return [
        FontAsset(family="Test Sans", weight=400, data=font_bytes),
        FontAsset(family="Test Sans", weight=500, data=font_bytes),
    ]


@pytest.fixture(scope="session")
def red_png() -> bytes:
    return solid_png((255, 0, 0))


@pytest.fixture()
def settings() -> AppSettings:
    return AppSettings(font_dir=None, http_timeout_seconds=5.0)
