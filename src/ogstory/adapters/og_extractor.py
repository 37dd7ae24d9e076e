"""Extracción de metadata Open Graph.

Extrae (si existe):
- meta[property=og:title]
- meta[property=og:description]
- meta[property=og:image]

Los campos ausentes quedan como "" (nunca None, nunca excepción).
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

import httpx
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from ogstory.adapters.http_client import fetch
from ogstory.core.domain.errors import ParseFailure
from ogstory.core.domain.models import OGMetadata

logger = logging.getLogger("ogstory.extractor")

DESCRIPTION_LIMIT = 50
ELLIPSIS = "..."

_OG_FIELDS = ("title", "description", "image")


def parse_og_tags(html: str) -> dict[str, str]:
    """Lee el `content` de cada og:* presente en el HTML.

    Lanza `ParseFailure` solo si el parser rechaza el markup por completo.
    """

    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ParseFailure(str(exc)) from exc

    out: dict[str, str] = {}
    for field in _OG_FIELDS:
        tag = soup.find("meta", attrs={"property": f"og:{field}"})
        content = tag.get("content") if tag else None
        out[field] = str(content) if content else ""
    return out


def truncate_description(description: str) -> str:
    """Corta a 50 code points y agrega '...'; si cabe, la devuelve intacta."""

    if len(description) > DESCRIPTION_LIMIT:
        return description[:DESCRIPTION_LIMIT] + ELLIPSIS
    return description


def derive_host(url: str) -> str:
    """Autoridad de la URL de origen.

    Si la URL no tiene esquema y autoridad, se usa el tercer segmento separado
    por "/" del string crudo ("" si no existe): `example.com/page` -> "".
    """

    try:
        parts = urlsplit(url)
    except ValueError:
        parts = None
    if parts is not None and parts.scheme and parts.netloc:
        return parts.netloc

    segments = url.split("/")
    return segments[2] if len(segments) > 2 else ""


def build_metadata(*, url: str, html: str) -> OGMetadata:
    """Arma `OGMetadata` desde HTML ya descargado."""

    try:
        tags = parse_og_tags(html)
    except ParseFailure as exc:
        logger.warning("Could not parse markup from %s, using empty fields: %s", url, exc)
        tags = {field: "" for field in _OG_FIELDS}

    return OGMetadata(
        title=tags["title"],
        description=truncate_description(tags["description"]),
        image=tags["image"],
        host=derive_host(url),
    )


async def extract(url: str, *, client: httpx.AsyncClient) -> OGMetadata:
    """Descarga `url` y devuelve su metadata Open Graph."""

    response = await fetch(client, url)
    metadata = build_metadata(url=url, html=response.text or "")
    logger.info(
        "Extracted og tags from %s (title=%r, image=%r)",
        url,
        metadata.title,
        metadata.image,
    )
    return metadata
