"""Fuentes tipográficas para el render (CDN o directorio local).

Por qué dos fuentes:
- El CDN es el camino por defecto.
- Un directorio local (`OG_STORY_FONT_DIR`) permite trabajar sin red, con las
  mismas fuentes: nunca se sustituye por una fuente del sistema.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

from ogstory.adapters.http_client import fetch
from ogstory.core.config import AppSettings
from ogstory.core.domain.errors import FetchFailure
from ogstory.core.domain.models import FontAsset
from ogstory.core.interfaces.font_source import FontSource

logger = logging.getLogger("ogstory.fonts")

REGULAR_WEIGHT = 400
MEDIUM_WEIGHT = 500


def _font_files(settings: AppSettings) -> list[tuple[int, str]]:
    return [
        (REGULAR_WEIGHT, settings.font_regular_file),
        (MEDIUM_WEIGHT, settings.font_medium_file),
    ]


class CdnFontSource(FontSource):
    """Descarga ambos pesos desde el CDN, en paralelo."""

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()

    def url_for(self, filename: str) -> str:
        return f"{self._settings.font_cdn_base_url.rstrip('/')}/{filename}"

    async def load(self, client: httpx.AsyncClient) -> list[FontAsset]:
        async def load_one(weight: int, filename: str) -> FontAsset:
            response = await fetch(client, self.url_for(filename))
            return FontAsset(
                family=self._settings.font_family,
                style="normal",
                weight=weight,
                data=response.content,
            )

        fonts = await asyncio.gather(
            *(load_one(weight, filename) for weight, filename in _font_files(self._settings))
        )
        logger.debug("Loaded %d fonts from %s", len(fonts), self._settings.font_cdn_base_url)
        return list(fonts)


class LocalFontSource(FontSource):
    """Lee los mismos archivos desde un directorio local."""

    def __init__(self, font_dir: Path, settings: AppSettings | None = None) -> None:
        self._font_dir = font_dir
        self._settings = settings or AppSettings()

    async def load(self, client: httpx.AsyncClient) -> list[FontAsset]:
        fonts: list[FontAsset] = []
        for weight, filename in _font_files(self._settings):
            path = self._font_dir / filename
            try:
                data = await asyncio.to_thread(path.read_bytes)
            except OSError as exc:
                raise FetchFailure(str(path), f"font file unavailable ({exc.strerror})") from exc
            fonts.append(
                FontAsset(
                    family=self._settings.font_family,
                    style="normal",
                    weight=weight,
                    data=data,
                )
            )
        logger.debug("Loaded %d fonts from %s", len(fonts), self._font_dir)
        return fonts


def resolve_font_source(settings: AppSettings) -> FontSource:
    """Directorio local si está configurado; si no, el CDN."""

    if settings.font_dir is not None:
        return LocalFontSource(settings.font_dir, settings)
    return CdnFontSource(settings)
