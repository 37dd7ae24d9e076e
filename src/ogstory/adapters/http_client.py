"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y la traducción de errores de red a
  `FetchFailure`/`FetchTimeout`.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import logging

import httpx

from ogstory.core.config import AppSettings
from ogstory.core.domain.errors import FetchFailure, FetchTimeout

logger = logging.getLogger("ogstory.http")


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que página, imagen y fuentes se
      comporten igual.
    - `transport` permite sustituir la red en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


async def fetch(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """GET sin reintentos; cualquier fallo o status no-2xx es `FetchFailure`."""

    logger.debug("GET %s", url)
    try:
        response = await client.get(url)
    except httpx.TimeoutException as exc:
        raise FetchTimeout(url, f"timed out ({exc.__class__.__name__})") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchFailure(url, str(exc) or exc.__class__.__name__) from exc

    if not response.is_success:
        raise FetchFailure(
            url,
            f"HTTP {response.status_code}",
            status_code=response.status_code,
        )
    logger.debug("GET %s -> %s (%d bytes)", url, response.status_code, len(response.content))
    return response
