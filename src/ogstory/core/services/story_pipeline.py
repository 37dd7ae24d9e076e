"""Story generation orchestration.

The pipeline is a small task graph: fonts and page content (metadata, image,
gradient) are loaded concurrently, joined, then rendered and rasterized.
Each branch reports a tagged `StepResult` instead of raising, and the first
failure is re-raised after the join, so a call either returns a complete
image or fails as a whole.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, TypeVar
from urllib.parse import urljoin

import httpx

from ogstory.adapters.font_loader import resolve_font_source
from ogstory.adapters.http_client import build_async_client
from ogstory.adapters.image_sampler import fetch_image, sample_color
from ogstory.adapters.og_extractor import extract
from ogstory.adapters.rasterizer import rasterize
from ogstory.adapters.story_renderer import render
from ogstory.core.config import AppSettings
from ogstory.core.domain.errors import FetchFailure, OGStoryError
from ogstory.core.domain.models import (
    FontAsset,
    GradientSpec,
    ImageAsset,
    OGMetadata,
    StoryResult,
)
from ogstory.core.interfaces.font_source import FontSource
from ogstory.core.services.gradient import gradient_from_color

logger = logging.getLogger("ogstory.pipeline")

T = TypeVar("T")


@dataclass(frozen=True)
class StepResult(Generic[T]):
    """Outcome of one pipeline branch: either a value or the error it raised."""

    name: str
    value: T | None = None
    error: OGStoryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


@dataclass(frozen=True)
class PageContent:
    """Everything derived from the target page before rendering."""

    metadata: OGMetadata
    image: ImageAsset
    gradient: GradientSpec


async def run_step(name: str, awaitable: Awaitable[T]) -> StepResult[T]:
    try:
        value = await awaitable
    except OGStoryError as exc:
        logger.debug("Step %s failed: %s", name, exc)
        return StepResult(name=name, error=exc)
    return StepResult(name=name, value=value)


def first_failure(results: list[StepResult[Any]]) -> OGStoryError | None:
    for result in results:
        if not result.ok:
            return result.error
    return None


async def load_page_content(url: str, *, client: httpx.AsyncClient) -> PageContent:
    """Extract og tags, fetch the og:image once and derive the gradient from it."""

    metadata = await extract(url, client=client)
    if not metadata.image:
        raise FetchFailure(url, "page declares no og:image")
    image = await fetch_image(urljoin(url, metadata.image), client=client)
    gradient = gradient_from_color(await asyncio.to_thread(sample_color, image))
    logger.info("Gradient for %s: %s", url, gradient.css())
    return PageContent(metadata=metadata, image=image, gradient=gradient)


def compose(content: PageContent, fonts: list[FontAsset]) -> StoryResult:
    document = render(content.metadata, content.gradient, fonts, image=content.image)
    encoded = rasterize(document)
    return StoryResult(metadata=content.metadata, gradient=content.gradient, image=encoded)


async def generate_story(
    url: str,
    *,
    settings: AppSettings | None = None,
    font_source: FontSource | None = None,
    client: httpx.AsyncClient | None = None,
) -> StoryResult:
    """Run the full pipeline for `url` and return metadata, gradient and PNG."""

    settings = settings or AppSettings()
    font_source = font_source or resolve_font_source(settings)

    async def run(active: httpx.AsyncClient) -> StoryResult:
        content_result, fonts_result = await asyncio.gather(
            run_step("content", load_page_content(url, client=active)),
            run_step("fonts", font_source.load(active)),
        )
        error = first_failure([content_result, fonts_result])
        if error is not None:
            raise error
        return await asyncio.to_thread(compose, content_result.unwrap(), fonts_result.unwrap())

    if client is not None:
        return await run(client)
    async with build_async_client(settings) as owned:
        return await run(owned)


async def generate_og_image(
    url: str,
    *,
    settings: AppSettings | None = None,
    font_source: FontSource | None = None,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Return the story image for `url` as `data:image/png;base64,...`."""

    result = await generate_story(url, settings=settings, font_source=font_source, client=client)
    return result.image.data_uri
