"""Image download and dominant-color sampling.

Decoding runs in a worker thread (`asyncio.to_thread`); a large og:image
must not stall the font fetches sharing the event loop.
"""

from __future__ import annotations

import asyncio
import io
import logging

import httpx
from PIL import Image, UnidentifiedImageError

from ogstory.adapters.http_client import fetch
from ogstory.core.domain.color import Color
from ogstory.core.domain.errors import FetchFailure
from ogstory.core.domain.models import ImageAsset

logger = logging.getLogger("ogstory.sampler")

# 16 bins per channel -> 4096-bin 3D histogram.
_BIN_SHIFT = 4
_BIN_SIZE = 1 << _BIN_SHIFT


def open_image(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def dominant_color(data: bytes) -> Color:
    """Return the center of the most populated bin of the RGB histogram.

    Ties go to the smallest bin so the result is deterministic. A solid
    `(255, 0, 0)` image yields `rgb(248, 8, 8)`.
    """

    try:
        image = open_image(data)
    except Image.DecompressionBombError as exc:
        raise ValueError(f"image too large: {exc}") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ValueError(f"not an image: {exc}") from exc

    rgb = image.convert("RGB")
    binned = rgb.point(lambda v: v >> _BIN_SHIFT)
    counts = binned.getcolors(maxcolors=_BIN_SIZE**3) or []
    if not counts:
        raise ValueError("image has no pixels")

    _, (r, g, b) = min(counts, key=lambda item: (-item[0], item[1]))
    half = _BIN_SIZE // 2
    return Color.from_rgb(r * _BIN_SIZE + half, g * _BIN_SIZE + half, b * _BIN_SIZE + half)


def decode_image(image_url: str, data: bytes, *, content_type: str = "") -> ImageAsset:
    """Validate that Pillow can decode `data` and describe it."""

    try:
        image = open_image(data)
    except Image.DecompressionBombError as exc:
        raise FetchFailure(image_url, "image too large") from exc
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise FetchFailure(
            image_url,
            f"not an image (Content-Type={content_type or 'unknown'})",
        ) from exc

    media_type = Image.MIME.get(image.format or "", "image/png")
    width, height = image.size
    return ImageAsset(
        url=image_url,
        data=data,
        media_type=media_type,
        width=width,
        height=height,
    )


def sample_color(asset: ImageAsset) -> Color:
    """Dominant color of an already validated image."""

    try:
        return dominant_color(asset.data)
    except ValueError as exc:
        raise FetchFailure(asset.url, str(exc)) from exc


async def fetch_image(image_url: str, *, client: httpx.AsyncClient) -> ImageAsset:
    """Download an image and validate that Pillow can decode it."""

    response = await fetch(client, image_url)
    asset = await asyncio.to_thread(
        decode_image,
        image_url,
        response.content,
        content_type=response.headers.get("Content-Type", ""),
    )
    logger.debug(
        "Fetched image %s (%s, %dx%d)", image_url, asset.media_type, asset.width, asset.height
    )
    return asset


async def sample(image_url: str, *, client: httpx.AsyncClient) -> Color:
    """Fetch `image_url` and return its dominant color."""

    asset = await fetch_image(image_url, client=client)
    return await asyncio.to_thread(sample_color, asset)
