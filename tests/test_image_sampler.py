from __future__ import annotations

import io

import pytest
from PIL import Image

from conftest import html_route, make_transport, png_route, solid_png
from ogstory.adapters.http_client import build_async_client
from ogstory.adapters.image_sampler import (
    decode_image,
    dominant_color,
    fetch_image,
    sample,
    sample_color,
)
from ogstory.core.domain.errors import FetchFailure
from ogstory.core.services.gradient import build_gradient


def _two_tone_png() -> bytes:
    image = Image.new("RGB", (100, 10), (0, 0, 255))
    image.paste((255, 0, 0), (0, 0, 30, 10))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def test_dominant_color_of_solid_red_is_red_bin_center(red_png):
    color = dominant_color(red_png)

    assert color.rgb() == (248, 8, 8)
    assert color.hue == pytest.approx(0)


def test_dominant_color_picks_most_frequent_bin():
    color = dominant_color(_two_tone_png())

    assert color.rgb() == (8, 8, 248)


def test_dominant_color_ignores_alpha_channel():
    buffer = io.BytesIO()
    Image.new("RGBA", (8, 8), (0, 255, 0, 128)).save(buffer, format="PNG")

    assert dominant_color(buffer.getvalue()).rgb() == (8, 248, 8)


def test_dominant_color_rejects_non_image():
    with pytest.raises(ValueError):
        dominant_color(b"<html>not an image</html>")


async def test_fetch_image_reports_format_and_size(settings, red_png):
    transport = make_transport({"https://example.com/red.png": png_route(red_png)})

    async with build_async_client(settings, transport=transport) as client:
        asset = await fetch_image("https://example.com/red.png", client=client)

    assert asset.media_type == "image/png"
    assert (asset.width, asset.height) == (120, 60)
    assert asset.data == red_png
    assert asset.data_uri.startswith("data:image/png;base64,")


async def test_fetch_image_jpeg_media_type(settings):
    buffer = io.BytesIO()
    Image.new("RGB", (10, 20), (10, 20, 30)).save(buffer, format="JPEG")
    transport = make_transport({"https://example.com/a.jpg": png_route(buffer.getvalue())})

    async with build_async_client(settings, transport=transport) as client:
        asset = await fetch_image("https://example.com/a.jpg", client=client)

    assert asset.media_type == "image/jpeg"


async def test_fetch_image_non_image_payload_is_fetch_failure(settings):
    transport = make_transport({"https://example.com/fake.png": html_route(b"<html></html>")})

    async with build_async_client(settings, transport=transport) as client:
        with pytest.raises(FetchFailure, match="not an image"):
            await fetch_image("https://example.com/fake.png", client=client)


async def test_sample_missing_image_is_fetch_failure(settings):
    transport = make_transport({})

    async with build_async_client(settings, transport=transport) as client:
        with pytest.raises(FetchFailure) as excinfo:
            await sample("https://example.com/missing.png", client=client)

    assert excinfo.value.status_code == 404


async def test_build_gradient_pairs_base_and_harmony(settings):
    transport = make_transport({"https://example.com/blue.png": png_route(solid_png((0, 0, 255)))})

    async with build_async_client(settings, transport=transport) as client:
        gradient = await build_gradient("https://example.com/blue.png", client=client)

    assert gradient.start.rgb() == (8, 8, 248)
    assert gradient.end.hue == pytest.approx((gradient.start.hue + 20) % 360)
    assert gradient.end.lightness > gradient.start.lightness
    assert gradient.end.saturation >= 20


async def test_fetch_image_decompression_bomb_is_fetch_failure(monkeypatch, settings, red_png):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    transport = make_transport({"https://example.com/red.png": png_route(red_png)})

    async with build_async_client(settings, transport=transport) as client:
        with pytest.raises(FetchFailure, match="image too large"):
            await fetch_image("https://example.com/red.png", client=client)


def test_dominant_color_decompression_bomb_is_value_error(monkeypatch, red_png):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(ValueError, match="image too large"):
        dominant_color(red_png)


def test_sample_color_maps_decode_errors_to_fetch_failure(monkeypatch, red_png):
    asset = decode_image("https://example.com/red.png", red_png)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(FetchFailure) as excinfo:
        sample_color(asset)

    assert excinfo.value.url == "https://example.com/red.png"
