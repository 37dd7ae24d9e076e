from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from conftest import solid_png
from ogstory.adapters.rasterizer import rasterize
from ogstory.adapters.story_renderer import render
from ogstory.core.domain.color import Color
from ogstory.core.domain.errors import EncodeFailure
from ogstory.core.domain.models import ImageAsset, OGMetadata, RenderedDocument
from ogstory.core.services.gradient import gradient_from_color

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture()
def document(fonts) -> RenderedDocument:
    metadata = OGMetadata(title="Hello World", description="A short description", host="example.com")
    image = ImageAsset(
        url="https://example.com/red.png",
        data=solid_png((255, 0, 0)),
        media_type="image/png",
        width=120,
        height=60,
    )
    gradient = gradient_from_color(Color.from_rgb(0, 0, 255))
    return render(metadata, gradient, fonts, image=image)


def test_rasterize_produces_png_at_native_size(document):
    encoded = rasterize(document)

    assert encoded.media_type == "image/png"
    assert encoded.data.startswith(PNG_SIGNATURE)
    with Image.open(io.BytesIO(encoded.data)) as image:
        assert image.size == (1080, 1920)


def test_rasterize_paints_gradient_and_card(document):
    encoded = rasterize(document)

    with Image.open(io.BytesIO(encoded.data)) as image:
        rgb = image.convert("RGB")
        top = rgb.getpixel((540, 0))
        center = rgb.getpixel((540, 960))

    assert top[2] > 200 and top[0] < 40
    # The card's image region is red.
    assert center[0] > 200 and center[1] < 40 and center[2] < 40


def test_rasterize_is_deterministic(document):
    assert rasterize(document).data == rasterize(document).data


def test_data_uri_round_trips(document):
    encoded = rasterize(document)

    prefix = "data:image/png;base64,"
    assert encoded.data_uri.startswith(prefix)
    assert base64.b64decode(encoded.data_uri[len(prefix):]) == encoded.data


def test_rasterize_malformed_svg_is_encode_failure():
    with pytest.raises(EncodeFailure):
        rasterize(RenderedDocument(svg="<svg><rect", width=10, height=10))
