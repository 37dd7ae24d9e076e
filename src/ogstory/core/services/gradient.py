"""Color harmony and background gradient derivation."""

from __future__ import annotations

import httpx

from ogstory.adapters.image_sampler import sample
from ogstory.core.domain.color import Color
from ogstory.core.domain.models import GradientSpec

HUE_SHIFT = 20
SATURATION_FACTOR = 0.7
SATURATION_FLOOR = 20
LIGHTNESS_FACTOR = 1.8
LIGHTNESS_CAP = 95


def harmonize(base: Color) -> Color:
    """Return a lighter, slightly hue-shifted companion of `base`.

    Pure and deterministic. Precondition: hue in [0, 360), saturation and
    lightness in [0, 100]; out-of-range inputs are not validated.
    """

    hue = (base.hue + HUE_SHIFT) % 360
    saturation = max(base.saturation * SATURATION_FACTOR, SATURATION_FLOOR)
    lightness = min(base.lightness * LIGHTNESS_FACTOR, LIGHTNESS_CAP)
    return Color.from_hsl(hue, saturation, lightness)


def gradient_from_color(base: Color) -> GradientSpec:
    return GradientSpec(start=base, end=harmonize(base))


async def build_gradient(image_url: str, *, client: httpx.AsyncClient) -> GradientSpec:
    """Sample the dominant color of `image_url` and pair it with its harmony."""

    base = await sample(image_url, client=client)
    return gradient_from_color(base)
