"""SVG -> PNG rasterization.

Synchronous: CairoSVG is CPU-bound local work. The pipeline runs it in a
worker thread.
"""

from __future__ import annotations

import logging

import cairosvg

from ogstory.core.domain.errors import EncodeFailure
from ogstory.core.domain.models import EncodedImage, RenderedDocument

logger = logging.getLogger("ogstory.rasterizer")


def rasterize(doc: RenderedDocument) -> EncodedImage:
    """Render `doc` at its declared size and wrap the PNG bytes."""

    try:
        png = cairosvg.svg2png(
            bytestring=doc.svg.encode("utf-8"),
            output_width=doc.width,
            output_height=doc.height,
        )
    except Exception as exc:
        raise EncodeFailure(f"Could not rasterize story document: {exc}") from exc

    if not png:
        raise EncodeFailure("Rasterizer produced an empty image")
    logger.debug("Rasterized %dx%d story (%d bytes)", doc.width, doc.height, len(png))
    return EncodedImage(data=png, media_type="image/png")
