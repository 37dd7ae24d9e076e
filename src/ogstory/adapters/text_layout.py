"""Font-metric text layout and glyph-outline conversion.

Text is drawn as `<path>` outlines taken from the supplied font bytes, so the
rasterizer never falls back to a system font with different glyphs.
Kerning and complex shaping are not applied; advances come from `hmtx`.
"""

from __future__ import annotations

import io
from dataclasses import dataclass

from fontTools.pens.svgPathPen import SVGPathPen
from fontTools.pens.transformPen import TransformPen
from fontTools.ttLib import TTFont

from ogstory.core.domain.errors import RenderFailure
from ogstory.core.domain.models import FontAsset

TRUNCATION_MARK = "…"


def format_number(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


class FontFace:
    """Metrics and outlines of one loaded font."""

    def __init__(self, asset: FontAsset) -> None:
        self.asset = asset
        try:
            font = TTFont(io.BytesIO(asset.data))
            self.units_per_em = font["head"].unitsPerEm
            self.ascent = font["hhea"].ascent
            self.descent = font["hhea"].descent
            self._hmtx = font["hmtx"]
            self._cmap = font.getBestCmap() or {}
            self._glyph_set = font.getGlyphSet()
        except Exception as exc:
            raise RenderFailure(
                f"Unreadable font data for {asset.family} {asset.weight}: {exc}"
            ) from exc

    def glyph_name(self, char: str) -> str:
        return self._cmap.get(ord(char), ".notdef")

    def advances(self, text: str, size: float) -> list[float]:
        scale = size / self.units_per_em
        return [self._hmtx[self.glyph_name(ch)][0] * scale for ch in text]

    def measure(self, text: str, size: float) -> float:
        return sum(self.advances(text, size))

    def baseline_offset(self, size: float, line_height: float) -> float:
        """Distance from the top of a line box to its baseline."""

        scale = size / self.units_per_em
        content = (self.ascent - self.descent) * scale
        return (line_height - content) / 2 + self.ascent * scale

    def outline(self, text: str, x: float, baseline: float, size: float) -> str:
        """SVG path data for `text` starting at (`x`, `baseline`)."""

        pen = SVGPathPen(self._glyph_set, ntos=format_number)
        scale = size / self.units_per_em
        cursor = x
        for char in text:
            name = self.glyph_name(char)
            glyph = self._glyph_set[name]
            glyph.draw(TransformPen(pen, (scale, 0, 0, -scale, cursor, baseline)))
            cursor += self._hmtx[name][0] * scale
        return pen.getCommands()


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


def _break_word(face: FontFace, word: str, size: float, max_width: float) -> list[str]:
    """Split `word` into pieces no wider than `max_width`, one char minimum each."""

    pieces: list[str] = []
    start = 0
    width = 0.0
    for index, advance in enumerate(face.advances(word, size)):
        if index > start and width + advance > max_width:
            pieces.append(word[start:index])
            start = index
            width = 0.0
        width += advance
    pieces.append(word[start:])
    return pieces


def wrap_lines(face: FontFace, text: str, size: float, max_width: float) -> list[str]:
    """Greedy word wrap; words wider than a line are broken by character."""

    lines: list[str] = []
    current = ""
    for word in normalize_whitespace(text).split(" "):
        if not word:
            continue
        candidate = f"{current} {word}" if current else word
        if face.measure(candidate, size) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
            current = ""
        *pieces, current = _break_word(face, word, size, max_width)
        lines.extend(pieces)
    if current:
        lines.append(current)
    return lines


def truncate_line(face: FontFace, text: str, size: float, max_width: float) -> str:
    """Clamp `text` to one line, ending in an ellipsis when it overflows."""

    text = normalize_whitespace(text)
    advances = face.advances(text, size)
    if sum(advances) <= max_width:
        return text
    budget = max_width - face.measure(TRUNCATION_MARK, size)
    cut = 0
    width = 0.0
    for index, advance in enumerate(advances):
        width += advance
        if width > budget:
            break
        cut = index + 1
    return text[:cut].rstrip() + TRUNCATION_MARK


@dataclass
class TextLine:
    """One laid-out line of text."""

    text: str
    x: float
    top: float
    size: float
    line_height: float
    color: str
    face: FontFace

    @property
    def baseline(self) -> float:
        return self.top + self.face.baseline_offset(self.size, self.line_height)

    def path_data(self) -> str:
        return self.face.outline(self.text, self.x, self.baseline, self.size)
