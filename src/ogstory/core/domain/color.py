"""Color en espacio HSL con proyección RGB.

Por qué HSL:
- Las reglas de armonía (girar tono, bajar saturación, subir luminosidad) se
  expresan directamente en HSL.
- El render solo necesita la proyección `rgb(r, g, b)`.
"""

from __future__ import annotations

import colorsys

from pydantic import BaseModel, ConfigDict, Field


def _clamp_channel(value: float) -> int:
    return max(0, min(255, round(value * 255)))


class Color(BaseModel):
    """Punto en HSL: hue 0–360°, saturation y lightness 0–100 %."""

    model_config = ConfigDict(frozen=True)

    hue: float = Field(..., description="Tono en grados (0–360).")
    saturation: float = Field(..., description="Saturación HSL (0–100).")
    lightness: float = Field(..., description="Luminosidad HSL (0–100).")

    @classmethod
    def from_hsl(cls, hue: float, saturation: float, lightness: float) -> "Color":
        return cls(hue=hue, saturation=saturation, lightness=lightness)

    @classmethod
    def from_rgb(cls, red: int, green: int, blue: int) -> "Color":
        """Construye el color a partir de canales sRGB 0–255."""

        h, l, s = colorsys.rgb_to_hls(red / 255, green / 255, blue / 255)
        return cls(hue=h * 360, saturation=s * 100, lightness=l * 100)

    def rgb(self) -> tuple[int, int, int]:
        """Proyección RGB redondeada a enteros."""

        r, g, b = colorsys.hls_to_rgb(
            (self.hue % 360) / 360,
            self.lightness / 100,
            self.saturation / 100,
        )
        return _clamp_channel(r), _clamp_channel(g), _clamp_channel(b)

    def css(self) -> str:
        r, g, b = self.rgb()
        return f"rgb({r}, {g}, {b})"

    def hex(self) -> str:
        r, g, b = self.rgb()
        return f"#{r:02x}{g:02x}{b:02x}"
