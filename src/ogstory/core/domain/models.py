"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación y documentación autocontenida (Field) sin acoplar el Core
  a librerías de I/O.
- `frozen=True`: cada artefacto se crea una vez por invocación y no se muta.

Nota:
- Estos modelos describen *qué* produce cada etapa, no *cómo* se obtiene.
"""

from __future__ import annotations

import base64

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ogstory.core.domain.color import Color

CANVAS_WIDTH = 1080
CANVAS_HEIGHT = 1920


class OGMetadata(BaseModel):
    """Campos Open Graph extraídos de la página objetivo."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Contenido de og:title.")
    description: str = Field(
        default="",
        max_length=53,
        description="Contenido de og:description, truncado a 50 + '...'.",
    )
    image: str = Field(default="", description="Contenido de og:image (sin resolver).")
    host: str = Field(default="", description="Autoridad de la URL de origen.")


class GradientSpec(BaseModel):
    """Degradado lineal de dos paradas, de arriba hacia abajo."""

    model_config = ConfigDict(frozen=True)

    start: Color = Field(..., description="Color base (muestreado).")
    end: Color = Field(..., description="Color derivado (armonizado).")
    angle: int = Field(default=180, description="Dirección CSS en grados.")

    def css(self) -> str:
        return f"linear-gradient({self.angle}deg, {self.start.css()}, {self.end.css()})"


class FontAsset(BaseModel):
    """Fuente binaria que el render usa para convertir texto en contornos."""

    model_config = ConfigDict(frozen=True)

    family: str = Field(..., min_length=1)
    style: str = Field(default="normal")
    weight: int = Field(..., ge=100, le=900)
    data: bytes = Field(..., repr=False)


class ImageAsset(BaseModel):
    """Imagen og:image descargada y validada.

    Se descarga una sola vez: sirve para muestrear el color dominante y para
    incrustarla en el documento.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    data: bytes = Field(..., repr=False)
    media_type: str = Field(..., description="MIME detectado por Pillow.")
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    @property
    def data_uri(self) -> str:
        payload = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.media_type};base64,{payload}"


class RenderedDocument(BaseModel):
    """Documento SVG intermedio; nunca se expone al llamador."""

    model_config = ConfigDict(frozen=True)

    svg: str = Field(..., repr=False)
    width: int = Field(default=CANVAS_WIDTH)
    height: int = Field(default=CANVAS_HEIGHT)


class EncodedImage(BaseModel):
    """Salida final: PNG comprimido más su prefijo de media-type."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., repr=False)
    media_type: str = Field(default="image/png")

    @property
    def data_uri(self) -> str:
        payload = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.media_type};base64,{payload}"


class StoryResult(BaseModel):
    """Resultado completo de una invocación (para CLI/exportación)."""

    model_config = ConfigDict(frozen=True)

    metadata: OGMetadata
    gradient: GradientSpec
    image: EncodedImage
