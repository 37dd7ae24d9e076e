"""Contratos de fuentes tipográficas.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que el render reciba fuentes del CDN, de un directorio local o de un
  fixture de test sin acoplar el Core a una implementación concreta.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx

from ogstory.core.domain.models import FontAsset


@runtime_checkable
class FontSource(Protocol):
    """Contrato mínimo para un proveedor de fuentes.

    Reglas de diseño:
    - `load` es asíncrono porque típicamente hará I/O (HTTP).
    - Devuelve un `FontAsset` por peso; si falta alguno debe fallar, nunca
      sustituir por otra fuente.
    """

    async def load(self, client: httpx.AsyncClient) -> list[FontAsset]:
        """Obtiene los bytes de cada peso requerido por el render."""

        ...
