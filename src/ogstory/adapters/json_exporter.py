"""Exportación JSON de la metadata y el degradado.

Por qué JSON:
- Permite inspeccionar qué extrajo el pipeline sin abrir el PNG.
- Interoperabilidad con otras herramientas (diffs, fixtures de tests).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ogstory.core.domain.models import GradientSpec, OGMetadata


def story_payload(*, metadata: OGMetadata, gradient: GradientSpec) -> dict[str, Any]:
    """Estructura serializable: campos og + colores en HSL, RGB y CSS."""

    def color_payload(color) -> dict[str, Any]:
        return {
            **color.model_dump(mode="json"),
            "rgb": list(color.rgb()),
            "css": color.css(),
        }

    return {
        "metadata": metadata.model_dump(mode="json"),
        "gradient": {
            "angle": gradient.angle,
            "start": color_payload(gradient.start),
            "end": color_payload(gradient.end),
            "css": gradient.css(),
        },
    }


def export_story_json(*, metadata: OGMetadata, gradient: GradientSpec, output_path: Path) -> Path:
    """Exporta metadata + degradado a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = story_payload(metadata=metadata, gradient=gradient)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
