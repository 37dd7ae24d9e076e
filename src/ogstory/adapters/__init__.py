"""Adaptadores de infraestructura: HTTP, parsing, imagen, fuentes, SVG y PNG."""
