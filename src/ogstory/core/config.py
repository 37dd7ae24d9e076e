"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/fuentes/render) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FONT_CDN_BASE_URL = (
    "https://cdn.jsdelivr.net/gh/wanteddev/wanted-sans@v1.0.3/"
    "packages/wanted-sans/fonts/otf"
)


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "og-story"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "og-story"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "og-story"
    return Path.home() / ".config" / "og-story"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# og-story user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="OG_STORY_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos): página, imagen y fuentes.",
    )
    user_agent: str = Field(
        default="og-story/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para las peticiones HTTP.",
    )

    font_cdn_base_url: str = Field(
        default=DEFAULT_FONT_CDN_BASE_URL,
        min_length=8,
        description="Base URL del CDN que sirve las fuentes OTF.",
    )
    font_family: str = Field(
        default="Wanted Sans",
        min_length=1,
        description="Nombre de familia asignado a las fuentes cargadas.",
    )
    font_regular_file: str = Field(
        default="WantedSans-Regular.otf",
        min_length=1,
        description="Archivo de la fuente de peso 400.",
    )
    font_medium_file: str = Field(
        default="WantedSans-Medium.otf",
        min_length=1,
        description="Archivo de la fuente de peso 500.",
    )
    font_dir: Path | None = Field(
        default=None,
        description="Directorio local con las fuentes; si existe, no se usa el CDN.",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Nivel de logging para la CLI.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value
