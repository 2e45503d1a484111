"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (firma, HTTP, push) lean config de forma consistente.

Host, puerto y credenciales no son settings: son entradas de la CLI que valida
el query builder.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "utapi-tools"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "utapi-tools"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "utapi-tools"
    return Path.home() / ".config" / "utapi-tools"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="UTAPI_",
        extra="ignore",
        case_sensitive=False,
        # Orden: primero el proyecto (dev), luego la config del usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    signing_service: str = Field(
        default="s3",
        min_length=1,
        description="Identificador de servicio en el scope de credenciales SigV4.",
    )
    signing_region: str = Field(
        default="us-east-1",
        min_length=1,
        description="Región en el scope de credenciales SigV4.",
    )

    query_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout de las consultas de métricas (segundos). None espera indefinidamente.",
    )
    user_agent: str = Field(
        default="utapi-tools/0.1",
        min_length=1,
        description="User-Agent para peticiones al servicio de metering.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Nivel de log raíz (DEBUG, INFO, WARNING, ERROR).",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Renderer de logs: consola legible o líneas JSON.",
    )

    push_url: str | None = Field(
        default=None,
        description="Endpoint que recibe los eventos de uso. Sin valor, el push queda deshabilitado.",
    )
    push_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout de un único request de push (segundos).",
    )
