"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta y documentación autocontenida (Field) sin acoplar el Core
  a librerías de I/O.
- Las invariantes de una consulta viven junto a los datos que restringen.

Nota:
- Estos modelos describen *qué* es una consulta o un evento de uso, no *cómo*
  se transmite.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, SecretStr, model_validator
from pydantic.config import ConfigDict

from core.domain.metric import MetricKind
from core.interfaces.push_client import CanonicalIdentity

LIST_METRICS = "ListMetrics"
LIST_RECENT_METRICS = "ListRecentMetrics"


class QueryRequest(BaseModel):
    """Consulta de métricas ya validada, inmutable una vez construida.

    Invariantes:
    - `resources` nunca está vacío.
    - las consultas recientes no llevan rango; el resto lleva `[start]` o
      `[start, end]` con `start <= end`.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., min_length=1, description="Host del servicio de metering.")
    port: str = Field(..., min_length=1, description="Puerto del servicio de metering.")
    metric: MetricKind = Field(..., description="Familia de recursos consultada.")
    resources: tuple[str, ...] = Field(
        ...,
        min_length=1,
        description="Nombres de buckets o cuentas en orden (se conservan los vacíos).",
    )
    time_range: tuple[int, ...] = Field(
        default=(),
        max_length=2,
        description="Vacío en consultas recientes; si no, [start] o [start, end].",
    )
    access_key: str = Field(..., min_length=1, description="Identificador de la access key.")
    secret_key: SecretStr = Field(..., description="Clave secreta de acceso.")
    verbose: bool = False
    recent: bool = False
    ssl: bool = False

    @model_validator(mode="after")
    def _check_time_range(self) -> "QueryRequest":
        if self.recent:
            if self.time_range:
                raise ValueError("recent queries do not take a time range")
            return self
        if not self.time_range:
            raise ValueError("a time range is required unless the query is recent")
        if len(self.time_range) == 2 and self.time_range[0] > self.time_range[1]:
            raise ValueError("time range start must not be after its end")
        return self

    @property
    def action(self) -> str:
        return LIST_RECENT_METRICS if self.recent else LIST_METRICS

    @property
    def path(self) -> str:
        return f"/{self.metric.value}?Action={self.action}"

    @property
    def scheme(self) -> str:
        return "https" if self.ssl else "http"


class RequestDescriptor(BaseModel):
    """Todo lo que el transporte necesita para emitir un request."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(default="POST")
    scheme: str = Field(..., pattern="^https?$")
    host: str = Field(..., min_length=1)
    port: str = Field(..., min_length=1)
    path: str = Field(..., min_length=1)
    headers: dict[str, str] = Field(default_factory=dict)
    body: dict[str, Any] = Field(default_factory=dict)

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}{self.path}"

    def encoded_body(self) -> bytes:
        """Body JSON compacto, claves en orden de inserción."""

        return json.dumps(self.body, separators=(",", ":")).encode("utf-8")


class QueryOutcome(BaseModel):
    """Resultado de una consulta de métricas; la CLI lo consume de inmediato."""

    status_code: int
    body: Any = None
    text: str = ""
    is_json: bool = True

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def render(self) -> str:
        """Texto que se escribe en stdout para una consulta exitosa."""

        if not self.is_json:
            return self.text
        return json.dumps(self.body, indent=2, ensure_ascii=False)


class UsageEvent(BaseModel):
    """Un hecho que cambia el uso y se reenvía al servicio de metering.

    Los campos opcionales que nunca se informaron quedan fuera del payload
    enviado; `old_byte_length` puede ser None explícito (sin objeto previo).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    action: str = Field(..., min_length=1, description="Acción de la métrica, p. ej. putObject.")
    bucket: str | None = Field(default=None, description="Nombre del bucket.")
    auth_info: CanonicalIdentity | None = Field(
        default=None,
        description="Solicitante autenticado; aporta el id canónico de la cuenta.",
    )
    byte_length: int | None = Field(default=None, description="Tamaño actual del objeto.")
    new_byte_length: int | None = Field(default=None, description="Nuevo tamaño del objeto.")
    old_byte_length: int | None = Field(
        default=None,
        description="Tamaño previo del objeto al sobrescribir.",
    )
    number_of_objects: int | None = Field(
        default=None,
        description="Número de objetos añadidos o borrados.",
    )
