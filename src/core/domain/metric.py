"""Tipos de métrica que sirve el servicio de metering.

Viven en el dominio para que la CLI, el query builder y la fábrica de requests
compartan una única fuente de verdad.
"""

from __future__ import annotations

from enum import Enum


class MetricKind(str, Enum):
    """Familias de recursos sobre las que el servicio agrega uso."""

    BUCKETS = "buckets"
    ACCOUNTS = "accounts"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(kind.value for kind in cls)

    @classmethod
    def parse(cls, value: str | None) -> "MetricKind | None":
        """Devuelve el tipo que coincide, o None si `value` no coincide exactamente."""

        for kind in cls:
            if kind.value == value:
                return kind
        return None
