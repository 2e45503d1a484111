"""Contratos de clientes de push.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite intercambiar el cliente HTTP, el cliente deshabilitado y los dobles
  de test sin acoplar el Core a una implementación concreta.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CanonicalIdentity(Protocol):
    """Un solicitante autenticado, tal como lo ve el camino de metering."""

    def get_canonical_id(self) -> str:
        ...


@runtime_checkable
class SerializedUidSource(Protocol):
    """Cualquier objeto con una cadena serializada de uids de request (ver `RequestLogger`)."""

    def get_serialized_uids(self) -> str:
        ...


@runtime_checkable
class PushClient(Protocol):
    """Contrato mínimo para reenviar eventos de uso.

    Reglas de diseño:
    - Una llamada por evento, con el payload completo.
    - El valor devuelto es opaco para quien usa el adaptador de push.
    - Cada implementación se ocupa de su propia seguridad entre hilos.
    """

    def push_metric(self, action: str, req_uids: str, payload: dict[str, Any]) -> Any:
        """Reenvía un único evento de uso."""

        ...
