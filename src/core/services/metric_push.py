"""Reenvío de eventos de uso.

Traduce un `UsageEvent` al payload que espera el cliente de push y hace
exactamente una llamada de push. Aquí no se valida ni se interpreta nada: los
errores del cliente de push llegan intactos a quien llama.
"""

from __future__ import annotations

from typing import Any

from core.domain.models import UsageEvent
from core.interfaces.push_client import PushClient, SerializedUidSource

# Campo del evento -> clave del payload.
_PASSTHROUGH_FIELDS = (
    ("bucket", "bucket"),
    ("byte_length", "byteLength"),
    ("new_byte_length", "newByteLength"),
    ("old_byte_length", "oldByteLength"),
    ("number_of_objects", "numberOfObjects"),
)


def build_push_payload(event: UsageEvent) -> dict[str, Any]:
    """Payload de `event`; los campos nunca informados quedan fuera."""

    payload: dict[str, Any] = {}
    # Las métricas por cuenta necesitan el id canónico del solicitante.
    if event.auth_info is not None:
        payload["accountId"] = event.auth_info.get_canonical_id()
    for field_name, key in _PASSTHROUGH_FIELDS:
        if field_name in event.model_fields_set:
            payload[key] = getattr(event, field_name)
    return payload


class MetricPushAdapter:
    """Reenvía eventos de uso a través de un cliente de push inyectado."""

    def __init__(self, push_client: PushClient) -> None:
        self._push_client = push_client

    def push(self, event: UsageEvent, log: SerializedUidSource) -> Any:
        return self._push_client.push_metric(
            event.action,
            log.get_serialized_uids(),
            build_push_payload(event),
        )


def push_metric(
    push_client: PushClient,
    action: str,
    log: SerializedUidSource,
    **fields: Any,
) -> Any:
    """Envía un único evento de uso construido a partir de keyword fields.

    Ejemplo:
        push_metric(client, "putObject", log, bucket="b1", new_byte_length=42)
    """

    event = UsageEvent(action=action, **fields)
    return MetricPushAdapter(push_client).push(event, log)
