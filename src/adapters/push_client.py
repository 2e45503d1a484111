"""Clientes de push que reenvían eventos de uso al servicio de metering.

`build_push_client` se llama una vez al arrancar; el handle devuelto se pasa
explícitamente a quien envía métricas y se reutiliza en cada llamada.
"""

from __future__ import annotations

from typing import Any

import httpx

from adapters.http_client import build_client
from core.config import AppSettings
from core.logging import get_logger

logger = get_logger(__name__)


class HttpPushClient:
    """Envía cada evento de uso como JSON al endpoint de push configurado.

    El `httpx.Client` subyacente mantiene un pool de conexiones y se puede
    compartir entre hilos.
    """

    def __init__(
        self,
        push_url: str,
        settings: AppSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        settings = settings or AppSettings()
        self.push_url = push_url
        self._client = build_client(
            settings,
            timeout=settings.push_timeout_seconds,
            transport=transport,
            extra_headers={"content-type": "application/json"},
        )

    def push_metric(self, action: str, req_uids: str, payload: dict[str, Any]) -> httpx.Response:
        logger.debug("pushing metric", action=action, req_uids=req_uids)
        return self._client.post(
            self.push_url,
            json={"action": action, "reqUids": req_uids, "params": payload},
        )

    def close(self) -> None:
        self._client.close()


class DisabledPushClient:
    """Cliente de push que se usa cuando no hay endpoint configurado."""

    def push_metric(self, action: str, req_uids: str, payload: dict[str, Any]) -> None:
        logger.debug("metric push disabled", action=action, req_uids=req_uids)
        return None

    def close(self) -> None:
        return None


def build_push_client(settings: AppSettings | None = None) -> HttpPushClient | DisabledPushClient:
    """Elige el cliente de push que corresponde a `settings`."""

    settings = settings or AppSettings()
    if not settings.push_url:
        return DisabledPushClient()
    return HttpPushClient(settings.push_url, settings)
