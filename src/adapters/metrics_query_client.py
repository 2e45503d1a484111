"""Cliente de consultas al servicio de metering.

Firma, envía e interpreta exactamente un request ListMetrics/ListRecentMetrics.
El cliente nunca termina el proceso: devuelve un `QueryOutcome` y deja que el
dispatcher de la CLI decida qué imprimir y con qué exit code salir.

No se verifican los certificados TLS del host de metering. La herramienta habla
con un host y puerto que aporta el operador en una red privada; no reutilizar
este cliente contra endpoints no confiables.
"""

from __future__ import annotations

import json

import httpx

from adapters.http_client import build_async_client
from adapters.request_signer import RequestSigner
from core.config import AppSettings
from core.domain.models import QueryOutcome, QueryRequest
from core.logging import get_logger
from core.services.query_builder import build_request_descriptor

logger = get_logger(__name__)


def parse_response_body(text: str) -> tuple[object, bool]:
    """Parsea el body de una respuesta como JSON.

    Devuelve el valor parseado y si el parseo tuvo éxito. Un body vacío
    se parsea como None; un body que no es JSON se devuelve tal cual.
    """

    if not text.strip():
        return None, True
    try:
        return json.loads(text), True
    except json.JSONDecodeError:
        return text, False


class MetricsQueryClient:
    """Lista métricas de buckets o cuentas desde el servicio de metering.

    Uso:
        client = MetricsQueryClient(settings)
        outcome = await client.list_metrics(query)
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        signer: RequestSigner | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._signer = signer or RequestSigner.from_settings(self._settings)
        self._transport = transport

    async def list_metrics(self, query: QueryRequest) -> QueryOutcome:
        """Envía `query` y recoge la respuesta.

        Raises:
            httpx.HTTPError: Ante fallos de conexión o de protocolo.
            httpx.InvalidURL: Si host y puerto no forman una URL válida.
            botocore.exceptions.BotoCoreError: Si falla la firma.
        """

        descriptor = self._signer.sign(
            build_request_descriptor(query),
            query.access_key,
            query.secret_key.get_secret_value(),
        )
        if query.verbose:
            logger.info("request headers", headers=descriptor.headers)

        async with build_async_client(
            self._settings,
            timeout=self._settings.query_timeout_seconds,
            verify=False,
            transport=self._transport,
        ) as client:
            response = await client.request(
                descriptor.method,
                descriptor.url,
                headers=descriptor.headers,
                content=descriptor.encoded_body(),
            )

        if query.verbose:
            logger.info("response status code", status_code=response.status_code)
            logger.info("response headers", headers=dict(response.headers))

        text = response.text
        body, is_json = parse_response_body(text)
        if not is_json:
            logger.warning(
                "response body is not valid JSON",
                status_code=response.status_code,
            )
        return QueryOutcome(
            status_code=response.status_code,
            body=body,
            text=text,
            is_json=is_json,
        )
