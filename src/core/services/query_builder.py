"""Construcción y validación de consultas.

La capa CLI solo tokeniza argumentos en un `QueryOptions`; todas las reglas
sobre qué opciones son obligatorias y cómo se parsean viven aquí, así el orden
de validación se puede testear sin lanzar un proceso. El primer fallo lanza
`QueryValidationError`; el dispatcher de la CLI lo convierte en exit code 1.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import cast

from core.domain.metric import MetricKind
from core.domain.models import QueryRequest, RequestDescriptor

# Entero inicial en base 10: espacios y signo opcionales, luego dígitos.
# Lo que sigue a los dígitos se ignora ("12abc" -> 12).
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")

DEFAULT_HEADERS = {
    "content-type": "application/json",
    "cache-control": "no-cache",
}


class QueryValidationError(ValueError):
    """Falta una opción o es inválida; `option` nombra el campo culpable."""

    def __init__(self, option: str, message: str) -> None:
        super().__init__(message)
        self.option = option
        self.message = message


@dataclass(frozen=True)
class QueryOptions:
    """Campos crudos de la CLI, tal como se tokenizaron."""

    host: str | None = None
    port: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    metric: str | None = None
    buckets: str | None = None
    accounts: str | None = None
    start: str | None = None
    end: str | None = None
    verbose: bool = False
    recent: bool = False
    ssl: bool = False

    def resources_for(self, metric: MetricKind) -> str | None:
        return self.buckets if metric is MetricKind.BUCKETS else self.accounts


def parse_epoch(value: str | None) -> int | None:
    """Parsea un entero inicial en base 10; None si no lo hay."""

    if value is None:
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))


def split_resources(value: str) -> list[str]:
    """Separa una lista por comas, conservando orden y segmentos vacíos."""

    return value.split(",")


def _parse_time_range(options: QueryOptions) -> tuple[int, ...]:
    # Un 0 literal se rechaza igual que un valor ausente; se mantiene por
    # compatibilidad con scripts existentes.
    start = parse_epoch(options.start)
    if not start:
        raise QueryValidationError("start", "start must be a number")
    if not options.end:
        return (start,)

    end = parse_epoch(options.end)
    if not end:
        raise QueryValidationError("end", "end must be a number")
    if end < start:
        raise QueryValidationError("end", "end must not be before start")
    return (start, end)


def build_query_request(options: QueryOptions, *, legacy: bool = False) -> QueryRequest:
    """Valida `options` y construye el `QueryRequest` correspondiente.

    Args:
        options: Campos crudos de la CLI.
        legacy: Modo solo-buckets, donde la métrica es implícitamente "buckets".

    Raises:
        QueryValidationError: En la primera opción ausente o inválida.
    """

    if legacy:
        metric = MetricKind.BUCKETS
    else:
        parsed = MetricKind.parse(options.metric)
        if parsed is None:
            raise QueryValidationError("metric", "metric must be buckets or accounts")
        metric = parsed

    required: dict[str, str | None] = {
        "host": options.host,
        "port": options.port,
        "access-key": options.access_key,
        "secret-key": options.secret_key,
    }
    if not legacy:
        required["metric"] = options.metric
    required[metric.value] = options.resources_for(metric)
    if not options.recent:
        required["start"] = options.start

    for option, value in required.items():
        if not value:
            raise QueryValidationError(option, f"missing required option: {option}")

    # El listado reciente ignora cualquier start o end recibido.
    time_range = () if options.recent else _parse_time_range(options)

    resources = cast(str, required[metric.value])

    return QueryRequest(
        host=options.host,
        port=options.port,
        metric=metric,
        resources=tuple(split_resources(resources)),
        time_range=time_range,
        access_key=options.access_key,
        secret_key=options.secret_key,
        verbose=options.verbose,
        recent=options.recent,
        ssl=options.ssl,
    )


def build_request_descriptor(query: QueryRequest) -> RequestDescriptor:
    """Construye el request sin firmar de `query`.

    El body asocia el tipo de métrica a la lista de recursos; `timeRange` solo
    aparece en consultas no recientes.
    """

    body: dict[str, object] = {query.metric.value: list(query.resources)}
    if not query.recent:
        body["timeRange"] = list(query.time_range)

    return RequestDescriptor(
        method="POST",
        scheme=query.scheme,
        host=query.host,
        port=query.port,
        path=query.path,
        headers=dict(DEFAULT_HEADERS),
        body=body,
    )
