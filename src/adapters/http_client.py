"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y política TLS de todas las peticiones salientes.
- Facilita testeo: se puede inyectar un `transport` (p. ej. `httpx.MockTransport`).
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def _base_headers(settings: AppSettings, extra_headers: dict[str, str] | None) -> dict[str, str]:
    headers: dict[str, str] = {"User-Agent": settings.user_agent}
    if extra_headers:
        headers.update(extra_headers)
    return headers


def build_async_client(
    settings: AppSettings | None = None,
    *,
    timeout: float | None = None,
    verify: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` para el servicio de metering.

    `timeout=None` desactiva los timeouts. No se siguen redirects: un request
    firmado solo es válido para el path con el que se firmó.
    """

    settings = settings or AppSettings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        verify=verify,
        follow_redirects=False,
        headers=_base_headers(settings, extra_headers),
        transport=transport,
    )


def build_client(
    settings: AppSettings | None = None,
    *,
    timeout: float | None = None,
    transport: httpx.BaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` bloqueante, que su dueño reutiliza entre llamadas."""

    settings = settings or AppSettings()
    return httpx.Client(
        timeout=httpx.Timeout(timeout),
        follow_redirects=False,
        headers=_base_headers(settings, extra_headers),
        transport=transport,
    )
