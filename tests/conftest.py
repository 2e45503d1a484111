"""Shared fixtures: settings without env files and a fake metering service."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from core.config import AppSettings


class FakeAuthInfo:
    """Authenticated requester exposing a canonical id."""

    def __init__(self, canonical_id: str) -> None:
        self._canonical_id = canonical_id

    def get_canonical_id(self) -> str:
        return self._canonical_id


@pytest.fixture
def settings(monkeypatch) -> AppSettings:
    for name in ("UTAPI_LOG_LEVEL", "UTAPI_LOG_FORMAT", "UTAPI_PUSH_URL"):
        monkeypatch.delenv(name, raising=False)
    return AppSettings(_env_file=None)


@pytest.fixture
def auth_info() -> Callable[[str], FakeAuthInfo]:
    return FakeAuthInfo


@pytest.fixture
def metering_service() -> Callable[..., tuple[httpx.MockTransport, list[httpx.Request]]]:
    """Build a mock transport answering every request with a fixed response.

    Returns the transport and the list the received requests are appended to.
    """

    def factory(
        status_code: int = 200,
        body: Any = None,
        *,
        raw: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> tuple[httpx.MockTransport, list[httpx.Request]]:
        received: list[httpx.Request] = []
        if raw is not None:
            content = raw
        elif body is None:
            content = b""
        else:
            content = json.dumps(body).encode("utf-8")

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(request)
            return httpx.Response(status_code, content=content, headers=headers)

        return httpx.MockTransport(handler), received

    return factory
