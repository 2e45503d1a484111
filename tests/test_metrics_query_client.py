"""Tests for the metering query client."""

from __future__ import annotations

import asyncio
import hashlib
import json

import httpx
import pytest
from structlog.testing import capture_logs

from adapters.metrics_query_client import MetricsQueryClient, parse_response_body
from core.domain.metric import MetricKind
from core.domain.models import QueryRequest


def make_query(**overrides) -> QueryRequest:
    fields = {
        "host": "metering.local",
        "port": "8100",
        "metric": MetricKind.BUCKETS,
        "resources": ("b1", "b2"),
        "time_range": (100, 200),
        "access_key": "AKID",
        "secret_key": "SECRET",
    }
    fields.update(overrides)
    return QueryRequest(**fields)


def run_query(settings, transport, query):
    client = MetricsQueryClient(settings, transport=transport)
    return asyncio.run(client.list_metrics(query))


class TestParseResponseBody:
    """Tests for response body parsing."""

    def test_json_object(self):
        assert parse_response_body('{"a": 1}') == ({"a": 1}, True)

    def test_empty_body_is_null(self):
        assert parse_response_body("") == (None, True)
        assert parse_response_body("  \n") == (None, True)

    def test_invalid_json_falls_back_to_text(self):
        assert parse_response_body("<html>oops</html>") == ("<html>oops</html>", False)


class TestRequestShape:
    """Tests for the request sent to the metering service."""

    def test_list_metrics_request(self, settings, metering_service):
        transport, received = metering_service(200, [])

        run_query(settings, transport, make_query())

        assert len(received) == 1
        request = received[0]
        assert request.method == "POST"
        assert request.url.scheme == "http"
        assert request.url.host == "metering.local"
        assert request.url.port == 8100
        assert request.url.path == "/buckets"
        assert request.url.params["Action"] == "ListMetrics"
        assert request.content == b'{"buckets":["b1","b2"],"timeRange":[100,200]}'

    def test_headers(self, settings, metering_service):
        transport, received = metering_service(200, [])

        run_query(settings, transport, make_query())

        headers = received[0].headers
        assert headers["content-type"] == "application/json"
        assert headers["cache-control"] == "no-cache"
        assert headers["authorization"].startswith("AWS4-HMAC-SHA256 Credential=AKID/")
        assert "x-amz-date" in headers
        assert headers["x-amz-content-sha256"] == hashlib.sha256(b"").hexdigest()
        assert headers["user-agent"] == settings.user_agent

    def test_recent_request(self, settings, metering_service):
        transport, received = metering_service(200, [])

        run_query(
            settings,
            transport,
            make_query(metric=MetricKind.ACCOUNTS, resources=("acc1",), time_range=(), recent=True),
        )

        request = received[0]
        assert request.url.path == "/accounts"
        assert request.url.params["Action"] == "ListRecentMetrics"
        assert json.loads(request.content) == {"accounts": ["acc1"]}

    def test_ssl_request(self, settings, metering_service):
        transport, received = metering_service(200, [])

        run_query(settings, transport, make_query(ssl=True))

        assert received[0].url.scheme == "https"


class TestResponseHandling:
    """Tests for QueryOutcome construction."""

    def test_success(self, settings, metering_service):
        payload = [{"bucketName": "b1", "storageUtilized": [0, 1024]}]
        transport, _ = metering_service(200, payload)

        outcome = run_query(settings, transport, make_query())

        assert outcome.ok
        assert outcome.status_code == 200
        assert outcome.body == payload
        assert outcome.is_json

    def test_no_content(self, settings, metering_service):
        transport, _ = metering_service(204)

        outcome = run_query(settings, transport, make_query())

        assert outcome.ok
        assert outcome.body is None
        assert outcome.render() == "null"

    def test_access_denied(self, settings, metering_service):
        transport, _ = metering_service(403, {"error": "AccessDenied"})

        outcome = run_query(settings, transport, make_query())

        assert not outcome.ok
        assert outcome.status_code == 403
        assert outcome.body == {"error": "AccessDenied"}

    def test_non_json_body(self, settings, metering_service):
        transport, _ = metering_service(200, raw=b"service warming up")

        with capture_logs() as logs:
            outcome = run_query(settings, transport, make_query())

        assert outcome.ok
        assert outcome.is_json is False
        assert outcome.render() == "service warming up"
        assert any(log["event"] == "response body is not valid JSON" for log in logs)

    def test_connection_error_propagates(self, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(httpx.ConnectError):
            run_query(settings, httpx.MockTransport(handler), make_query())


class TestVerbose:
    """Tests for verbose logging."""

    def test_verbose_logs_request_and_response(self, settings, metering_service):
        transport, _ = metering_service(200, [], headers={"x-amz-request-id": "abc"})

        with capture_logs() as logs:
            run_query(settings, transport, make_query(verbose=True))

        events = [log["event"] for log in logs]
        assert events == ["request headers", "response status code", "response headers"]
        assert "Authorization" in logs[0]["headers"]
        assert logs[1]["status_code"] == 200
        assert logs[2]["headers"]["x-amz-request-id"] == "abc"

    def test_quiet_by_default(self, settings, metering_service):
        transport, _ = metering_service(200, [])

        with capture_logs() as logs:
            run_query(settings, transport, make_query())

        assert logs == []
