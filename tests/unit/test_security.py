"""Redaction, HTTP client and structured logging tests."""

from __future__ import annotations

import io
import json

import httpx
import pytest

from travel_planner.infrastructure.logging import StructuredLogger
from travel_planner.security.http_client import SecureHttpClient
from travel_planner.security.redact import redact_sensitive
from travel_planner.shared.exceptions import ExternalServiceUnavailable


@pytest.mark.parametrize(
    "raw",
    [
        "https://api.openweathermap.org/data/2.5/weather?lat=1&appid=abc123&units=metric",
        "https://api.geoapify.com/v2/places?apiKey=abc123&limit=50",
        '{"api_key": "abc123"}',
        "Authorization: Bearer abc123",
    ],
)
def test_redact_sensitive_hides_credentials(raw):
    redacted = redact_sensitive(raw)
    assert "abc123" not in redacted
    assert "***REDACTED***" in redacted


def test_redact_sensitive_keeps_plain_text():
    assert redact_sensitive("lat=41.9&lon=12.5") == "lat=41.9&lon=12.5"
    assert redact_sensitive("") == ""


def test_http_client_returns_json_and_passes_params():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"echo": request.url.params["q"]})

    client = SecureHttpClient(timeout=3.0, client=httpx.Client(transport=httpx.MockTransport(handler)))
    assert client.timeout == 3.0
    assert client.get_json("https://example.test/x", params={"q": "roma"}) == {"echo": "roma"}


def test_http_client_error_names_service():
    client = SecureHttpClient(
        service_name="weather",
        client=httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(502))),
    )
    with pytest.raises(ExternalServiceUnavailable) as excinfo:
        client.get_json("https://example.test/weather?appid=abc123")
    assert excinfo.value.service == "weather"
    assert str(excinfo.value) == "[weather] HTTP 502"


def test_structured_logger_emits_redacted_json_lines():
    output = io.StringIO()
    logger = StructuredLogger(trace_id="t-1", output=output)
    logger.fallback("places", "synthetic", "provider_failed", error="GET /v2/places?apiKey=abc123 failed")
    logger.provider_call("weather", city="Roma")

    lines = [json.loads(line) for line in output.getvalue().splitlines()]
    assert lines[0]["event"] == "fallback"
    assert lines[0]["reason"] == "provider_failed"
    assert lines[0]["trace_id"] == "t-1"
    assert "abc123" not in lines[0]["error"]
    assert lines[1]["event"] == "provider_call"
    assert lines[1]["provider"] == "weather"
    assert lines[1]["city"] == "Roma"
