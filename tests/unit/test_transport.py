"""Unit tests for the authenticated transport."""

from unittest.mock import patch

import httpx
import pytest

from src.services.transport import Transport
from src.utils.errors import ApiError, NetworkError, RequestTimeoutError, UnauthenticatedError


def _mock_response(status_code: int, **kwargs) -> httpx.Response:
    """Create a mock httpx.Response with a request attached."""
    request = httpx.Request("GET", "http://verify.test")
    return httpx.Response(status_code, request=request, **kwargs)


async def test_request_attaches_key_and_identification_headers(settings):
    mock_response = _mock_response(200, json={"success": True})

    with patch.object(httpx.AsyncClient, "request", return_value=mock_response) as mock_request:
        transport = Transport(settings)
        data = await transport.request("POST", "/extension/verify", {"url": "https://example.com"})
        await transport.close()

    assert data == {"success": True}
    method, url = mock_request.call_args.args
    assert method == "POST"
    assert url == "http://verify.test/extension/verify"
    headers = mock_request.call_args.kwargs["headers"]
    assert headers["x-api-key"] == "test-key"
    assert headers["x-machine-id"] == "machine-1"
    assert headers["x-session-id"] == "session-1"
    assert headers["User-Agent"].startswith("UpRockVerify/")
    assert mock_request.call_args.kwargs["json"] == {"url": "https://example.com"}


async def test_get_never_carries_a_body(settings):
    mock_response = _mock_response(200, json={"ok": True})

    with patch.object(httpx.AsyncClient, "request", return_value=mock_response) as mock_request:
        transport = Transport(settings)
        await transport.request("get", "/extension/status", {"ignored": True})
        await transport.close()

    assert mock_request.call_args.args[0] == "GET"
    assert "json" not in mock_request.call_args.kwargs


async def test_missing_key_fails_before_any_io(settings_without_key):
    with patch.object(httpx.AsyncClient, "request") as mock_request:
        transport = Transport(settings_without_key)
        with pytest.raises(UnauthenticatedError):
            await transport.request("GET", "/extension/status")
        await transport.close()

    mock_request.assert_not_called()


async def test_error_body_message_is_used(settings):
    mock_response = _mock_response(404, json={"error": "Job not found"})

    with patch.object(httpx.AsyncClient, "request", return_value=mock_response):
        transport = Transport(settings)
        with pytest.raises(ApiError) as exc_info:
            await transport.request("GET", "/extension/job/abc")
        await transport.close()

    assert exc_info.value.http_status == 404
    assert exc_info.value.message == "Job not found"
    assert str(exc_info.value) == "API Error (404): Job not found"
    assert exc_info.value.retryable is False


async def test_error_without_structured_body_uses_reason_phrase(settings):
    mock_response = _mock_response(502, text="<html>upstream down</html>")

    with patch.object(httpx.AsyncClient, "request", return_value=mock_response):
        transport = Transport(settings)
        with pytest.raises(ApiError) as exc_info:
            await transport.request("GET", "/extension/status")
        await transport.close()

    assert exc_info.value.http_status == 502
    assert exc_info.value.message == "Bad Gateway"


@pytest.mark.parametrize("body", [b"", b"null"])
async def test_empty_and_null_bodies_become_none(settings, body):
    mock_response = _mock_response(200, content=body)

    with patch.object(httpx.AsyncClient, "request", return_value=mock_response):
        transport = Transport(settings)
        data = await transport.request("GET", "/extension/status")
        await transport.close()

    assert data is None


async def test_timeout_is_distinct_from_api_error(settings):
    with patch.object(httpx.AsyncClient, "request", side_effect=httpx.ReadTimeout("timed out")):
        transport = Transport(settings)
        with pytest.raises(RequestTimeoutError) as exc_info:
            await transport.request("GET", "/extension/job/abc")
        await transport.close()

    assert "taking longer than expected" in str(exc_info.value)


async def test_other_transport_failures_are_network_errors(settings):
    with patch.object(httpx.AsyncClient, "request", side_effect=httpx.ConnectError("refused")):
        transport = Transport(settings)
        with pytest.raises(NetworkError) as exc_info:
            await transport.request("GET", "/extension/status")
        await transport.close()

    assert str(exc_info.value) == "Network Error: refused"


async def test_validate_api_key_sends_key_in_body_not_header(settings_without_key):
    mock_response = _mock_response(200, json={"valid": True})

    with patch.object(httpx.AsyncClient, "request", return_value=mock_response) as mock_request:
        transport = Transport(settings_without_key)
        data = await transport.validate_api_key("candidate")
        await transport.close()

    assert data == {"valid": True}
    assert mock_request.call_args.kwargs["json"] == {"apiKey": "candidate"}
    assert "x-api-key" not in mock_request.call_args.kwargs["headers"]
