"""Authenticated HTTP transport for the verification service."""

import json
from typing import Any

import httpx
import structlog

from src.config.constants import ENDPOINTS
from src.config.settings import Settings, get_settings
from src.utils.errors import ApiError, NetworkError, RequestTimeoutError, UnauthenticatedError

log = structlog.get_logger()


def decode_body(response: httpx.Response) -> Any:
    """Parse a response body; empty or literal `null` bodies become None."""
    text = response.text
    if not text or text.strip() == "null":
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


class Transport:
    """Async request/response exchange with the verification API.

    Owns header construction, the timeout and error normalisation. Every
    request carries the API key; a missing key fails before any I/O.
    """

    def __init__(self, settings: Settings | None = None, api_key: str | None = None) -> None:
        self.settings = settings or get_settings()
        self.base_url = self.settings.api_base_url
        self._api_key = api_key or self.settings.api_key
        self._client = httpx.AsyncClient(
            timeout=self.settings.timeout_seconds, follow_redirects=True
        )

    @property
    def api_key(self) -> str | None:
        return self._api_key

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def set_api_key(self, api_key: str | None) -> None:
        self._api_key = api_key or None

    def _headers(self, api_key: str | None) -> dict[str, str]:
        version = self.settings.extension_version
        headers = {
            "Content-Type": "application/json",
            "x-extension-version": version,
            "x-machine-id": self.settings.machine_id,
            "x-session-id": self.settings.session_id,
            "x-app-name": self.settings.app_name,
            "User-Agent": f"UpRockVerify/{version} (python-httpx/{httpx.__version__})",
        }
        if api_key:
            headers["x-api-key"] = api_key
        return headers

    async def request(self, method: str, path: str, body: Any = None) -> Any:
        """Send an authenticated request and return the decoded body (or None)."""
        if not self._api_key:
            raise UnauthenticatedError()
        return await self._send(method, path, body, self._headers(self._api_key))

    async def validate_api_key(self, api_key: str) -> Any:
        """Check a candidate key. The key travels in the body, not the header."""
        return await self._send("POST", ENDPOINTS["validate"], {"apiKey": api_key}, self._headers(None))

    async def _send(self, method: str, path: str, body: Any, headers: dict[str, str]) -> Any:
        method = method.upper()
        kwargs: dict[str, Any] = {"headers": headers}
        if body is not None and method != "GET":
            kwargs["json"] = body

        try:
            response = await self._client.request(method, f"{self.base_url}{path}", **kwargs)
        except httpx.TimeoutException as e:
            log.warning("transport_timeout", method=method, path=path)
            raise RequestTimeoutError() from e
        except httpx.HTTPError as e:
            log.warning("transport_network_error", method=method, path=path, error=str(e))
            raise NetworkError(str(e) or e.__class__.__name__) from e

        data = decode_body(response)
        if not response.is_success:
            message = response.reason_phrase
            if isinstance(data, dict) and isinstance(data.get("error"), str):
                message = data["error"]
            log.info(
                "transport_api_error",
                method=method,
                path=path,
                status=response.status_code,
                message=message,
            )
            raise ApiError(response.status_code, message)

        return data

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
