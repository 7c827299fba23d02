"""Endpoint wrappers for the verification API."""

from typing import Any
from urllib.parse import quote, urlencode

import structlog

from src.config.constants import ENDPOINTS, MAX_BATCH_URLS
from src.models.api import AccountStatus, ApiKeyValidation, BatchVerifyResult, VerifySubmission
from src.models.history import HistoryFilters
from src.models.job import Region
from src.services.transport import Transport
from src.utils.errors import InvalidUrlError, SubmissionError, UnauthenticatedError

log = structlog.get_logger()


def unwrap(payload: Any, action: str) -> Any:
    """Reject `success: false` envelopes and return the payload's data.

    Responses come either bare or wrapped as `{success, data}`; both are
    accepted.
    """
    if payload is None:
        raise SubmissionError(f"Failed to {action}: empty response")
    if isinstance(payload, dict):
        if payload.get("success") is False:
            raise SubmissionError(payload.get("error") or f"Failed to {action}")
        if "data" in payload and payload["data"] is not None:
            return payload["data"]
    return payload


def _job_path(template: str, job_id: str) -> str:
    return ENDPOINTS[template].format(job_id=quote(job_id, safe=""))


class VerifyClient:
    """Async client for the verification service endpoints."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    async def verify(self, url: str) -> VerifySubmission:
        """Start a global verification across all regions."""
        payload = await self.transport.request("POST", ENDPOINTS["verify"], {"url": url})
        unwrap(payload, "start verification")
        return VerifySubmission.model_validate(payload)

    async def verify_dev(self, url: str, continent: Region = Region.NA) -> VerifySubmission:
        """Start a quick single-region verification."""
        payload = await self.transport.request(
            "POST",
            ENDPOINTS["verify"],
            {"url": url, "continent": continent.value, "mode": "dev"},
        )
        unwrap(payload, "start verification")
        return VerifySubmission.model_validate(payload)

    async def batch_verify(self, urls: list[str]) -> BatchVerifyResult:
        if not urls or len(urls) > MAX_BATCH_URLS:
            raise InvalidUrlError(f"Batch verification takes 1 to {MAX_BATCH_URLS} URLs")
        payload = await self.transport.request(
            "POST", ENDPOINTS["verify"], {"urls": urls, "mode": "batch"}
        )
        unwrap(payload, "run batch verification")
        return BatchVerifyResult.model_validate(payload)

    async def get_account_status(self) -> AccountStatus:
        payload = await self.transport.request("GET", ENDPOINTS["status"])
        return AccountStatus.model_validate(unwrap(payload, "get account status"))

    async def get_job_progress(self, job_id: str) -> dict[str, Any]:
        """Raw job snapshot, including region results once available."""
        payload = await self.transport.request("GET", _job_path("job", job_id))
        return unwrap(payload, "get job status")

    async def get_job_details(self, job_id: str) -> dict[str, Any]:
        payload = await self.transport.request("GET", _job_path("job_details", job_id))
        return unwrap(payload, "get job details")

    async def list_scans(self, limit: int = 10, offset: int = 0) -> dict[str, Any]:
        """Legacy listing endpoint. Returns the full envelope."""
        query = urlencode({"limit": limit, "offset": offset})
        payload = await self.transport.request("GET", f"{ENDPOINTS['scans']}?{query}")
        unwrap(payload, "list scans")
        return payload

    async def get_history(
        self,
        filters: HistoryFilters | None = None,
        *,
        page: int = 1,
        limit: int = 10,
    ) -> dict[str, Any]:
        """Filtered, paginated history endpoint. Returns the full envelope."""
        params: dict[str, str | int] = {"page": page, "limit": limit}
        if filters:
            params.update(filters.to_params())
        payload = await self.transport.request("GET", f"{ENDPOINTS['history']}?{urlencode(params)}")
        unwrap(payload, "get history")
        return payload

    async def validate_api_key(self, api_key: str) -> ApiKeyValidation:
        payload = await self.transport.validate_api_key(api_key)
        return ApiKeyValidation.model_validate(payload or {})

    async def validate_auth(self) -> ApiKeyValidation:
        """Validate the currently configured key with the server."""
        api_key = self.transport.api_key
        if not api_key:
            raise UnauthenticatedError()
        result = await self.validate_api_key(api_key)
        log.info("api_key_validated", valid=result.valid)
        return result
