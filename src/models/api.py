from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.config.constants import MAX_BATCH_URLS
from src.models.history import ScanHistoryPage
from src.models.job import Region


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class VerifySubmission(_WireModel):
    success: bool
    job_id: str = Field(alias="jobId")
    url: str | None = None
    scans_remaining: int | str | None = Field(default=None, alias="scansRemaining")
    message: str | None = None


class BatchSummary(_WireModel):
    total: int = 0
    completed: int = 0
    failed: int = 0


class BatchVerifyResult(_WireModel):
    success: bool
    summary: BatchSummary = BatchSummary()
    results: list[dict[str, Any]] = []


class AccountUser(_WireModel):
    user_name: str | None = Field(default=None, alias="userName")
    team_name: str | None = Field(default=None, alias="teamName")


class AccountBilling(_WireModel):
    plan: str = "unknown"
    scans_used: int = Field(default=0, alias="scansUsed")
    scans_limit: int | str | None = Field(default=None, alias="scansLimit")
    subscription_status: str | None = Field(default=None, alias="subscriptionStatus")


class AccountStatus(_WireModel):
    user: AccountUser = AccountUser()
    billing: AccountBilling = AccountBilling()


class ApiKeyValidation(_WireModel):
    valid: bool = False
    user: dict[str, Any] | None = None
    error: str | None = None


# --------------- Local API request/response models ---------------


class VerifyRequest(BaseModel):
    url: str = Field(min_length=1, max_length=2048)
    mode: Literal["global", "dev"] = "global"
    continent: Region | None = None


class BatchVerifyRequest(BaseModel):
    urls: list[str] = Field(min_length=1, max_length=MAX_BATCH_URLS)


class SubmitResponse(BaseModel):
    job_id: str
    url: str
    mode: str
    status: str
    progress_text: str


class HistoryNavResponse(BaseModel):
    moved: bool
    page: ScanHistoryPage | None = None


class HealthResponse(BaseModel):
    status: str
    api_base_url: str
    api_key_configured: bool
    tracked_jobs: int = 0


class ApiKeyRequest(BaseModel):
    api_key: str = Field(min_length=1)


class ApiKeyStatusResponse(BaseModel):
    has_key: bool
