"""Events published to the presentation layer."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from src.models.api import AccountStatus, BatchVerifyResult
from src.models.history import ScanHistoryPage
from src.models.job import JobStatus, VerifyMode
from src.models.result import JobResult


class VerificationSubmitted(BaseModel):
    type: Literal["verificationSubmitted"] = "verificationSubmitted"
    job_id: str
    url: str
    mode: VerifyMode
    scans_remaining: int | str | None = None
    message: str | None = None


class VerificationError(BaseModel):
    type: Literal["verificationError"] = "verificationError"
    url: str
    error: str


class BatchResult(BaseModel):
    type: Literal["batchResult"] = "batchResult"
    urls: list[str]
    result: BatchVerifyResult


class JobProgress(BaseModel):
    type: Literal["jobProgress"] = "jobProgress"
    job_id: str
    status: JobStatus
    completed_regions: int
    total_regions: int
    progress_text: str


class JobResultEvent(BaseModel):
    type: Literal["jobResult"] = "jobResult"
    job_id: str
    result: JobResult
    notify: bool = True


class JobError(BaseModel):
    type: Literal["jobError"] = "jobError"
    job_id: str
    error: str


class HistoryPageEvent(BaseModel):
    type: Literal["historyPage"] = "historyPage"
    page: ScanHistoryPage


class HistoryError(BaseModel):
    type: Literal["historyError"] = "historyError"
    error: str


class AccountStatusEvent(BaseModel):
    type: Literal["accountStatus"] = "accountStatus"
    data: AccountStatus


class ApiKeyStatus(BaseModel):
    type: Literal["apiKeyStatus"] = "apiKeyStatus"
    has_key: bool
    user: dict[str, Any] | None = None


Event = Annotated[
    VerificationSubmitted
    | VerificationError
    | BatchResult
    | JobProgress
    | JobResultEvent
    | JobError
    | HistoryPageEvent
    | HistoryError
    | AccountStatusEvent
    | ApiKeyStatus,
    Field(discriminator="type"),
]
