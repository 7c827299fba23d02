"""Models for scan history retrieval."""

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from src.models.job import Region

HistoryStatus = Literal["pending", "processing", "completed", "failed"]
HistorySource = Literal["history", "scans"]


class HistoryFilters(BaseModel):
    status: HistoryStatus | None = None
    continent: Region | None = None
    url: str | None = Field(default=None, max_length=2048)
    from_date: date | None = None
    to_date: date | None = None
    team_id: str | None = None

    @model_validator(mode="after")
    def check_date_range(self) -> "HistoryFilters":
        if self.from_date and self.to_date and self.from_date > self.to_date:
            raise ValueError("from_date must not be after to_date")
        return self

    def to_params(self) -> dict[str, str]:
        """Query parameters for the filtered endpoint, empty filters omitted."""
        params: dict[str, str] = {}
        if self.team_id:
            params["team_id"] = self.team_id
        if self.status:
            params["status"] = self.status
        if self.continent:
            params["continent"] = self.continent.value
        if self.url:
            params["url"] = self.url
        if self.from_date:
            params["from"] = self.from_date.isoformat()
        if self.to_date:
            params["to"] = self.to_date.isoformat()
        return params


class ScanSummary(BaseModel):
    job_id: str | None = None
    url: str
    status: str
    continent: Region | None = None
    created_at: datetime | None = None
    reachability: int | None = None
    usability: int | None = None
    state: str | None = None
    http_status: int | None = None
    response_time_ms: float | None = None
    report_url: str | None = None
    screenshot_url: str | None = None

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "ScanSummary":
        scores = data.get("scores") or {}
        return cls(
            job_id=data.get("jobId"),
            url=data.get("url") or "",
            status=data.get("status") or "unknown",
            continent=data.get("continent") or None,
            created_at=data.get("createdAt"),
            reachability=scores.get("reachability"),
            usability=scores.get("usability"),
            state=scores.get("state"),
            http_status=data.get("httpStatus"),
            response_time_ms=data.get("responseTime"),
            report_url=data.get("reportUrl"),
            screenshot_url=data.get("screenshotUrl"),
        )


class ScanHistoryPage(BaseModel):
    items: list[ScanSummary] = []
    page: int | None = Field(default=None, ge=1)
    total_pages: int | None = Field(default=None, ge=0)
    total: int | None = Field(default=None, ge=0)
    has_next: bool | None = None
    has_prev: bool | None = None
    source: HistorySource = "history"

    @model_validator(mode="after")
    def consistent_navigation(self) -> "ScanHistoryPage":
        # page/total_pages win over the flags when both are known
        if self.page is not None and self.total_pages is not None:
            self.has_next = self.page < self.total_pages
            self.has_prev = self.page > 1
        return self
