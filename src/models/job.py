from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from src.config.constants import WEB_VITALS_THRESHOLDS

log = structlog.get_logger()


class Region(StrEnum):
    NA = "NA"
    EU = "EU"
    AS = "AS"
    AF = "AF"
    OC = "OC"
    SA = "SA"


class RegionStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMEOUT = "timeout"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL

    @property
    def rank(self) -> int:
        if self.is_terminal:
            return 2
        return 1 if self is RegionStatus.PROCESSING else 0


_TERMINAL = frozenset({RegionStatus.COMPLETED, RegionStatus.FAILED, RegionStatus.TIMEOUT})
_REQUIRED_WIRE_FIELDS = frozenset({"region", "status"})


class JobStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"


class VerifyMode(StrEnum):
    GLOBAL = "global"
    DEV = "dev"
    BATCH = "batch"


class RegionResult(BaseModel):
    region: Region
    status: RegionStatus = RegionStatus.PENDING
    http_status: int | None = None
    response_time_ms: float | None = Field(default=None, ge=0)
    reachability: int | None = Field(default=None, ge=0, le=100)
    usability: int | None = Field(default=None, ge=0, le=100)
    state: str | None = None
    web_vitals: dict[str, float] = {}
    error: str | None = None
    screenshot_url: str | None = None

    @field_validator("web_vitals", mode="before")
    @classmethod
    def drop_unknown_vitals(cls, value: Any) -> dict[str, float]:
        if not value:
            return {}
        if not isinstance(value, dict):
            raise ValueError("webVitals must be an object")
        return {
            name: sample
            for name, sample in value.items()
            if name in WEB_VITALS_THRESHOLDS and sample is not None
        }

    @model_validator(mode="after")
    def scores_only_when_completed(self) -> "RegionResult":
        if self.status is not RegionStatus.COMPLETED:
            self.reachability = None
            self.usability = None
        return self

    @property
    def has_scores(self) -> bool:
        return self.reachability is not None and self.usability is not None

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "RegionResult":
        """Build from the service's per-region payload.

        Accepts both `continent` and `region` keys, and scores either nested
        under `scores` or flat on the entry.
        """
        scores = data.get("scores") or {}
        fields: dict[str, Any] = {
            "region": data.get("continent") or data.get("region"),
            "status": data.get("status") or RegionStatus.PENDING,
            "http_status": data.get("httpStatus"),
            "response_time_ms": data.get("responseTime", data.get("responseTimeMs")),
            "reachability": scores.get("reachability", data.get("reachability")),
            "usability": scores.get("usability", data.get("usability")),
            "state": scores.get("state") or data.get("state"),
            "web_vitals": data.get("webVitals"),
            "error": data.get("error"),
            "screenshot_url": data.get("screenshotUrl") or data.get("screenshot"),
        }
        try:
            return cls(**fields)
        except ValidationError as e:
            invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
            # An unusable region or status still rejects the entry
            if not invalid or invalid & _REQUIRED_WIRE_FIELDS:
                raise
            log.warning("region_field_invalid", region=fields["region"], fields=sorted(invalid))
            for name in invalid:
                fields.pop(name)
            return cls(**fields)


class Job(BaseModel):
    job_id: str
    url: str
    mode: VerifyMode = VerifyMode.GLOBAL
    requested_regions: list[Region] = Field(default_factory=lambda: list(Region))
    region_results: dict[Region, RegionResult] = {}
    results_rendered: bool = False
    report_url: str | None = None
    gallery_url: str | None = None
    summary: dict[str, Any] | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def completed_regions(self) -> int:
        return sum(
            1
            for region in self.requested_regions
            if region in self.region_results and self.region_results[region].status.is_terminal
        )

    @property
    def total_regions(self) -> int:
        return len(self.requested_regions)

    @property
    def is_terminal(self) -> bool:
        return self.completed_regions == self.total_regions

    @property
    def status(self) -> JobStatus:
        if self.is_terminal:
            return JobStatus.COMPLETED
        if not self.region_results:
            return JobStatus.PENDING
        return JobStatus.PROCESSING

    @property
    def progress_text(self) -> str:
        if self.is_terminal:
            return "Completed"
        return f"{self.completed_regions}/{self.total_regions} regions"

    def merge_region(self, incoming: RegionResult) -> bool:
        """Overwrite the stored result for a region, forward-only.

        Returns False (and leaves state untouched) when the incoming status
        would move the region backwards.
        """
        current = self.region_results.get(incoming.region)
        if current is not None and incoming.status.rank < current.status.rank:
            return False
        if incoming.region not in self.requested_regions:
            self.requested_regions.append(incoming.region)
        self.region_results[incoming.region] = incoming
        return True

    def mark_rendered(self) -> bool:
        """Flip results_rendered once. Returns True only on the first call."""
        if self.results_rendered:
            return False
        self.results_rendered = True
        return True

