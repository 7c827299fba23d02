"""Display-level models produced by the aggregation engine."""

from typing import Literal

from pydantic import BaseModel

from src.models.job import Job, JobStatus, Region, RegionStatus

HealthState = Literal["perfect", "good", "degraded", "down"]
VitalRatingLabel = Literal["good", "needs-improvement", "poor"]


class VitalRating(BaseModel):
    name: str
    label: str
    value: float
    unit: str
    display_value: str
    rating: VitalRatingLabel


class StateDisplay(BaseModel):
    label: str
    color: str
    emoji: str
    description: str


class RegionView(BaseModel):
    region: Region
    label: str
    flag: str
    status: RegionStatus
    state: str | None = None
    reachability: int | None = None
    usability: int | None = None
    response_time_ms: float | None = None
    http_status: int | None = None
    error: str | None = None
    screenshot_url: str | None = None
    reachability_band: str = "bad"
    usability_band: str = "bad"
    web_vitals: list[VitalRating] = []


class JobResult(BaseModel):
    job_id: str
    url: str
    overall_state: str
    overall_display: StateDisplay
    avg_reachability: int | None = None
    avg_usability: int | None = None
    avg_response_time_ms: int | None = None
    completed_count: int
    total_count: int
    regions: list[RegionView]
    report_url: str | None = None
    gallery_url: str | None = None


class JobView(BaseModel):
    """What a status check hands back to the caller."""

    job_id: str
    url: str
    status: JobStatus
    completed_regions: int
    total_regions: int
    progress_text: str
    result: JobResult | None = None

    @classmethod
    def from_job(cls, job: Job, result: JobResult | None = None) -> "JobView":
        return cls(
            job_id=job.job_id,
            url=job.url,
            status=job.status,
            completed_regions=job.completed_regions,
            total_regions=job.total_regions,
            progress_text=job.progress_text,
            result=result,
        )
