"""Health-state classification, Web Vitals rating and cross-region averages.

Everything here is a pure function of its inputs: no I/O, no mutation of the
job being aggregated.
"""

import math
from collections.abc import Iterable, Mapping

from src.config.constants import (
    CONTINENT_DISPLAY,
    DOWN_REACHABILITY_BELOW,
    GOOD_USABILITY_MIN,
    PERFECT_USABILITY_MIN,
    STATE_DISPLAY,
    WEB_VITALS_THRESHOLDS,
)
from src.models.job import Job, Region, RegionResult, RegionStatus
from src.models.result import (
    HealthState,
    JobResult,
    RegionView,
    StateDisplay,
    VitalRating,
    VitalRatingLabel,
)

_REGION_ORDER = {region: idx for idx, region in enumerate(Region)}


def derive_state(reachability: float, usability: float) -> HealthState:
    """Classify a reachability/usability pair. First matching rule wins."""
    if reachability < DOWN_REACHABILITY_BELOW:
        return "down"
    if reachability == 100 and usability >= PERFECT_USABILITY_MIN:
        return "perfect"
    if reachability == 100 and GOOD_USABILITY_MIN <= usability < PERFECT_USABILITY_MIN:
        return "good"
    return "degraded"


def region_state(result: RegionResult) -> str | None:
    """Server label when supplied, else derived from scores, else None."""
    if result.state:
        return result.state
    if result.has_scores:
        return derive_state(result.reachability, result.usability)  # type: ignore[arg-type]
    return None


def rate_vital(value: float, thresholds: Mapping[str, float | str]) -> VitalRatingLabel:
    if value <= thresholds["good"]:  # type: ignore[operator]
        return "good"
    if value <= thresholds["poor"]:  # type: ignore[operator]
        return "needs-improvement"
    return "poor"


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def rate_vitals(web_vitals: Mapping[str, float] | None) -> list[VitalRating]:
    """Rate every sampled vital. Vitals without a sample are left out."""
    if not web_vitals:
        return []

    ratings: list[VitalRating] = []
    for name, thresholds in WEB_VITALS_THRESHOLDS.items():
        value = web_vitals.get(name)
        if value is None:
            continue
        unit = str(thresholds["unit"])
        display = f"{round_half_up(value)}{unit}" if unit == "ms" else f"{value:.3f}"
        ratings.append(
            VitalRating(
                name=name,
                label=str(thresholds["label"]),
                value=value,
                unit=unit,
                display_value=display,
                rating=rate_vital(value, thresholds),
            )
        )
    return ratings


def score_band(score: float | None) -> str:
    """Colour band for a single score. Missing scores count as bad."""
    if score is None:
        return "bad"
    if score >= 90:
        return "good"
    if score >= 70:
        return "warning"
    return "bad"


def mean(values: Iterable[float | None]) -> float | None:
    """Arithmetic mean of the defined values; None when nothing is defined."""
    defined = [v for v in values if v is not None]
    if not defined:
        return None
    return sum(defined) / len(defined)


def mean_of_defined(values: Iterable[float | None]) -> int | None:
    """Rounded mean of the defined values, for display."""
    value = mean(values)
    return None if value is None else round_half_up(value)


def state_display(state: str) -> StateDisplay:
    """Display metadata for a health state. Unknown server labels get a neutral badge."""
    display = STATE_DISPLAY.get(state)
    if display is None:
        return StateDisplay(label=state.capitalize(), color="#6b7280", emoji="⚪", description="")
    return StateDisplay(**display)


def region_view(result: RegionResult) -> RegionView:
    display = CONTINENT_DISPLAY.get(result.region.value, {"label": result.region.value, "flag": "🌍"})
    return RegionView(
        region=result.region,
        label=display["label"],
        flag=display["flag"],
        status=result.status,
        state=region_state(result),
        reachability=result.reachability,
        usability=result.usability,
        response_time_ms=result.response_time_ms,
        http_status=result.http_status,
        error=result.error,
        screenshot_url=result.screenshot_url,
        reachability_band=score_band(result.reachability),
        usability_band=score_band(result.usability),
        web_vitals=rate_vitals(result.web_vitals),
    )


def aggregate(job: Job) -> JobResult:
    """Build the aggregated result view for a terminal job."""
    results = sorted(
        (job.region_results[r] for r in job.requested_regions if r in job.region_results),
        key=lambda r: _REGION_ORDER[r.region],
    )
    completed = [r for r in results if r.status is RegionStatus.COMPLETED]

    reachability = mean(r.reachability for r in completed)
    usability = mean(r.usability for r in completed)
    avg_response_time = mean_of_defined(r.response_time_ms for r in completed)

    overall_state = (job.summary or {}).get("overallState")
    if not overall_state:
        # Classify on unrounded means
        if reachability is not None and usability is not None:
            overall_state = derive_state(reachability, usability)
        else:
            overall_state = "down"

    return JobResult(
        job_id=job.job_id,
        url=job.url,
        overall_state=overall_state,
        overall_display=state_display(overall_state),
        avg_reachability=None if reachability is None else round_half_up(reachability),
        avg_usability=None if usability is None else round_half_up(usability),
        avg_response_time_ms=avg_response_time,
        completed_count=len(completed),
        total_count=job.total_regions,
        regions=[region_view(r) for r in results],
        report_url=job.report_url,
        gallery_url=job.gallery_url,
    )
