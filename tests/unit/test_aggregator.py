"""Unit tests for health classification, vital ratings and averages."""

import pytest

from src.models.job import Job, Region, RegionResult, RegionStatus, VerifyMode
from src.services.aggregator import (
    aggregate,
    derive_state,
    mean_of_defined,
    rate_vitals,
    region_state,
    round_half_up,
    score_band,
)


def _completed(region: Region, reachability: int | None = 100, usability: int | None = 95, **kwargs) -> RegionResult:
    return RegionResult(
        region=region,
        status=RegionStatus.COMPLETED,
        reachability=reachability,
        usability=usability,
        **kwargs,
    )


def _job(*results: RegionResult, **kwargs) -> Job:
    job = Job(job_id="job-1", url="https://example.com", **kwargs)
    for result in results:
        job.merge_region(result)
    return job


# --------------- classification ---------------


@pytest.mark.parametrize(
    "reachability,usability,expected",
    [
        (55, 95, "down"),
        (59, 100, "down"),
        (100, 91, "perfect"),
        (100, 100, "perfect"),
        (100, 90, "good"),
        (100, 76, "good"),
        (100, 75, "degraded"),
        (99, 99, "degraded"),
        (60, 40, "degraded"),
    ],
)
def test_derive_state(reachability, usability, expected):
    assert derive_state(reachability, usability) == expected


def test_server_state_label_is_trusted():
    result = _completed(Region.NA, reachability=100, usability=95, state="degraded")
    assert region_state(result) == "degraded"


def test_region_without_scores_has_no_state():
    assert region_state(RegionResult(region=Region.NA, status=RegionStatus.FAILED)) is None


# --------------- web vitals ---------------


@pytest.mark.parametrize(
    "name,value,expected",
    [
        ("lcp", 2500, "good"),
        ("lcp", 2501, "needs-improvement"),
        ("lcp", 4000, "needs-improvement"),
        ("lcp", 4001, "poor"),
        ("fcp", 1800, "good"),
        ("fcp", 1801, "needs-improvement"),
        ("fcp", 3000, "needs-improvement"),
        ("fcp", 3001, "poor"),
        ("ttfb", 800, "good"),
        ("ttfb", 801, "needs-improvement"),
        ("ttfb", 1800, "needs-improvement"),
        ("ttfb", 1801, "poor"),
        ("cls", 0.1, "good"),
        ("cls", 0.11, "needs-improvement"),
        ("cls", 0.25, "needs-improvement"),
        ("cls", 0.26, "poor"),
        ("tti", 3800, "good"),
        ("tti", 3801, "needs-improvement"),
        ("tti", 7300, "needs-improvement"),
        ("tti", 7301, "poor"),
    ],
)
def test_vital_rating_boundaries(name, value, expected):
    (rating,) = rate_vitals({name: value})
    assert rating.name == name
    assert rating.rating == expected


def test_absent_vitals_are_omitted():
    ratings = rate_vitals({"lcp": 1234.4, "cls": 0.05})
    assert [r.name for r in ratings] == ["lcp", "cls"]
    assert ratings[0].display_value == "1234ms"
    assert ratings[1].display_value == "0.050"
    assert rate_vitals({}) == []
    assert rate_vitals(None) == []


# --------------- averages ---------------


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


def test_mean_ignores_missing_scores():
    assert mean_of_defined([100, None]) == 100
    assert mean_of_defined([None, None]) is None
    assert mean_of_defined([90, 95]) == 93


@pytest.mark.parametrize("score,band", [(None, "bad"), (95, "good"), (90, "good"), (70, "warning"), (69, "bad")])
def test_score_band(score, band):
    assert score_band(score) == band


# --------------- aggregate ---------------


def test_aggregate_averages_completed_regions_only():
    job = _job(
        _completed(Region.EU, 100, 90, response_time_ms=300),
        _completed(Region.NA, 100, 95, response_time_ms=101),
        RegionResult(region=Region.AS, status=RegionStatus.FAILED, error="timeout"),
        RegionResult(region=Region.AF, status=RegionStatus.TIMEOUT),
        _completed(Region.OC, None, None),
        _completed(Region.SA, 100, 100),
    )
    result = aggregate(job)

    assert result.avg_reachability == 100
    assert result.avg_usability == 95
    assert result.avg_response_time_ms == 201
    assert result.completed_count == 4
    assert result.total_count == 6
    assert result.overall_state == "perfect"
    assert [r.region for r in result.regions] == list(Region)


def test_aggregate_without_scores():
    job = _job(
        RegionResult(region=Region.NA, status=RegionStatus.FAILED),
        mode=VerifyMode.DEV,
        requested_regions=[Region.NA],
    )
    result = aggregate(job)
    assert result.avg_reachability is None
    assert result.avg_usability is None
    assert result.overall_state == "down"


def test_aggregate_prefers_summary_overall_state():
    job = _job(
        _completed(Region.NA, 100, 100),
        mode=VerifyMode.DEV,
        requested_regions=[Region.NA],
    )
    job.summary = {"overallState": "good"}
    assert aggregate(job).overall_state == "good"


def test_aggregate_does_not_mutate_job():
    job = _job(_completed(Region.NA), mode=VerifyMode.DEV, requested_regions=[Region.NA])
    before = job.model_dump()
    aggregate(job)
    assert job.model_dump() == before


def test_region_view_bands_and_overall_display():
    job = _job(
        _completed(Region.NA, 100, 72),
        mode=VerifyMode.DEV,
        requested_regions=[Region.NA],
    )
    result = aggregate(job)
    (region,) = result.regions
    assert region.reachability_band == "good"
    assert region.usability_band == "warning"
    assert region.label == "North America"
    assert result.overall_state == "degraded"
    assert result.overall_display.label == "Degraded"
    assert result.overall_display.emoji == "🟠"
    assert result.overall_display.color == "#f97316"


def test_overall_state_uses_unrounded_means():
    job = _job(*(_completed(region, 100, 95) for region in list(Region)[:5]), _completed(Region.SA, 99, 95))
    result = aggregate(job)

    assert result.avg_reachability == 100
    assert result.overall_state == "degraded"


def test_unknown_server_state_gets_neutral_display():
    job = _job(_completed(Region.NA), mode=VerifyMode.DEV, requested_regions=[Region.NA])
    job.summary = {"overallState": "maintenance"}
    result = aggregate(job)
    assert result.overall_state == "maintenance"
    assert result.overall_display.label == "Maintenance"
