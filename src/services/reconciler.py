"""Merges job snapshots into tracked jobs and decides when results surface."""

from typing import Any

import structlog
from pydantic import ValidationError

from src.models.api import VerifySubmission
from src.models.job import Job, Region, RegionResult, VerifyMode
from src.models.result import JobResult, JobView
from src.services.aggregator import aggregate
from src.services.job_registry import JobRegistry
from src.services.verify_client import VerifyClient
from src.utils.errors import (
    JobCheckError,
    ReconcileInProgressError,
    SubmissionError,
    VerifyClientError,
)

log = structlog.get_logger()


class StatusReconciler:
    """On-demand status checks for tracked jobs.

    There is no background poller: every reconcile is triggered by the caller.
    At most one reconcile per job may be outstanding; a second one is rejected.
    A job's aggregated result is returned by exactly one reconcile, the first
    one that sees every requested region terminal.
    """

    def __init__(self, client: VerifyClient, registry: JobRegistry | None = None) -> None:
        self.client = client
        self.registry = registry or JobRegistry()
        self._in_flight: set[str] = set()

    def register_submission(
        self,
        submission: VerifySubmission,
        *,
        url: str,
        mode: VerifyMode = VerifyMode.GLOBAL,
        continent: Region | None = None,
    ) -> Job:
        if mode is VerifyMode.DEV:
            requested = [continent or Region.NA]
        else:
            requested = list(Region)
        job = Job(
            job_id=submission.job_id,
            url=submission.url or url,
            mode=mode,
            requested_regions=requested,
        )
        return self.registry.register(job)

    def is_in_flight(self, job_id: str) -> bool:
        return job_id in self._in_flight

    async def reconcile(self, job_id: str) -> JobView | None:
        """Fetch a fresh snapshot and merge it into the tracked job.

        Returns None when the job was evicted while the request was in flight;
        the late snapshot is dropped.
        """
        job = self.registry.require(job_id)
        if job_id in self._in_flight:
            raise ReconcileInProgressError(job_id)

        self._in_flight.add(job_id)
        job_log = log.bind(job_id=job_id)
        try:
            try:
                snapshot = await self.client.get_job_progress(job_id)
            except VerifyClientError as e:
                job_log.warning("job_check_failed", error=str(e))
                raise JobCheckError(job_id, e) from e

            if self.registry.get(job_id) is not job:
                job_log.debug("stale_snapshot_dropped")
                return None

            if not isinstance(snapshot, dict):
                error = SubmissionError("Malformed job snapshot")
                job_log.warning("job_check_failed", error=str(error))
                raise JobCheckError(job_id, error)

            self.merge_snapshot(job, snapshot)

            result: JobResult | None = None
            if job.is_terminal and not job.results_rendered:
                result = aggregate(job)
                job.mark_rendered()
                job_log.info(
                    "job_result_ready",
                    overall_state=result.overall_state,
                    completed=result.completed_count,
                    total=result.total_count,
                )
            else:
                job_log.debug("job_progress", progress=job.progress_text)

            return JobView.from_job(job, result)
        finally:
            self._in_flight.discard(job_id)

    def merge_snapshot(self, job: Job, snapshot: dict[str, Any]) -> int:
        """Merge a raw snapshot into the job. Returns the number of regions applied.

        Every region entry is parsed before any is applied, so a snapshot either
        lands whole (minus unparseable entries) or not at all.
        """
        incoming: list[RegionResult] = []
        for entry in snapshot.get("results") or []:
            try:
                incoming.append(RegionResult.from_wire(entry))
            except (ValidationError, AttributeError) as e:
                log.warning("region_entry_invalid", job_id=job.job_id, error=str(e))

        applied = 0
        for result in incoming:
            if job.merge_region(result):
                applied += 1
            else:
                log.info(
                    "region_regression_ignored",
                    job_id=job.job_id,
                    region=result.region.value,
                    status=result.status.value,
                )

        if snapshot.get("reportUrl"):
            job.report_url = snapshot["reportUrl"]
        if snapshot.get("galleryUrl"):
            job.gallery_url = snapshot["galleryUrl"]
        if isinstance(snapshot.get("summary"), dict):
            job.summary = snapshot["summary"]
        return applied

    def evict(self, job_id: str) -> None:
        self.registry.evict(job_id)
