import structlog

from src.models.job import Job
from src.utils.errors import UnknownJobError

log = structlog.get_logger()


class JobRegistry:
    """In-memory jobs keyed by job id, alive while the presenting surface is open."""

    def __init__(self) -> None:
        self._jobs: dict[str, Job] = {}

    def register(self, job: Job) -> Job:
        """Track a newly submitted job. Re-registering an id keeps the existing job."""
        existing = self._jobs.get(job.job_id)
        if existing is not None:
            return existing
        self._jobs[job.job_id] = job
        log.info("job_registered", job_id=job.job_id, url=job.url, mode=job.mode.value)
        return job

    def get(self, job_id: str) -> Job | None:
        return self._jobs.get(job_id)

    def require(self, job_id: str) -> Job:
        job = self._jobs.get(job_id)
        if job is None:
            raise UnknownJobError(job_id)
        return job

    def evict(self, job_id: str) -> Job | None:
        job = self._jobs.pop(job_id, None)
        if job is not None:
            log.info("job_evicted", job_id=job_id)
        return job

    def clear(self) -> None:
        self._jobs.clear()

    def job_ids(self) -> list[str]:
        return list(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs

    def __len__(self) -> int:
        return len(self._jobs)
