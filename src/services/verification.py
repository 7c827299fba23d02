"""Verification facade: submit, check, browse history, publish events.

This is the seam the presentation layer talks to. Each action validates its
input, calls the core components and publishes the matching event. Failures
are published as error events and then re-raised to the caller.
"""

from collections.abc import Awaitable
from typing import Any

import structlog

from src.config.constants import MAX_BATCH_URLS
from src.config.settings import Settings, get_settings
from src.models.api import AccountStatus, ApiKeyValidation, BatchVerifyResult
from src.models.events import (
    AccountStatusEvent,
    ApiKeyStatus,
    BatchResult,
    HistoryError,
    HistoryPageEvent,
    JobError,
    JobProgress,
    JobResultEvent,
    VerificationError,
    VerificationSubmitted,
)
from src.models.history import HistoryFilters, ScanHistoryPage
from src.models.job import Job, Region, VerifyMode
from src.models.result import JobView
from src.services.events import EventBus
from src.services.history import HistoryBrowser, HistoryPager
from src.services.job_registry import JobRegistry
from src.services.reconciler import StatusReconciler
from src.services.transport import Transport
from src.services.verify_client import VerifyClient
from src.utils.errors import (
    JobCheckError,
    UnauthenticatedError,
    UnknownJobError,
    VerifyClientError,
)
from src.utils.url import extract_urls_from_text, normalize_target_url, parse_url_list

log = structlog.get_logger()


class VerificationService:
    def __init__(
        self,
        client: VerifyClient,
        *,
        bus: EventBus | None = None,
        registry: JobRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.client = client
        self.bus = bus or EventBus()
        self.settings = settings or get_settings()
        self.reconciler = StatusReconciler(client, registry)
        self.history_browser = HistoryBrowser(
            HistoryPager(client), limit=self.settings.history_page_size
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "VerificationService":
        settings = settings or get_settings()
        return cls(VerifyClient(Transport(settings)), settings=settings)

    @property
    def registry(self) -> JobRegistry:
        return self.reconciler.registry

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(
        self,
        url: str,
        mode: VerifyMode = VerifyMode.GLOBAL,
        continent: Region | None = None,
    ) -> Job:
        """Submit a global or dev verification and start tracking the job."""
        if mode is VerifyMode.BATCH:
            raise ValueError("use submit_batch() for batch verification")

        try:
            normalized = normalize_target_url(url)
            if mode is VerifyMode.DEV:
                continent = continent or Region(self.settings.default_region)
                submission = await self.client.verify_dev(normalized, continent)
            else:
                submission = await self.client.verify(normalized)
        except VerifyClientError as e:
            log.warning("verification_submit_failed", url=url, mode=mode.value, error=str(e))
            self.bus.publish(VerificationError(url=url, error=str(e)))
            raise

        job = self.reconciler.register_submission(
            submission, url=normalized, mode=mode, continent=continent
        )
        self.bus.publish(
            VerificationSubmitted(
                job_id=job.job_id,
                url=job.url,
                mode=mode,
                scans_remaining=submission.scans_remaining,
                message=submission.message,
            )
        )
        return job

    async def submit_batch(self, urls: list[str] | str) -> BatchVerifyResult:
        """Verify up to ten URLs at once.

        Accepts a list, a comma-separated string, or pasted multi-line text.
        """
        if isinstance(urls, str) and "\n" in urls.strip():
            urls = extract_urls_from_text(urls, limit=MAX_BATCH_URLS + 1)
        raw = urls if isinstance(urls, str) else ",".join(urls)
        try:
            normalized = parse_url_list(raw)
            result = await self.client.batch_verify(normalized)
        except VerifyClientError as e:
            log.warning("batch_submit_failed", error=str(e))
            self.bus.publish(VerificationError(url=raw, error=str(e)))
            raise

        log.info(
            "batch_verification_complete",
            total=result.summary.total,
            completed=result.summary.completed,
            failed=result.summary.failed,
        )
        self.bus.publish(BatchResult(urls=normalized, result=result))
        return result

    # ------------------------------------------------------------------
    # Status checks
    # ------------------------------------------------------------------

    async def check_job(self, job_id: str) -> JobView | None:
        """Reconcile one job. Unknown or evicted jobs are dropped (None)."""
        try:
            view = await self.reconciler.reconcile(job_id)
        except UnknownJobError:
            log.debug("unknown_job_dropped", job_id=job_id)
            return None
        except JobCheckError as e:
            self.bus.publish(JobError(job_id=job_id, error=str(e.cause)))
            raise

        if view is None:
            return None

        self.bus.publish(
            JobProgress(
                job_id=view.job_id,
                status=view.status,
                completed_regions=view.completed_regions,
                total_regions=view.total_regions,
                progress_text=view.progress_text,
            )
        )
        if view.result is not None:
            self.bus.publish(
                JobResultEvent(
                    job_id=view.job_id,
                    result=view.result,
                    notify=self.settings.show_notifications,
                )
            )
        return view

    async def job_details(self, job_id: str) -> dict[str, Any]:
        """Full per-region details for a job, fetched straight from the service."""
        try:
            return await self.client.get_job_details(job_id)
        except VerifyClientError as e:
            log.warning("job_details_failed", job_id=job_id, error=str(e))
            self.bus.publish(JobError(job_id=job_id, error=str(e)))
            raise

    def close_job(self, job_id: str) -> None:
        self.reconciler.evict(job_id)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    async def history(
        self, page: int = 1, filters: HistoryFilters | None = None
    ) -> ScanHistoryPage:
        if filters is not None:
            self.history_browser.filters = filters
        return await self._history_action(self.history_browser.load(page))

    async def next_history_page(self) -> ScanHistoryPage | None:
        return await self._history_action(self.history_browser.next_page())

    async def prev_history_page(self) -> ScanHistoryPage | None:
        return await self._history_action(self.history_browser.prev_page())

    async def _history_action(
        self, action: Awaitable[ScanHistoryPage | None]
    ) -> ScanHistoryPage | None:
        try:
            page = await action
        except VerifyClientError as e:
            self.bus.publish(HistoryError(error=str(e)))
            raise
        if page is not None:
            self.bus.publish(HistoryPageEvent(page=page))
        return page

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    async def account_status(self) -> AccountStatus:
        status = await self.client.get_account_status()
        self.bus.publish(AccountStatusEvent(data=status))
        return status

    async def check_api_key(self) -> bool:
        """Validate the configured key. A key rejected by the server is cleared."""
        if not self.client.transport.has_api_key:
            self.bus.publish(ApiKeyStatus(has_key=False))
            return False

        try:
            result = await self.client.validate_auth()
        except VerifyClientError as e:
            # Server unreachable: the key still exists locally
            log.warning("api_key_check_failed", error=str(e))
            self.bus.publish(ApiKeyStatus(has_key=True))
            return True

        if not result.valid:
            self.client.transport.set_api_key(None)
            self.bus.publish(ApiKeyStatus(has_key=False))
            return False

        self.bus.publish(ApiKeyStatus(has_key=True, user=result.user))
        return True

    async def set_api_key(self, api_key: str) -> ApiKeyValidation:
        """Validate a candidate key and keep it only if the server accepts it."""
        if not api_key or not api_key.strip():
            raise UnauthenticatedError("API key is required")
        result = await self.client.validate_api_key(api_key.strip())
        if not result.valid:
            raise UnauthenticatedError(result.error or "Invalid API key")
        self.client.transport.set_api_key(api_key.strip())
        self.bus.publish(ApiKeyStatus(has_key=True, user=result.user))
        return result

    async def close(self) -> None:
        self.registry.clear()
        await self.client.transport.close()
