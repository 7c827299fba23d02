"""Paginated scan history with fallback to the legacy listing endpoint."""

from typing import Any

import structlog

from src.config.constants import MAX_HISTORY_LIMIT
from src.models.history import HistoryFilters, ScanHistoryPage, ScanSummary
from src.services.verify_client import VerifyClient
from src.utils.errors import HistoryUnavailableError

log = structlog.get_logger()


def _items_and_pagination(payload: Any) -> tuple[list[Any], dict[str, Any]]:
    """Handle both `data: [...]` and `data: {scans, pagination}` shapes."""
    if isinstance(payload, list):
        return payload, {}
    data = payload.get("data", payload)
    pagination = payload.get("pagination") or {}
    if isinstance(data, dict):
        pagination = data.get("pagination") or pagination
        data = data.get("scans") or []
    if not isinstance(data, list):
        raise ValueError("history payload has no scan list")
    return data, pagination


def parse_history_payload(payload: dict[str, Any], page: int) -> ScanHistoryPage:
    scans, pagination = _items_and_pagination(payload)
    return ScanHistoryPage(
        items=[ScanSummary.from_wire(scan) for scan in scans],
        page=pagination.get("page", page),
        total_pages=pagination.get("totalPages"),
        total=pagination.get("total"),
        has_next=pagination.get("hasNext"),
        has_prev=pagination.get("hasPrev"),
        source="history",
    )


def parse_scans_payload(payload: dict[str, Any], page: int) -> ScanHistoryPage:
    """Legacy listing: only metadata the endpoint actually returns is kept."""
    scans, pagination = _items_and_pagination(payload)
    has_next = pagination.get("hasNext", pagination.get("hasMore"))
    has_prev = pagination.get("hasPrev")
    if has_prev is None and "offset" in pagination:
        has_prev = pagination["offset"] > 0
    return ScanHistoryPage(
        items=[ScanSummary.from_wire(scan) for scan in scans],
        page=page,
        total_pages=pagination.get("totalPages"),
        total=pagination.get("total"),
        has_next=has_next,
        has_prev=has_prev,
        source="scans",
    )


def clamp_limit(limit: int) -> int:
    return max(1, min(limit, MAX_HISTORY_LIMIT))


class HistoryPager:
    """Two-tier history retrieval. Holds no paging state of its own."""

    def __init__(self, client: VerifyClient) -> None:
        self.client = client

    async def get_history(
        self,
        filters: HistoryFilters | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> ScanHistoryPage:
        page = max(1, page)
        limit = clamp_limit(limit)

        try:
            payload = await self.client.get_history(filters, page=page, limit=limit)
            return parse_history_payload(payload, page)
        except Exception as e:
            history_error = e
            log.warning("history_endpoint_failed", page=page, error=str(e))

        offset = (page - 1) * limit
        try:
            payload = await self.client.list_scans(limit, offset)
            result = parse_scans_payload(payload, page)
        except Exception as e:
            log.error("history_fallback_failed", page=page, offset=offset, error=str(e))
            raise HistoryUnavailableError(history_error, e) from e

        log.info(
            "history_fallback_used",
            page=page,
            offset=offset,
            items=len(result.items),
            filters_ignored=bool(filters and filters.to_params()),
        )
        return result


class HistoryCursor:
    """Caller-owned page position. Moves only on a confirmed fetch."""

    def __init__(self) -> None:
        self.page = 1
        self.last_page: ScanHistoryPage | None = None

    def next_page_number(self) -> int | None:
        if self.last_page is not None and self.last_page.has_next:
            return self.page + 1
        return None

    def prev_page_number(self) -> int | None:
        if self.last_page is not None and self.last_page.has_prev and self.page > 1:
            return self.page - 1
        return None

    def confirm(self, page: int, result: ScanHistoryPage) -> None:
        self.page = page
        self.last_page = result


class HistoryBrowser:
    """Pager plus cursor: refresh, next and previous page navigation."""

    def __init__(
        self,
        pager: HistoryPager,
        *,
        filters: HistoryFilters | None = None,
        limit: int = 10,
    ) -> None:
        self.pager = pager
        self.filters = filters
        self.limit = limit
        self.cursor = HistoryCursor()

    async def load(self, page: int) -> ScanHistoryPage:
        result = await self.pager.get_history(self.filters, page=page, limit=self.limit)
        self.cursor.confirm(result.page or page, result)
        return result

    async def refresh(self, filters: HistoryFilters | None = None) -> ScanHistoryPage:
        if filters is not None:
            self.filters = filters
        return await self.load(1)

    async def next_page(self) -> ScanHistoryPage | None:
        """Fetch the next page, or return None when there is none."""
        target = self.cursor.next_page_number()
        if target is None:
            return None
        return await self.load(target)

    async def prev_page(self) -> ScanHistoryPage | None:
        target = self.cursor.prev_page_number()
        if target is None:
            return None
        return await self.load(target)
