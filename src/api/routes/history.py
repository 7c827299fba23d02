from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from src.api.deps import get_service, to_http_exception
from src.models.api import HistoryNavResponse
from src.models.history import HistoryFilters, HistoryStatus, ScanHistoryPage
from src.models.job import Region
from src.services.verification import VerificationService
from src.utils.errors import VerifyClientError

router = APIRouter(prefix="/history")


@router.get("", response_model=ScanHistoryPage)
async def get_history(
    page: int = Query(default=1, ge=1),
    status: HistoryStatus | None = None,
    continent: Region | None = None,
    url: str | None = None,
    from_date: date | None = Query(default=None, alias="from"),
    to_date: date | None = Query(default=None, alias="to"),
    team_id: str | None = None,
    service: VerificationService = Depends(get_service),
) -> ScanHistoryPage:
    try:
        filters = HistoryFilters(
            status=status,
            continent=continent,
            url=url,
            from_date=from_date,
            to_date=to_date,
            team_id=team_id,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        )

    try:
        return await service.history(page, filters)
    except VerifyClientError as e:
        raise to_http_exception(e)


@router.post("/next", response_model=HistoryNavResponse)
async def next_page(service: VerificationService = Depends(get_service)) -> HistoryNavResponse:
    try:
        result = await service.next_history_page()
    except VerifyClientError as e:
        raise to_http_exception(e)
    return HistoryNavResponse(moved=result is not None, page=result)


@router.post("/prev", response_model=HistoryNavResponse)
async def prev_page(service: VerificationService = Depends(get_service)) -> HistoryNavResponse:
    try:
        result = await service.prev_history_page()
    except VerifyClientError as e:
        raise to_http_exception(e)
    return HistoryNavResponse(moved=result is not None, page=result)
