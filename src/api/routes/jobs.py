from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response

from src.api.deps import get_service, to_http_exception
from src.models.result import JobView
from src.services.verification import VerificationService
from src.utils.errors import VerifyClientError

router = APIRouter(prefix="/jobs")


@router.get("/{job_id}", response_model=JobView)
async def check_job(
    job_id: str,
    service: VerificationService = Depends(get_service),
) -> JobView:
    """Reconcile a tracked job. The aggregated result is included only once."""
    if job_id not in service.registry:
        raise HTTPException(status_code=404, detail="Job not found")

    try:
        view = await service.check_job(job_id)
    except VerifyClientError as e:
        raise to_http_exception(e)

    if view is None:
        # Evicted while the check was in flight
        raise HTTPException(status_code=404, detail="Job not found")
    return view


@router.get("/{job_id}/details")
async def job_details(
    job_id: str,
    service: VerificationService = Depends(get_service),
) -> dict[str, Any]:
    try:
        return await service.job_details(job_id)
    except VerifyClientError as e:
        raise to_http_exception(e)


@router.delete("/{job_id}", status_code=204)
async def close_job(
    job_id: str,
    service: VerificationService = Depends(get_service),
) -> Response:
    service.close_job(job_id)
    return Response(status_code=204)
