from fastapi import APIRouter, Depends

from src.api.deps import get_service, to_http_exception
from src.models.api import BatchVerifyRequest, BatchVerifyResult, SubmitResponse, VerifyRequest
from src.models.job import VerifyMode
from src.services.verification import VerificationService
from src.utils.errors import VerifyClientError

router = APIRouter(prefix="/verify")


@router.post("", status_code=202, response_model=SubmitResponse)
async def submit_verification(
    input: VerifyRequest,
    service: VerificationService = Depends(get_service),
) -> SubmitResponse:
    """Submit a global or single-region verification."""
    try:
        job = await service.submit(input.url, VerifyMode(input.mode), input.continent)
    except VerifyClientError as e:
        raise to_http_exception(e)

    return SubmitResponse(
        job_id=job.job_id,
        url=job.url,
        mode=job.mode.value,
        status=job.status.value,
        progress_text=job.progress_text,
    )


@router.post("/batch", response_model=BatchVerifyResult)
async def submit_batch(
    input: BatchVerifyRequest,
    service: VerificationService = Depends(get_service),
) -> BatchVerifyResult:
    try:
        return await service.submit_batch(input.urls)
    except VerifyClientError as e:
        raise to_http_exception(e)
