from fastapi import APIRouter, Depends

from src.api.deps import get_service, to_http_exception
from src.models.api import AccountStatus, ApiKeyRequest, ApiKeyStatusResponse, ApiKeyValidation
from src.services.verification import VerificationService
from src.utils.errors import VerifyClientError

router = APIRouter(prefix="/account")


@router.get("/status", response_model=AccountStatus)
async def account_status(service: VerificationService = Depends(get_service)) -> AccountStatus:
    try:
        return await service.account_status()
    except VerifyClientError as e:
        raise to_http_exception(e)


@router.get("/api-key", response_model=ApiKeyStatusResponse)
async def check_api_key(service: VerificationService = Depends(get_service)) -> ApiKeyStatusResponse:
    return ApiKeyStatusResponse(has_key=await service.check_api_key())


@router.put("/api-key", response_model=ApiKeyValidation)
async def set_api_key(
    input: ApiKeyRequest,
    service: VerificationService = Depends(get_service),
) -> ApiKeyValidation:
    """Validate a key with the service and keep it in memory if accepted."""
    try:
        return await service.set_api_key(input.api_key)
    except VerifyClientError as e:
        raise to_http_exception(e)
