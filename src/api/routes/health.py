from fastapi import APIRouter, Depends

from src.api.deps import get_service
from src.models.api import HealthResponse
from src.services.verification import VerificationService

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(service: VerificationService = Depends(get_service)) -> HealthResponse:
    has_key = service.client.transport.has_api_key
    return HealthResponse(
        status="ok" if has_key else "degraded",
        api_base_url=service.settings.api_base_url,
        api_key_configured=has_key,
        tracked_jobs=len(service.registry),
    )
