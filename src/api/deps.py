from fastapi import HTTPException, Request, status

from src.services.verification import VerificationService
from src.utils.errors import (
    ApiError,
    HistoryUnavailableError,
    InvalidUrlError,
    JobCheckError,
    ReconcileInProgressError,
    RequestTimeoutError,
    SubmissionError,
    UnauthenticatedError,
    UnknownJobError,
    VerifyClientError,
)


def get_service(request: Request) -> VerificationService:
    """The service instance created in the app lifespan."""
    return request.app.state.verification


def to_http_exception(error: VerifyClientError) -> HTTPException:
    """Map the client error taxonomy onto HTTP status codes."""
    if isinstance(error, JobCheckError) and isinstance(error.cause, VerifyClientError):
        mapped = to_http_exception(error.cause)
        return HTTPException(
            status_code=mapped.status_code,
            detail={"job_id": error.job_id, "error": str(error.cause)},
        )

    if isinstance(error, UnauthenticatedError):
        code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(error, InvalidUrlError):
        code = 422
    elif isinstance(error, UnknownJobError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, ReconcileInProgressError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(error, RequestTimeoutError):
        code = status.HTTP_504_GATEWAY_TIMEOUT
    elif isinstance(error, ApiError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"upstream_status": error.http_status, "error": error.message},
        )
    elif isinstance(error, (SubmissionError, HistoryUnavailableError)):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HTTPException(status_code=code, detail=str(error))
