class VerifyClientError(Exception):
    """Base exception for verification client errors."""


class UnauthenticatedError(VerifyClientError):
    """Raised when no API key is configured."""

    def __init__(self, message: str = 'API key not configured. Set VERIFY_API_KEY to configure.'):
        super().__init__(message)


class ApiError(VerifyClientError):
    """Raised when the remote service answers with a non-2xx status."""

    def __init__(self, http_status: int, message: str):
        self.http_status = http_status
        self.message = message
        super().__init__(f"API Error ({http_status}): {message}")

    @property
    def retryable(self) -> bool:
        # Retrying is always a user-initiated re-check, never internal backoff
        return False


class RequestTimeoutError(VerifyClientError):
    """Raised when a request exceeds the configured timeout."""

    def __init__(
        self,
        message: str = "Request timed out. The verification is taking longer than expected.",
    ):
        super().__init__(message)


class NetworkError(VerifyClientError):
    """Raised for any other transport failure."""

    def __init__(self, message: str):
        super().__init__(f"Network Error: {message}")


class SubmissionError(VerifyClientError):
    """Raised when the service returns a `success: false` envelope."""


class InvalidUrlError(VerifyClientError):
    """Raised when a URL cannot be normalized into an absolute http(s) URL."""

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message)


class UnknownJobError(VerifyClientError):
    """Raised when a job id is not tracked by the registry."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Unknown job: {job_id}")


class ReconcileInProgressError(VerifyClientError):
    """Raised when a status check is already outstanding for the same job."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Status check already in progress for job {job_id}")


class JobCheckError(VerifyClientError):
    """Raised when fetching a job snapshot fails."""

    def __init__(self, job_id: str, cause: Exception):
        self.job_id = job_id
        self.cause = cause
        super().__init__(f"Job {job_id}: {cause}")


class HistoryUnavailableError(VerifyClientError):
    """Raised when both the history and the legacy scans endpoints fail."""

    def __init__(self, history_error: Exception, scans_error: Exception):
        self.history_error = history_error
        self.scans_error = scans_error
        super().__init__(
            f"History: /history failed ({history_error}); "
            f"fallback /scans failed ({scans_error})"
        )
