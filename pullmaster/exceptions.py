"""Pullmaster exception classes."""


class PullmasterError(Exception):
    """Base exception for all Pullmaster errors."""

    retryable: bool = False

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(PullmasterError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class InvalidReferenceError(PullmasterError):
    """Raised when a pull request reference cannot be parsed."""

    def __init__(self, message: str) -> None:
        super().__init__("INVALID_REFERENCE", message)


class NotFoundError(PullmasterError):
    """Raised when a repository, pull request or ref is not found."""

    pass


class UnauthorizedError(PullmasterError):
    """Raised when the credential is missing, invalid or expired."""

    pass


class RateLimitedError(PullmasterError):
    """Raised when the provider throttles requests."""

    retryable = True

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: float | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class TransientNetworkError(PullmasterError):
    """Raised on timeouts, connection failures and 5xx responses."""

    retryable = True


class UnknownError(PullmasterError):
    """Raised on unexpected failures. Never retried."""

    pass


class ContentFetchFailedError(PullmasterError):
    """Raised when file content could not be fetched for one changed file."""

    def __init__(self, filename: str, cause: Exception) -> None:
        super().__init__(
            "CONTENT_FETCH_FAILED",
            f"Failed to fetch content for {filename}: {cause}",
        )
        self.filename = filename
        self.cause = cause


class AggregationCancelledError(PullmasterError):
    """Raised when an aggregation run is cancelled or times out."""

    def __init__(self, message: str = "Aggregation was cancelled") -> None:
        super().__init__("CANCELLED", message)
