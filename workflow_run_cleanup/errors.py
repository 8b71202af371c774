"""Exceptions raised by the cleanup tool."""


class ConfigurationError(Exception):
    """Raised when the cleanup configuration is invalid."""


class BackendError(Exception):
    """Raised when a backend call fails."""


class RateLimitError(BackendError):
    """Raised when a backend call is rejected by a rate limit."""

    def __init__(self, message: str, *, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after
