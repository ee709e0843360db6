"""Exceptions raised by the dreview core."""


class DreviewError(RuntimeError):
    """Base class for all dreview errors."""


class ConfigError(DreviewError):
    """Raised when the configuration is invalid."""


class ReviewApiError(DreviewError):
    """Raised when a review API call (other than a probe) fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
