"""Application-level exceptions."""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR", hint: Optional[str] = None):
        self.message = message
        self.code = code
        self.hint = hint
        super().__init__(message)


class EmptyDatasetError(AppError):
    """Raised when a series is built from zero points."""

    def __init__(self, message: str = "Dataset contains no data points"):
        super().__init__(message, code="EMPTY_DATASET")


class UnsortedOrDuplicateDatesError(AppError):
    """Raised when two points of a series share a date."""

    def __init__(self, duplicate: str):
        super().__init__(
            f"Dataset contains more than one data point for {duplicate}",
            code="DUPLICATE_DATE",
        )
        self.duplicate = duplicate


class NetworkError(AppError):
    """Raised when the remote data source cannot be reached."""

    def __init__(self, message: str):
        super().__init__(message, code="NETWORK_ERROR")


class MalformedResponseError(AppError):
    """Raised when the remote payload does not decode into (date, count) records."""

    def __init__(self, message: str):
        super().__init__(message, code="MALFORMED_RESPONSE")


class CacheUnavailableError(AppError):
    """Raised when offline mode is requested but nothing is cached."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, code="CACHE_UNAVAILABLE", hint=hint)


class TerminalError(AppError):
    """Raised when the terminal cannot be read from or drawn to."""

    def __init__(self, message: str):
        super().__init__(message, code="TERMINAL_ERROR")
