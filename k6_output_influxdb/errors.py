"""Error definitions for the InfluxDB output."""

from typing import Optional


class OutputError(Exception):
    """Base exception for output errors."""
    pass


class ConfigError(OutputError):
    """Raised when the output configuration cannot be resolved or is invalid."""
    pass


class StartError(OutputError):
    """Raised when the output cannot be started."""
    pass


class StopError(OutputError):
    """Raised when the output cannot be stopped."""
    pass


class TransportError(OutputError):
    """Exception raised when a write to InfluxDB fails."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        is_retryable: bool = False,
        original_error: Optional[Exception] = None
    ):
        self.status_code = status_code
        self.is_retryable = is_retryable
        self.original_error = original_error
        super().__init__(message)
