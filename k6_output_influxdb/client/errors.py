"""
Error mapping for InfluxDB client failures.

Converts whatever the client library raises into a TransportError carrying
the HTTP status code (when there is one) and a retryable flag.
"""

from typing import Optional

import urllib3
from influxdb_client.client.exceptions import InfluxDBError
from influxdb_client.rest import ApiException

from ..errors import TransportError


class ErrorMapper:
    """Maps InfluxDB client errors to TransportError."""

    # Common HTTP status codes that indicate retryable errors
    RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

    @staticmethod
    def get_status_code(error: Exception) -> Optional[int]:
        """Extract the HTTP status code from a client error, if any."""
        if isinstance(error, ApiException):
            return error.status
        if isinstance(error, InfluxDBError) and error.response is not None:
            return getattr(error.response, "status", None)
        status = getattr(error, "status", None)
        return status if isinstance(status, int) else None

    @staticmethod
    def is_retryable(error: Exception) -> bool:
        """
        Determine if an error is retryable.

        Args:
            error: The exception to check

        Returns:
            bool: True if the error is retryable
        """
        status_code = ErrorMapper.get_status_code(error)
        if status_code is not None:
            return status_code in ErrorMapper.RETRYABLE_STATUS_CODES

        # Connection level failures
        if isinstance(error, (urllib3.exceptions.HTTPError, ConnectionError, TimeoutError)):
            return True

        return False

    @staticmethod
    def map_error(error: Exception) -> TransportError:
        """
        Map a client error to TransportError.

        Args:
            error: The exception raised by the client library

        Returns:
            TransportError with status code and retryable flag
        """
        status_code = ErrorMapper.get_status_code(error)

        if status_code is not None:
            reason = getattr(error, "reason", None) or getattr(error, "message", None) or str(error)
            message = f"InfluxDB write failed with status {status_code}: {reason}"
        else:
            message = f"InfluxDB write failed: {error}"

        return TransportError(
            message,
            status_code=status_code,
            is_retryable=ErrorMapper.is_retryable(error),
            original_error=error
        )
