"""
Structured logging utility for the InfluxDB output.

All log lines carry the output name plus any extra key/value fields, for
example ``[output=InfluxDBv2 points=120 elapsed=0.031s] Metrics points have
been sent``.
"""

import logging
from typing import Any, Optional

from ..config.constants import OUTPUT_LABEL


class OutputLogger:
    """Structured logger for the output and its workers."""

    def __init__(self, logger: Optional[logging.Logger] = None, output: str = OUTPUT_LABEL):
        """
        Initialize logger for an output.

        Args:
            logger: Base logger supplied by the host; a module logger is used if omitted
            output: Output name added to every line
        """
        self.output = output
        self.logger = logger or logging.getLogger("k6_output_influxdb")

    def _format_message(self, message: str, **kwargs: Any) -> str:
        """Format message with structured fields."""
        fields = [f"output={self.output}"]

        for key, value in kwargs.items():
            if value is None:
                continue
            # Durations are passed as float seconds
            if key == "elapsed" and isinstance(value, float):
                value = f"{value:.3f}s"
            fields.append(f"{key}={value}")

        return f"[{' '.join(fields)}] {message}"

    def debug(self, message: str, **kwargs: Any) -> None:
        self.logger.debug(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, error: Optional[Exception] = None, **kwargs: Any) -> None:
        """Log error message with structured fields."""
        if error:
            kwargs['error_type'] = type(error).__name__
            kwargs['error'] = str(error)

        self.logger.error(self._format_message(message, **kwargs))
