"""
Blocking point writer backed by the official InfluxDB client.

The client is shared by all writer threads; it pools its HTTP connections
and owns transport-level retries.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional, Sequence

from influxdb_client import InfluxDBClient, WritePrecision
from influxdb_client.client.write_api import SYNCHRONOUS

from ..config.models import Config
from ..errors import ConfigError
from ..models.points import Point
from .errors import ErrorMapper

# Internal client logging is disabled; failures surface through write()
logging.getLogger("influxdb_client").setLevel(logging.CRITICAL)

_PRECISIONS: Dict[int, str] = {
    1: WritePrecision.NS,
    1_000: WritePrecision.US,
    1_000_000: WritePrecision.MS,
    1_000_000_000: WritePrecision.S,
}


def write_precision(precision_ns: Optional[int]) -> str:
    """
    Map a precision duration to the client's write precision.

    Raises:
        ConfigError: If the duration is not 1ns, 1us, 1ms or 1s
    """
    if precision_ns is None:
        return WritePrecision.NS
    try:
        return _PRECISIONS[precision_ns]
    except KeyError:
        raise ConfigError(
            f"the Precision option must be one of 1ns, 1us, 1ms or 1s, got {precision_ns}ns"
        ) from None


class InfluxPointWriter:
    """
    Writes batches of points to one bucket.

    Example:
        writer = InfluxPointWriter(config)
        writer.write(points)
        writer.close()
    """

    def __init__(self, config: Config, client: Optional[InfluxDBClient] = None):
        """
        Build the client from the output configuration.

        Args:
            config: Consolidated output configuration
            client: Pre-built client, mainly for tests
        """
        self.org = config.organization or ""
        self.bucket = config.bucket or ""
        self.precision = write_precision(config.precision)

        self.client = client or InfluxDBClient(
            url=config.addr,
            token=config.token or None,
            org=self.org,
            verify_ssl=not config.insecure_skip_tls_verify,
            connection_pool_maxsize=config.concurrent_writes,
        )
        self._write_api = self.client.write_api(write_options=SYNCHRONOUS)
        self._closed = False
        self._close_lock = threading.Lock()

    def write(self, points: Sequence[Point]) -> None:
        """
        Send the whole batch in one call.

        Raises:
            TransportError: If the client reports any failure
        """
        if not points:
            return
        try:
            self._write_api.write(
                bucket=self.bucket,
                org=self.org,
                record=[point.to_dict() for point in points],
                write_precision=self.precision,
            )
        except Exception as e:
            raise ErrorMapper.map_error(e) from e

    def close(self) -> None:
        """Close the client. Only the first call has an effect."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._write_api.close()
        self.client.close()
