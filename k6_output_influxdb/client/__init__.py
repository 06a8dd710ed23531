"""InfluxDB client integration."""

from .errors import ErrorMapper
from .writer import InfluxPointWriter, write_precision

__all__ = ["ErrorMapper", "InfluxPointWriter", "write_precision"]
