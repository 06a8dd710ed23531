"""Logging for the InfluxDB output."""

from .logging import OutputLogger

__all__ = ["OutputLogger"]
