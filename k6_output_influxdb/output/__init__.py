"""Flush pipeline of the InfluxDB output."""

from .batch import batch_from_samples
from .buffer import SampleBuffer
from .dispatcher import Dispatcher, PointWriter, WaitGroup
from .fields import (
    FieldKind,
    FieldKindTable,
    coerce_field_value,
    extract_tags_to_values,
    make_field_kinds,
)
from .flusher import PeriodicFlusher
from .influxdb import InfluxDBOutput, OutputParams, OutputState

__all__ = [
    "batch_from_samples",
    "SampleBuffer",
    "Dispatcher",
    "PointWriter",
    "WaitGroup",
    "FieldKind",
    "FieldKindTable",
    "coerce_field_value",
    "extract_tags_to_values",
    "make_field_kinds",
    "PeriodicFlusher",
    "InfluxDBOutput",
    "OutputParams",
    "OutputState",
]
