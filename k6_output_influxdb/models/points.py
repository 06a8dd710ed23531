"""Line-protocol point model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Union

FieldValue = Union[str, bool, int, float]


@dataclass
class Point:
    """
    One line-protocol point.

    ``tags`` may be shared between points built from the same tag set and must
    not be mutated; ``fields`` is owned by the point.
    """
    measurement: str
    tags: Dict[str, str]
    fields: Dict[str, FieldValue]
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the record dictionary accepted by the InfluxDB client."""
        return {
            "measurement": self.measurement,
            "tags": self.tags,
            "fields": self.fields,
            "time": self.timestamp,
        }
