"""
Sample types produced by the load-testing engine.

A ``Sample`` is one metric observation. Samples travel in containers: a
plain ``Samples`` list, or ``ConnectedSamples`` for a group of observations
emitted together (for example the timings of one HTTP request).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterator, List, Optional, Protocol, runtime_checkable


class MetricType(str, Enum):
    """Types of metrics emitted by the engine."""
    COUNTER = "counter"
    GAUGE = "gauge"
    TREND = "trend"
    RATE = "rate"


@dataclass(frozen=True)
class Metric:
    """A named metric."""
    name: str
    type: MetricType = MetricType.GAUGE


class SampleTags(Mapping):
    """
    Immutable set of labels attached to samples.

    Producers reuse the same instance across many samples; the point builder
    caches its derived tags and fields by instance identity.
    """

    __slots__ = ("_tags",)

    def __init__(self, tags: Optional[Mapping[str, str]] = None):
        self._tags: Dict[str, str] = dict(tags or {})

    def __getitem__(self, key: str) -> str:
        return self._tags[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __repr__(self) -> str:
        return f"SampleTags({self._tags!r})"

    def clone_tags(self) -> Dict[str, str]:
        """Return a mutable copy of the labels."""
        return dict(self._tags)


@dataclass
class Sample:
    """A single metric observation."""
    metric: Metric
    value: float
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tags: SampleTags = field(default_factory=SampleTags)

    @property
    def metric_name(self) -> str:
        return self.metric.name


@runtime_checkable
class SampleContainer(Protocol):
    """Anything that can hand out its samples."""

    def get_samples(self) -> List[Sample]:
        ...


class Samples(list):
    """A plain list of samples."""

    def get_samples(self) -> List[Sample]:
        return list(self)


@dataclass
class ConnectedSamples:
    """Samples emitted together, sharing a time and a tag set."""
    samples: List[Sample] = field(default_factory=list)
    tags: SampleTags = field(default_factory=SampleTags)
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def get_samples(self) -> List[Sample]:
        return list(self.samples)
