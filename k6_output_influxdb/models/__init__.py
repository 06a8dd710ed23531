from .samples import (
    ConnectedSamples,
    Metric,
    MetricType,
    Sample,
    SampleContainer,
    Samples,
    SampleTags,
)
from .points import FieldValue, Point

__all__ = [
    "ConnectedSamples",
    "Metric",
    "MetricType",
    "Sample",
    "SampleContainer",
    "Samples",
    "SampleTags",
    "FieldValue",
    "Point",
]
