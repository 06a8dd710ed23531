"""
k6 InfluxDB output - pushes load-test metrics to InfluxDB v2.

Samples emitted by the engine are buffered, converted to line-protocol
points and written to an InfluxDB bucket on a fixed push interval, with a
bounded number of concurrent writes.

Features:
- Layered configuration (defaults, JSON, environment, URL argument)
- Tag-to-field promotion with typed values
- Backpressure when InfluxDB cannot keep up
- Clean drain on stop
"""

__version__ = "0.1.0"

from .config import Config, get_consolidated_config
from .config.constants import OUTPUT_NAME
from .errors import ConfigError, OutputError, StartError, StopError, TransportError
from .models import ConnectedSamples, Metric, MetricType, Sample, Samples, SampleTags
from .output import InfluxDBOutput, OutputParams, OutputState


def new(params: OutputParams) -> InfluxDBOutput:
    """Output factory registered with the host under ``OUTPUT_NAME``."""
    return InfluxDBOutput(params)


__all__ = [
    "__version__",
    "new",
    "OUTPUT_NAME",
    "Config",
    "get_consolidated_config",
    "ConfigError",
    "OutputError",
    "StartError",
    "StopError",
    "TransportError",
    "ConnectedSamples",
    "Metric",
    "MetricType",
    "Sample",
    "Samples",
    "SampleTags",
    "InfluxDBOutput",
    "OutputParams",
    "OutputState",
]
