"""Shared pytest fixtures for k6 InfluxDB output tests."""

from datetime import datetime, timezone
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load environment variables from .env file for tests
load_dotenv()

from k6_output_influxdb.models import Metric, MetricType, Sample, Samples, SampleTags
from k6_output_influxdb.output import OutputParams
from tests.helpers.fake_influxdb import FakeInfluxDB
from tests.helpers.writers import RecordingWriter


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without network access")
    config.addinivalue_line("markers", "integration: tests against a fake InfluxDB server")
    config.addinivalue_line("markers", "slow: tests that take more than a second")


def pytest_collection_modifyitems(config, items):
    unit_dir = Path(__file__).parent / "unit"
    for item in items:
        if unit_dir in Path(str(item.fspath)).parents:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def recording_writer():
    """A writer that records batches instead of sending them."""
    return RecordingWriter()


@pytest.fixture
def writer_factory(recording_writer):
    """Factory handing the recording writer to an output."""
    def factory(config):
        recording_writer.config = config
        return recording_writer
    return factory


@pytest.fixture
def output_params():
    """Params for an output with a short push interval."""
    return OutputParams(
        json_config={"bucket": "testbucket", "pushInterval": "50ms"},
        environment={},
    )


@pytest.fixture
def sample_tags():
    """Tag set shared by the generated samples."""
    return SampleTags({"something": "else", "vu": "21", "iter": "3", "url": "http://test.k6.io"})


@pytest.fixture
def make_samples(sample_tags):
    """Build a Samples container of ``count`` gauge samples."""
    def _make(count: int = 10, value: float = 2.0, tags: SampleTags = None) -> Samples:
        metric = Metric("testGauge", MetricType.GAUGE)
        now = datetime.now(timezone.utc)
        return Samples(
            Sample(metric=metric, value=value, time=now, tags=tags or sample_tags)
            for _ in range(count)
        )
    return _make


@pytest.fixture
def fake_influxdb():
    """A running fake InfluxDB answering 204."""
    with FakeInfluxDB() as server:
        yield server
