"""Unit tests for the output lifecycle."""

import threading

import pytest

from k6_output_influxdb import new
from k6_output_influxdb.client import InfluxPointWriter
from k6_output_influxdb.errors import ConfigError, StartError, StopError, TransportError
from k6_output_influxdb.output import FieldKind, InfluxDBOutput, OutputParams, OutputState
from tests.helpers.writers import RecordingWriter


class TestNew:
    """Test construction and validation."""

    def test_bucket_required(self):
        with pytest.raises(ConfigError, match="Bucket option is required"):
            InfluxDBOutput(OutputParams(config_argument="/"))

    def test_empty_bucket_in_json(self):
        with pytest.raises(ConfigError, match="Bucket"):
            InfluxDBOutput(OutputParams(json_config='{"bucket":""}'))

    @pytest.mark.parametrize("value", ["0", "-2"])
    def test_concurrent_writes_must_be_positive(self, value):
        with pytest.raises(ConfigError) as exc_info:
            InfluxDBOutput(OutputParams(
                json_config=f'{{"bucket":"b","concurrentWrites":"{value}"}}'
            ))
        assert str(exc_info.value) == "the ConcurrentWrites option must be a positive number"

    def test_concurrent_writes_positive(self, writer_factory):
        output = InfluxDBOutput(
            OutputParams(json_config='{"bucket":"b","concurrentWrites":"2"}'),
            writer_factory=writer_factory,
        )
        assert output.config.concurrent_writes == 2
        assert output.state is OutputState.UNSTARTED

    @pytest.mark.parametrize("interval", ["0s", "-1s", "0"])
    def test_push_interval_must_be_positive(self, interval, writer_factory):
        with pytest.raises(ConfigError, match="PushInterval"):
            InfluxDBOutput(
                OutputParams(json_config={"bucket": "b", "pushInterval": interval}),
                writer_factory=writer_factory,
            )

    def test_bad_field_kinds(self):
        with pytest.raises(ConfigError, match="invalid type"):
            InfluxDBOutput(OutputParams(json_config='{"bucket":"b","tagsAsFields":["vu:number"]}'))

    def test_unsupported_precision(self):
        with pytest.raises(ConfigError, match="Precision"):
            InfluxDBOutput(OutputParams(json_config='{"bucket":"b","precision":"10ms"}'))

    def test_default_field_kinds(self, writer_factory):
        output = InfluxDBOutput(OutputParams(config_argument="bucket"), writer_factory=writer_factory)

        assert output.field_kinds == {
            "vu": FieldKind.INT,
            "iter": FieldKind.INT,
            "url": FieldKind.STRING,
        }

    def test_builds_client_writer_by_default(self):
        output = new(OutputParams(config_argument="http://influx.local:8086/k6"))
        try:
            assert isinstance(output.writer, InfluxPointWriter)
            assert output.writer.bucket == "k6"
        finally:
            output.writer.close()

    def test_environment_map_used(self, writer_factory):
        output = InfluxDBOutput(
            OutputParams(environment={"K6_INFLUXDB_BUCKET": "env-bucket"}),
            writer_factory=writer_factory,
        )
        assert output.config.bucket == "env-bucket"

    def test_description(self, writer_factory):
        output = InfluxDBOutput(
            OutputParams(config_argument="http://influx.local:8086/k6"),
            writer_factory=writer_factory,
        )
        assert output.description() == "InfluxDBv2 (http://influx.local:8086)"


class TestLifecycle:
    """Test start, sample intake and stop."""

    def test_start_and_stop(self, output_params, writer_factory, recording_writer, make_samples):
        output = InfluxDBOutput(output_params, writer_factory=writer_factory)

        output.start()
        assert output.state is OutputState.RUNNING
        output.add_metric_samples([make_samples(10)])
        output.add_metric_samples([make_samples(10)])
        output.stop()

        assert output.state is OutputState.STOPPED
        assert len(recording_writer.points) == 20
        assert recording_writer.closed == 1

    def test_start_twice(self, output_params, writer_factory):
        output = InfluxDBOutput(output_params, writer_factory=writer_factory)
        output.start()
        try:
            with pytest.raises(StartError):
                output.start()
        finally:
            output.stop()

    def test_stop_unstarted(self, output_params, writer_factory):
        output = InfluxDBOutput(output_params, writer_factory=writer_factory)
        with pytest.raises(StopError):
            output.stop()

    def test_stop_twice(self, output_params, writer_factory):
        output = InfluxDBOutput(output_params, writer_factory=writer_factory)
        output.start()
        output.stop()
        with pytest.raises(StopError):
            output.stop()

    def test_no_samples_lost_on_stop(self, writer_factory, recording_writer, make_samples):
        output = InfluxDBOutput(
            OutputParams(json_config={"bucket": "b", "pushInterval": "10ms", "concurrentWrites": 2}),
            writer_factory=writer_factory,
        )
        producers, batches, per_batch = 4, 50, 3

        def produce():
            for _ in range(batches):
                output.add_metric_samples([make_samples(per_batch)])

        output.start()
        threads = [threading.Thread(target=produce) for _ in range(producers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        output.stop()

        assert len(recording_writer.points) == producers * batches * per_batch

    def test_samples_added_before_first_tick_are_flushed_on_stop(
        self, writer_factory, recording_writer, make_samples
    ):
        output = InfluxDBOutput(
            OutputParams(json_config={"bucket": "b", "pushInterval": "1h"}),
            writer_factory=writer_factory,
        )
        output.start()
        output.add_metric_samples([make_samples(7)])
        output.stop()

        assert len(recording_writer.batches) == 1
        assert len(recording_writer.points) == 7

    def test_stop_succeeds_when_writes_fail(self, output_params, make_samples):
        failing = RecordingWriter(error=TransportError("connection refused", is_retryable=True))
        output = InfluxDBOutput(output_params, writer_factory=lambda config: failing)

        output.start()
        output.add_metric_samples([make_samples(3)])
        output.stop()

        assert output.state is OutputState.STOPPED
        assert output.dispatcher.stats()["writes_failed"] >= 1
        assert failing.closed == 1
