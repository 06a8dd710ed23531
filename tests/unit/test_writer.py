"""Unit tests for the InfluxDB client writer and error mapping."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import urllib3
from influxdb_client import WritePrecision
from influxdb_client.rest import ApiException

from k6_output_influxdb.client import ErrorMapper, InfluxPointWriter, write_precision
from k6_output_influxdb.config import get_consolidated_config
from k6_output_influxdb.errors import ConfigError, TransportError
from k6_output_influxdb.models import Point


@pytest.fixture
def config():
    return get_consolidated_config(
        '{"organization":"my-org","bucket":"my-bucket","token":"tok","precision":"1ms"}', {}, ""
    )


@pytest.fixture
def mock_client():
    client = Mock()
    client.write_api.return_value = Mock()
    return client


def _point():
    return Point(
        measurement="http_reqs",
        tags={"method": "GET"},
        fields={"value": 1.0, "vu": 3},
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


class TestWritePrecision:
    """Test mapping of precision durations."""

    @pytest.mark.parametrize("precision,expected", [
        (None, WritePrecision.NS),
        (1, WritePrecision.NS),
        (1_000, WritePrecision.US),
        (1_000_000, WritePrecision.MS),
        (1_000_000_000, WritePrecision.S),
    ])
    def test_supported(self, precision, expected):
        assert write_precision(precision) == expected

    def test_unsupported(self):
        with pytest.raises(ConfigError):
            write_precision(5_000_000)


class TestInfluxPointWriter:
    """Test writes through the client library."""

    def test_write_sends_whole_batch(self, config, mock_client):
        writer = InfluxPointWriter(config, client=mock_client)
        points = [_point(), _point()]

        writer.write(points)

        write_api = mock_client.write_api.return_value
        write_api.write.assert_called_once()
        kwargs = write_api.write.call_args.kwargs
        assert kwargs["bucket"] == "my-bucket"
        assert kwargs["org"] == "my-org"
        assert kwargs["write_precision"] == WritePrecision.MS
        assert kwargs["record"] == [p.to_dict() for p in points]

    def test_empty_batch_not_sent(self, config, mock_client):
        writer = InfluxPointWriter(config, client=mock_client)
        writer.write([])
        mock_client.write_api.return_value.write.assert_not_called()

    def test_client_error_mapped(self, config, mock_client):
        mock_client.write_api.return_value.write.side_effect = ApiException(status=503, reason="Service Unavailable")
        writer = InfluxPointWriter(config, client=mock_client)

        with pytest.raises(TransportError) as exc_info:
            writer.write([_point()])

        assert exc_info.value.status_code == 503
        assert exc_info.value.is_retryable is True
        assert isinstance(exc_info.value.original_error, ApiException)

    def test_close_once(self, config, mock_client):
        writer = InfluxPointWriter(config, client=mock_client)

        writer.close()
        writer.close()

        mock_client.close.assert_called_once()

    def test_real_client_options(self):
        config = get_consolidated_config(
            '{"bucket":"b","token":"user:password","insecureSkipTLSVerify":true}',
            {},
            "https://influx.local:8086",
        )
        writer = InfluxPointWriter(config)
        try:
            assert writer.client.url == "https://influx.local:8086"
            assert writer.client.org == ""
            assert writer.precision == WritePrecision.NS
            assert writer.client.conf.verify_ssl is False
        finally:
            writer.close()

    @pytest.mark.parametrize("json_config,verify_ssl", [
        ('{"bucket":"b"}', True),
        ('{"bucket":"b","insecureSkipTLSVerify":false}', True),
        ('{"bucket":"b","insecureSkipTLSVerify":true}', False),
    ])
    def test_tls_verification(self, json_config, verify_ssl):
        writer = InfluxPointWriter(get_consolidated_config(json_config, {}, ""))
        try:
            assert writer.client.conf.verify_ssl is verify_ssl
        finally:
            writer.close()

    def test_connection_pool_sized_to_concurrent_writes(self):
        config = get_consolidated_config('{"bucket":"b","concurrentWrites":7}', {}, "")
        writer = InfluxPointWriter(config)
        try:
            assert writer.client.conf.connection_pool_maxsize == 7
        finally:
            writer.close()


class TestErrorMapper:
    """Test classification of client failures."""

    @pytest.mark.parametrize("status,retryable", [
        (400, False), (401, False), (404, False),
        (429, True), (500, True), (502, True), (503, True), (504, True),
    ])
    def test_status_codes(self, status, retryable):
        error = ErrorMapper.map_error(ApiException(status=status, reason="reason"))

        assert error.status_code == status
        assert error.is_retryable is retryable
        assert str(status) in str(error)

    def test_connection_error_retryable(self):
        error = ErrorMapper.map_error(urllib3.exceptions.ProtocolError("connection aborted"))

        assert error.status_code is None
        assert error.is_retryable is True

    def test_unknown_error(self):
        error = ErrorMapper.map_error(ValueError("bad record"))

        assert error.status_code is None
        assert error.is_retryable is False
        assert "bad record" in str(error)
