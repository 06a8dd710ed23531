"""
InfluxDB output configuration constants.

Default values and the environment variable names recognised by the
configuration loader.
"""

# Defaults applied before any other configuration layer
DEFAULT_ADDR = "http://localhost:8086"
DEFAULT_TAGS_AS_FIELDS = ("vu:int", "iter:int", "url")
DEFAULT_CONCURRENT_WRITES = 4
DEFAULT_PUSH_INTERVAL_NS = 1_000_000_000  # 1s

# Environment variable -> config field
ENV_ADDR = "K6_INFLUXDB_ADDR"
ENV_ORGANIZATION = "K6_INFLUXDB_ORGANIZATION"
ENV_BUCKET = "K6_INFLUXDB_BUCKET"
ENV_TOKEN = "K6_INFLUXDB_TOKEN"
ENV_INSECURE = "K6_INFLUXDB_INSECURE"
ENV_PUSH_INTERVAL = "K6_INFLUXDB_PUSH_INTERVAL"
ENV_CONCURRENT_WRITES = "K6_INFLUXDB_CONCURRENT_WRITES"
ENV_PRECISION = "K6_INFLUXDB_PRECISION"
ENV_TAGS_AS_FIELDS = "K6_INFLUXDB_TAGS_AS_FIELDS"

ENV_FIELDS = {
    ENV_ADDR: "addr",
    ENV_ORGANIZATION: "organization",
    ENV_BUCKET: "bucket",
    ENV_TOKEN: "token",
    ENV_INSECURE: "insecure_skip_tls_verify",
    ENV_PUSH_INTERVAL: "push_interval",
    ENV_CONCURRENT_WRITES: "concurrent_writes",
    ENV_PRECISION: "precision",
    ENV_TAGS_AS_FIELDS: "tags_as_fields",
}

# Output identity
OUTPUT_NAME = "xk6-influxdb"
OUTPUT_LABEL = "InfluxDBv2"

OVERRUN_WARNING = (
    "The flush operation took higher than the expected set push interval. "
    "If you see this message multiple times then the setup or configuration "
    "need to be adjusted to achieve a sustainable rate."
)
