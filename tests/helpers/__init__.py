"""Test helpers for the k6 InfluxDB output."""
