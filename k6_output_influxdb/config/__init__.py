"""Configuration module for the InfluxDB output."""

from .models import Config, parse_duration
from .loader import (
    get_consolidated_config,
    parse_env,
    parse_json,
    parse_url,
    validate_config,
)

# Import all constants
from .constants import *

__all__ = [
    "Config",
    "parse_duration",
    "get_consolidated_config",
    "parse_env",
    "parse_json",
    "parse_url",
    "validate_config",
]
