"""
Configuration loading for the InfluxDB output.

The final configuration is consolidated from four layers, each overriding
the fields set by the previous one:

    defaults <- JSON config <- environment <- URL argument
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlsplit

from pydantic import ValidationError

from ..errors import ConfigError
from .constants import ENV_FIELDS, ENV_TAGS_AS_FIELDS
from .models import Config

logger = logging.getLogger(__name__)

JSONConfig = Union[str, bytes, bytearray, Mapping[str, Any]]


def _validation_message(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(loc) for loc in item.get("loc", ()))
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)


def parse_json(data: JSONConfig) -> Config:
    """
    Parse a JSON config document into a Config overlay.

    Args:
        data: Raw JSON text or an already decoded mapping

    Raises:
        ConfigError: If the document is malformed or holds invalid values
    """
    try:
        if isinstance(data, Mapping):
            return Config.model_validate(dict(data))
        return Config.model_validate_json(data)
    except ValidationError as e:
        raise ConfigError(f"invalid JSON config: {_validation_message(e)}") from e


def parse_env(env: Optional[Mapping[str, str]]) -> Config:
    """
    Parse the K6_INFLUXDB_* keys of an environment map into a Config overlay.

    Empty values are treated as unset. The tags-as-fields list is comma
    separated.
    """
    values: Dict[str, Any] = {}
    for key, field_name in ENV_FIELDS.items():
        raw = (env or {}).get(key)
        if raw is None or raw == "":
            continue
        if key == ENV_TAGS_AS_FIELDS:
            values[field_name] = [item.strip() for item in raw.split(",") if item.strip()]
        else:
            values[field_name] = raw

    try:
        return Config.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"invalid environment config: {_validation_message(e)}") from e


def parse_url(text: str) -> Config:
    """
    Parse the output URL argument into a Config overlay.

    ``scheme://host[:port]`` sets the address; the path without its leading
    slash sets the bucket, keeping inner slashes (``/dbname/retention``).

    Raises:
        ConfigError: If the URL cannot be parsed
    """
    try:
        parts = urlsplit(text)
        # Accessing port validates it
        parts.port
    except ValueError as e:
        raise ConfigError(f"invalid URL config {text!r}: {e}") from e

    values: Dict[str, Any] = {}
    host = parts.netloc.rpartition("@")[2]
    if host:
        values["addr"] = f"{parts.scheme}://{host}"

    path = parts.path
    # "localhost:8086" parses as scheme "localhost" with opaque data "8086"
    if parts.scheme and not parts.netloc and not path.startswith("/"):
        path = ""
    if path.startswith("/"):
        path = path[1:]
    if path:
        values["bucket"] = path

    return Config.model_validate(values)


def get_consolidated_config(
    json_config: Optional[JSONConfig],
    env: Optional[Mapping[str, str]],
    url: Optional[str]
) -> Config:
    """
    Combine defaults, JSON config, environment and URL argument.

    Args:
        json_config: Optional JSON config document
        env: Environment map supplied by the host (not ``os.environ``)
        url: Optional URL argument

    Returns:
        The consolidated Config

    Raises:
        ConfigError: If any layer fails to parse
    """
    result = Config()
    if json_config is not None:
        result = result.apply(parse_json(json_config))

    result = result.apply(parse_env(env))

    if url:
        result = result.apply(parse_url(url))

    logger.debug(f"Consolidated InfluxDB config: addr={result.addr} bucket={result.bucket}")
    return result


def validate_config(config: Config) -> None:
    """
    Check the options that must hold before an output can be built.

    Raises:
        ConfigError: On a missing bucket or a non-positive write concurrency
    """
    if not config.bucket:
        raise ConfigError("the Bucket option is required")
    if config.concurrent_writes is None or config.concurrent_writes <= 0:
        raise ConfigError("the ConcurrentWrites option must be a positive number")
    if config.push_interval is None or config.push_interval <= 0:
        raise ConfigError("the PushInterval option must be a positive duration")
