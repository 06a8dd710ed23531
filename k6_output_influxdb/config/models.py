"""
Configuration model for the InfluxDB output.

Every option is optional so that a partially filled ``Config`` can act as an
overlay: the fields a layer actually provides are tracked by pydantic in
``model_fields_set`` and only those replace the accumulated values when the
layers are merged with :meth:`Config.apply`.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Dict, Optional, Tuple

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .constants import (
    DEFAULT_ADDR,
    DEFAULT_CONCURRENT_WRITES,
    DEFAULT_PUSH_INTERVAL_NS,
    DEFAULT_TAGS_AS_FIELDS,
)


_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> int:
    """
    Parse a Go-style duration string into nanoseconds.

    Accepts a sequence of decimal numbers with unit suffixes such as
    ``"300ms"``, ``"1.5h"`` or ``"2h45m"``, with an optional leading sign.
    A bare ``"0"`` is also accepted.

    Raises:
        ValueError: If the string is not a valid duration
    """
    original = text
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return 0
    if not text:
        raise ValueError(f"invalid duration {original!r}")

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration {original!r}")
        number, unit = match.groups()
        total += float(number) * _DURATION_UNITS[unit]
        pos = match.end()
    return sign * int(round(total))


def _coerce_duration(value: Any) -> Any:
    """Strings use duration syntax; bare JSON numbers are milliseconds."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("a duration must be a string or a number")
    if isinstance(value, (int, float)):
        return int(round(value * 1_000_000))
    if isinstance(value, str):
        return parse_duration(value.strip())
    return value


Duration = Annotated[Optional[int], BeforeValidator(_coerce_duration)]


class Config(BaseModel):
    """
    InfluxDB output configuration.

    Durations are stored as integer nanoseconds. A ``Config()`` built with no
    arguments carries the defaults and has an empty ``model_fields_set``.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    addr: Optional[str] = Field(default=DEFAULT_ADDR, description="InfluxDB base URL")
    organization: Optional[str] = Field(None, description="Organization (tenant)")
    bucket: Optional[str] = Field(None, description="Destination bucket")
    token: Optional[str] = Field(None, description="Auth token, or user:password for v1 compat")
    insecure_skip_tls_verify: Optional[bool] = Field(
        None,
        alias="insecureSkipTLSVerify",
        description="Skip TLS certificate verification"
    )
    push_interval: Duration = Field(
        DEFAULT_PUSH_INTERVAL_NS,
        alias="pushInterval",
        description="Flush period in nanoseconds"
    )
    concurrent_writes: Optional[int] = Field(
        DEFAULT_CONCURRENT_WRITES,
        alias="concurrentWrites",
        description="Maximum number of concurrent write requests"
    )
    precision: Duration = Field(None, description="Timestamp precision in nanoseconds")
    tags_as_fields: Optional[Tuple[str, ...]] = Field(
        DEFAULT_TAGS_AS_FIELDS,
        alias="tagsAsFields",
        description="Tags promoted to fields, as name or name:kind"
    )

    def apply(self, other: Config) -> Config:
        """Return a copy with every field that ``other`` sets replacing ours."""
        updates: Dict[str, Any] = {}
        for name in other.model_fields_set:
            value = getattr(other, name)
            if value is None:
                continue
            if name == "tags_as_fields" and len(value) == 0:
                continue
            updates[name] = value
        return self.model_copy(update=updates)

    @property
    def push_interval_seconds(self) -> float:
        return (self.push_interval or 0) / 1e9

    def describe(self) -> Dict[str, Any]:
        """Render the resolved options for display, with the token masked."""
        return {
            "addr": self.addr,
            "organization": self.organization or "",
            "bucket": self.bucket or "",
            "token": "****" if self.token else "",
            "insecureSkipTLSVerify": bool(self.insecure_skip_tls_verify),
            "pushInterval": f"{self.push_interval_seconds}s",
            "concurrentWrites": self.concurrent_writes,
            "precision": f"{self.precision}ns" if self.precision is not None else "",
            "tagsAsFields": list(self.tags_as_fields or ()),
        }
