"""
Tag-to-field promotion.

``tagsAsFields`` entries name the sample tags that are written as fields
instead of tags, optionally with the kind their value is converted to
(``"vu:int"``, ``"url"``).
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Dict, Iterable, MutableMapping

from ..errors import ConfigError
from ..models.points import FieldValue


class FieldKind(str, Enum):
    """Kind a promoted tag value is converted to."""
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"


FieldKindTable = Dict[str, FieldKind]

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1

_INT_PATTERN = re.compile(r"[+-]?\d+")
_FLOAT_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_BOOL_VALUES = {
    "1": True, "t": True, "true": True,
    "0": False, "f": False, "false": False,
}


def make_field_kinds(tags_as_fields: Iterable[str]) -> FieldKindTable:
    """
    Build the lookup of tag names to the field kind their values convert to.

    Args:
        tags_as_fields: Entries of the form ``name`` or ``name:kind``

    Returns:
        Mapping of tag name to FieldKind

    Raises:
        ConfigError: On an unknown kind or a tag listed more than once
    """
    field_kinds: FieldKindTable = {}
    for entry in tags_as_fields:
        name, sep, kind = entry.partition(":")
        if not sep:
            kind = FieldKind.STRING.value

        if name in field_kinds:
            raise ConfigError(
                f"a tag name ({name}) shows up more than once in InfluxDB field type configurations"
            )

        try:
            field_kinds[name] = FieldKind(kind)
        except ValueError:
            raise ConfigError(
                f"an invalid type ({kind}) is specified for an InfluxDB field ({name})"
            ) from None

    return field_kinds


def parse_bool(raw: str) -> bool:
    """Parse ``true/false/1/0/t/f`` in any case."""
    try:
        return _BOOL_VALUES[raw.lower()]
    except KeyError:
        raise ValueError(f"invalid boolean {raw!r}") from None


def parse_int(raw: str) -> int:
    """Parse a signed 64-bit base-10 integer."""
    if not _INT_PATTERN.fullmatch(raw):
        raise ValueError(f"invalid integer {raw!r}")
    value = int(raw)
    if value < _INT64_MIN or value > _INT64_MAX:
        raise ValueError(f"integer out of range {raw!r}")
    return value


def parse_float(raw: str) -> float:
    """Parse a finite 64-bit float; overflow, NaN and infinities are errors."""
    if not _FLOAT_PATTERN.fullmatch(raw):
        raise ValueError(f"invalid float {raw!r}")
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"float out of range {raw!r}")
    return value


_PARSERS = {
    FieldKind.BOOL: parse_bool,
    FieldKind.INT: parse_int,
    FieldKind.FLOAT: parse_float,
}


def coerce_field_value(raw: str, kind: FieldKind) -> FieldValue:
    """
    Convert a tag value to its field kind.

    A value that does not parse is kept as the raw string.
    """
    parser = _PARSERS.get(kind)
    if parser is None:
        return raw
    try:
        return parser(raw)
    except ValueError:
        return raw


def extract_tags_to_values(
    tags: MutableMapping[str, str],
    values: MutableMapping[str, FieldValue],
    field_kinds: FieldKindTable
) -> MutableMapping[str, FieldValue]:
    """
    Move the promoted tags out of ``tags`` and into ``values``.

    Both mappings are modified in place; ``values`` is returned for convenience.
    """
    for tag, kind in field_kinds.items():
        if tag in tags:
            values[tag] = coerce_field_value(tags.pop(tag), kind)
    return values
