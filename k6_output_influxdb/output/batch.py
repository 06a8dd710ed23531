"""
Conversion of buffered samples into line-protocol points.

Samples sharing a ``SampleTags`` instance share the derived tags and the
promoted field values, so the promotion work is done once per tag set per
flush rather than once per sample.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from ..models.points import FieldValue, Point
from ..models.samples import SampleContainer, SampleTags
from .fields import FieldKindTable, extract_tags_to_values

_CacheItem = Tuple[SampleTags, Dict[str, str], Dict[str, FieldValue]]


def batch_from_samples(
    containers: Iterable[SampleContainer],
    field_kinds: FieldKindTable
) -> List[Point]:
    """
    Build one point per sample, in arrival order.

    Args:
        containers: Sample containers drained in one flush cycle
        field_kinds: Tags to promote to fields and their kinds

    Returns:
        Points whose fields hold the promoted tags plus ``value``
    """
    # Keyed by id(); each entry holds its tag set so the id cannot be reused
    # while the cache is alive.
    cache: Dict[int, _CacheItem] = {}
    points: List[Point] = []

    for container in containers:
        for sample in container.get_samples():
            cached = cache.get(id(sample.tags))
            if cached is None:
                cached = _derive(sample.tags, field_kinds)
                cache[id(sample.tags)] = cached
            _, tags, base_values = cached

            values: Dict[str, FieldValue] = dict(base_values)
            values["value"] = float(sample.value)
            points.append(Point(
                measurement=sample.metric_name,
                tags=tags,
                fields=values,
                timestamp=sample.time,
            ))

    return points


def _derive(sample_tags: SampleTags, field_kinds: FieldKindTable) -> _CacheItem:
    tags = sample_tags.clone_tags()
    values: Dict[str, FieldValue] = {}
    extract_tags_to_values(tags, values, field_kinds)
    return sample_tags, tags, values
