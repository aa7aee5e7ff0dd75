"""
check_logstash/snapshot.py — Point-in-time node stats payload.

A Snapshot wraps the decoded /_node/stats JSON together with the wall-clock
time of the fetch on the monitoring host. Rates are always computed against
that local capture time, never against timestamps reported by Logstash.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

from check_logstash.errors import InvalidField

# Decoded JSON value: scalars, nested mappings, lists (tuples once frozen), or null.
Value = Union[int, float, str, bool, None, list[Any], tuple[Any, ...], Mapping[str, Any]]


def get_field(path: str, data: Mapping[str, Any]) -> Value:
    """Resolve a dotted path such as ``jvm.mem.heap_used_percent``.

    Descends one segment at a time. If a segment resolves to something that
    is not a mapping while segments remain, that value is returned and the
    remaining segments are ignored: ``get_field("a.b.c", {"a": {"b": 5}})``
    yields 5. This mirrors how the plugin has always behaved; it may hide a
    wrong path, so callers should never append segments past a known leaf.

    Raises:
        InvalidField: naming the full ``path`` when any segment is absent.
    """
    return _descend(path, path, data)


def _descend(original: str, path: str, data: Mapping[str, Any]) -> Value:
    head, _, remaining = path.partition(".")
    try:
        value = data[head]
    except KeyError:
        raise InvalidField(original) from None
    if remaining and isinstance(value, Mapping):
        return _descend(original, remaining, value)
    return value


def as_int(value: Value) -> int:
    """Counters and gauges reported as null count as zero."""
    if value is None:
        return 0
    return int(value)


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of one stats payload.

    ``data`` is copied on construction into read-only proxies (lists become
    tuples), so neither the caller's dict nor a value handed out by ``get``
    can change what the snapshot reports.
    """

    data: Mapping[str, Any]
    captured_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", _freeze(self.data))

    def get(self, path: str) -> Value:
        return get_field(path, self.data)

    @property
    def version(self) -> str:
        return str(self.get("version"))
