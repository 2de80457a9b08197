"""Metric sample model shared by every probe collector."""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class MetricSample:
    """One named, timestamped, tagged observation.

    Attributes:
        name: Dotted metric name, e.g. ``kernel.files.max``.
        value: Numeric value.
        timestamp: Unix time in whole seconds.
        tags: Read-only tag mapping.
    """

    name: str
    value: float
    timestamp: int
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))


def to_metric(
    name: str,
    value: float,
    tags: Mapping[str, str] | None = None,
    timestamp: int | None = None,
) -> MetricSample:
    """Build a sample, stamping it with the current time unless one is given."""
    if timestamp is None:
        timestamp = int(time.time())
    return MetricSample(name=name, value=value, timestamp=timestamp, tags=tags or {})


def set_precision(value: float, places: int) -> float:
    """Round ``value`` to ``places`` decimals for reporting."""
    return round(float(value), places)
