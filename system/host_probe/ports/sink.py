"""Metric sink port.

Any object with a ``write(samples)`` method can receive a collection cycle's
samples; the probe does not care where they go.
"""

from __future__ import annotations

from typing import Protocol

from system.host_probe.metrics import MetricSample


class MetricSinkPort(Protocol):
    """Protocol for metric sample consumers."""

    def write(self, samples: list[MetricSample]) -> None:
        """Accept the samples of one collection cycle."""
        ...
