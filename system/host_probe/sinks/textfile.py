"""Prometheus text exposition output for probe samples.

Writes one file per cycle into a directory watched by a local agent (for
example node_exporter's textfile collector). The textfile collector rejects
client-side timestamps, so lines carry no timestamp. Samples that share a
metric name and label set are summed into one line; several logins by the same
user from the same host within the window become a single count.

Emits, for a dotted probe name such as ``kernel.files.max``:
- host_probe_kernel_files_max 1048576
- host_probe_kernel_user_login{host="10.0.0.5",user="alice"} 2
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Mapping
from pathlib import Path

from infrastructure.logging.logger import get_logger
from system.host_probe.metrics import MetricSample

METRIC_PREFIX = "host_probe_"
OUTPUT_FILENAME = "host_probe.prom"

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_:]")


def _escape_label_value(value: str) -> str:
    """Escape a Prometheus label value for text exposition format."""
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def metric_name(name: str) -> str:
    """Turn a dotted probe metric name into a Prometheus metric name."""
    return METRIC_PREFIX + _INVALID_NAME_CHARS.sub("_", name)


def _format_value(value: float) -> str:
    if isinstance(value, int):
        return f"{value:d}"
    return f"{value:g}"


def _labels(tags: Mapping[str, str]) -> tuple[tuple[str, str], ...]:
    return tuple(sorted((_INVALID_NAME_CHARS.sub("_", k), v) for k, v in tags.items()))


def _format_line(name: str, labels: tuple[tuple[str, str], ...], value: float) -> str:
    if labels:
        label_items = [f'{k}="{_escape_label_value(v)}"' for k, v in labels]
        name = f"{name}{{{','.join(label_items)}}}"
    return f"{name} {_format_value(value)}"


def format_sample(sample: MetricSample) -> str:
    return _format_line(metric_name(sample.name), _labels(sample.tags), sample.value)


def render(samples: Iterable[MetricSample]) -> str:
    """Render samples grouped by metric, one TYPE line per metric.

    Samples sharing a metric name and label set are summed into one series.
    """
    series: dict[str, dict[tuple[tuple[str, str], ...], float]] = {}
    for sample in samples:
        by_labels = series.setdefault(metric_name(sample.name), {})
        labels = _labels(sample.tags)
        by_labels[labels] = by_labels.get(labels, 0) + sample.value

    lines: list[str] = []
    for name, by_labels in series.items():
        lines.append(f"# TYPE {name} gauge")
        lines.extend(_format_line(name, labels, value) for labels, value in by_labels.items())
    return "\n".join(lines) + "\n" if lines else ""


def write_atomically(output_path: Path, content: str) -> None:
    """Write content to output_path atomically (write temp, then replace)."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = output_path.with_suffix(output_path.suffix + ".tmp")
    tmp_path.write_text(content, encoding="utf-8")
    os.replace(tmp_path, output_path)


class TextfileSink:
    """Metric sink that rewrites one exposition file per cycle.

    Args:
        output_dir: Directory to write ``host_probe.prom`` into.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_file = Path(output_dir) / OUTPUT_FILENAME
        self.logger = get_logger(self.__class__.__name__)

    def write(self, samples: list[MetricSample]) -> None:
        write_atomically(self.output_file, render(samples))
        self.logger.debug(f"Wrote {len(samples)} samples to {self.output_file}")
