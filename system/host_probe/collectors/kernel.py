"""Kernel file-handle metrics from procfs."""

from __future__ import annotations

from pathlib import Path

from infrastructure.logging.logger import get_logger
from system.host_probe.metrics import MetricSample, set_precision, to_metric

logger = get_logger("KernelMetrics")


def _read_first_int(path: Path) -> int:
    # file-nr holds "allocated  free  max"; file-max a single number.
    text = path.read_text(encoding="utf-8", errors="replace")
    fields = text.split()
    if not fields:
        raise ValueError(f"{path} is empty")
    return int(fields[0])


def read_kernel_files(proc_root: Path) -> tuple[int, int]:
    """Return (max open files, allocated file handles).

    Raises:
        OSError: A procfs file could not be read.
        ValueError: A procfs file did not contain an integer.
    """
    fs_dir = proc_root / "sys" / "fs"
    max_files = _read_first_int(fs_dir / "file-max")
    allocated = _read_first_int(fs_dir / "file-nr")
    return max_files, allocated


def file_usage(max_files: int, allocated: int) -> tuple[float, int]:
    """Return (percent allocated to 2 places, handles left)."""
    percent = set_precision(allocated * 100 / max_files, 2) if max_files > 0 else 0.0
    return percent, max_files - allocated


def kernel_file_metrics(proc_root: Path = Path("/proc")) -> list[MetricSample]:
    """Collect ``kernel.files.*`` samples. Failures are logged and yield nothing."""
    try:
        max_files, allocated = read_kernel_files(proc_root)
    except (OSError, ValueError) as e:
        logger.error(f"failed collect kernel metrics: {e}")
        return []

    percent, left = file_usage(max_files, allocated)
    return [
        to_metric("kernel.files.max", max_files),
        to_metric("kernel.files.allocated", allocated),
        to_metric("kernel.files.allocated.percent", percent),
        to_metric("kernel.files.left", left),
    ]
