"""Host probe service.

Runs every metric group once per cycle and hands the samples to a sink. A
failing group is logged and skipped; the other groups still report.
"""

from __future__ import annotations

import signal
import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from infrastructure.config import ProbeConfig
from infrastructure.logging.logger import get_logger
from system.host_probe.collectors.kernel import kernel_file_metrics
from system.host_probe.collectors.network import interface_metrics
from system.host_probe.collectors.processes import process_metrics
from system.host_probe.metrics import MetricSample
from system.host_probe.ports.sink import MetricSinkPort
from system.host_probe.wtmp.logins import wtmp_metrics

SLEEP_CHECK_INTERVAL = 0.1  # Check running flag every 100ms during sleep

MetricGroup = tuple[str, Callable[[], list[MetricSample]]]


def metric_groups(config: ProbeConfig, now: datetime) -> list[MetricGroup]:
    """Bind each collector to its configuration for one cycle."""
    window = timedelta(seconds=config.login_window_seconds)
    return [
        ("kernel", lambda: kernel_file_metrics(config.proc_root)),
        ("processes", lambda: process_metrics(config.ps_binary)),
        ("logins", lambda: wtmp_metrics(config.wtmp_path, now=now, window=window)),
        ("interfaces", lambda: interface_metrics(config.iface_prefixes)),
    ]


def collect_once(
    config: ProbeConfig,
    now: datetime | None = None,
    groups: list[MetricGroup] | None = None,
) -> list[MetricSample]:
    """Run one collection cycle.

    Args:
        config: Probe configuration.
        now: Reference instant for the login window; defaults to the current time.
        groups: Override the metric groups (name, callable) to run.

    Returns:
        Samples from every group that succeeded, in group order.
    """
    logger = get_logger("HostProbe")
    if now is None:
        now = datetime.now(timezone.utc)
    if groups is None:
        groups = metric_groups(config, now)

    samples: list[MetricSample] = []
    for name, collect in groups:
        try:
            group_samples = collect()
        except Exception as e:
            logger.error(f"Metric group '{name}' failed, skipping: {e}")
            continue
        logger.debug(f"Metric group '{name}': {len(group_samples)} samples")
        samples.extend(group_samples)
    return samples


class HostProbe:
    """Periodic collector daemon.

    Args:
        config: Probe configuration.
        sink: Receiver for each cycle's samples.
    """

    def __init__(self, config: ProbeConfig, sink: MetricSinkPort) -> None:
        self.logger = get_logger(self.__class__.__name__)
        self.config = config
        self.sink = sink
        self.running = False

    def _signal_handler(self, signum, frame) -> None:
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received {signal_name}, initiating graceful shutdown...")
        self.running = False

    def install_signal_handlers(self) -> None:
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

    def _interruptible_sleep(self, duration: float) -> None:
        """Sleep in small increments, checking running flag to allow quick shutdown.

        Args:
            duration: Total sleep duration in seconds.
        """
        elapsed = 0.0
        while elapsed < duration and self.running:
            sleep_time = min(SLEEP_CHECK_INTERVAL, duration - elapsed)
            time.sleep(sleep_time)
            elapsed += sleep_time

    def run_once(self) -> list[MetricSample]:
        """Collect one cycle and write it to the sink."""
        samples = collect_once(self.config)
        try:
            self.sink.write(samples)
        except OSError as e:
            self.logger.error(f"Failed to write {len(samples)} samples: {e}")
        return samples

    def run(self) -> None:
        """Collect every ``interval_seconds`` until stopped; once if the interval is <= 0."""
        interval = self.config.interval_seconds
        self.logger.info(f"Starting host probe (interval: {interval}s)")
        self.running = True

        while self.running:
            started = time.monotonic()
            samples = self.run_once()
            self.logger.info(f"Collected {len(samples)} samples")

            if interval <= 0 or not self.running:
                break
            self._interruptible_sleep(max(0.0, interval - (time.monotonic() - started)))

        self.running = False
        self.logger.info("Host probe stopped")
