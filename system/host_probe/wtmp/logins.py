"""Recent-login metrics from the wtmp login history."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

from infrastructure.logging.logger import get_logger
from system.host_probe.errors import TruncatedRecordError
from system.host_probe.metrics import MetricSample, to_metric
from system.host_probe.wtmp.normalizer import NormalizedRecord, normalize
from system.host_probe.wtmp.reader import iter_records

LOGIN_METRIC = "kernel.user.login"
DEFAULT_LOGIN_WINDOW = timedelta(minutes=5)

logger = get_logger("LoginMetrics")


def login_samples(
    records: Iterable[NormalizedRecord],
    now: datetime,
    window: timedelta = DEFAULT_LOGIN_WINDOW,
) -> Iterator[MetricSample]:
    """Yield one login sample per record newer than ``now - window``.

    Records are emitted in stream order. Every record type passes, including
    ones with empty user and host.

    Args:
        records: Normalized records in file order.
        now: Reference instant; must be timezone-aware.
        window: Recency window.

    Yields:
        ``kernel.user.login`` samples with value 1 tagged by user and host.
    """
    cutoff = now - window
    for record in records:
        if record.timestamp > cutoff:
            yield to_metric(
                LOGIN_METRIC,
                1,
                tags={"user": record.user, "host": record.host},
                timestamp=int(record.timestamp.timestamp()),
            )


def wtmp_metrics(
    path: str | Path,
    now: datetime | None = None,
    window: timedelta = DEFAULT_LOGIN_WINDOW,
) -> list[MetricSample]:
    """Scan the login history at ``path`` for logins within ``window``.

    Records are decoded, normalized and filtered one at a time while the file
    is open; only the emitted samples are kept. A truncated tail is logged and
    the logins before it are reported. Open and read failures are logged and
    produce no samples.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    samples: list[MetricSample] = []
    try:
        with open(path, "rb") as f:
            records = (normalize(raw) for raw in iter_records(f))
            try:
                for sample in login_samples(records, now, window):
                    samples.append(sample)
            except TruncatedRecordError as e:
                logger.warning(f"{path}: {e}")
    except OSError as e:
        logger.error(f"read wtmp file failed: {e}")
        return []

    logger.debug(f"{len(samples)} logins in the last {window} from {path}")
    return samples
