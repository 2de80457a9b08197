"""Process state counters from ``ps``."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Iterable

from infrastructure.logging.logger import get_logger
from system.host_probe.errors import UnknownProcessStateError
from system.host_probe.metrics import MetricSample, to_metric

logger = get_logger("ProcessMetrics")

# First character of a ps STAT code -> counter name.
STATE_COUNTERS: dict[str, str] = {
    "W": "wait",
    "U": "blocked",  # uninterruptible / disk sleep
    "D": "blocked",
    "L": "blocked",
    "Z": "zombies",
    "T": "stopped",
    "R": "running",
    "S": "sleeping",
    "I": "idle",
    "X": "exit",
    "?": "unknown",
}
COUNTER_NAMES = (
    "wait",
    "blocked",
    "zombies",
    "stopped",
    "running",
    "sleeping",
    "idle",
    "exit",
    "unknown",
)


def classify_state(code: str) -> str:
    """Map a state code to its counter name.

    Raises:
        UnknownProcessStateError: The leading character is not recognised.
    """
    counter = STATE_COUNTERS.get(code[:1])
    if counter is None:
        raise UnknownProcessStateError(code[:1])
    return counter


def tally_states(codes: Iterable[str]) -> dict[str, int]:
    """Count process states by counter name, plus ``total``.

    Unrecognised codes are logged and left out of every count, ``total``
    included.
    """
    counts = dict.fromkeys(COUNTER_NAMES, 0)
    counts["total"] = 0
    for code in codes:
        try:
            counter = classify_state(code)
        except UnknownProcessStateError as e:
            logger.error(f"processes: {e} from ps")
            continue
        counts[counter] += 1
        counts["total"] += 1
    return counts


def list_process_states(ps_binary: str = "ps", timeout: float = 10.0) -> list[str]:
    """Run ``ps axo state`` and return one state code per process.

    Raises:
        FileNotFoundError: ``ps_binary`` is not on PATH.
        subprocess.SubprocessError: ps failed or timed out.
    """
    binary = shutil.which(ps_binary)
    if binary is None:
        raise FileNotFoundError(f"{ps_binary}: command not found")

    result = subprocess.run(
        [binary, "axo", "state"],
        capture_output=True,
        text=True,
        timeout=timeout,
        check=True,
    )
    lines = result.stdout.split("\n")
    # First line is the column header.
    return [line.strip() for line in lines[1:] if line.strip()]


def process_metrics(ps_binary: str = "ps") -> list[MetricSample]:
    """Collect ``ps.<state>.num`` samples. Failures are logged and yield nothing."""
    try:
        codes = list_process_states(ps_binary)
    except (OSError, subprocess.SubprocessError) as e:
        logger.error(f"failed to call ps command: {e}")
        return []

    counts = tally_states(codes)
    return [to_metric(f"ps.{name}.num", value) for name, value in counts.items()]
