"""Configuration for the host probe.

Provides a Pydantic settings model read from ``HOST_PROBE_*`` environment
variables, with an optional YAML file layered on top.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IFACE_PREFIXES = ["eth", "em", "en", "bond", "wl"]


class ProbeConfig(BaseSettings):
    """Host probe configuration with environment variable support.

    Reads from HOST_PROBE_* environment variables automatically. List values
    (``iface_prefixes``) are given as JSON, e.g.
    ``HOST_PROBE_IFACE_PREFIXES='["eth", "bond"]'``.

    Attributes:
        wtmp_path: Login history file to scan.
        proc_root: Procfs mount to read kernel counters from.
        ps_binary: Name or path of the ``ps`` executable.
        iface_prefixes: Interface name prefixes whose addresses are reported.
        login_window_seconds: Recency window for login events.
        output_dir: Directory the textfile sink writes into.
        interval_seconds: Seconds between collection cycles; 0 runs once.
        log_level: Explicit log level; empty defers to LOG_LEVEL.
    """

    model_config = SettingsConfigDict(
        env_prefix="HOST_PROBE_",
        env_file=None,
        extra="ignore",
    )

    wtmp_path: Path = Field(default=Path("/var/log/wtmp"))
    proc_root: Path = Field(default=Path("/proc"))
    ps_binary: str = Field(default="ps")
    iface_prefixes: list[str] = Field(default_factory=lambda: list(DEFAULT_IFACE_PREFIXES))
    login_window_seconds: int = Field(default=300, gt=0)
    output_dir: Path = Field(default=Path("/var/lib/host-probe"))
    interval_seconds: float = Field(default=60.0)
    log_level: str = Field(default="")

    @field_validator("iface_prefixes")
    @classmethod
    def _drop_blank_prefixes(cls, value: list[str]) -> list[str]:
        # An empty prefix would match every interface.
        return [prefix.strip() for prefix in value if prefix.strip()]


def load_probe_config(path: str | Path | None = None, **overrides: Any) -> ProbeConfig:
    """Build a ProbeConfig from the environment and an optional YAML file.

    Keys in the YAML document take precedence over environment variables;
    keyword ``overrides`` take precedence over both.

    Args:
        path: Optional YAML file path.
        **overrides: Field values that win over every other source.

    Returns:
        Validated ProbeConfig.

    Raises:
        FileNotFoundError: If ``path`` is given but does not exist.
        ValueError: If the YAML document is not a mapping.
    """
    values: dict[str, Any] = {}
    if path is not None:
        config_file = Path(path)
        if not config_file.exists():
            raise FileNotFoundError(f"Probe config file not found: {config_file}")

        with open(config_file, encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}

        if not isinstance(document, dict):
            raise ValueError(f"Probe config must be a mapping, got {type(document).__name__}")
        values.update(document)

    values.update({k: v for k, v in overrides.items() if v is not None})
    return ProbeConfig(**values)
