"""Entry point for running the host probe as a module.

    python -m system.host_probe --once --output-dir /tmp/textfile
"""

import argparse
import sys

from infrastructure.config import load_probe_config
from infrastructure.logging.logger import configure_logging, get_logger
from system.host_probe.probe import HostProbe
from system.host_probe.sinks.textfile import TextfileSink


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="host-probe")
    parser.add_argument("--config", default=None, help="Optional YAML config file.")
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for the metrics textfile (overrides config).",
    )
    parser.add_argument(
        "--interval-seconds",
        type=float,
        default=None,
        help="Polling interval (overrides config). Use 0 to run once and exit.",
    )
    parser.add_argument("--once", action="store_true", help="Run one cycle and exit.")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """CLI entrypoint: periodically write host metrics to a textfile directory."""
    args = _parse_args(argv)

    try:
        config = load_probe_config(
            args.config,
            output_dir=args.output_dir,
            interval_seconds=0.0 if args.once else args.interval_seconds,
            log_level=args.log_level,
        )
    except (OSError, ValueError) as e:
        configure_logging(args.log_level)
        get_logger("HostProbe").error(f"Invalid configuration: {e}")
        return 1

    configure_logging(config.log_level or None)

    probe = HostProbe(config, TextfileSink(config.output_dir))
    probe.install_signal_handlers()
    probe.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
