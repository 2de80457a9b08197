"""Unit tests for the host probe command-line entry point."""

from unittest.mock import patch

from system.host_probe.__main__ import _parse_args, main


class TestParseArgs:
    """Test _parse_args."""

    def test_defaults(self):
        """Test optional arguments default to None so config values apply."""
        args = _parse_args([])
        assert args.config is None
        assert args.output_dir is None
        assert args.interval_seconds is None
        assert args.once is False


class TestMain:
    """Test main entrypoint."""

    def test_once_writes_textfile(self, tmp_path):
        """Test --once runs a single cycle and writes the textfile."""
        with (
            patch("system.host_probe.__main__.configure_logging"),
            patch("system.host_probe.__main__.HostProbe.install_signal_handlers"),
            patch("system.host_probe.probe.process_metrics", return_value=[]),
            patch("system.host_probe.probe.interface_metrics", return_value=[]),
            patch.dict(
                "os.environ",
                {
                    "HOST_PROBE_WTMP_PATH": str(tmp_path / "wtmp"),
                    "HOST_PROBE_PROC_ROOT": str(tmp_path / "proc"),
                },
            ),
        ):
            rc = main(["--once", "--output-dir", str(tmp_path / "out")])

        assert rc == 0
        assert (tmp_path / "out" / "host_probe.prom").exists()

    def test_bad_config_returns_error(self, tmp_path):
        """Test a missing config file exits with status 1."""
        with patch("system.host_probe.__main__.configure_logging"):
            rc = main(["--config", str(tmp_path / "absent.yaml"), "--once"])

        assert rc == 1
