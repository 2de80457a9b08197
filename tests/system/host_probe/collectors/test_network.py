"""Unit tests for interface address metrics.

psutil is mocked; interface lists are built by hand.
"""

import socket
from collections import namedtuple
from unittest.mock import patch

import pytest

from system.host_probe.collectors.network import (
    NetworkInterface,
    has_interface_prefix,
    interface_metrics,
    is_intranet,
    list_interfaces,
    local_ipv4_addresses,
    usable_ipv4,
)

snicaddr = namedtuple("snicaddr", ["family", "address", "netmask", "broadcast", "ptp"])
snicstats = namedtuple("snicstats", ["isup", "duplex", "speed", "mtu", "flags"])

PREFIXES = ["eth", "bond"]


@pytest.fixture
def interfaces():
    """Fixture providing a mix of up/down, loopback and unlisted interfaces."""
    return [
        NetworkInterface("lo", True, True, ("127.0.0.1", "::1")),
        NetworkInterface("eth0", True, False, ("10.0.0.5", "fe80::1", "2001:db8::5")),
        NetworkInterface("eth1", False, False, ("10.0.1.5",)),
        NetworkInterface("docker0", True, False, ("172.17.0.1",)),
        NetworkInterface("bond0", True, False, ("169.254.3.3", "::ffff:192.168.7.7")),
    ]


class TestListInterfaces:
    """Test list_interfaces psutil adapter."""

    def test_builds_interfaces(self):
        """Test flags and inet addresses are taken from psutil."""
        addrs = {
            "lo": [snicaddr(socket.AF_INET, "127.0.0.1", None, None, None)],
            "eth0": [
                snicaddr(socket.AF_INET, "10.0.0.5", None, None, None),
                snicaddr(socket.AF_INET6, "fe80::1%eth0", None, None, None),
                snicaddr(17, "aa:bb:cc:dd:ee:ff", None, None, None),
            ],
        }
        stats = {
            "lo": snicstats(True, 0, 0, 65536, "up,loopback,running"),
            "eth0": snicstats(False, 2, 1000, 1500, "broadcast,multicast"),
        }
        with (
            patch("system.host_probe.collectors.network.psutil.net_if_addrs", return_value=addrs),
            patch("system.host_probe.collectors.network.psutil.net_if_stats", return_value=stats),
        ):
            result = {iface.name: iface for iface in list_interfaces()}

        assert result["lo"].is_loopback is True
        assert result["lo"].is_up is True
        assert result["eth0"].is_loopback is False
        assert result["eth0"].is_up is False
        assert result["eth0"].addresses == ("10.0.0.5", "fe80::1")

    def test_missing_stats_means_down(self):
        """Test an interface without stats is treated as down."""
        addrs = {"eth9": [snicaddr(socket.AF_INET, "10.9.9.9", None, None, None)]}
        with (
            patch("system.host_probe.collectors.network.psutil.net_if_addrs", return_value=addrs),
            patch("system.host_probe.collectors.network.psutil.net_if_stats", return_value={}),
        ):
            (iface,) = list_interfaces()

        assert iface.is_up is False


class TestUsableIPv4:
    """Test usable_ipv4 address filter."""

    @pytest.mark.parametrize(
        "address,expected",
        [
            ("10.0.0.5", "10.0.0.5"),
            ("203.0.113.9", "203.0.113.9"),
            ("127.0.0.1", None),
            ("169.254.1.1", None),
            ("224.0.0.1", None),
            ("239.1.1.1", None),
            ("fe80::1", None),
            ("ff02::1", None),
            ("2001:db8::1", None),
            ("::ffff:192.168.1.9", "192.168.1.9"),
            ("::ffff:127.0.0.1", None),
            ("not-an-ip", None),
        ],
    )
    def test_filter(self, address, expected):
        """Test loopback, link-local, multicast and pure IPv6 are rejected."""
        assert usable_ipv4(address) == expected


class TestLocalIPv4Addresses:
    """Test local_ipv4_addresses interface and address filtering."""

    def test_filters_interfaces_and_addresses(self, interfaces):
        """Test only up, non-loopback, allow-listed interfaces contribute."""
        assert local_ipv4_addresses(PREFIXES, interfaces) == ["10.0.0.5", "192.168.7.7"]

    def test_prefixes_are_explicit(self, interfaces):
        """Test changing the allow-list changes the result."""
        assert local_ipv4_addresses(["docker"], interfaces) == ["172.17.0.1"]

    def test_empty_prefixes_match_nothing(self, interfaces):
        """Test an empty allow-list reports no addresses."""
        assert local_ipv4_addresses([], interfaces) == []

    def test_enumerates_when_not_given(self):
        """Test interfaces are enumerated from the OS by default."""
        with patch(
            "system.host_probe.collectors.network.list_interfaces",
            return_value=[NetworkInterface("eth0", True, False, ("10.1.1.1",))],
        ) as mock_list:
            assert local_ipv4_addresses(PREFIXES) == ["10.1.1.1"]
        mock_list.assert_called_once()


class TestHelpers:
    """Test has_interface_prefix and is_intranet."""

    def test_has_interface_prefix(self):
        """Test prefix matching on interface names."""
        assert has_interface_prefix("eth0", PREFIXES)
        assert not has_interface_prefix("docker0", PREFIXES)

    @pytest.mark.parametrize(
        "ip,expected",
        [
            ("10.1.2.3", True),
            ("192.168.0.1", True),
            ("172.16.0.1", True),
            ("172.31.255.255", True),
            ("172.32.0.1", False),
            ("172.15.0.1", False),
            ("172.x.0.1", False),
            ("172.16", False),
            ("8.8.8.8", False),
        ],
    )
    def test_is_intranet(self, ip, expected):
        """Test RFC 1918 ranges are intranet."""
        assert is_intranet(ip) is expected


class TestInterfaceMetrics:
    """Test interface_metrics collector."""

    def test_emits_address_samples(self, interfaces):
        """Test one sample per address tagged with intranet flag."""
        with patch(
            "system.host_probe.collectors.network.list_interfaces", return_value=interfaces
        ):
            samples = interface_metrics(PREFIXES)

        assert [s.name for s in samples] == ["net.if.ipv4", "net.if.ipv4"]
        assert dict(samples[0].tags) == {"address": "10.0.0.5", "intranet": "true"}
        assert samples[0].value == 1

    def test_enumeration_failure_logged(self):
        """Test an OS error during enumeration yields no samples."""
        with (
            patch(
                "system.host_probe.collectors.network.list_interfaces",
                side_effect=OSError("no netlink"),
            ),
            patch("system.host_probe.collectors.network.logger") as mock_logger,
        ):
            assert interface_metrics(PREFIXES) == []
        mock_logger.error.assert_called_once()
