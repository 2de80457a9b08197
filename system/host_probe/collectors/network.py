"""Local IPv4 addresses of the host's data-plane interfaces."""

from __future__ import annotations

import ipaddress
import socket
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import psutil

from infrastructure.logging.logger import get_logger
from system.host_probe.metrics import MetricSample, to_metric

logger = get_logger("NetworkMetrics")


@dataclass(frozen=True)
class NetworkInterface:
    """One network interface as reported by the OS.

    Attributes:
        name: Interface name, e.g. ``eth0``.
        is_up: Administrative/operational up flag.
        is_loopback: Loopback flag.
        addresses: IPv4/IPv6 addresses assigned to the interface.
    """

    name: str
    is_up: bool
    is_loopback: bool
    addresses: tuple[str, ...]


def list_interfaces() -> list[NetworkInterface]:
    """Enumerate interfaces with their flags and IP addresses via psutil."""
    stats = psutil.net_if_stats()
    interfaces = []
    for name, addrs in psutil.net_if_addrs().items():
        stat = stats.get(name)
        flags = set(getattr(stat, "flags", "").split(",")) if stat is not None else set()
        addresses = tuple(
            # Drop the "%scope" suffix of link-local IPv6 addresses.
            addr.address.split("%", 1)[0]
            for addr in addrs
            if addr.family in (socket.AF_INET, socket.AF_INET6)
        )
        interfaces.append(
            NetworkInterface(
                name=name,
                is_up=bool(stat.isup) if stat is not None else False,
                is_loopback="loopback" in flags,
                addresses=addresses,
            )
        )
    return interfaces


def has_interface_prefix(name: str, prefixes: Iterable[str]) -> bool:
    return any(name.startswith(prefix) for prefix in prefixes)


def usable_ipv4(address: str) -> str | None:
    """Return the dotted-quad form of ``address`` if it should be reported.

    Loopback, link-local (unicast and multicast) and multicast addresses are
    rejected. IPv4-mapped IPv6 addresses are reported as IPv4; any other IPv6
    address is rejected.
    """
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        return None

    if ip.is_loopback or ip.is_link_local or ip.is_multicast:
        return None

    if isinstance(ip, ipaddress.IPv6Address):
        ip = ip.ipv4_mapped
        if ip is None or ip.is_loopback or ip.is_link_local or ip.is_multicast:
            return None

    return str(ip)


def local_ipv4_addresses(
    prefixes: Sequence[str],
    interfaces: Iterable[NetworkInterface] | None = None,
) -> list[str]:
    """Return reportable IPv4 addresses on up, non-loopback, allow-listed interfaces.

    Args:
        prefixes: Interface name prefixes to keep, e.g. ``["eth", "bond"]``.
        interfaces: Interfaces to filter; enumerated from the OS when omitted.

    Returns:
        Addresses in interface order.
    """
    if interfaces is None:
        interfaces = list_interfaces()

    ips: list[str] = []
    for iface in interfaces:
        if not iface.is_up or iface.is_loopback:
            continue
        if not has_interface_prefix(iface.name, prefixes):
            continue
        for address in iface.addresses:
            ipv4 = usable_ipv4(address)
            if ipv4 is not None:
                ips.append(ipv4)
    return ips


def is_intranet(ip: str) -> bool:
    """True for dotted-quads in 10/8, 192.168/16 or 172.16/12."""
    if ip.startswith("10.") or ip.startswith("192.168."):
        return True

    if ip.startswith("172."):
        parts = ip.split(".")
        if len(parts) != 4:
            return False
        try:
            second = int(parts[1])
        except ValueError:
            return False
        return 16 <= second <= 31

    return False


def interface_metrics(prefixes: Sequence[str]) -> list[MetricSample]:
    """Collect one ``net.if.ipv4`` sample per reportable address."""
    try:
        ips = local_ipv4_addresses(prefixes)
    except (OSError, psutil.Error) as e:
        logger.error(f"failed to enumerate interfaces: {e}")
        return []

    return [
        to_metric("net.if.ipv4", 1, tags={"address": ip, "intranet": str(is_intranet(ip)).lower()})
        for ip in ips
    ]
