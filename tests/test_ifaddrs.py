import socket
from collections import namedtuple
from types import SimpleNamespace
from unittest import mock

from kxcompat.ifaddrs import (
    IFF_BROADCAST,
    IFF_LOOPBACK,
    IFF_POINTOPOINT,
    IFF_UP,
    getifaddrs,
)

Addr = namedtuple("Addr", "family address netmask broadcast ptp")


def _run(addrs, stats):
    with mock.patch("psutil.net_if_addrs", return_value=addrs), mock.patch(
        "psutil.net_if_stats", return_value=stats
    ):
        return getifaddrs()


def test_real_interfaces_invariants():
    for entry in getifaddrs():
        assert isinstance(entry.name, str) and entry.name
        if entry.family != socket.AF_INET:
            assert entry.netmask is None
            assert entry.broadaddr is None and entry.dstaddr is None


def test_broadcast_interface():
    addrs = {"eth0": [Addr(socket.AF_INET, "192.0.2.5", "255.255.255.0", "192.0.2.255", None)]}
    stats = {"eth0": SimpleNamespace(isup=True, flags="up,broadcast,running,multicast")}
    (entry,) = _run(addrs, stats)
    assert entry.name == "eth0"
    assert entry.address == "192.0.2.5"
    assert entry.netmask == "255.255.255.0"
    assert entry.broadaddr == "192.0.2.255"
    assert entry.dstaddr is None
    assert entry.flags & IFF_UP and entry.flags & IFF_BROADCAST


def test_point_to_point_interface():
    addrs = {"ppp0": [Addr(socket.AF_INET, "10.0.0.1", "255.255.255.255", None, "10.0.0.2")]}
    stats = {"ppp0": SimpleNamespace(isup=True, flags="up,pointopoint")}
    (entry,) = _run(addrs, stats)
    assert entry.dstaddr == "10.0.0.2"
    assert entry.broadaddr is None
    assert entry.flags & IFF_POINTOPOINT


def test_loopback_flags_and_no_broadcast():
    addrs = {"lo": [Addr(socket.AF_INET, "127.0.0.1", "255.0.0.0", None, None)]}
    stats = {"lo": SimpleNamespace(isup=True, flags="up,loopback,running")}
    (entry,) = _run(addrs, stats)
    assert entry.flags & IFF_LOOPBACK
    assert not entry.flags & IFF_BROADCAST
    assert entry.broadaddr is None and entry.dstaddr is None


def test_flags_derived_without_flag_names():
    addrs = {"eth1": [Addr(socket.AF_INET, "192.0.2.9", "255.255.255.0", "192.0.2.255", None)]}
    stats = {"eth1": SimpleNamespace(isup=True)}
    (entry,) = _run(addrs, stats)
    assert entry.flags == IFF_UP | IFF_BROADCAST
    assert entry.broadaddr == "192.0.2.255"


def test_non_ipv4_entries_carry_only_address():
    addrs = {
        "eth0": [
            Addr(socket.AF_INET6, "fe80::1", "ffff:ffff:ffff:ffff::", None, None),
            Addr(socket.AF_INET, "192.0.2.5", "255.255.255.0", "192.0.2.255", None),
        ]
    }
    stats = {"eth0": SimpleNamespace(isup=False, flags="broadcast")}
    v6, v4 = _run(addrs, stats)
    assert v6.family == socket.AF_INET6
    assert v6.address == "fe80::1"
    assert v6.netmask is None
    assert v4.broadaddr == "192.0.2.255"
    assert v6.flags == v4.flags


def test_missing_stats_gives_zero_flags():
    addrs = {"tun0": [Addr(socket.AF_INET, "10.8.0.1", "255.255.255.0", "10.8.0.255", None)]}
    (entry,) = _run(addrs, {})
    assert entry.flags == 0
    assert entry.broadaddr is None
    assert entry.netmask == "255.255.255.0"


def test_order_is_preserved():
    addrs = {
        "a": [Addr(socket.AF_INET, "10.0.0.1", None, None, None)],
        "b": [Addr(socket.AF_INET, "10.0.0.2", None, None, None)],
    }
    result = _run(addrs, {})
    assert [(e.name, e.address) for e in result] == [("a", "10.0.0.1"), ("b", "10.0.0.2")]