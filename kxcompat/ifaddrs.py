"""List network interface addresses."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import Any

import psutil

__all__ = [
    "IFF_UP",
    "IFF_BROADCAST",
    "IFF_LOOPBACK",
    "IFF_POINTOPOINT",
    "IFF_RUNNING",
    "IFF_MULTICAST",
    "InterfaceAddress",
    "getifaddrs",
]

IFF_UP = 0x1
IFF_BROADCAST = 0x2
IFF_DEBUG = 0x4
IFF_LOOPBACK = 0x8
IFF_POINTOPOINT = 0x10
IFF_NOTRAILERS = 0x20
IFF_RUNNING = 0x40
IFF_NOARP = 0x80
IFF_PROMISC = 0x100
IFF_ALLMULTI = 0x200
IFF_MASTER = 0x400
IFF_SLAVE = 0x800
IFF_MULTICAST = 0x1000
IFF_PORTSEL = 0x2000
IFF_AUTOMEDIA = 0x4000
IFF_DYNAMIC = 0x8000

_FLAG_NAMES = {
    "up": IFF_UP,
    "broadcast": IFF_BROADCAST,
    "debug": IFF_DEBUG,
    "loopback": IFF_LOOPBACK,
    "pointopoint": IFF_POINTOPOINT,
    "notrailers": IFF_NOTRAILERS,
    "running": IFF_RUNNING,
    "noarp": IFF_NOARP,
    "promisc": IFF_PROMISC,
    "allmulti": IFF_ALLMULTI,
    "master": IFF_MASTER,
    "slave": IFF_SLAVE,
    "multicast": IFF_MULTICAST,
    "portsel": IFF_PORTSEL,
    "automedia": IFF_AUTOMEDIA,
    "dynamic": IFF_DYNAMIC,
}


@dataclass(frozen=True)
class InterfaceAddress:
    """One address of a network interface.

    Netmask, broadcast and point-to-point addresses are only filled in for
    IPv4 entries, as the interface flags allow.
    """

    name: str
    flags: int
    family: int
    address: str | None
    netmask: str | None = None
    broadaddr: str | None = None
    dstaddr: str | None = None
    data: Any = None


def _interface_flags(stats: Any, entries: list[Any]) -> int:
    if stats is None:
        return 0
    names = getattr(stats, "flags", None)
    if names is not None:
        flags = 0
        for item in str(names).split(","):
            flags |= _FLAG_NAMES.get(item.strip(), 0)
        return flags
    flags = IFF_UP if getattr(stats, "isup", False) else 0
    for entry in entries:
        if entry.family == socket.AF_INET:
            if entry.broadcast:
                flags |= IFF_BROADCAST
            elif entry.ptp:
                flags |= IFF_POINTOPOINT
    return flags


def getifaddrs() -> list[InterfaceAddress]:
    """Return the addresses of all network interfaces."""
    all_addrs = psutil.net_if_addrs()
    all_stats = psutil.net_if_stats()
    result: list[InterfaceAddress] = []
    for name, entries in all_addrs.items():
        entries = list(entries)
        flags = _interface_flags(all_stats.get(name), entries)
        for entry in entries:
            netmask = broadaddr = dstaddr = None
            if entry.family == socket.AF_INET:
                netmask = entry.netmask
                if flags & IFF_BROADCAST:
                    broadaddr = entry.broadcast
                elif flags & IFF_POINTOPOINT:
                    dstaddr = entry.ptp
            result.append(
                InterfaceAddress(
                    name=name,
                    flags=flags,
                    family=entry.family,
                    address=entry.address,
                    netmask=netmask,
                    broadaddr=broadaddr,
                    dstaddr=dstaddr,
                )
            )
    return result