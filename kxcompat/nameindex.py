"""Map network interface names to indexes and back."""

from __future__ import annotations

import errno
import os
import socket
from dataclasses import dataclass

__all__ = ["IF_NAMESIZE", "NameIndex", "if_nameindex", "if_indextoname", "if_nametoindex"]

IF_NAMESIZE = 16


@dataclass(frozen=True)
class NameIndex:
    """One network interface: its index (never 0) and its name."""

    index: int
    name: str


def _no_such_interface() -> OSError:
    return OSError(errno.ENXIO, os.strerror(errno.ENXIO))


def if_nameindex() -> list[NameIndex]:
    """Return all network interfaces in the order the system lists them.

    Raises OSError when the interface list cannot be obtained.
    """
    entries = socket.if_nameindex()
    return [NameIndex(index=index, name=name) for index, name in entries if index != 0 and name]


def if_indextoname(ifindex: int) -> str:
    """Return the name of the interface with index ``ifindex``.

    Raises OSError (ENXIO) when there is no such interface.
    """
    if ifindex != 0:
        for entry in if_nameindex():
            if entry.index == ifindex:
                return entry.name
    raise _no_such_interface()


def if_nametoindex(ifname: str) -> int:
    """Return the index of the interface named ``ifname``.

    Raises OSError (ENXIO) when there is no such interface.
    """
    for entry in if_nameindex():
        if entry.name == ifname:
            return entry.index
    raise _no_such_interface()