"""Registry usage statistics and global lock owner information."""

from __future__ import annotations

import enum
import sys
import threading
from dataclasses import dataclass
from typing import TextIO

from kxcompat.registry import Registry

__all__ = ["LockState", "LockInfo", "lock_info", "format_stats", "print_stats"]


class LockState(enum.IntEnum):
    """State of the owner of the global registry lock."""

    ALIVE = 0
    DEAD = 1
    NOT_OWNED = 2

    @property
    def label(self) -> str:
        return {
            LockState.ALIVE: "alive",
            LockState.DEAD: "dead",
            LockState.NOT_OWNED: "not owned",
        }[self]


@dataclass(frozen=True)
class LockInfo:
    """Owner of the global lock and how many times it requested it."""

    state: LockState
    pid: int
    tid: int
    count: int


def lock_info(registry: Registry) -> LockInfo:
    """Return who owns the global lock of ``registry``.

    The lock is not taken, so this works even when its owner has died.
    """
    owner = registry.owner_tid
    depth = registry.lock_depth
    if owner is None or depth == 0:
        return LockInfo(state=LockState.NOT_OWNED, pid=0, tid=0, count=0)
    live = {thread.ident for thread in threading.enumerate()}
    state = LockState.ALIVE if owner in live else LockState.DEAD
    return LockInfo(state=state, pid=registry.pid, tid=owner, count=depth)


def format_stats(registry: Registry) -> str:
    """Return a human-readable report of registry usage and lock state."""
    info = lock_info(registry)
    counts = registry.counts()

    lines = [
        "",
        "===== resource usage =====",
        f"ProcDesc structs used now:       {counts.procs}",
        f"FileDesc structs used now:       {counts.files}",
        f"SharedFileDesc structs used now: {counts.shared_files}",
        "===== global lock info =====",
    ]

    current_pid = info.pid == registry.pid and info.state is not LockState.NOT_OWNED
    current_tid = current_pid and info.tid == threading.get_ident()
    lines += [
        f"owner state:  {info.state.label}",
        f"owner PID:    {info.pid:04x} ({info.pid}){' <current>' if current_pid else ''}",
        f"owner TID:    {info.tid}{' <current>' if current_tid else ''}",
        f"request #:    {info.count}",
        "===== stats end =====",
    ]
    return "\n".join(lines) + "\n"


def print_stats(registry: Registry, stream: TextIO | None = None) -> None:
    """Write the usage report of ``registry`` to ``stream`` (stdout by default)."""
    out = sys.stdout if stream is None else stream
    with registry.lock():
        out.write(format_stats(registry))