"""Shared file descriptions keyed by full path, with per-process views."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterator

__all__ = [
    "FILE_DESC_HASH_SIZE",
    "PROC_DESC_HASH_SIZE",
    "HashMapOpt",
    "SharedFileDesc",
    "FileDesc",
    "SharedFileTable",
    "hash_string",
    "bucket_of",
    "divide_up",
    "round_up",
]

FILE_DESC_HASH_SIZE = 127  # prime
PROC_DESC_HASH_SIZE = 17  # prime

_HASH_MASK = 0xFFFFFFFF  # hashes are computed in 32-bit arithmetic
_HASH_A = 63689
_HASH_B = 378551


class HashMapOpt(enum.IntEnum):
    """What a hash map lookup does when an entry is or is not present."""

    NONE = 0
    NEW = 1
    TAKE = 2


def _as_bytes(text: str | bytes) -> bytes:
    if isinstance(text, bytes):
        return text
    return text.encode("utf-8", "surrogateescape")


def hash_string(text: str | bytes) -> int:
    """Return the 32-bit RS hash of ``text``."""
    a = _HASH_A
    result = 0
    for byte in _as_bytes(text):
        result = (result * a + byte) & _HASH_MASK
        a = (a * _HASH_B) & _HASH_MASK
    return result


def bucket_of(path: str | bytes) -> int:
    """Return the file description hash bucket for ``path``."""
    return hash_string(path) % FILE_DESC_HASH_SIZE


def divide_up(count: int, bucket_size: int) -> int:
    """Divide ``count`` by ``bucket_size`` rounding the result up."""
    if bucket_size <= 0:
        raise ValueError("bucket_size must be positive")
    return (count + bucket_size - 1) // bucket_size


def round_up(count: int, bucket_size: int) -> int:
    """Round ``count`` up to a multiple of ``bucket_size``."""
    return divide_up(count, bucket_size) * bucket_size


@dataclass(eq=False)
class SharedFileDesc:
    """System-wide description of one file, shared by all processes."""

    path: str
    refcnt: int = 0
    map: Any = None
    fcntl_locks: Any = None
    pwrite_lock: Any = None


@dataclass(eq=False)
class FileDesc:
    """Process-specific description of a file and the fds open on it."""

    shared: SharedFileDesc
    fds: list[int] = field(default_factory=list)
    map: Any = None
    fh: Any = None

    @property
    def path(self) -> str:
        return self.shared.path

    def add_fd(self, fd: int) -> None:
        """Associate ``fd`` with this description; -1 means no fd."""
        if fd < 0:
            return
        if fd not in self.fds:
            self.fds.append(fd)

    def remove_fd(self, fd: int) -> bool:
        """Drop ``fd`` from this description; return whether it was present."""
        try:
            self.fds.remove(fd)
        except ValueError:
            return False
        return True

    def has_fds(self) -> bool:
        """Return True if any fd still refers to this description."""
        return bool(self.fds)


class SharedFileTable:
    """Hash map of shared file descriptions, reference counted by users."""

    def __init__(self) -> None:
        self._buckets: list[list[SharedFileDesc]] = [
            [] for _ in range(FILE_DESC_HASH_SIZE)
        ]

    def find(self, path: str) -> SharedFileDesc | None:
        """Return the shared description for ``path`` or None."""
        for desc in self._buckets[bucket_of(path)]:
            if desc.path == path:
                return desc
        return None

    def acquire(self, path: str) -> SharedFileDesc:
        """Return the shared description for ``path``, creating it if needed.

        Each call adds one reference.
        """
        desc = self.find(path)
        if desc is None:
            desc = SharedFileDesc(path=path)
            self._buckets[bucket_of(path)].insert(0, desc)
        desc.refcnt += 1
        return desc

    def release(self, shared: SharedFileDesc) -> bool:
        """Drop one reference; remove and return True when none are left."""
        bucket = self._buckets[bucket_of(shared.path)]
        if not any(desc is shared for desc in bucket):
            raise ValueError(f"shared description for {shared.path!r} is not in the table")
        if shared.refcnt <= 0:
            raise ValueError(f"shared description for {shared.path!r} has no references")
        shared.refcnt -= 1
        if shared.refcnt:
            return False
        bucket[:] = [desc for desc in bucket if desc is not shared]
        return True

    def __iter__(self) -> Iterator[SharedFileDesc]:
        for bucket in self._buckets:
            yield from bucket

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets)