"""Process and file description registry guarded by one global lock."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, NamedTuple

from kxcompat.files import (
    PROC_DESC_HASH_SIZE,
    FileDesc,
    HashMapOpt,
    SharedFileDesc,
    SharedFileTable,
)

__all__ = ["PROC_SPAWN2_WRAPPER", "ProcDesc", "Counts", "Registry"]

PROC_SPAWN2_WRAPPER = 0x01  # process is a spawn2 wrapper


@dataclass(eq=False)
class ProcDesc:
    """Description of one process using the registry."""

    pid: int
    files: dict[str, FileDesc] = field(default_factory=dict)
    flags: int = 0
    mmap: Any = None
    mmaps: Any = None
    spawn2_sem: Any = None
    spawn2_wrappers: Any = None
    interrupts: Any = None
    tcpip_lock: threading.Lock = field(default_factory=threading.Lock)


class Counts(NamedTuple):
    """Numbers of live process, file and shared file descriptions."""

    procs: int
    files: int
    shared_files: int


class Registry:
    """Hash maps of process and file descriptions shared by all users.

    ``pid`` is the process this registry instance acts for; it is the
    default wherever a pid may be omitted.
    """

    def __init__(self, pid: int) -> None:
        self.pid = pid
        self.shared_files = SharedFileTable()
        self.owner_tid: int | None = None
        self.lock_depth = 0
        self._mutex = threading.RLock()
        self._procs: list[list[ProcDesc]] = [[] for _ in range(PROC_DESC_HASH_SIZE)]

    @contextmanager
    def lock(self) -> Iterator[Registry]:
        """Hold the global lock for the duration of the block."""
        with self._mutex:
            self.owner_tid = threading.get_ident()
            self.lock_depth += 1
            try:
                yield self
            finally:
                self.lock_depth -= 1
                if not self.lock_depth:
                    self.owner_tid = None

    def _pid(self, pid: int | None) -> int:
        return self.pid if pid is None or pid == -1 else pid

    def get_proc_desc(self, pid: int | None = None, opt: HashMapOpt = HashMapOpt.NEW) -> ProcDesc | None:
        """Look up a process description, creating or removing it per ``opt``."""
        pid = self._pid(pid)
        opt = HashMapOpt(opt)
        with self.lock():
            bucket = self._procs[pid % PROC_DESC_HASH_SIZE]
            desc = next((proc for proc in bucket if proc.pid == pid), None)
            if desc is None and opt is HashMapOpt.NEW:
                desc = ProcDesc(pid=pid)
                bucket.insert(0, desc)
            elif desc is not None and opt is HashMapOpt.TAKE:
                bucket.remove(desc)
            return desc

    def find_proc_desc(self, pid: int | None = None) -> ProcDesc | None:
        """Return the description of ``pid`` or None."""
        return self.get_proc_desc(pid, HashMapOpt.NONE)

    def take_proc_desc(self, pid: int | None = None) -> ProcDesc | None:
        """Remove the description of ``pid`` from the map and return it."""
        return self.get_proc_desc(pid, HashMapOpt.TAKE)

    def get_file_desc(
        self,
        path: str,
        fd: int = -1,
        opt: HashMapOpt = HashMapOpt.NEW,
        pid: int | None = None,
    ) -> FileDesc | None:
        """Look up the description of ``path`` in a process.

        With ``HashMapOpt.NEW`` the process and file descriptions are created
        as needed and ``fd`` (unless -1) is associated with the result.
        """
        if not path:
            raise ValueError("path must not be empty")
        opt = HashMapOpt(opt)
        with self.lock():
            proc = self.get_proc_desc(
                pid, HashMapOpt.NEW if opt is HashMapOpt.NEW else HashMapOpt.NONE
            )
            if proc is None:
                return None
            desc = proc.files.get(path)
            if opt is not HashMapOpt.NEW:
                return desc
            if desc is None:
                desc = FileDesc(shared=self.shared_files.acquire(path))
                proc.files[path] = desc
            desc.add_fd(fd)
            return desc

    def find_file_desc(self, path: str, pid: int | None = None) -> FileDesc | None:
        """Return the process-specific description of ``path`` or None."""
        return self.get_file_desc(path, -1, HashMapOpt.NONE, pid)

    def find_shared_file_desc(self, path: str) -> SharedFileDesc | None:
        """Return the system-wide description of ``path`` or None."""
        with self.lock():
            return self.shared_files.find(path)

    def free_file_desc(self, desc: FileDesc, pid: int | None = None) -> None:
        """Remove ``desc`` from its process and drop its shared reference."""
        if desc.fh is not None:
            raise ValueError(f"file description for {desc.path!r} still has a file handle")
        if desc.map is not None:
            raise ValueError(f"file description for {desc.path!r} is still mapped")
        with self.lock():
            proc = self.find_proc_desc(pid)
            if proc is None or proc.files.get(desc.path) is not desc:
                raise ValueError(f"file description for {desc.path!r} is not registered")
            del proc.files[desc.path]
            self.shared_files.release(desc.shared)

    def close_fd(self, fd: int, path: str, pid: int | None = None) -> bool:
        """Detach ``fd`` from the description of ``path``.

        The description is freed when nothing uses it any more; returns True
        in that case.
        """
        with self.lock():
            desc = self.find_file_desc(path, pid)
            if desc is None:
                return False
            desc.remove_fd(fd)
            if desc.fh is None and desc.map is None and not desc.has_fds():
                self.free_file_desc(desc, pid)
                return True
            return False

    def release_process(self, pid: int | None = None) -> ProcDesc | None:
        """Free all file descriptions of a process and remove it."""
        with self.lock():
            proc = self.find_proc_desc(pid)
            if proc is None:
                return None
            for desc in list(proc.files.values()):
                self.free_file_desc(desc, proc.pid)
            return self.take_proc_desc(proc.pid)

    def counts(self) -> Counts:
        """Return the current numbers of descriptions of each kind."""
        with self.lock():
            procs = [proc for bucket in self._procs for proc in bucket]
            return Counts(
                procs=len(procs),
                files=sum(len(proc.files) for proc in procs),
                shared_files=len(self.shared_files),
            )