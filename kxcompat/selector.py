"""select() that treats regular files as always ready."""

from __future__ import annotations

import errno
import os
import select as _select
import socket
import stat
import time
from typing import Iterable, NamedTuple

__all__ = ["FD_SETSIZE", "SelectResult", "select"]

FD_SETSIZE = 1024

_RETRY_ATTEMPTS = 3
_RETRY_DELAY = 0.1


class SelectResult(NamedTuple):
    """Number of ready events and the fds ready in each set."""

    count: int
    readable: frozenset[int]
    writable: frozenset[int]
    exceptional: frozenset[int]


def _is_regular(fd: int) -> bool:
    try:
        mode = os.fstat(fd).st_mode
    except OSError as exc:
        raise OSError(exc.errno, os.strerror(exc.errno)) from None
    return stat.S_ISREG(mode)


def _is_socket(fd: int) -> bool:
    try:
        return stat.S_ISSOCK(os.fstat(fd).st_mode)
    except OSError:
        return False


def _socket_is_dead(fd: int) -> bool:
    try:
        sock = socket.fromfd(fd, socket.AF_UNIX, socket.SOCK_STREAM)
    except OSError as exc:
        return exc.errno == errno.EBADF
    try:
        sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
    except OSError as exc:
        return exc.errno == errno.EBADF
    finally:
        sock.close()
    return False


def select(
    nfds: int,
    readfds: Iterable[int] | None = None,
    writefds: Iterable[int] | None = None,
    exceptfds: Iterable[int] | None = None,
    timeout: float | None = None,
) -> SelectResult:
    """Wait for fds below ``nfds`` to become ready.

    Regular files are reported ready at once for every set they are in.
    ``timeout`` is in seconds; None waits indefinitely. Raises OSError on
    failure, with EINVAL for a bad ``nfds`` and EBADF for a bad fd.
    """
    if nfds < 0 or nfds > FD_SETSIZE:
        raise OSError(errno.EINVAL, os.strerror(errno.EINVAL))

    r_in = frozenset(fd for fd in readfds or () if 0 <= fd < nfds)
    w_in = frozenset(fd for fd in writefds or () if 0 <= fd < nfds)
    e_in = frozenset(fd for fd in exceptfds or () if 0 <= fd < nfds)

    regular: set[int] = set()
    others: list[int] = []
    n_ready = 0
    for fd in sorted(r_in | w_in | e_in):
        if _is_regular(fd):
            regular.add(fd)
            n_ready += (fd in r_in) + (fd in w_in) + (fd in e_in)
        else:
            others.append(fd)

    r_reg = r_in & regular
    w_reg = w_in & regular
    e_reg = e_in & regular

    if not others and n_ready:
        return SelectResult(n_ready, r_reg, w_reg, e_reg)

    if n_ready:
        timeout = 0.0

    r_sel = [fd for fd in others if fd in r_in]
    w_sel = [fd for fd in others if fd in w_in]
    e_sel = [fd for fd in others if fd in e_in]

    error: OSError | None = None
    ready: tuple[set[int], set[int], set[int]] | None = None
    for _ in range(_RETRY_ATTEMPTS):
        try:
            r_out, w_out, e_out = _select.select(r_sel, w_sel, e_sel, timeout)
        except OSError as exc:
            error = exc
            if exc.errno == errno.EFAULT:
                time.sleep(_RETRY_DELAY)
                continue
            if exc.errno == errno.ENOTSOCK and all(_is_socket(fd) for fd in others):
                time.sleep(_RETRY_DELAY)
                continue
            break
        error = None
        ready = (set(r_out), set(w_out), set(e_out))
        break

    if error is not None and error.errno == errno.EBADF:
        guilty = {fd for fd in others if _socket_is_dead(fd)}
        if guilty:
            ready = (
                guilty & set(r_sel),
                guilty & set(w_sel),
                guilty & set(e_sel),
            )
            count = len(guilty)
            return SelectResult(
                count + n_ready,
                frozenset(ready[0]) | r_reg,
                frozenset(ready[1]) | w_reg,
                frozenset(ready[2]) | e_reg,
            )

    if ready is None:
        assert error is not None
        raise error

    r_ready, w_ready, e_ready = ready
    count = len(r_ready) + len(w_ready) + len(e_ready)
    return SelectResult(
        count + n_ready,
        frozenset(r_ready) | r_reg,
        frozenset(w_ready) | w_reg,
        frozenset(e_ready) | e_reg,
    )