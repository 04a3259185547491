# kxcompat

POSIX-style compatibility helpers built around file descriptors, network
interfaces and a registry of open files:

- `kxcompat.selector.select` — a `select` that reports regular files as ready
  at once for every set they are in and only waits on the remaining
  descriptors. It returns a `SelectResult` (`count`, `readable`, `writable`,
  `exceptional`) and raises `OSError` on failure (`EINVAL` for a bad `nfds`,
  `EBADF` for a bad descriptor).
- `kxcompat.ifaddrs.getifaddrs` — lists the addresses of all network
  interfaces as `InterfaceAddress` entries with `IFF_*` flags; netmask,
  broadcast and point-to-point addresses are filled in for IPv4 entries.
- `kxcompat.nameindex` — `if_nameindex`, `if_indextoname` and
  `if_nametoindex`, returning `NameIndex` entries and raising `OSError`
  (`ENXIO`) for an unknown interface.
- `kxcompat.files` — `SharedFileTable` of reference-counted `SharedFileDesc`
  entries, the per-process `FileDesc`, `HashMapOpt`, and the helpers
  `hash_string`, `bucket_of`, `divide_up` and `round_up`.
- `kxcompat.registry.Registry` — process (`ProcDesc`) and file descriptions
  guarded by one global lock.
- `kxcompat.stats` — `lock_info`, `format_stats` and `print_stats` for a
  usage report of a registry and the state of its lock.

## Installation

```
pip install kxcompat
```

## Examples

Selecting on a regular file returns at once:

```python
import os
from kxcompat.selector import select

fd = os.open("data.bin", os.O_RDONLY | os.O_CREAT)
result = select(fd + 1, readfds=[fd], timeout=5.0)
print(result.count, result.readable)   # 1 frozenset({fd})
```

Tracking open files in a registry:

```python
import os
from kxcompat.registry import Registry
from kxcompat.stats import print_stats

registry = Registry(os.getpid())
registry.get_file_desc("/tmp/data.bin", fd=3)
print(registry.counts())               # Counts(procs=1, files=1, shared_files=1)
registry.close_fd(3, "/tmp/data.bin")  # True: nothing uses the description any more
print_stats(registry)
```

Listing interfaces:

```python
from kxcompat.ifaddrs import getifaddrs
from kxcompat.nameindex import if_nameindex, if_nametoindex

for entry in if_nameindex():
    print(entry.index, entry.name, if_nametoindex(entry.name) == entry.index)

for addr in getifaddrs():
    print(addr.name, addr.family, addr.address, addr.netmask)
```

## What the package does not do

There is no `poll` emulation, no positional read/write (`pread`/`pwrite`)
helper and no host or service name resolution (`getaddrinfo`,
`getnameinfo`). The package installs no command-line program; everything is
used as a library.

## Running the tests

```
pip install kxcompat[test]
pytest
```