"""POSIX-style helpers: a select that treats regular files as ready, interface listing, and a file-description registry."""

__version__ = "1.0.0"

__all__ = [
    "files",
    "registry",
    "stats",
    "selector",
    "ifaddrs",
    "nameindex",
]