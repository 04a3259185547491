import errno
from unittest import mock

import pytest

from kxcompat.nameindex import (
    NameIndex,
    if_indextoname,
    if_nameindex,
    if_nametoindex,
)

FAKE = [(1, "lo"), (2, "eth0"), (5, "wlan0")]


@mock.patch("socket.if_nameindex", return_value=FAKE)
def test_if_nameindex_lists_entries(_patched):
    result = if_nameindex()
    assert result == [NameIndex(1, "lo"), NameIndex(2, "eth0"), NameIndex(5, "wlan0")]


@mock.patch("socket.if_nameindex", return_value=[(0, "bogus"), (3, "eth1")])
def test_if_nameindex_skips_zero_index(_patched):
    assert if_nameindex() == [NameIndex(3, "eth1")]


@mock.patch("socket.if_nameindex", return_value=FAKE)
def test_round_trip_name_and_index(_patched):
    for index, name in FAKE:
        assert if_nametoindex(name) == index
        assert if_indextoname(index) == name


@mock.patch("socket.if_nameindex", return_value=FAKE)
def test_unknown_name_raises(_patched):
    with pytest.raises(OSError) as info:
        if_nametoindex("nosuchif")
    assert info.value.errno == errno.ENXIO


@mock.patch("socket.if_nameindex", return_value=FAKE)
def test_unknown_index_raises(_patched):
    with pytest.raises(OSError) as info:
        if_indextoname(42)
    assert info.value.errno == errno.ENXIO


@mock.patch("socket.if_nameindex", return_value=FAKE)
def test_index_zero_raises(_patched):
    with pytest.raises(OSError):
        if_indextoname(0)


@mock.patch("socket.if_nameindex", side_effect=OSError(errno.EPERM, "denied"))
def test_listing_failure_propagates(_patched):
    with pytest.raises(OSError) as info:
        if_nameindex()
    assert info.value.errno == errno.EPERM


def test_real_interfaces_are_consistent():
    entries = if_nameindex()
    assert all(entry.index > 0 and entry.name for entry in entries)
    assert all(if_nametoindex(entry.name) == entry.index for entry in entries)