"""Wiping secret material held in mutable buffers."""

import ctypes
from contextlib import contextmanager
from typing import Iterator


def zeroize(buf: bytearray) -> None:
    """Overwrite ``buf`` in place with zero bytes."""
    size = len(buf)
    if not size:
        return
    # memset through ctypes so the write goes straight to the buffer's memory
    view = (ctypes.c_char * size).from_buffer(buf)
    try:
        ctypes.memset(ctypes.addressof(view), 0, size)
    finally:
        del view


@contextmanager
def wiped(secret: bytes) -> Iterator[bytearray]:
    """
    Copy ``secret`` into a bytearray and zero it when the block exits,
    whether it exits normally or by exception.
    """
    buf = bytearray(secret)
    try:
        yield buf
    finally:
        zeroize(buf)
