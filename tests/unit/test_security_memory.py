"""Unit tests for secret zeroization helpers."""

import pytest

from ramcrypt.security.memory import wiped, zeroize


def test_zeroize_overwrites_in_place():
    buf = bytearray(b"\xff" * 32)
    alias = buf
    zeroize(buf)
    assert alias == bytearray(32)
    assert len(buf) == 32


def test_zeroize_empty_buffer():
    buf = bytearray()
    zeroize(buf)
    assert buf == bytearray()


def test_zeroize_buffer_still_resizable():
    """The temporary ctypes export is released afterwards."""
    buf = bytearray(b"secret")
    zeroize(buf)
    buf.extend(b"!")
    assert buf == b"\x00" * 6 + b"!"


def test_wiped_zeroes_on_exit():
    with wiped(b"k" * 32) as key:
        assert key == bytearray(b"k" * 32)
    assert key == bytearray(32)


def test_wiped_zeroes_on_exception():
    with pytest.raises(RuntimeError):
        with wiped(b"k" * 32) as key:
            raise RuntimeError("cipher failed")
    assert key == bytearray(32)
