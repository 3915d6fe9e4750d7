"""Merkle-Damgard plumbing shared by the MD5 and SHA-256 contexts.

A context owns three things:
- the chaining state (a list of 32-bit words, set up by the subclass)
- a pending buffer of 0..63 bytes not yet fed to the compression function
- the total number of bytes ever submitted, buffered bytes included

Subclasses supply the initial state, the compression function and the byte
order used for state words and the trailing bit-length field. Padding,
buffering and the finalize-once lifecycle live here.
"""

from __future__ import annotations

import struct
from typing import ClassVar, List, Tuple

from .exceptions import HashContextError


BLOCK_SIZE = 64
MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF


def rotl32(x: int, n: int) -> int:
    return ((x << n) | (x >> (32 - n))) & MASK32


def rotr32(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & MASK32


class MerkleDamgardContext:
    """Streaming hash context; call ``update`` any number of times, then ``finalize`` once."""

    name: ClassVar[str] = ""
    digest_size: ClassVar[int] = 0
    initial_state: ClassVar[Tuple[int, ...]] = ()
    # struct prefix for state words and the length field: "<" or ">"
    byte_order: ClassVar[str] = "<"

    def __init__(self, data: bytes = b"") -> None:
        self.reset()
        if data:
            self.update(data)

    def reset(self) -> "MerkleDamgardContext":
        """Return the context to the algorithm's initial state."""
        self._state: List[int] = list(self.initial_state)
        self._buffer = bytearray()
        self._count = 0
        self._finalized = False
        return self

    @property
    def total_bytes(self) -> int:
        return self._count

    @property
    def pending(self) -> int:
        return len(self._buffer)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def copy(self) -> "MerkleDamgardContext":
        """Clone an in-progress context so a shared prefix is only hashed once."""
        self._check_open()
        clone = self.__class__.__new__(self.__class__)
        clone._state = list(self._state)
        clone._buffer = bytearray(self._buffer)
        clone._count = self._count
        clone._finalized = False
        return clone

    def update(self, data) -> "MerkleDamgardContext":
        """Append ``data`` (any bytes-like object, possibly empty)."""
        self._check_open()
        view = memoryview(data).cast("B")
        self._count += len(view)
        self._absorb(view)
        return self

    def finalize(self) -> bytes:
        """Pad, process the last block(s) and return the raw digest.

        The context is consumed; use ``reset()`` before hashing again.
        """
        self._check_open()
        bit_length = (self._count * 8) & MASK64
        zeros = (55 - self._count) % BLOCK_SIZE
        tail = b"\x80" + b"\x00" * zeros + struct.pack(self.byte_order + "Q", bit_length)
        self._absorb(memoryview(tail))
        if self._buffer:
            raise HashContextError(f"{self.name} padding left {len(self._buffer)} bytes unprocessed")

        digest = struct.pack(f"{self.byte_order}{len(self._state)}I", *self._state)
        self._finalized = True
        self._state = [0] * len(self._state)
        return digest[: self.digest_size]

    def hexdigest(self) -> str:
        """Finalize and return the digest as uppercase hexadecimal."""
        return self.finalize().hex().upper()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_open(self) -> None:
        if self._finalized:
            raise HashContextError(
                f"{self.name} context already finalized; call reset() before reuse"
            )

    def _absorb(self, view: memoryview) -> None:
        # Feed bytes through the compression function without touching the counter.
        offset = 0
        if self._buffer:
            need = BLOCK_SIZE - len(self._buffer)
            self._buffer += view[:need]
            if len(self._buffer) < BLOCK_SIZE:
                return
            self._compress(bytes(self._buffer))
            self._buffer.clear()
            offset = need

        end = len(view) - (len(view) - offset) % BLOCK_SIZE
        for start in range(offset, end, BLOCK_SIZE):
            self._compress(view[start : start + BLOCK_SIZE])
        self._buffer += view[end:]

    def _compress(self, block) -> None:
        raise NotImplementedError
