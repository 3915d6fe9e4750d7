"""Password-protected container format for account secrets.

Layout (fixed offsets, no version field):
- 64 bytes: HEADER, an ASCII magic string
- 16 bytes: Argon2id salt
- 24 bytes: XSalsa20 nonce
- N + 16 bytes: secretbox output (Poly1305 tag, then ciphertext)

Salt and nonce are fresh for every call to :func:`encrypt`, so encrypting
the same plaintext twice gives different containers.

Failure policy: :func:`encrypt` and :func:`decrypt` never raise for
cryptographic problems. A missing sodium library, a bad header, a truncated
buffer, an Argon2 failure and a tag mismatch all return ``b""``. Wrong
password and tampered data are deliberately indistinguishable.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Union

from ..core.exceptions import MalformedInputError, RamCryptError
from .kdf import MODERATE, SALT_SIZE, KdfParams, derive_key, generate_salt
from .memory import wiped
from .sodium import NONCE_SIZE, TAG_SIZE, ensure_initialized, secretbox_open, secretbox_seal


logger = logging.getLogger(__name__)

HEADER = b"Roblox Account Manager created by ic3w0lf22 @ github.com ......."
HEADER_SIZE = len(HEADER)

SALT_OFFSET = HEADER_SIZE
NONCE_OFFSET = SALT_OFFSET + SALT_SIZE
BOX_OFFSET = NONCE_OFFSET + NONCE_SIZE
MIN_CONTAINER_SIZE = BOX_OFFSET + TAG_SIZE

Password = Union[bytes, str]


@dataclass(frozen=True)
class Container:
    """Parsed view of a container; ``box`` is the secretbox output."""

    salt: bytes
    nonce: bytes
    box: bytes

    def __post_init__(self) -> None:
        if len(self.salt) != SALT_SIZE:
            raise MalformedInputError(f"salt must be {SALT_SIZE} bytes")
        if len(self.nonce) != NONCE_SIZE:
            raise MalformedInputError(f"nonce must be {NONCE_SIZE} bytes")
        if len(self.box) < TAG_SIZE:
            raise MalformedInputError("ciphertext shorter than the authentication tag")

    @property
    def plaintext_size(self) -> int:
        return len(self.box) - TAG_SIZE

    def to_bytes(self) -> bytes:
        return HEADER + self.salt + self.nonce + self.box

    @classmethod
    def from_bytes(cls, buffer) -> "Container":
        """Split ``buffer`` at the fixed offsets; raises MalformedInputError."""
        if not has_header(buffer):
            raise MalformedInputError("missing container header")
        if len(buffer) < MIN_CONTAINER_SIZE:
            raise MalformedInputError(
                f"container truncated: {len(buffer)} < {MIN_CONTAINER_SIZE} bytes"
            )
        data = bytes(buffer)
        return cls(
            salt=data[SALT_OFFSET:NONCE_OFFSET],
            nonce=data[NONCE_OFFSET:BOX_OFFSET],
            box=data[BOX_OFFSET:],
        )


def has_header(buffer) -> bool:
    """True if ``buffer`` starts with the 64-byte container header."""
    if buffer is None or len(buffer) < HEADER_SIZE:
        return False
    return bytes(buffer[:HEADER_SIZE]) == HEADER


def parse_container(buffer) -> Optional[Container]:
    """Return the parsed container, or None if the layout is invalid."""
    try:
        return Container.from_bytes(buffer)
    except MalformedInputError:
        return None


def seal(plaintext: bytes, password: Password, params: KdfParams = MODERATE) -> Container:
    """Encrypt ``plaintext`` into a :class:`Container`, raising on failure."""
    ensure_initialized()
    salt = generate_salt(SALT_SIZE)
    nonce = os.urandom(NONCE_SIZE)
    with wiped(derive_key(password, salt, params)) as key:
        box = secretbox_seal(plaintext, nonce, key)
    return Container(salt=salt, nonce=nonce, box=box)


def unseal(container: Container, password: Password, params: KdfParams = MODERATE) -> bytes:
    """Re-derive the key and open ``container``, raising on failure."""
    ensure_initialized()
    with wiped(derive_key(password, container.salt, params)) as key:
        return secretbox_open(container.box, container.nonce, key)


def encrypt(plaintext: Union[bytes, str], password: Password, params: KdfParams = MODERATE) -> bytes:
    """
    Encrypt ``plaintext`` with a key derived from ``password``.

    Returns header || salt || nonce || box, or ``b""`` when the plaintext is
    empty or anything fails.
    """
    if isinstance(plaintext, str):
        plaintext = plaintext.encode("utf-8")
    if not plaintext:
        return b""

    try:
        return seal(bytes(plaintext), password, params).to_bytes()
    except RamCryptError as exc:
        logger.debug("encrypt failed: %s", type(exc).__name__)
        return b""


def decrypt(container, password: Password, params: KdfParams = MODERATE) -> bytes:
    """
    Authenticate and decrypt a buffer produced by :func:`encrypt`.

    Returns the plaintext, or ``b""`` if the header is wrong, the buffer is
    truncated, the password is wrong or the data was modified.
    """
    try:
        return unseal(Container.from_bytes(container), password, params)
    except RamCryptError as exc:
        logger.debug("decrypt failed: %s", type(exc).__name__)
        return b""
