"""libsodium access through PyNaCl's low-level bindings.

The bindings are optional at import time so that a missing or broken
installation surfaces as :class:`EnvironmentUnavailableError` from the first
call instead of an ImportError while importing ramcrypt. ``sodium_init`` runs
once per process behind a lock; later calls only read a flag.
"""

from __future__ import annotations

import logging
import threading

from ..core.exceptions import (
    AuthenticationError,
    EnvironmentUnavailableError,
    MalformedInputError,
)

try:
    from nacl import bindings
    from nacl.exceptions import CryptoError
except ImportError:
    bindings = None
    CryptoError = None


logger = logging.getLogger(__name__)

KEY_SIZE = 32
NONCE_SIZE = 24
TAG_SIZE = 16

_init_lock = threading.Lock()
_initialized = False


def ensure_initialized():
    """Initialize libsodium once and return the bindings module."""
    global _initialized
    if _initialized:
        return bindings

    with _init_lock:
        if not _initialized:
            if bindings is None:
                raise EnvironmentUnavailableError(
                    "PyNaCl is not available; install pynacl to use encryption"
                )
            try:
                bindings.sodium_init()
            except RuntimeError as exc:
                raise EnvironmentUnavailableError(f"sodium_init failed: {exc}") from exc
            logger.debug("libsodium initialized")
            _initialized = True
    return bindings


def secretbox_seal(message: bytes, nonce: bytes, key) -> bytes:
    """XSalsa20-Poly1305: return the 16-byte tag followed by the ciphertext."""
    sodium = ensure_initialized()
    try:
        return sodium.crypto_secretbox(message, nonce, bytes(key))
    except CryptoError as exc:
        # bad key or nonce length
        raise MalformedInputError(f"crypto_secretbox failed: {exc}") from exc


def secretbox_open(box: bytes, nonce: bytes, key) -> bytes:
    """Verify the tag, then decrypt. Raises AuthenticationError on mismatch."""
    sodium = ensure_initialized()
    try:
        return sodium.crypto_secretbox_open(box, nonce, bytes(key))
    except CryptoError as exc:
        raise AuthenticationError("secretbox verification failed") from exc
