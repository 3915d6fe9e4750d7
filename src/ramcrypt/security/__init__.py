"""Security helpers: KDF and password-protected containers for ramcrypt.

This package provides:
- Argon2id key derivation with libsodium-compatible work factors
- XSalsa20-Poly1305 containers with a fixed magic header
- header sniffing and whole-file seal/open helpers

The codec functions never raise for cryptographic failures; they return
empty results instead.
"""

from .kdf import generate_salt, derive_key, KdfParams, INTERACTIVE, MODERATE, SENSITIVE
from .container import (
    HEADER,
    Container,
    encrypt,
    decrypt,
    has_header,
    parse_container,
)
from .files import seal_file, open_file, is_container_file

__all__ = [
    "generate_salt",
    "derive_key",
    "KdfParams",
    "INTERACTIVE",
    "MODERATE",
    "SENSITIVE",
    "HEADER",
    "Container",
    "encrypt",
    "decrypt",
    "has_header",
    "parse_container",
    "seal_file",
    "open_file",
    "is_container_file",
]
