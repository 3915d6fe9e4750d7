"""Argon2id key derivation for ramcrypt containers.

The profiles use libsodium's ``crypto_pwhash`` Argon2id limits (ops limit as
``time_cost``, mem limit in KiB as ``memory_cost``, one lane), so a key
derived here is byte-identical to ``crypto_pwhash(..., ALG_DEFAULT)``.
"""
import os
from dataclasses import dataclass
from typing import Dict, Union

from argon2.exceptions import HashingError
from argon2.low_level import ARGON2_VERSION, Type, hash_secret_raw

from ..core.exceptions import DerivationError


SALT_SIZE = 16
KEY_SIZE = 32


@dataclass(frozen=True)
class KdfParams:
    time_cost: int
    memory_cost: int  # KiB
    parallelism: int = 1


INTERACTIVE = KdfParams(time_cost=2, memory_cost=65536)
MODERATE = KdfParams(time_cost=3, memory_cost=262144)
SENSITIVE = KdfParams(time_cost=4, memory_cost=1048576)

PROFILES: Dict[str, KdfParams] = {
    "interactive": INTERACTIVE,
    "moderate": MODERATE,
    "sensitive": SENSITIVE,
}


def generate_salt(length: int = SALT_SIZE) -> bytes:
    """Return a cryptographically secure random salt."""
    return os.urandom(length)


def derive_key(
    password: Union[bytes, str],
    salt: bytes,
    params: KdfParams = MODERATE,
    key_len: int = KEY_SIZE,
) -> bytes:
    """
    Derive a symmetric key from a password using Argon2id v1.3.
    Returns raw derived key bytes; raises DerivationError if Argon2 fails.
    """
    if isinstance(password, str):
        password = password.encode("utf-8")
    if len(salt) != SALT_SIZE:
        raise DerivationError(f"salt must be {SALT_SIZE} bytes, got {len(salt)}")

    try:
        return hash_secret_raw(
            secret=bytes(password),
            salt=bytes(salt),
            time_cost=params.time_cost,
            memory_cost=params.memory_cost,
            parallelism=params.parallelism,
            hash_len=key_len,
            type=Type.ID,
            version=ARGON2_VERSION,
        )
    except (HashingError, MemoryError) as exc:
        raise DerivationError(f"argon2id derivation failed: {exc}") from exc


def kdf_params_to_dict(salt: bytes, params: KdfParams) -> Dict:
    return {
        "algo": "argon2id",
        "salt": salt.hex(),
        "time": params.time_cost,
        "memory": params.memory_cost,
        "parallelism": params.parallelism,
    }
