""" Utility for hashing operations.

Thin functional layer over the streaming contexts in ``md5`` and ``sha256``.
Digests are rendered as uppercase hex, matching the fingerprints the account
manager has always written to disk.
"""

import logging
import os
from typing import Union

from .digest import MerkleDamgardContext
from .md5 import Md5Context
from .sha256 import Sha256Context


logger = logging.getLogger(__name__)

CHUNK_SIZE = 65536  # 64KB

ALGORITHMS = {
    "md5": Md5Context,
    "sha256": Sha256Context,
}

PathLike = Union[str, "os.PathLike[str]"]


def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return data


def init(algorithm: str = "sha256") -> MerkleDamgardContext:
    """Return a fresh context for ``algorithm`` ("md5" or "sha256")."""
    try:
        return ALGORITHMS[algorithm.lower()]()
    except KeyError:
        raise ValueError(f"Unsupported hash algorithm: {algorithm!r}") from None


def update(ctx: MerkleDamgardContext, data) -> MerkleDamgardContext:
    return ctx.update(data)


def finalize(ctx: MerkleDamgardContext) -> bytes:
    return ctx.finalize()


def md5_hex(data: Union[bytes, str]) -> str:
    """MD5 of ``data`` as 32 uppercase hex characters; str is UTF-8 encoded."""
    return Md5Context(_as_bytes(data)).hexdigest()


def sha256_hex(data: Union[bytes, str]) -> str:
    """SHA-256 of ``data`` as 64 uppercase hex characters; str is UTF-8 encoded."""
    return Sha256Context(_as_bytes(data)).hexdigest()


def calculate_file_hash(file_path: PathLike, algorithm: str = "sha256") -> str:
    """
    Hash a file in CHUNK_SIZE pieces.

    A missing or unreadable file is not an error: the digest of the empty
    byte string is returned instead, so callers always get a comparable
    fingerprint. An empty file and a missing file therefore hash the same.
    """
    ctx = init(algorithm)
    try:
        with open(file_path, "rb") as f:
            while True:
                data = f.read(CHUNK_SIZE)
                if not data:
                    break
                ctx.update(data)
    except OSError as exc:
        logger.debug("Cannot read %s (%s); using empty-input digest", file_path, exc)
        ctx = init(algorithm)
    return ctx.hexdigest()


def file_sha256(file_path: PathLike) -> str:
    return calculate_file_hash(file_path, "sha256")


def file_md5(file_path: PathLike) -> str:
    return calculate_file_hash(file_path, "md5")
