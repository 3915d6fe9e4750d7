"""Seal and open whole files with the container format.

Same fail-soft policy as the codec: both helpers return ``False`` instead of
raising, and the destination is only replaced once the output is complete.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from .container import HEADER_SIZE, Password, decrypt, encrypt, has_header
from .kdf import MODERATE, KdfParams


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _atomic_write(dst: Path, data: bytes) -> None:
    dst.parent.mkdir(parents=True, exist_ok=True)
    tmpf = tempfile.NamedTemporaryFile(dir=dst.parent, prefix=f".{dst.name}.", delete=False)
    tmp_path = Path(tmpf.name)
    try:
        with tmpf:
            tmpf.write(data)
        os.replace(tmp_path, dst)
    except BaseException:
        # never leave partial output (possibly plaintext) next to dst
        tmp_path.unlink(missing_ok=True)
        raise


def _read(src: Path) -> bytes:
    try:
        return src.read_bytes()
    except OSError as exc:
        logger.warning("Cannot read %s: %s", src, exc)
        return b""


def seal_file(src: PathLike, dst: PathLike, password: Password, params: KdfParams = MODERATE) -> bool:
    """Encrypt the file at ``src`` into a container file at ``dst``."""
    src, dst = Path(src), Path(dst)
    sealed = encrypt(_read(src), password, params)
    if not sealed:
        logger.info("Nothing sealed for %s", src)
        return False
    try:
        _atomic_write(dst, sealed)
    except OSError as exc:
        logger.warning("Cannot write %s: %s", dst, exc)
        return False
    return True


def open_file(src: PathLike, dst: PathLike, password: Password, params: KdfParams = MODERATE) -> bool:
    """Decrypt the container file at ``src`` into ``dst``.

    Wrong password, corruption and a missing source all return ``False`` and
    leave ``dst`` untouched.
    """
    src, dst = Path(src), Path(dst)
    plaintext = decrypt(_read(src), password, params)
    if not plaintext:
        logger.info("Could not open %s", src)
        return False
    try:
        _atomic_write(dst, plaintext)
    except OSError as exc:
        logger.warning("Cannot write %s: %s", dst, exc)
        return False
    return True


def is_container_file(path: PathLike) -> bool:
    """Sniff the first bytes of ``path``; unreadable files are not containers."""
    try:
        with open(path, "rb") as f:
            head = f.read(HEADER_SIZE)
    except OSError:
        return False
    return has_header(head)
