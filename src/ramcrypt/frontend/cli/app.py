"""Command-line front end for ramcrypt.

Examples::

    ramcrypt md5 test
    ramcrypt hash --algo sha256 AccountData.json
    RAMCRYPT_PASSWORD=... ramcrypt encrypt AccountData.json AccountData.dat
    ramcrypt decrypt AccountData.dat AccountData.json
    ramcrypt sniff AccountData.dat

Exit status is 0 on success, 1 when a command produced no output (wrong
password, corrupt container, nothing to encrypt) and 2 on usage errors.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from ramcrypt.core import hashing
from ramcrypt.core.exceptions import ConfigurationError
from ramcrypt.security.files import is_container_file, open_file, seal_file
from ramcrypt.security.kdf import PROFILES

from .config import Settings
from .logging_config import configure_logging


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _resolve_password(settings: Settings, confirm: bool = False) -> str:
    # RAMCRYPT_PASSWORD wins; otherwise prompt without echo.
    if settings.password:
        return settings.password
    password = getpass.getpass("Password: ")
    if confirm and getpass.getpass("Confirm password: ") != password:
        raise ConfigurationError("passwords do not match")
    if not password:
        raise ConfigurationError("password must not be empty")
    return password


def _cmd_md5(args: argparse.Namespace, settings: Settings) -> int:
    print(hashing.md5_hex(args.text))
    return EXIT_OK


def _cmd_sha256(args: argparse.Namespace, settings: Settings) -> int:
    print(hashing.sha256_hex(args.text))
    return EXIT_OK


def _cmd_hash(args: argparse.Namespace, settings: Settings) -> int:
    for path in args.paths:
        print(f"{hashing.calculate_file_hash(path, args.algo)}  {path}")
    return EXIT_OK


def _cmd_encrypt(args: argparse.Namespace, settings: Settings) -> int:
    password = _resolve_password(settings, confirm=True)
    if not seal_file(args.src, args.dst, password, settings.kdf_params):
        print(f"ramcrypt: could not encrypt {args.src}", file=sys.stderr)
        return EXIT_FAILED
    logger.info("Sealed %s -> %s", args.src, args.dst)
    return EXIT_OK


def _cmd_decrypt(args: argparse.Namespace, settings: Settings) -> int:
    if not is_container_file(args.src):
        print(f"ramcrypt: {args.src} is not a container", file=sys.stderr)
        return EXIT_FAILED
    password = _resolve_password(settings)
    if not open_file(args.src, args.dst, password, settings.kdf_params):
        # wrong password and corrupted data look the same here
        print(f"ramcrypt: could not decrypt {args.src}", file=sys.stderr)
        return EXIT_FAILED
    logger.info("Opened %s -> %s", args.src, args.dst)
    return EXIT_OK


def _cmd_sniff(args: argparse.Namespace, settings: Settings) -> int:
    status = EXIT_OK
    for path in args.paths:
        found = is_container_file(path)
        print(f"{'container' if found else 'plain':9}  {path}")
        if not found:
            status = EXIT_FAILED
    return status


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ramcrypt",
        description="Password-protected containers and MD5/SHA-256 fingerprints.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: $RAMCRYPT_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--kdf-profile",
        default=None,
        choices=sorted(PROFILES),
        help="Argon2id work factors (default: $RAMCRYPT_KDF_PROFILE or moderate)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("md5", help="MD5 of a UTF-8 string")
    p.add_argument("text")
    p.set_defaults(handler=_cmd_md5)

    p = sub.add_parser("sha256", help="SHA-256 of a UTF-8 string")
    p.add_argument("text")
    p.set_defaults(handler=_cmd_sha256)

    p = sub.add_parser("hash", help="Fingerprint files (missing files hash as empty)")
    p.add_argument("--algo", default="sha256", choices=sorted(hashing.ALGORITHMS))
    p.add_argument("paths", nargs="+")
    p.set_defaults(handler=_cmd_hash)

    p = sub.add_parser("encrypt", help="Seal a file into a container")
    p.add_argument("src")
    p.add_argument("dst")
    p.set_defaults(handler=_cmd_encrypt)

    p = sub.add_parser("decrypt", help="Open a container file")
    p.add_argument("src")
    p.add_argument("dst")
    p.set_defaults(handler=_cmd_decrypt)

    p = sub.add_parser("sniff", help="Report whether files are containers")
    p.add_argument("paths", nargs="+")
    p.set_defaults(handler=_cmd_sniff)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env().override(
            kdf_profile=args.kdf_profile, log_level=args.log_level
        )
    except ConfigurationError as exc:
        print(f"ramcrypt: {exc}", file=sys.stderr)
        return EXIT_USAGE

    configure_logging(settings.log_level_value)

    try:
        return args.handler(args, settings)
    except ConfigurationError as exc:
        print(f"ramcrypt: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except EOFError:
        # stdin closed before a password could be read
        print("ramcrypt: no password given (stdin closed)", file=sys.stderr)
        return EXIT_USAGE
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
