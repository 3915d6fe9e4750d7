"""Runtime settings, driven by environment variables.

- ``RAMCRYPT_PASSWORD``: password for the CLI encrypt/decrypt commands. When
  unset the CLI prompts with :mod:`getpass`.
- ``RAMCRYPT_KDF_PROFILE``: Argon2id work factors, one of ``interactive``,
  ``moderate`` (default) or ``sensitive``. Containers do not record the
  profile, so the same one must be used to decrypt.
- ``RAMCRYPT_LOG_LEVEL``: logging level name, ``INFO`` by default.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ramcrypt.core.exceptions import ConfigurationError
from ramcrypt.security.kdf import KdfParams, PROFILES


ENV_PASSWORD = "RAMCRYPT_PASSWORD"
ENV_KDF_PROFILE = "RAMCRYPT_KDF_PROFILE"
ENV_LOG_LEVEL = "RAMCRYPT_LOG_LEVEL"

DEFAULT_KDF_PROFILE = "moderate"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    password: Optional[str] = None
    kdf_profile: str = DEFAULT_KDF_PROFILE
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        if self.kdf_profile not in PROFILES:
            choices = ", ".join(sorted(PROFILES))
            raise ConfigurationError(
                f"unknown KDF profile {self.kdf_profile!r} (expected one of: {choices})"
            )
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"unknown log level {self.log_level!r}")

    @property
    def kdf_params(self) -> KdfParams:
        return PROFILES[self.kdf_profile]

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            password=env.get(ENV_PASSWORD) or None,
            kdf_profile=env.get(ENV_KDF_PROFILE, DEFAULT_KDF_PROFILE).strip().lower(),
            log_level=env.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).strip().upper(),
        )

    def override(
        self,
        kdf_profile: Optional[str] = None,
        log_level: Optional[str] = None,
    ) -> "Settings":
        """Return a copy with CLI flags applied on top of the environment."""
        return Settings(
            password=self.password,
            kdf_profile=kdf_profile.lower() if kdf_profile else self.kdf_profile,
            log_level=log_level.upper() if log_level else self.log_level,
        )
