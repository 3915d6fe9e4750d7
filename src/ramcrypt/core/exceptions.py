"""
Exceptions for ramcrypt
Every failure kind of the crypto layer has its own class so internal code can
tell them apart, even though the public codec collapses them to empty results.
"""


class RamCryptError(Exception):
    # general container for errors
    pass


class EnvironmentUnavailableError(RamCryptError):
    # raised when the sodium bindings are missing or fail to initialize
    pass


class MalformedInputError(RamCryptError):
    # raised on a wrong header or a truncated container
    pass


class AuthenticationError(RamCryptError):
    # raised when the secretbox tag does not verify (wrong password or tampering)
    pass


class DerivationError(RamCryptError):
    # raised when Argon2 reports an internal error (bad salt, out of memory)
    pass


class HashContextError(RamCryptError):
    # raised when a finalized hash context is used again without reset()
    pass


class ConfigurationError(RamCryptError):
    # raised on invalid environment settings
    pass
