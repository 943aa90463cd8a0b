"""
Custom exceptions for the license system.
"""

from __future__ import annotations

from pathlib import Path  # noqa: TC003


class LicenseKitError(Exception):
    """Base class for every failure raised by licensekit."""


class CryptoError(LicenseKitError):
    """Backend-level cryptographic failure. Never retried automatically."""


class KeyGenerationError(CryptoError):
    """The random source or key derivation could not produce a key pair."""


class InvalidKeyMaterialError(CryptoError):
    """Key bytes are malformed, truncated or not an Ed25519 key."""


class SigningError(CryptoError):
    """The signing backend failed."""


class TokenError(LicenseKitError):
    """Exception for token verification failures."""

    kind: str = "invalid"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedTokenError(TokenError):
    """Token is not valid base64 or its field region cannot be decoded."""

    kind = "malformed"


class SignatureInvalidError(TokenError):
    """Signature does not match the public key."""

    kind = "signature_invalid"


class TokenExpiredError(TokenError):
    """Current time is past valid_to."""

    kind = "expired"


class TokenNotYetValidError(TokenError):
    """Current time is before valid_from."""

    kind = "not_yet_valid"


class LicenseFileError(LicenseKitError):
    """Reading or writing a license artifact failed."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path
