# licensekit: signed license keys

from licensekit.common.codec import TokenCodec
from licensekit.common.exceptions import (
    CryptoError,
    InvalidKeyMaterialError,
    KeyGenerationError,
    MalformedTokenError,
    SignatureInvalidError,
    SigningError,
    TokenError,
    TokenExpiredError,
    TokenNotYetValidError,
)
from licensekit.common.models import LicenseFields, VerifiedToken
from licensekit.server.keygen import KeyManager, KeyPair
from licensekit.server.license_generator import LicenseGenerator
from licensekit.server.license_validator import LicenseValidator
from licensekit.server.secret_generator import SecretGenerator

__all__ = [
    "CryptoError",
    "InvalidKeyMaterialError",
    "KeyGenerationError",
    "KeyManager",
    "KeyPair",
    "LicenseFields",
    "LicenseGenerator",
    "LicenseValidator",
    "MalformedTokenError",
    "SecretGenerator",
    "SignatureInvalidError",
    "SigningError",
    "TokenCodec",
    "TokenError",
    "TokenExpiredError",
    "TokenNotYetValidError",
    "VerifiedToken",
]
