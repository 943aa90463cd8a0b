"""
Issuing side: key pairs, signing, verification and API keys.
"""

from licensekit.server.issuer import LicenseIssuer
from licensekit.server.keygen import KeyManager, KeyPair
from licensekit.server.license_generator import LicenseGenerator
from licensekit.server.license_validator import LicenseValidator
from licensekit.server.secret_generator import SecretGenerator

__all__ = [
    "KeyManager",
    "KeyPair",
    "LicenseGenerator",
    "LicenseIssuer",
    "LicenseValidator",
    "SecretGenerator",
]
