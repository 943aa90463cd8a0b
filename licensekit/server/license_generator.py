"""
License token signing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cryptography.exceptions import InternalError

from licensekit.common.codec import TokenCodec
from licensekit.common.crypto import CryptoUtils
from licensekit.common.exceptions import InvalidKeyMaterialError, SigningError
from licensekit.common.models import LicenseFields

if TYPE_CHECKING:
    from licensekit.server.keygen import KeyPair


class LicenseGenerator:
    """License generator for creating signed wire tokens."""

    def __init__(self, key_pair: KeyPair) -> None:
        self.key_pair = key_pair
        self.logger = logging.getLogger(__name__)

    def sign(self, canonical: bytes) -> bytes:
        """Produce a detached Ed25519 signature over the exact bytes given."""
        try:
            signature = self.key_pair.private_key.sign(canonical)
        except InvalidKeyMaterialError as err:
            msg = f"Cannot sign: {err}"
            raise SigningError(msg) from err
        except (InternalError, ValueError) as err:
            msg = f"Signing backend failed: {err}"
            raise SigningError(msg) from err

        if len(signature) != CryptoUtils.SIGNATURE_LEN:
            msg = f"Signing backend returned {len(signature)} bytes"
            raise SigningError(msg)
        return signature

    def issue(
        self,
        valid_from: int,
        valid_to: int,
        account_limit: int,
        domain: str,
    ) -> str:
        """Encode, sign and base64 the given fields."""
        fields = LicenseFields(
            valid_from=valid_from,
            valid_to=valid_to,
            account_limit=account_limit,
            domain=domain,
        )
        return self.issue_fields(fields)

    def issue_fields(self, fields: LicenseFields) -> str:
        canonical = TokenCodec.encode_fields(fields)
        token = CryptoUtils.b64encode(canonical + self.sign(canonical))
        self.logger.debug(
            "Issued license for %s: accounts=%s, valid_from=%s, valid_to=%s",
            fields.domain,
            fields.account_limit,
            fields.valid_from,
            fields.valid_to,
        )
        return token
