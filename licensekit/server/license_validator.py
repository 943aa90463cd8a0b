"""
License token verification.
"""

from __future__ import annotations

import logging
import time

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from licensekit.common.codec import TokenCodec
from licensekit.common.crypto import CryptoUtils
from licensekit.common.exceptions import (
    MalformedTokenError,
    SignatureInvalidError,
    TokenExpiredError,
    TokenNotYetValidError,
)
from licensekit.common.models import VerifiedToken
from licensekit.server.keygen import KeyManager


class LicenseValidator:
    """Checks signature and validity window of wire tokens.

    Holds no mutable state, so one instance can be shared across threads.
    """

    def __init__(self, public_key: Ed25519PublicKey | bytes) -> None:
        if not isinstance(public_key, Ed25519PublicKey):
            public_key = KeyManager.load_public(public_key)
        self.public_key = public_key
        self.logger = logging.getLogger(__name__)

    def verify(self, wire_token: str | bytes, now: int | None = None) -> VerifiedToken:
        """Verify a wire token and return its fields.

        The signature is always checked before the validity window, so no
        field of an unauthenticated token is acted upon.
        """
        try:
            data = CryptoUtils.b64decode(wire_token)
            canonical, signature = CryptoUtils.split_signature(data)
        except ValueError as err:
            self.logger.info("License rejected: %s", err)
            raise MalformedTokenError(str(err)) from err

        try:
            fields = TokenCodec.decode(canonical)
        except MalformedTokenError as err:
            self.logger.info("License rejected: %s", err)
            raise

        try:
            self.public_key.verify(signature, canonical)
        except InvalidSignature as err:
            self.logger.info("License for %r signature invalid", fields.domain)
            msg = "License signature is invalid"
            raise SignatureInvalidError(msg) from err

        if now is None:
            now = int(time.time())
        self.logger.debug(
            "License for %r times: valid_from=%s, valid_to=%s, now=%s",
            fields.domain,
            fields.valid_from,
            fields.valid_to,
            now,
        )

        if now < fields.valid_from:
            self.logger.info("License for %r not yet valid", fields.domain)
            msg = f"License is not valid until {fields.valid_from}"
            raise TokenNotYetValidError(msg)
        if now > fields.valid_to:
            self.logger.info("License for %r expired", fields.domain)
            msg = f"License expired at {fields.valid_to}"
            raise TokenExpiredError(msg)

        return VerifiedToken(**fields.model_dump())
