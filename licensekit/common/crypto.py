"""Common cryptographic utilities and protocol constants.
"""

from __future__ import annotations

import base64
import binascii


class CryptoUtils:
    """Utility class for the Ed25519 token protocol."""

    SIGNATURE_LEN = 64  # Ed25519 detached signature
    PUBLIC_KEY_LEN = 32
    SEED_LEN = 32

    @staticmethod
    def b64encode(data: bytes) -> str:
        """Standard alphabet, padded."""
        return base64.b64encode(data).decode("ascii")

    @staticmethod
    def b64decode(token: str | bytes) -> bytes:
        """Strictly decode standard base64; raises ValueError on bad input."""
        if isinstance(token, str):
            token = token.strip().encode("ascii")
        else:
            token = token.strip()
        try:
            return base64.b64decode(token, validate=True)
        except binascii.Error as err:
            msg = f"invalid base64: {err}"
            raise ValueError(msg) from err

    @staticmethod
    def split_signature(data: bytes) -> tuple[bytes, bytes]:
        """Split a decoded token into (canonical bytes, signature)."""
        if len(data) < CryptoUtils.SIGNATURE_LEN:
            msg = (
                f"token is {len(data)} bytes, shorter than the "
                f"{CryptoUtils.SIGNATURE_LEN}-byte signature"
            )
            raise ValueError(msg)
        cut = len(data) - CryptoUtils.SIGNATURE_LEN
        return data[:cut], data[cut:]
