"""
Ed25519 key pair lifecycle: generation, loading and export.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from licensekit.common.crypto import CryptoUtils
from licensekit.common.exceptions import (
    InvalidKeyMaterialError,
    KeyGenerationError,
)

if TYPE_CHECKING:
    from types import TracebackType

    from licensekit.common.interfaces import IRandomSource

logger = logging.getLogger(__name__)

_PEM_MARKER = b"-----BEGIN"

# PKCS#8 v2 (RFC 5958) as written by ring: seed, then the public key in [1]
_V2_PREFIX = bytes.fromhex("3053020101300506032b657004220420")
_V2_PUBLIC_TAG = bytes.fromhex("a123032100")
_V2_LEN = (
    len(_V2_PREFIX)
    + CryptoUtils.SEED_LEN
    + len(_V2_PUBLIC_TAG)
    + CryptoUtils.PUBLIC_KEY_LEN
)


class KeyPair:
    """An Ed25519 signing key and its public half.

    Use as a context manager to drop the private key when the scope ends.
    """

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._private_key: Ed25519PrivateKey | None = private_key
        self.public_key: Ed25519PublicKey = private_key.public_key()

    @property
    def private_key(self) -> Ed25519PrivateKey:
        if self._private_key is None:
            msg = "Key pair has been destroyed"
            raise InvalidKeyMaterialError(msg)
        return self._private_key

    @property
    def destroyed(self) -> bool:
        return self._private_key is None

    def public_bytes(self) -> bytes:
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def destroy(self) -> None:
        self._private_key = None

    def __enter__(self) -> KeyPair:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.destroy()


class KeyManager:
    """Creates, loads and exports Ed25519 key pairs. Performs no I/O."""

    def __init__(self, random_source: IRandomSource | None = None) -> None:
        self.random_source = random_source or os.urandom

    def generate(self) -> KeyPair:
        """Generate a key pair from a fresh 32-byte seed."""
        logger.debug("Generating Ed25519 key pair")
        try:
            seed = self.random_source(CryptoUtils.SEED_LEN)
        except Exception as err:  # noqa: BLE001
            msg = f"Random source failed: {err}"
            raise KeyGenerationError(msg) from err

        if not isinstance(seed, bytes) or len(seed) != CryptoUtils.SEED_LEN:
            msg = f"Random source did not return {CryptoUtils.SEED_LEN} bytes"
            raise KeyGenerationError(msg)

        try:
            private_key = Ed25519PrivateKey.from_private_bytes(seed)
        except (ValueError, UnsupportedAlgorithm) as err:
            msg = f"Key derivation failed: {err}"
            raise KeyGenerationError(msg) from err
        return KeyPair(private_key)

    @staticmethod
    def load(data: bytes) -> KeyPair:
        """Load a PKCS#8 private key container.

        Accepts PEM, v1 DER and the 85-byte v2 DER layout that carries the
        public key alongside the seed. The embedded public key of a v2
        container must match the one derived from its seed.
        """
        try:
            if data.lstrip().startswith(_PEM_MARKER):
                private_key = serialization.load_pem_private_key(data, password=None)
            else:
                private_key = serialization.load_der_private_key(data, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as err:
            if KeyManager._is_v2_container(data):
                return KeyManager._load_v2(data)
            msg = f"Cannot parse private key: {err}"
            raise InvalidKeyMaterialError(msg) from err

        if not isinstance(private_key, Ed25519PrivateKey):
            msg = f"Expected an Ed25519 private key, got {type(private_key).__name__}"
            raise InvalidKeyMaterialError(msg)
        logger.debug("Loaded Ed25519 private key")
        return KeyPair(private_key)

    @staticmethod
    def _is_v2_container(data: bytes) -> bool:
        tag_at = len(_V2_PREFIX) + CryptoUtils.SEED_LEN
        return (
            len(data) == _V2_LEN
            and data.startswith(_V2_PREFIX)
            and data[tag_at : tag_at + len(_V2_PUBLIC_TAG)] == _V2_PUBLIC_TAG
        )

    @staticmethod
    def _load_v2(data: bytes) -> KeyPair:
        seed_at = len(_V2_PREFIX)
        seed = data[seed_at : seed_at + CryptoUtils.SEED_LEN]
        embedded = data[-CryptoUtils.PUBLIC_KEY_LEN :]
        try:
            private_key = Ed25519PrivateKey.from_private_bytes(seed)
        except (ValueError, UnsupportedAlgorithm) as err:
            msg = f"Cannot parse private key: {err}"
            raise InvalidKeyMaterialError(msg) from err

        key_pair = KeyPair(private_key)
        if key_pair.public_bytes() != embedded:
            key_pair.destroy()
            msg = "Embedded public key does not match the private key"
            raise InvalidKeyMaterialError(msg)
        logger.debug("Loaded Ed25519 private key (PKCS#8 v2)")
        return key_pair

    @staticmethod
    def load_public(data: bytes) -> Ed25519PublicKey:
        """Load a public key from raw 32 bytes or a PEM SubjectPublicKeyInfo."""
        try:
            if data.lstrip().startswith(_PEM_MARKER):
                public_key = serialization.load_pem_public_key(data)
            else:
                if len(data) != CryptoUtils.PUBLIC_KEY_LEN:
                    msg = (
                        f"Raw public key must be {CryptoUtils.PUBLIC_KEY_LEN} bytes, "
                        f"got {len(data)}"
                    )
                    raise InvalidKeyMaterialError(msg)
                public_key = Ed25519PublicKey.from_public_bytes(data)
        except (ValueError, UnsupportedAlgorithm) as err:
            msg = f"Cannot parse public key: {err}"
            raise InvalidKeyMaterialError(msg) from err

        if not isinstance(public_key, Ed25519PublicKey):
            msg = f"Expected an Ed25519 public key, got {type(public_key).__name__}"
            raise InvalidKeyMaterialError(msg)
        return public_key

    @staticmethod
    def export_private(key_pair: KeyPair) -> bytes:
        """Serialize the private key as unencrypted PKCS#8 DER."""
        return key_pair.private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    @staticmethod
    def export_public(key_pair: KeyPair) -> bytes:
        """Raw 32-byte public key, as distributed to verifiers."""
        return key_pair.public_bytes()
