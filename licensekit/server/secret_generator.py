"""
API key generation for the renewal handshake.
"""

from __future__ import annotations

import math
import secrets
import string
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from licensekit.common.interfaces import IChoiceSource

ALPHABET = string.ascii_letters + string.digits


class SecretGenerator:
    """Generates opaque alphanumeric secrets unrelated to the signing keys."""

    def __init__(self, rng: IChoiceSource | None = None) -> None:
        self.rng = rng or secrets.SystemRandom()

    def generate(self, length: int = 32) -> str:
        if length < 1:
            msg = f"Secret length must be positive, got {length}"
            raise ValueError(msg)
        return "".join(self.rng.choice(ALPHABET) for _ in range(length))

    @staticmethod
    def entropy_bits(length: int = 32) -> float:
        return length * math.log2(len(ALPHABET))
