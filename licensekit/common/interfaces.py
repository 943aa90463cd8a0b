"""
Interfaces and protocols for dependency injection.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, TypeVar

T = TypeVar("T")


class IRandomSource(Protocol):
    """Entropy capability: return ``n`` random bytes."""

    def __call__(self, n: int, /) -> bytes: ...


class IChoiceSource(Protocol):
    """Anything with a ``choice`` method, e.g. ``secrets.SystemRandom``."""

    def choice(self, seq: Sequence[T], /) -> T: ...
