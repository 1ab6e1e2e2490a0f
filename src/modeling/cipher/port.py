"""Cipher port (abstract interface).

The guard library only depends on this contract; the actual cryptography
lives in an adapter chosen at runtime.
"""

from abc import ABC, abstractmethod


class Cipher(ABC):
    """Reversible encryption plus one-way hashing of property values."""

    @abstractmethod
    def encrypt(self, value) -> str:
        """Encrypt a property value."""
        ...

    @abstractmethod
    def decrypt(self, token: str) -> str:
        """Reverse :meth:`encrypt`."""
        ...

    @abstractmethod
    def hash(self, value) -> str:
        """One-way hash of a property value."""
        ...
