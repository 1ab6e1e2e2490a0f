"""Cipher factory.

Provides get_cipher() / set_cipher() to swap implementations. Uses FakeCipher
by default; configure via the CIPHER_ADAPTER environment variable.
"""

import os

from modeling.cipher.port import Cipher

_current_cipher: Cipher | None = None


def get_cipher() -> Cipher:
    """Return the current cipher (singleton)."""
    global _current_cipher
    if _current_cipher is None:
        adapter = os.environ.get("CIPHER_ADAPTER", "fake")
        if adapter == "fake":
            from modeling.cipher.fake_adapter import FakeCipher

            _current_cipher = FakeCipher()
        else:
            raise ValueError(f"Unknown cipher adapter: {adapter}")
    return _current_cipher


def set_cipher(cipher: Cipher) -> None:
    """Override the active cipher (useful for tests)."""
    global _current_cipher
    _current_cipher = cipher


def reset_cipher() -> None:
    """Reset to the default cipher."""
    global _current_cipher
    _current_cipher = None
