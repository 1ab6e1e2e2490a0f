"""Fake cipher for development and testing.

Encryption is a reversible base64 wrapping, tagged so tests can tell an
encrypted value from a plain one. Hashing is a salted SHA-256.
"""

import base64
import hashlib
import json

from modeling.cipher.port import Cipher

PREFIX = "enc:"


def _as_text(value) -> str:
    return value if isinstance(value, str) else json.dumps(value, sort_keys=True)


class FakeCipher(Cipher):
    def __init__(self, salt: str = "fake-salt") -> None:
        self.salt = salt

    def encrypt(self, value) -> str:
        encoded = base64.urlsafe_b64encode(_as_text(value).encode("utf-8")).decode("ascii")
        return f"{PREFIX}{encoded}"

    def decrypt(self, token: str) -> str:
        if not token.startswith(PREFIX):
            raise ValueError("Value was not encrypted by FakeCipher")
        return base64.urlsafe_b64decode(token[len(PREFIX) :].encode("ascii")).decode("utf-8")

    def hash(self, value) -> str:
        return hashlib.sha256(f"{self.salt}:{_as_text(value)}".encode()).hexdigest()
