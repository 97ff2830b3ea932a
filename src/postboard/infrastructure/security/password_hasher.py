"""HMAC-SHA256 credential hasher adapter."""

from __future__ import annotations

import hashlib
import hmac

from postboard.application.ports.password_hasher_port import PasswordHasherPort


class HmacPasswordHasher(PasswordHasherPort):
    """Keyed deterministic hasher for passwords and verification tags."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("password secret must be configured")
        self._key = secret.encode("utf-8")

    def digest(self, value: str) -> str:
        return hmac.new(self._key, value.encode("utf-8"), hashlib.sha256).hexdigest()

    def hash_password(self, password: str) -> str:
        return self.digest(password)

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        return hmac.compare_digest(self.digest(password), password_hash)
