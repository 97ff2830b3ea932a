"""Port for keyed credential digests."""

from __future__ import annotations

from typing import Protocol


class PasswordHasherPort(Protocol):
    """Deterministic keyed hashing contract."""

    def digest(self, value: str) -> str:
        """Return the fixed-length hex digest of one value."""

    def hash_password(self, password: str) -> str:
        """Hash plaintext password for storage."""

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Verify plaintext password against stored hash."""
