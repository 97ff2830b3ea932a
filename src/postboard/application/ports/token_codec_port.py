"""Port for signed identity token issue and verification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims carried inside a signed token."""

    id: str
    email: str
    verification_tag: str


class TokenVerificationError(Exception):
    """Base class for token verification failures."""


class TokenMalformedError(TokenVerificationError):
    """Token cannot be parsed or lacks required claims."""


class TokenExpiredError(TokenVerificationError):
    """Token signature is valid but its expiry has passed."""


class TokenInvalidError(TokenVerificationError):
    """Token signature or standard claims failed verification."""


class TokenCodecPort(Protocol):
    """Token codec contract."""

    def issue(self, claims: TokenClaims) -> str:
        """Sign claims into a compact token."""

    def verify(self, token: str) -> TokenClaims:
        """Return claims of a valid token or raise TokenVerificationError."""
