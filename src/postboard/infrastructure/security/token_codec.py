"""JWT token codec adapter signing identity claims with a shared HS256 secret."""

from __future__ import annotations

import binascii
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from jose.utils import base64url_decode, base64url_encode

from postboard.application.ports.token_codec_port import (
    TokenClaims,
    TokenCodecPort,
    TokenExpiredError,
    TokenInvalidError,
    TokenMalformedError,
)

DEFAULT_TOKEN_TTL = timedelta(days=7)
_ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ("id", "email", "verification_tag")


class JwtTokenCodec(TokenCodecPort):
    """Issue and verify expiring JWTs carrying `TokenClaims`."""

    def __init__(
        self,
        *,
        secret: str,
        token_ttl: timedelta = DEFAULT_TOKEN_TTL,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("jwt secret must be configured")
        self._secret = secret
        self._token_ttl = token_ttl
        self._now = now or (lambda: datetime.now(tz=UTC))

    def issue(self, claims: TokenClaims, *, ttl: timedelta | None = None) -> str:
        """Sign claims with issued-at and expiry timestamps."""

        issued_at = self._now()
        payload: dict[str, Any] = {
            "id": claims.id,
            "email": claims.email,
            "verification_tag": claims.verification_tag,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + (ttl or self._token_ttl)).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Return decoded claims, raising a distinct error per failure kind."""

        try:
            jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise TokenMalformedError("token cannot be parsed") from exc

        if not _is_canonical_segment(token.rsplit(".", 1)[-1]):
            raise TokenInvalidError("token signature is not canonically encoded")

        try:
            payload = jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("token has expired") from exc
        except JWTError as exc:
            raise TokenInvalidError("token failed verification") from exc

        missing = [name for name in _REQUIRED_CLAIMS if not isinstance(payload.get(name), str)]
        if missing:
            raise TokenMalformedError(f"token is missing claims: {', '.join(missing)}")

        return TokenClaims(
            id=payload["id"],
            email=payload["email"],
            verification_tag=payload["verification_tag"],
        )


def _is_canonical_segment(segment: str) -> bool:
    # Base64url decoding ignores trailing pad bits; a re-encode must match exactly.
    try:
        decoded = base64url_decode(segment.encode("ascii"))
    except (UnicodeEncodeError, binascii.Error, ValueError):
        return False
    return base64url_encode(decoded).decode("ascii") == segment
