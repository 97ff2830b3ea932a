from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from postboard.application.ports.token_codec_port import (
    TokenClaims,
    TokenExpiredError,
    TokenInvalidError,
    TokenMalformedError,
    TokenVerificationError,
)
from postboard.infrastructure.security.token_codec import JwtTokenCodec

SECRET = "jwt-secret-for-tests-0123456789abcdef"
CLAIMS = TokenClaims(id="user-1", email="a@x.com", verification_tag="tag")


def _tamper(token: str, index: int) -> str:
    replacement = "A" if token[index] != "A" else "B"
    return token[:index] + replacement + token[index + 1 :]


def test_issue_then_verify_returns_claims() -> None:
    codec = JwtTokenCodec(secret=SECRET)

    token = codec.issue(CLAIMS)

    assert token.count(".") == 2
    assert codec.verify(token) == CLAIMS


def test_issued_token_expires_after_seven_days_by_default() -> None:
    fixed_now = datetime(2026, 2, 15, 0, 0, 0, tzinfo=UTC)
    codec = JwtTokenCodec(secret=SECRET, now=lambda: fixed_now)

    payload = jwt.get_unverified_claims(codec.issue(CLAIMS))

    assert payload["iat"] == int(fixed_now.timestamp())
    assert payload["exp"] == int((fixed_now + timedelta(days=7)).timestamp())


def test_expired_token_raises_expired_error() -> None:
    past = datetime.now(tz=UTC) - timedelta(days=8)
    issuer = JwtTokenCodec(secret=SECRET, now=lambda: past)
    verifier = JwtTokenCodec(secret=SECRET)

    with pytest.raises(TokenExpiredError):
        verifier.verify(issuer.issue(CLAIMS))


def test_token_signed_with_other_secret_is_invalid() -> None:
    other = JwtTokenCodec(secret="another-secret-0123456789abcdefghij")
    codec = JwtTokenCodec(secret=SECRET)

    with pytest.raises(TokenInvalidError):
        codec.verify(other.issue(CLAIMS))


def test_tampered_signature_is_rejected() -> None:
    codec = JwtTokenCodec(secret=SECRET)
    token = codec.issue(CLAIMS)
    signature_start = token.rindex(".") + 1

    with pytest.raises(TokenVerificationError):
        codec.verify(_tamper(token, signature_start + 5))


def _flip_low_bit(token: str) -> str:
    alphabet = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
    last = token[-1]
    return token[:-1] + alphabet[alphabet.index(last) ^ 1]


def test_signature_with_altered_padding_bits_is_invalid() -> None:
    codec = JwtTokenCodec(secret=SECRET)
    token = codec.issue(CLAIMS)

    with pytest.raises(TokenInvalidError):
        codec.verify(_flip_low_bit(token))


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b", "a.b.c"])
def test_unparseable_token_is_malformed(token: str) -> None:
    codec = JwtTokenCodec(secret=SECRET)

    with pytest.raises(TokenMalformedError):
        codec.verify(token)


def test_token_missing_identity_claims_is_malformed() -> None:
    codec = JwtTokenCodec(secret=SECRET)
    token = jwt.encode({"id": "user-1"}, SECRET, algorithm="HS256")

    with pytest.raises(TokenMalformedError, match="email, verification_tag"):
        codec.verify(token)


def test_empty_secret_is_rejected() -> None:
    with pytest.raises(ValueError, match="jwt secret must be configured"):
        JwtTokenCodec(secret="")
