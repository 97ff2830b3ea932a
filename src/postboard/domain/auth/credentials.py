"""Shared normalization helpers for user credential inputs."""

from __future__ import annotations

import json


def normalize_user_email(*, email: str | None) -> str:
    """Trim one user email, keeping its case, and reject blank values."""

    normalized = (email or "").strip()
    if not normalized:
        raise ValueError("email cannot be blank")
    return normalized


def normalize_user_name(*, name: str | None) -> str:
    """Trim one display name and reject blank values."""

    normalized = (name or "").strip()
    if not normalized:
        raise ValueError("name cannot be blank")
    return normalized


def require_password(*, password: str | None) -> str:
    """Return the plaintext password unchanged, rejecting empty values."""

    if not password:
        raise ValueError("password cannot be blank")
    return password


def canonical_identity_payload(*, email: str, password_hash: str) -> str:
    """Serialize the identity fields a verification tag is derived from.

    Keys are sorted and separators compact so the same record always yields
    the same string, independent of dict ordering.
    """

    return json.dumps(
        {"email": email, "password_hash": password_hash},
        sort_keys=True,
        separators=(",", ":"),
    )
