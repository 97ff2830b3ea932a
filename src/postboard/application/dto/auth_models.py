"""Pydantic models for sign-up, sign-in and profile contracts."""

from __future__ import annotations

from postboard.application.dto.response_models import StrictModel


class SignUpRequest(StrictModel):
    """Sign-up body; missing fields are reported by the auth service as 400."""

    name: str | None = None
    email: str | None = None
    password: str | None = None


class SignInRequest(StrictModel):
    """Sign-in body; missing fields are reported by the auth service as 400."""

    email: str | None = None
    password: str | None = None


class TokenData(StrictModel):
    token: str


class UserProfileData(StrictModel):
    name: str
    email: str
