"""Bearer-token guard for protected endpoints."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from fastapi import Header, Request

from postboard.application.errors import ApiError, NotFoundError, UnauthorizedError
from postboard.application.ports.token_codec_port import TokenCodecPort, TokenVerificationError
from postboard.application.services.auth_service import AuthService

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized"
INVALID_TOKEN_MESSAGE = "Invalid token"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class MissingAuthTokenError(PermissionError):
    """Raised when a bearer token is required but not provided."""


class InvalidAuthTokenError(PermissionError):
    """Raised when the authorization header is not a bearer credential."""


class AuthRejectedError(ApiError):
    """Terminal rejection of one request by the auth guard."""


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Caller identity attached to one request after successful verification."""

    id: str
    email: str
    verification_tag: str

    @property
    def user_id(self) -> UUID:
        return UUID(self.id)


def extract_bearer_token(authorization_header: str | None) -> str:
    """Extract token from standard `Authorization: Bearer <token>` header."""

    if authorization_header is None or not authorization_header.strip():
        raise MissingAuthTokenError("missing bearer token")

    parts = authorization_header.strip().split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise InvalidAuthTokenError("invalid bearer token header")

    return parts[1]


class AuthGuard:
    """Verify bearer tokens and re-check them against the stored user state."""

    def __init__(self, *, token_codec: TokenCodecPort, auth_service: AuthService) -> None:
        self._token_codec = token_codec
        self._auth_service = auth_service

    async def authenticate(self, *, authorization_header: str | None) -> AuthenticatedIdentity:
        """Return the caller identity or raise `AuthRejectedError`."""

        try:
            token = extract_bearer_token(authorization_header)
        except (MissingAuthTokenError, InvalidAuthTokenError) as exc:
            raise AuthRejectedError(UNAUTHORIZED_MESSAGE, status_code=401) from exc

        try:
            claims = self._token_codec.verify(token)
        except TokenVerificationError as exc:
            logger.info("auth_guard_rejected reason=%s", type(exc).__name__)
            raise AuthRejectedError(INVALID_TOKEN_MESSAGE, status_code=401) from exc
        except Exception as exc:
            logger.exception("auth_guard_failed stage=verify")
            raise AuthRejectedError(INTERNAL_ERROR_MESSAGE, status_code=500) from exc

        try:
            await self._auth_service.re_verify(
                user_id=claims.id,
                presented_tag=claims.verification_tag,
            )
        except (NotFoundError, UnauthorizedError) as exc:
            logger.info("auth_guard_rejected reason=stale_token user_id=%s", claims.id)
            raise AuthRejectedError(UNAUTHORIZED_MESSAGE, status_code=401) from exc
        except Exception as exc:
            logger.exception("auth_guard_failed stage=re_verify user_id=%s", claims.id)
            raise AuthRejectedError(INTERNAL_ERROR_MESSAGE, status_code=500) from exc

        return AuthenticatedIdentity(
            id=claims.id,
            email=claims.email,
            verification_tag=claims.verification_tag,
        )


def build_identity_dependency(
    auth_guard: AuthGuard,
) -> Callable[..., Awaitable[AuthenticatedIdentity]]:
    """Build a FastAPI dependency that authenticates and stores identity on the request."""

    async def require_identity(
        request: Request,
        authorization: Annotated[str | None, Header()] = None,
    ) -> AuthenticatedIdentity:
        identity = await auth_guard.authenticate(authorization_header=authorization)
        request.state.identity = identity
        return identity

    return require_identity
