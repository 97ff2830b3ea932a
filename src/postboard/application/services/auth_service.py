"""Application authentication service: sign-up, sign-in and token re-verification."""

from __future__ import annotations

import hmac
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TypeVar
from uuid import UUID

from postboard.application.errors import (
    ApiError,
    BadRequestError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
)
from postboard.application.ports.password_hasher_port import PasswordHasherPort
from postboard.application.ports.token_codec_port import TokenClaims, TokenCodecPort
from postboard.application.ports.user_repository_port import (
    DuplicateEmailError,
    UserCreateInput,
    UserRecord,
    UserRepositoryPort,
)
from postboard.domain.auth.credentials import (
    canonical_identity_payload,
    normalize_user_email,
    normalize_user_name,
    require_password,
)

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

SIGN_UP_REQUIRED_MESSAGE = "Name, email, and password are required"
SIGN_IN_REQUIRED_MESSAGE = "Email and password are required"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
USER_EXISTS_MESSAGE = "User already exists"
USER_NOT_FOUND_MESSAGE = "User not found"
INVALID_TOKEN_MESSAGE = "Invalid token"
INTERNAL_ERROR_MESSAGE = "Internal server error"


@dataclass(frozen=True)
class UserProfile:
    """Public profile fields of one user."""

    name: str
    email: str


class AuthService:
    """Issue tokens for valid credentials and re-verify tokens against live user state."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort,
        token_codec: TokenCodecPort,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._token_codec = token_codec

    async def sign_up(self, *, name: str | None, email: str | None, password: str | None) -> str:
        """Register one user and return a freshly issued token."""

        try:
            normalized_name = normalize_user_name(name=name)
            normalized_email = normalize_user_email(email=email)
            plaintext = require_password(password=password)
        except ValueError as exc:
            raise BadRequestError(SIGN_UP_REQUIRED_MESSAGE) from exc

        return await self._guard(
            self._sign_up(name=normalized_name, email=normalized_email, password=plaintext),
            operation="sign_up",
        )

    async def sign_in(self, *, email: str | None, password: str | None) -> str:
        """Authenticate credentials and return a token.

        Unknown email and wrong password fail with the same message.
        """

        try:
            normalized_email = normalize_user_email(email=email)
            plaintext = require_password(password=password)
        except ValueError as exc:
            raise BadRequestError(SIGN_IN_REQUIRED_MESSAGE) from exc

        return await self._guard(
            self._sign_in(email=normalized_email, password=plaintext),
            operation="sign_in",
        )

    async def get_user_profile(self, *, user_id: str | UUID) -> UserProfile:
        """Return the public profile of one user."""

        return await self._guard(self._get_user_profile(user_id=user_id), operation="profile")

    async def re_verify(self, *, user_id: str | UUID, presented_tag: str) -> bool:
        """Confirm a presented verification tag still matches the stored user state."""

        return await self._guard(
            self._re_verify(user_id=user_id, presented_tag=presented_tag),
            operation="re_verify",
        )

    def verification_tag_for(self, user: UserRecord) -> str:
        """Derive the verification tag from the user's current email and digest."""

        return self._password_hasher.digest(
            canonical_identity_payload(email=user.email, password_hash=user.password_hash)
        )

    async def _sign_up(self, *, name: str, email: str, password: str) -> str:
        existing = await self._users.get_by_email(email=email)
        if existing is not None:
            logger.info("sign_up_rejected reason=email_exists")
            raise ConflictError(USER_EXISTS_MESSAGE)

        try:
            user = await self._users.create_user(
                UserCreateInput(
                    name=name,
                    email=email,
                    password_hash=self._password_hasher.hash_password(password),
                )
            )
        except DuplicateEmailError as exc:
            logger.info("sign_up_rejected reason=email_exists_race")
            raise ConflictError(USER_EXISTS_MESSAGE) from exc

        logger.info("sign_up_success user_id=%s", user.user_id)
        return self._issue_token(user)

    async def _sign_in(self, *, email: str, password: str) -> str:
        user = await self._users.get_by_email(email=email)
        if user is None:
            logger.info("sign_in_failed reason=invalid_credentials")
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

        if not self._password_hasher.verify_password(
            password=password,
            password_hash=user.password_hash,
        ):
            logger.info("sign_in_failed reason=invalid_credentials user_id=%s", user.user_id)
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

        logger.info("sign_in_success user_id=%s", user.user_id)
        return self._issue_token(user)

    async def _get_user_profile(self, *, user_id: str | UUID) -> UserProfile:
        user = await self._require_user(user_id=user_id)
        return UserProfile(name=user.name, email=user.email)

    async def _re_verify(self, *, user_id: str | UUID, presented_tag: str) -> bool:
        user = await self._require_user(user_id=user_id)
        expected_tag = self.verification_tag_for(user)
        if not hmac.compare_digest(expected_tag, presented_tag):
            logger.info("re_verify_failed reason=tag_mismatch user_id=%s", user.user_id)
            raise UnauthorizedError(INVALID_TOKEN_MESSAGE)
        return True

    async def _require_user(self, *, user_id: str | UUID) -> UserRecord:
        parsed_id = _parse_user_id(user_id)
        if parsed_id is None:
            raise NotFoundError(USER_NOT_FOUND_MESSAGE)

        user = await self._users.get_by_id(user_id=parsed_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND_MESSAGE)
        return user

    def _issue_token(self, user: UserRecord) -> str:
        return self._token_codec.issue(
            TokenClaims(
                id=str(user.user_id),
                email=user.email,
                verification_tag=self.verification_tag_for(user),
            )
        )

    async def _guard(self, operation_result: Awaitable[_T], *, operation: str) -> _T:
        """Re-raise typed errors unchanged and wrap anything else as internal."""

        try:
            return await operation_result
        except ApiError:
            raise
        except Exception as exc:
            logger.exception("auth_operation_failed operation=%s", operation)
            raise InternalError(INTERNAL_ERROR_MESSAGE) from exc


def _parse_user_id(user_id: str | UUID) -> UUID | None:
    if isinstance(user_id, UUID):
        return user_id
    try:
        return UUID(user_id)
    except (TypeError, ValueError):
        return None
