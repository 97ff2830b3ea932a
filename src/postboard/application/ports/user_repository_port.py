"""Port for user directory operations used by authentication services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class UserRecord:
    """User persistence model."""

    user_id: UUID
    name: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UserCreateInput:
    """Insert payload for one user; password_hash is already digested."""

    name: str
    email: str
    password_hash: str


class DuplicateEmailError(Exception):
    """Raised when the storage unique constraint rejects an email."""

    def __init__(self, *, email: str) -> None:
        super().__init__(f"email already registered: {email}")
        self.email = email


class UserRepositoryPort(Protocol):
    """User repository contract."""

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id or None."""

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by exact stored email or None."""

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user and return the persisted row.

        Raises DuplicateEmailError when the email is already taken.
        """
