"""SQLAlchemy adapter for the user directory."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from postboard.application.ports.user_repository_port import (
    DuplicateEmailError,
    UserCreateInput,
    UserRecord,
    UserRepositoryPort,
)
from postboard.infrastructure.db.metadata import users

_EMAIL_CONSTRAINT = "uq_users_email"
_USER_COLUMNS = (
    users.c.id,
    users.c.name,
    users.c.email,
    users.c.password_hash,
    users.c.created_at,
    users.c.updated_at,
)


class SqlAlchemyUserRepository(UserRepositoryPort):
    """User repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id or None."""

        statement = sa.select(*_USER_COLUMNS).where(users.c.id == user_id).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by exact stored email or None."""

        statement = sa.select(*_USER_COLUMNS).where(users.c.email == email).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user; the email unique constraint settles concurrent sign-ups."""

        now = datetime.now(tz=UTC)
        statement = (
            sa.insert(users)
            .values(
                id=uuid4(),
                name=payload.name,
                email=payload.email,
                password_hash=payload.password_hash,
                created_at=now,
                updated_at=now,
            )
            .returning(*_USER_COLUMNS)
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                row = result.mappings().one()
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                if _is_duplicate_email(exc):
                    raise DuplicateEmailError(email=payload.email) from exc
                raise

        return _to_user_record(row)


def _is_duplicate_email(exc: IntegrityError) -> bool:
    # PostgreSQL names the constraint; SQLite names the column.
    message = str(exc.orig)
    return _EMAIL_CONSTRAINT in message or "UNIQUE constraint failed: users.email" in message


def _to_user_record(row: sa.RowMapping) -> UserRecord:
    raw_user_id = row["id"]
    user_id = raw_user_id if isinstance(raw_user_id, UUID) else UUID(str(raw_user_id))
    return UserRecord(
        user_id=user_id,
        name=cast(str, row["name"]),
        email=cast(str, row["email"]),
        password_hash=cast(str, row["password_hash"]),
        created_at=_as_utc(cast(datetime, row["created_at"])),
        updated_at=_as_utc(cast(datetime, row["updated_at"])),
    )


def _as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps returned by SQLite."""

    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
