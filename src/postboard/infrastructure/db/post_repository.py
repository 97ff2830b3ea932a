"""SQLAlchemy adapter for post persistence."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from postboard.application.ports.post_repository_port import (
    PostAuthor,
    PostCreateInput,
    PostRecord,
    PostRepositoryPort,
)
from postboard.infrastructure.db.metadata import posts, users

_POST_COLUMNS = (
    posts.c.id,
    posts.c.author_id,
    posts.c.title,
    posts.c.content,
    posts.c.expires_at,
    posts.c.created_at,
    posts.c.updated_at,
)


class SqlAlchemyPostRepository(PostRepositoryPort):
    """Post repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_post(self, payload: PostCreateInput) -> PostRecord:
        """Insert one post row and return it."""

        now = datetime.now(tz=UTC)
        statement = (
            sa.insert(posts)
            .values(
                id=uuid4(),
                author_id=payload.author_id,
                title=payload.title,
                content=payload.content,
                expires_at=payload.expires_at,
                created_at=now,
                updated_at=now,
            )
            .returning(*_POST_COLUMNS)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)
            row = result.mappings().one()
            await session.commit()

        return _to_post_record(row)

    async def get_by_id(self, *, post_id: UUID) -> PostRecord | None:
        """Return post by id or None."""

        statement = sa.select(*_POST_COLUMNS).where(posts.c.id == post_id).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_post_record(row)

    async def list_active(self, *, now: datetime, skip: int, limit: int) -> list[PostRecord]:
        """Return non-expired posts newest first joined with their authors."""

        statement = (
            sa.select(
                *_POST_COLUMNS,
                users.c.name.label("author_name"),
                users.c.email.label("author_email"),
            )
            .select_from(posts.join(users, users.c.id == posts.c.author_id))
            .where(posts.c.expires_at > now)
            .order_by(posts.c.created_at.desc())
            .offset(skip)
            .limit(limit)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [_to_post_record(row, with_author=True) for row in result.mappings().all()]

    async def delete_post(self, *, post_id: UUID) -> PostRecord | None:
        """Delete one post and return the removed row."""

        statement = sa.delete(posts).where(posts.c.id == post_id).returning(*_POST_COLUMNS)

        async with self._session_factory() as session:
            result = await session.execute(statement)
            row = result.mappings().first()
            await session.commit()

        if row is None:
            return None
        return _to_post_record(row)


def _to_post_record(row: sa.RowMapping, *, with_author: bool = False) -> PostRecord:
    post_id = _as_uuid(row["id"])
    author_id = _as_uuid(row["author_id"])
    author = None
    if with_author:
        author = PostAuthor(
            user_id=author_id,
            name=cast(str, row["author_name"]),
            email=cast(str, row["author_email"]),
        )
    return PostRecord(
        post_id=post_id,
        author_id=author_id,
        title=cast(str, row["title"]),
        content=cast(str, row["content"]),
        expires_at=_as_utc(cast(datetime, row["expires_at"])),
        created_at=_as_utc(cast(datetime, row["created_at"])),
        updated_at=_as_utc(cast(datetime, row["updated_at"])),
        author=author,
    )


def _as_uuid(value: object) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
