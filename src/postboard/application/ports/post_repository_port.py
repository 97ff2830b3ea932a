"""Port for post persistence operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class PostAuthor:
    """Public author fields embedded in post listings."""

    user_id: UUID
    name: str
    email: str


@dataclass(frozen=True)
class PostRecord:
    """Post persistence model."""

    post_id: UUID
    author_id: UUID
    title: str
    content: str
    expires_at: datetime
    created_at: datetime
    updated_at: datetime
    author: PostAuthor | None = None


@dataclass(frozen=True)
class PostCreateInput:
    """Insert payload for one post."""

    author_id: UUID
    title: str
    content: str
    expires_at: datetime


class PostRepositoryPort(Protocol):
    """Post repository contract."""

    async def create_post(self, payload: PostCreateInput) -> PostRecord:
        """Insert one post and return the persisted row."""

    async def get_by_id(self, *, post_id: UUID) -> PostRecord | None:
        """Return post by id or None."""

    async def list_active(self, *, now: datetime, skip: int, limit: int) -> list[PostRecord]:
        """Return non-expired posts newest first, with author fields populated."""

    async def delete_post(self, *, post_id: UUID) -> PostRecord | None:
        """Delete one post and return the removed row, or None if absent."""
