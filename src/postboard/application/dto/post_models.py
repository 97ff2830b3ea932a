"""Pydantic models for post endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from postboard.application.dto.response_models import StrictModel
from postboard.application.ports.post_repository_port import PostRecord


class PostCreateRequest(StrictModel):
    """Create-post body; blank title or content is reported as 400."""

    title: str | None = None
    content: str | None = None
    expires_at: datetime | None = None


class PostAuthorData(StrictModel):
    id: UUID
    name: str
    email: str


class PostData(StrictModel):
    """One post rendered in API responses."""

    id: UUID
    author_id: UUID
    title: str
    content: str
    expires_at: datetime
    created_at: datetime
    updated_at: datetime
    author: PostAuthorData | None = None

    @classmethod
    def from_record(cls, record: PostRecord) -> PostData:
        author = None
        if record.author is not None:
            author = PostAuthorData(
                id=record.author.user_id,
                name=record.author.name,
                email=record.author.email,
            )
        return cls(
            id=record.post_id,
            author_id=record.author_id,
            title=record.title,
            content=record.content,
            expires_at=record.expires_at,
            created_at=record.created_at,
            updated_at=record.updated_at,
            author=author,
        )
