"""Application service for listing, creating and deleting posts."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import UUID

from postboard.application.errors import (
    ApiError,
    BadRequestError,
    ForbiddenError,
    InternalError,
    NotFoundError,
)
from postboard.application.ports.post_repository_port import (
    PostCreateInput,
    PostRecord,
    PostRepositoryPort,
)

logger = logging.getLogger(__name__)

DEFAULT_POST_TTL = timedelta(days=1)
DEFAULT_PAGE_SIZE = 10


class PostService:
    """Expose post use-cases with author ownership rules."""

    def __init__(
        self,
        *,
        posts: PostRepositoryPort,
        post_ttl: timedelta = DEFAULT_POST_TTL,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._posts = posts
        self._post_ttl = post_ttl
        self._now = now or (lambda: datetime.now(tz=UTC))

    async def list_posts(
        self,
        *,
        skip: str | int | None = None,
        limit: str | int | None = None,
    ) -> list[PostRecord]:
        """Return one page of non-expired posts, newest first."""

        resolved_skip = _parse_page_value(skip, default=0, message="Invalid skip value")
        if resolved_skip < 0:
            raise BadRequestError("Skip value cannot be negative")
        resolved_limit = _parse_page_value(
            limit,
            default=DEFAULT_PAGE_SIZE,
            message="Invalid limit value",
        )
        if resolved_limit <= 0:
            raise BadRequestError("Invalid limit value")

        try:
            return await self._posts.list_active(
                now=self._now(),
                skip=resolved_skip,
                limit=resolved_limit,
            )
        except Exception as exc:
            logger.exception("post_list_failed")
            raise InternalError("An unexpected error occurred while retrieving posts") from exc

    async def create_post(
        self,
        *,
        author_id: UUID,
        title: str | None,
        content: str | None,
        expires_at: datetime | None = None,
    ) -> PostRecord:
        """Create one post owned by the caller."""

        normalized_title = (title or "").strip()
        normalized_content = (content or "").strip()
        if not normalized_title or not normalized_content:
            raise BadRequestError("Title and content are required")

        if expires_at is None:
            expires_at = self._now() + self._post_ttl
        elif expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        else:
            # SQLite keeps wall-clock time only; store every expiry in UTC.
            expires_at = expires_at.astimezone(UTC)

        try:
            post = await self._posts.create_post(
                PostCreateInput(
                    author_id=author_id,
                    title=normalized_title,
                    content=normalized_content,
                    expires_at=expires_at,
                )
            )
        except Exception as exc:
            logger.exception("post_create_failed author_id=%s", author_id)
            raise InternalError("An unexpected error occurred while creating the post") from exc

        logger.info("post_created post_id=%s author_id=%s", post.post_id, author_id)
        return post

    async def delete_post(self, *, author_id: UUID, post_id: UUID) -> PostRecord:
        """Delete one post when the caller is its author."""

        try:
            post = await self._posts.get_by_id(post_id=post_id)
            if post is None:
                raise NotFoundError("Post not found")
            if post.author_id != author_id:
                logger.info("post_delete_forbidden post_id=%s caller_id=%s", post_id, author_id)
                raise ForbiddenError("You are not authorized to delete this post")

            deleted = await self._posts.delete_post(post_id=post_id)
            if deleted is None:
                raise NotFoundError("Post not found")
        except ApiError:
            raise
        except Exception as exc:
            logger.exception("post_delete_failed post_id=%s", post_id)
            raise InternalError("An unexpected error occurred while deleting the post") from exc

        logger.info("post_deleted post_id=%s author_id=%s", post_id, author_id)
        return deleted


def _parse_page_value(value: str | int | None, *, default: int, message: str) -> int:
    if value is None:
        return default
    if isinstance(value, int):
        return value
    try:
        return int(value.strip())
    except ValueError as exc:
        raise BadRequestError(message) from exc
