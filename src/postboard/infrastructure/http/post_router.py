"""FastAPI router for authenticated post endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from postboard.application.dto.post_models import PostCreateRequest, PostData
from postboard.application.dto.response_models import ApiResponse
from postboard.application.services.post_service import PostService
from postboard.infrastructure.http.auth_guard import (
    AuthenticatedIdentity,
    AuthGuard,
    build_identity_dependency,
)


def build_post_router(*, post_service: PostService, auth_guard: AuthGuard) -> APIRouter:
    """Build router exposing `/posts` endpoints behind the auth guard."""

    require_identity = build_identity_dependency(auth_guard)
    router = APIRouter(
        prefix="/posts",
        tags=["posts"],
        dependencies=[Depends(require_identity)],
    )

    @router.get("", response_model=ApiResponse[list[PostData]])
    async def list_posts(
        skip: str | None = None,
        limit: str | None = None,
    ) -> ApiResponse[list[PostData]]:
        posts = await post_service.list_posts(skip=skip, limit=limit)
        return ApiResponse[list[PostData]](
            message="Posts retrieved successfully",
            data=[PostData.from_record(post) for post in posts],
        )

    @router.post("", status_code=201, response_model=ApiResponse[PostData])
    async def create_post(
        payload: PostCreateRequest,
        identity: AuthenticatedIdentity = Depends(require_identity),
    ) -> ApiResponse[PostData]:
        post = await post_service.create_post(
            author_id=identity.user_id,
            title=payload.title,
            content=payload.content,
            expires_at=payload.expires_at,
        )
        return ApiResponse[PostData](
            message="Post created successfully",
            data=PostData.from_record(post),
        )

    @router.delete("/{post_id}", response_model=ApiResponse[PostData])
    async def delete_post(
        post_id: UUID,
        identity: AuthenticatedIdentity = Depends(require_identity),
    ) -> ApiResponse[PostData]:
        post = await post_service.delete_post(author_id=identity.user_id, post_id=post_id)
        return ApiResponse[PostData](
            message="Post deleted successfully",
            data=PostData.from_record(post),
        )

    return router
