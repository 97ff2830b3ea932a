"""FastAPI router for sign-up, sign-in and profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from postboard.application.dto.auth_models import (
    SignInRequest,
    SignUpRequest,
    TokenData,
    UserProfileData,
)
from postboard.application.dto.response_models import ApiResponse
from postboard.application.services.auth_service import AuthService
from postboard.infrastructure.http.auth_guard import (
    AuthenticatedIdentity,
    AuthGuard,
    build_identity_dependency,
)


def build_auth_router(*, auth_service: AuthService, auth_guard: AuthGuard) -> APIRouter:
    """Build router exposing `/auth` endpoints."""

    router = APIRouter(prefix="/auth", tags=["auth"])
    require_identity = build_identity_dependency(auth_guard)

    @router.post("/signup", status_code=201, response_model=ApiResponse[TokenData])
    async def sign_up(payload: SignUpRequest) -> ApiResponse[TokenData]:
        token = await auth_service.sign_up(
            name=payload.name,
            email=payload.email,
            password=payload.password,
        )
        return ApiResponse[TokenData](
            message="User signed up successfully",
            data=TokenData(token=token),
        )

    @router.post("/signin", response_model=ApiResponse[TokenData])
    async def sign_in(payload: SignInRequest) -> ApiResponse[TokenData]:
        token = await auth_service.sign_in(email=payload.email, password=payload.password)
        return ApiResponse[TokenData](
            message="User authenticated successfully",
            data=TokenData(token=token),
        )

    @router.get("/", response_model=ApiResponse[UserProfileData])
    async def get_profile(
        identity: AuthenticatedIdentity = Depends(require_identity),
    ) -> ApiResponse[UserProfileData]:
        profile = await auth_service.get_user_profile(user_id=identity.id)
        return ApiResponse[UserProfileData](
            message="User profile retrieved successfully",
            data=UserProfileData(name=profile.name, email=profile.email),
        )

    return router
