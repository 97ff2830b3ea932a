"""api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from datetime import timedelta

import uvicorn
from fastapi import FastAPI

from postboard.application.dto.response_models import ApiResponse
from postboard.application.services.auth_service import AuthService
from postboard.application.services.post_service import PostService
from postboard.config.settings import AuthSecrets, load_settings
from postboard.infrastructure.db.post_repository import SqlAlchemyPostRepository
from postboard.infrastructure.db.session import create_session_factory
from postboard.infrastructure.db.user_repository import SqlAlchemyUserRepository
from postboard.infrastructure.http.auth_guard import AuthGuard
from postboard.infrastructure.http.auth_router import build_auth_router
from postboard.infrastructure.http.error_handlers import register_exception_handlers
from postboard.infrastructure.http.post_router import build_post_router
from postboard.infrastructure.logging import configure_logging
from postboard.infrastructure.security.password_hasher import HmacPasswordHasher
from postboard.infrastructure.security.token_codec import JwtTokenCodec

API_HOST = "0.0.0.0"
API_PORT = 8000
logger = logging.getLogger(__name__)


def build_token_codec(secrets: AuthSecrets) -> JwtTokenCodec:
    """Build JWT codec from configured signing secret and lifetime."""

    return JwtTokenCodec(secret=secrets.jwt_secret, token_ttl=secrets.token_ttl)


def build_auth_service(
    database_url: str,
    *,
    secrets: AuthSecrets,
    token_codec: JwtTokenCodec | None = None,
) -> AuthService:
    """Build authentication service with SQLAlchemy-backed dependencies."""

    session_factory = create_session_factory(database_url)
    return AuthService(
        users=SqlAlchemyUserRepository(session_factory),
        password_hasher=HmacPasswordHasher(secret=secrets.password_secret),
        token_codec=token_codec or build_token_codec(secrets),
    )


def build_post_service(database_url: str, *, post_ttl: timedelta) -> PostService:
    """Build post service with SQLAlchemy-backed dependencies."""

    session_factory = create_session_factory(database_url)
    return PostService(posts=SqlAlchemyPostRepository(session_factory), post_ttl=post_ttl)


def create_app(
    *,
    auth_service: AuthService | None = None,
    post_service: PostService | None = None,
    token_codec: JwtTokenCodec | None = None,
) -> FastAPI:
    """Create FastAPI app exposing auth and post routes.

    Collaborators not passed in are built from environment settings, so a
    missing secret or database URL fails here, before the app serves traffic.
    """

    if auth_service is None or post_service is None or token_codec is None:
        settings = load_settings()
        configure_logging(level=settings.log_level)
        secrets = settings.auth_secrets()
        if token_codec is None:
            token_codec = build_token_codec(secrets)
        if auth_service is None:
            auth_service = build_auth_service(
                settings.database_url,
                secrets=secrets,
                token_codec=token_codec,
            )
        if post_service is None:
            post_service = build_post_service(
                settings.database_url,
                post_ttl=timedelta(hours=settings.post_ttl_hours),
            )
        logger.info("api_settings_loaded token_ttl_days=%s", settings.token_ttl_days)

    auth_guard = AuthGuard(token_codec=token_codec, auth_service=auth_service)

    app = FastAPI(title="postboard")
    register_exception_handlers(app)
    app.include_router(build_auth_router(auth_service=auth_service, auth_guard=auth_guard))
    app.include_router(build_post_router(post_service=post_service, auth_guard=auth_guard))

    @app.get("/", response_model=ApiResponse[dict[str, str]])
    async def welcome() -> ApiResponse[dict[str, str]]:
        return ApiResponse[dict[str, str]](message="Welcome to the API")

    return app


def run_asgi_server(*, host: str = API_HOST, port: int = API_PORT) -> None:
    """Run the API as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
