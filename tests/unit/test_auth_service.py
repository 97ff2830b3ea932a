from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from postboard.application.errors import (
    BadRequestError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
)
from postboard.application.ports.user_repository_port import (
    DuplicateEmailError,
    UserCreateInput,
    UserRecord,
)
from postboard.application.services.auth_service import AuthService, UserProfile
from postboard.infrastructure.security.password_hasher import HmacPasswordHasher
from postboard.infrastructure.security.token_codec import JwtTokenCodec

JWT_SECRET = "jwt-secret-for-tests-0123456789abcdef"


class FakeUserRepository:
    def __init__(self) -> None:
        self.users_by_id: dict[UUID, UserRecord] = {}
        self.fail_with: Exception | None = None
        self.race_on_create = False

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        if self.fail_with is not None:
            raise self.fail_with
        return self.users_by_id.get(user_id)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        if self.fail_with is not None:
            raise self.fail_with
        return next((user for user in self.users_by_id.values() if user.email == email), None)

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        if self.race_on_create:
            raise DuplicateEmailError(email=payload.email)
        now = datetime.now(tz=UTC)
        user = UserRecord(
            user_id=uuid4(),
            name=payload.name,
            email=payload.email,
            password_hash=payload.password_hash,
            created_at=now,
            updated_at=now,
        )
        self.users_by_id[user.user_id] = user
        return user


def _service(users: FakeUserRepository) -> tuple[AuthService, JwtTokenCodec]:
    codec = JwtTokenCodec(secret=JWT_SECRET)
    service = AuthService(
        users=users,
        password_hasher=HmacPasswordHasher(secret="password-secret"),
        token_codec=codec,
    )
    return service, codec


@pytest.mark.asyncio
async def test_sign_up_then_sign_in_return_verifiable_tokens() -> None:
    users = FakeUserRepository()
    service, codec = _service(users)

    signup_token = await service.sign_up(name="A", email="a@x.com", password="p1")
    signin_token = await service.sign_in(email="a@x.com", password="p1")

    signup_claims = codec.verify(signup_token)
    signin_claims = codec.verify(signin_token)
    assert signup_claims.email == "a@x.com"
    assert signup_claims.id == signin_claims.id
    assert signup_claims.verification_tag == signin_claims.verification_tag


@pytest.mark.asyncio
async def test_sign_up_stores_digest_never_plaintext() -> None:
    users = FakeUserRepository()
    service, _ = _service(users)

    await service.sign_up(name="  A ", email=" a@x.com ", password="p1")

    (stored,) = users.users_by_id.values()
    assert stored.name == "A"
    assert stored.email == "a@x.com"
    assert stored.password_hash == HmacPasswordHasher(secret="password-secret").digest("p1")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("name", "email", "password"),
    [(None, "a@x.com", "p1"), ("A", None, "p1"), ("A", "a@x.com", None), ("  ", "a@x.com", "p")],
)
async def test_sign_up_missing_field_is_bad_request(
    name: str | None,
    email: str | None,
    password: str | None,
) -> None:
    service, _ = _service(FakeUserRepository())

    with pytest.raises(BadRequestError, match="Name, email, and password are required"):
        await service.sign_up(name=name, email=email, password=password)


@pytest.mark.asyncio
async def test_sign_up_twice_with_same_email_conflicts() -> None:
    service, _ = _service(FakeUserRepository())
    await service.sign_up(name="A", email="a@x.com", password="p1")

    with pytest.raises(ConflictError, match="User already exists") as exc_info:
        await service.sign_up(name="B", email="a@x.com", password="other")

    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_sign_up_losing_storage_race_is_conflict() -> None:
    users = FakeUserRepository()
    users.race_on_create = True
    service, _ = _service(users)

    with pytest.raises(ConflictError):
        await service.sign_up(name="A", email="a@x.com", password="p1")


@pytest.mark.asyncio
async def test_sign_in_failures_share_one_message() -> None:
    service, _ = _service(FakeUserRepository())
    await service.sign_up(name="X", email="x@example.com", password="right")

    with pytest.raises(UnauthorizedError) as wrong_password:
        await service.sign_in(email="x@example.com", password="wrong")
    with pytest.raises(UnauthorizedError) as unknown_email:
        await service.sign_in(email="nonexistent@example.com", password="anything")

    assert wrong_password.value.message == "Invalid email or password"
    assert unknown_email.value.message == wrong_password.value.message


@pytest.mark.asyncio
async def test_sign_in_missing_field_is_bad_request() -> None:
    service, _ = _service(FakeUserRepository())

    with pytest.raises(BadRequestError, match="Email and password are required"):
        await service.sign_in(email="a@x.com", password="")


@pytest.mark.asyncio
async def test_re_verify_accepts_fresh_token_tag() -> None:
    service, codec = _service(FakeUserRepository())
    claims = codec.verify(await service.sign_up(name="A", email="a@x.com", password="p1"))

    assert await service.re_verify(user_id=claims.id, presented_tag=claims.verification_tag)


@pytest.mark.asyncio
async def test_password_change_invalidates_previous_tokens() -> None:
    users = FakeUserRepository()
    service, codec = _service(users)
    claims = codec.verify(await service.sign_up(name="A", email="a@x.com", password="p1"))
    user = users.users_by_id[UUID(claims.id)]
    users.users_by_id[user.user_id] = replace(
        user,
        password_hash=HmacPasswordHasher(secret="password-secret").digest("p2"),
    )

    with pytest.raises(UnauthorizedError, match="Invalid token"):
        await service.re_verify(user_id=claims.id, presented_tag=claims.verification_tag)


@pytest.mark.asyncio
async def test_email_change_invalidates_previous_tokens() -> None:
    users = FakeUserRepository()
    service, codec = _service(users)
    claims = codec.verify(await service.sign_up(name="A", email="a@x.com", password="p1"))
    user = users.users_by_id[UUID(claims.id)]
    users.users_by_id[user.user_id] = replace(user, email="new@x.com")

    with pytest.raises(UnauthorizedError):
        await service.re_verify(user_id=claims.id, presented_tag=claims.verification_tag)


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", [str(uuid4()), "not-a-uuid"])
async def test_re_verify_unknown_user_is_not_found(user_id: str) -> None:
    service, _ = _service(FakeUserRepository())

    with pytest.raises(NotFoundError, match="User not found"):
        await service.re_verify(user_id=user_id, presented_tag="tag")


@pytest.mark.asyncio
async def test_get_user_profile_returns_name_and_email() -> None:
    service, codec = _service(FakeUserRepository())
    claims = codec.verify(await service.sign_up(name="A", email="a@x.com", password="p1"))

    profile = await service.get_user_profile(user_id=claims.id)

    assert profile == UserProfile(name="A", email="a@x.com")


@pytest.mark.asyncio
async def test_unexpected_storage_failure_is_wrapped_as_internal() -> None:
    users = FakeUserRepository()
    users.fail_with = RuntimeError("database unavailable")
    service, _ = _service(users)

    with pytest.raises(InternalError, match="Internal server error") as exc_info:
        await service.sign_in(email="a@x.com", password="p1")

    assert exc_info.value.status_code == 500
    assert isinstance(exc_info.value.__cause__, RuntimeError)
