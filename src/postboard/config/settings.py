"""Runtime settings loaded from environment variables."""

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]


@dataclass(frozen=True)
class AuthSecrets:
    """Immutable process-wide secrets handed to auth components at construction."""

    password_secret: str
    jwt_secret: str
    token_ttl: timedelta


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    password_secret: NonEmptyStr = Field(validation_alias="PASSWORD_SECRET")
    jwt_secret: NonEmptyStr = Field(validation_alias="JWT_SECRET")
    token_ttl_days: PositiveInt = Field(default=7, validation_alias="TOKEN_TTL_DAYS")
    post_ttl_hours: PositiveInt = Field(default=24, validation_alias="POST_TTL_HOURS")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def auth_secrets(self) -> AuthSecrets:
        """Return the secrets consumed by the credential hasher and token codec."""

        return AuthSecrets(
            password_secret=self.password_secret,
            jwt_secret=self.jwt_secret,
            token_ttl=timedelta(days=self.token_ttl_days),
        )


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
