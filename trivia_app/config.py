"""Runtime settings loaded from the environment (prefix ``TRIVIA_``) or a ``.env`` file."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from trivia_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT, TOKEN_COOKIE_NAME
from trivia_app.core.question_pool import DEFAULT_CATALOG_PATH


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TRIVIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: SecretStr
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = Field(default=7, gt=0)
    cookie_name: str = TOKEN_COOKIE_NAME
    cookie_secure: bool = False

    questions_path: Path = DEFAULT_CATALOG_PATH
    random_seed: int | None = None

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
