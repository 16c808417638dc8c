from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load project-root .env early so both pydantic-settings and any direct os.getenv access
# see consistent values, even if the process CWD is not the repo root.
_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_IN_TEST = (os.getenv("ENVIRONMENT") or "").lower() == "test" or bool(os.getenv("PYTEST_CURRENT_TEST"))
if _ENV_PATH.exists() and not _IN_TEST:
    load_dotenv(dotenv_path=_ENV_PATH, override=True)


def _parse_origins(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple, set)):
        return [str(item).strip() for item in raw if str(item).strip()]
    s = str(raw).strip()
    if not s:
        return []
    # Support JSON array string or comma-separated string.
    if s.startswith("["):
        try:
            parsed = json.loads(s)
            items = parsed if isinstance(parsed, list) else [parsed]
        except Exception:
            items = s.split(",")
    else:
        items = s.split(",")
    return [str(item).strip() for item in items if str(item).strip()]


class Settings(BaseSettings):
    app_name: str = Field(default="SDG-8 Job Board")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=True)

    # Document paths are <data_namespace>/<app_id>/users/<identity>/<collection>.
    app_id: str = Field(default="default-app-id", validation_alias="APP_ID")
    data_namespace: str = Field(default="artifacts", validation_alias="DATA_NAMESPACE")

    # Supplied by the hosting environment. When set, the session is started from this
    # custom token instead of anonymously.
    initial_auth_token: str | None = Field(default=None, validation_alias="INITIAL_AUTH_TOKEN")

    # Document store (SQLAlchemy). DB_URL/ORM_DB_URL win over the discrete MySQL settings.
    db_url: str | None = Field(default=None, validation_alias="DB_URL")
    orm_db_url: str | None = Field(default=None, validation_alias="ORM_DB_URL")
    orm_use_mysql: bool = Field(default=False, validation_alias="ORM_USE_MYSQL")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_name: str = Field(default="sdg8_jobboard", validation_alias="DB_NAME")
    db_user: str = Field(default="root", validation_alias="DB_USER")
    db_password: str = Field(default="password", validation_alias="DB_PASSWORD")
    db_charset: str = Field(default="utf8mb4", validation_alias="DB_CHARSET")

    # Custom session tokens
    jwt_secret: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    custom_token_expire_minutes: int = Field(default=60)

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        validation_alias="CORS_ORIGINS",
    )

    # UI presentation
    message_ttl_seconds: float = Field(default=3.0, validation_alias="MESSAGE_TTL_SECONDS")
    landing_page: str = Field(default="page-home", validation_alias="LANDING_PAGE")
    auth_page: str = Field(default="page-auth", validation_alias="AUTH_PAGE")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> list[str]:
        return _parse_origins(v)

    @field_validator("initial_auth_token", mode="before")
    @classmethod
    def _blank_token_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def build_sqlalchemy_db_url(settings: Settings) -> str:
    # Prefer a dedicated ORM URL if provided.
    if settings.orm_db_url:
        return settings.orm_db_url

    if settings.db_url:
        return settings.db_url

    # In development, default to sqlite unless explicitly configured.
    if settings.environment.lower() in ("development", "test") and not settings.orm_use_mysql:
        return "sqlite:///./dev.db"

    # NOTE: password may include special chars; rely on DB_URL for complex passwords.
    return (
        f"mysql+pymysql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
        f"?charset={settings.db_charset}"
    )
