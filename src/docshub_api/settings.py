"""Runtime configuration, read from ``DOCSHUB_*`` environment variables and ``.env``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

_PACKAGE_DIR = Path(__file__).resolve().parent


def _find_alembic_root() -> Path:
    """Directory holding ``alembic.ini`` and ``migrations/``.

    Checked in order: the source checkout (``<root>/src/docshub_api``), then the
    working directory. Falls back to the checkout root.
    """

    checkout = _PACKAGE_DIR.parents[1]
    for root in (checkout, Path.cwd().resolve()):
        if (root / "alembic.ini").is_file() and (root / "migrations").is_dir():
            return root
    return checkout


_ALEMBIC_ROOT = _find_alembic_root()

DEFAULT_PUBLIC_URL = "http://localhost:8000"
DEFAULT_IDENTITY_HEADER = "X-User-Id"
DEFAULT_DB_FILENAME = "docshub.sqlite"
DEFAULT_SQLITE_PATH = Path("data") / "db" / DEFAULT_DB_FILENAME

MIN_HMAC_SECRET_LENGTH = 16


class Settings(BaseSettings):
    """Settings for the DocsHub API process."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSHUB_",
        env_file=".env",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "DocsHub API"
    app_version: str = "0.1.0"
    debug: bool = False
    logging_level: str = "INFO"

    api_docs_enabled: bool = False
    docs_url: str = "/docs"
    redoc_url: str = "/redoc"
    openapi_url: str = "/openapi.json"

    server_host: str = "localhost"
    server_port: int = Field(8000, ge=1, le=65535)
    server_public_url: str = DEFAULT_PUBLIC_URL

    # Async DSN; a plain sqlite:// DSN is switched to the aiosqlite driver.
    database_dsn: str | None = None
    database_echo: bool = False
    alembic_ini_path: Path = _ALEMBIC_ROOT / "alembic.ini"
    alembic_migrations_dir: Path = _ALEMBIC_ROOT / "migrations"

    # Header carrying the caller's user id, set by the upstream identity provider.
    identity_header: str = DEFAULT_IDENTITY_HEADER

    hmac_secret: SecretStr = Field(
        validation_alias=AliasChoices("DOCSHUB_HMAC_SECRET", "HMAC_SECRET", "hmac_secret"),
        description="Signs share-link tokens. Changing it invalidates every issued link.",
    )
    share_token_default_expiry_hours: float = Field(24, gt=0)
    share_token_max_expiry_hours: float = Field(720, gt=0)

    @field_validator("logging_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> str:
        return str(value or "").strip().upper() or "INFO"

    @field_validator("server_public_url", mode="before")
    @classmethod
    def _check_public_url(cls, value: Any) -> str:
        text = str(value).strip()
        parsed = urlparse(text)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("DOCSHUB_SERVER_PUBLIC_URL must be an http(s) URL")
        return text.rstrip("/")

    @field_validator("identity_header", mode="before")
    @classmethod
    def _check_identity_header(cls, value: Any) -> str:
        name = str(value or "").strip()
        if not name or any(char.isspace() for char in name):
            raise ValueError("DOCSHUB_IDENTITY_HEADER must be a non-empty header name")
        return name

    @field_validator("hmac_secret", mode="before")
    @classmethod
    def _check_hmac_secret(cls, value: Any) -> SecretStr:
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        secret = str(value or "").strip()
        if len(secret) < MIN_HMAC_SECRET_LENGTH:
            raise ValueError(
                f"DOCSHUB_HMAC_SECRET must be set to at least {MIN_HMAC_SECRET_LENGTH} characters"
            )
        return SecretStr(secret)

    @model_validator(mode="after")
    def _finalize(self) -> Settings:
        self.alembic_ini_path = self.alembic_ini_path.expanduser().resolve()
        self.alembic_migrations_dir = self.alembic_migrations_dir.expanduser().resolve()

        if self.database_dsn:
            url = make_url(self.database_dsn)
        else:
            url = make_url(f"sqlite:///{DEFAULT_SQLITE_PATH.resolve().as_posix()}")
        if url.get_backend_name() == "sqlite":
            url = url.set(drivername="sqlite+aiosqlite")
        self.database_dsn = url.render_as_string(hide_password=False)

        if self.share_token_default_expiry_hours > self.share_token_max_expiry_hours:
            raise ValueError(
                "DOCSHUB_SHARE_TOKEN_DEFAULT_EXPIRY_HOURS must not exceed "
                "DOCSHUB_SHARE_TOKEN_MAX_EXPIRY_HOURS"
            )
        return self

    @property
    def hmac_secret_value(self) -> str:
        return self.hmac_secret.get_secret_value()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # pyright: ignore[reportCallIssue]


def reload_settings() -> Settings:
    """Re-read the environment, replacing the cached settings."""

    get_settings.cache_clear()
    return get_settings()


__all__ = [
    "DEFAULT_DB_FILENAME",
    "DEFAULT_IDENTITY_HEADER",
    "DEFAULT_PUBLIC_URL",
    "Settings",
    "get_settings",
    "reload_settings",
]
