"""Tests for environment-driven settings."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from pydantic import ValidationError

from docshub_api.settings import Settings, get_settings, reload_settings

SECRET = "settings-test-secret-0123"


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure settings cache and env overrides are cleared between tests."""

    for var in (
        "DOCSHUB_IDENTITY_HEADER",
        "DOCSHUB_LOGGING_LEVEL",
        "DOCSHUB_SHARE_TOKEN_DEFAULT_EXPIRY_HOURS",
        "DOCSHUB_SHARE_TOKEN_MAX_EXPIRY_HOURS",
        "HMAC_SECRET",
    ):
        monkeypatch.delenv(var, raising=False)
    yield
    monkeypatch.undo()
    reload_settings()


def test_settings_defaults() -> None:
    settings = get_settings()

    assert settings.identity_header == "X-User-Id"
    assert settings.share_token_default_expiry_hours == 24
    assert settings.share_token_max_expiry_hours == 720
    assert settings.logging_level == "INFO"
    assert settings.alembic_ini_path.name == "alembic.ini"


def test_missing_secret_fails_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DOCSHUB_HMAC_SECRET", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_short_secret_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, hmac_secret="too-short")


def test_secret_is_not_rendered() -> None:
    settings = Settings(_env_file=None, hmac_secret=SECRET)

    assert settings.hmac_secret_value == SECRET
    assert SECRET not in repr(settings)


def test_unprefixed_secret_alias(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DOCSHUB_HMAC_SECRET", raising=False)
    monkeypatch.setenv("HMAC_SECRET", SECRET)

    assert reload_settings().hmac_secret_value == SECRET


def test_sqlite_dsn_uses_async_driver() -> None:
    settings = Settings(
        _env_file=None,
        hmac_secret=SECRET,
        database_dsn="sqlite:////tmp/docshub-settings.sqlite",
    )

    assert settings.database_dsn == "sqlite+aiosqlite:////tmp/docshub-settings.sqlite"


def test_public_url_is_normalized() -> None:
    settings = Settings(
        _env_file=None,
        hmac_secret=SECRET,
        server_public_url="https://docs.example.com/",
    )

    assert settings.server_public_url == "https://docs.example.com"

    with pytest.raises(ValidationError):
        Settings(_env_file=None, hmac_secret=SECRET, server_public_url="docs.example.com")


def test_default_expiry_cannot_exceed_maximum(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCSHUB_SHARE_TOKEN_DEFAULT_EXPIRY_HOURS", "48")
    monkeypatch.setenv("DOCSHUB_SHARE_TOKEN_MAX_EXPIRY_HOURS", "24")

    with pytest.raises(ValidationError):
        reload_settings()


def test_identity_header_must_be_a_header_name() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, hmac_secret=SECRET, identity_header="X User")
