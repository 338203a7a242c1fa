# tests/test_config.py
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from orgdir.core.config import Settings, get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("ASYNC_DATABASE_URL", raising=False)
    s = Settings(_env_file=None)
    assert s.DATABASE_URL.startswith("postgresql+asyncpg://")
    assert s.ACCOUNT_PROVIDER == "auth0"
    assert s.LOCKED_SECRET_BYTES == 24
    assert s.LOGS_DIRECTORY == Path("logs")
    assert not s.is_sqlite


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./dir.db")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("TESTING", "1")
    s = Settings(_env_file=None)
    assert s.is_sqlite
    assert s.LOG_LEVEL == "DEBUG"
    assert s.use_nullpool


def test_async_database_url_alias(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("ASYNC_DATABASE_URL", "postgresql+asyncpg://u:p@db:5432/x")
    assert Settings(_env_file=None).DATABASE_URL == "postgresql+asyncpg://u:p@db:5432/x"


def test_sync_driver_rejected():
    with pytest.raises(PydanticValidationError):
        Settings(_env_file=None, DATABASE_URL="postgresql://u:p@localhost/x")


def test_bad_log_level_rejected():
    with pytest.raises(PydanticValidationError):
        Settings(_env_file=None, LOG_LEVEL="chatty")


def test_locked_secret_bytes_bounds():
    with pytest.raises(PydanticValidationError):
        Settings(_env_file=None, LOCKED_SECRET_BYTES=4)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
