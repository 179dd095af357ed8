"""
Tests for configuration helpers
"""

import pytest

from graphql_app.config import Settings, get_database_url, to_async_url


@pytest.mark.unit
@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgresql://localhost/app", "postgresql+asyncpg://localhost/app"),
        ("postgres://u:p@db:5432/app", "postgresql+asyncpg://u:p@db:5432/app"),
        ("postgresql+asyncpg://localhost/app", "postgresql+asyncpg://localhost/app"),
        ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
    ],
)
def test_to_async_url(url, expected):
    assert to_async_url(url) == expected


@pytest.mark.unit
def test_environment_overrides_database_url(monkeypatch):
    monkeypatch.setenv("GRAPHQL_APP_DATABASE_URL", "postgresql://elsewhere/db")

    assert get_database_url() == "postgresql://elsewhere/db"


@pytest.mark.unit
def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("GRAPHQL_APP_DATABASE_POOL_SIZE", "1")
    monkeypatch.setenv("GRAPHQL_APP_EAGER_LOADING", "false")

    settings = Settings()

    assert settings.database_pool_size == 1
    assert settings.eager_loading is False
    assert settings.database_max_overflow == 0
