"""Tests for configuration and backend selection."""

import pytest

from snapshare.core.settings import Settings
from snapshare.repositories import MemoryStore, SqlStore, build_store


def test_defaults() -> None:
    config = Settings(_env_file=None)

    assert config.storage_backend in {"memory", "sql"}
    assert config.jwt_algorithm == "HS256"
    assert config.access_token_expire_minutes > 0


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("NOTIFY_ON_ACTIVITY", "true")

    config = Settings(_env_file=None)

    assert config.storage_backend == "memory"
    assert config.notify_on_activity is True


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("postgresql+asyncpg://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
        ("postgresql://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
        ("sqlite:///./snapshare.db", "sqlite:///./snapshare.db"),
    ],
)
def test_database_url_sync(url, expected) -> None:
    assert Settings(_env_file=None, database_url=url).database_url_sync == expected


def test_build_store_memory() -> None:
    assert isinstance(build_store(Settings(_env_file=None, storage_backend="memory")), MemoryStore)


def test_build_store_sql(tmp_path) -> None:
    config = Settings(
        _env_file=None,
        storage_backend="sql",
        database_url=f"sqlite:///{tmp_path / 'app.db'}",
    )
    store = build_store(config)
    try:
        assert isinstance(store, SqlStore)
        store.init()
        assert store.get_user_by_username("nobody") is None
    finally:
        store.close()
