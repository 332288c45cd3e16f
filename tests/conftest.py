# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Iterator
from itertools import count
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from snapshare.core.security import create_access_token
from snapshare.core.settings import Settings
from snapshare.main import create_app
from snapshare.repositories import MemoryStore, SocialStore, SqlStore
from snapshare.schemas import PhotoRecord, UserRecord

TEST_PASSWORD = "correct-horse-battery"

_USERNAME_COUNTER = count(1)


def _test_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "secret_key": "test-secret-key",
        "storage_backend": "memory",
        "notify_on_activity": False,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture()
def test_settings() -> Settings:
    """Settings with a fixed signing key and the in-memory backend."""
    return _test_settings()


@pytest.fixture()
def memory_store() -> Iterator[MemoryStore]:
    store = MemoryStore()
    store.init()
    try:
        yield store
    finally:
        store.close()


@pytest.fixture()
def sql_store(tmp_path: Path) -> Iterator[SqlStore]:
    """SQL store on a throwaway SQLite file so worker threads share one database."""
    store = SqlStore.from_url(f"sqlite:///{tmp_path / 'snapshare.db'}")
    store.init()
    try:
        yield store
    finally:
        store.close()


@pytest.fixture(params=["memory", "sql"])
def store(request: pytest.FixtureRequest) -> SocialStore:
    """Every backend; tests using this fixture run once per backend."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture()
def make_user(store: SocialStore) -> Callable[..., UserRecord]:
    """Create users directly in the store."""

    def _make(username: str | None = None) -> UserRecord:
        name = username or f"user{next(_USERNAME_COUNTER)}"
        return store.create_user(name, "unused-hash")

    return _make


@pytest.fixture()
def make_photo(store: SocialStore) -> Callable[..., PhotoRecord]:
    """Publish a photo for ``owner``."""

    def _make(owner: UserRecord, caption: str | None = None) -> PhotoRecord:
        return store.create_photo(owner.id, "https://cdn.example.com/p.jpg", caption)

    return _make


@pytest.fixture()
def app(test_settings: Settings, store: SocialStore) -> FastAPI:
    return create_app(test_settings, store)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def notifying_client(test_settings: Settings, store: SocialStore) -> Iterator[TestClient]:
    """Client for an app that records activity notifications."""
    settings = test_settings.model_copy(update={"notify_on_activity": True})
    with TestClient(create_app(settings, store), base_url="http://test") as test_client:
        yield test_client


def _register(client: TestClient, username: str | None = None) -> dict[str, Any]:
    name = username or f"user{next(_USERNAME_COUNTER)}"
    response = client.post(
        "/api/v1/auth/register",
        json={"username": name, "password": TEST_PASSWORD},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "user": body["user"],
        "id": body["user"]["id"],
        "headers": {"Authorization": f"Bearer {body['access_token']}"},
    }


@pytest.fixture()
def auth_headers(test_settings: Settings) -> Callable[[UserRecord], dict[str, str]]:
    """Return authorization headers for a user created directly in the store."""

    def _headers(user: UserRecord) -> dict[str, str]:
        token = create_access_token(user.id, test_settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def register() -> Callable[..., dict[str, Any]]:
    """Register through the API; returns the user payload, its id and auth headers."""
    return _register
