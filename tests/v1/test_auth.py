"""Tests for authentication endpoints."""

from uuid import uuid4

from fastapi import status

from snapshare.core.security import create_access_token


def test_register_returns_token_and_profile(client) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "new.user", "password": "long-enough-pw"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["username"] == "new.user"
    assert data["user"]["follower_count"] == 0
    assert "password_hash" not in data["user"]


def test_register_duplicate_username(client, register) -> None:
    register(client, "dupe_name")

    response = client.post(
        "/api/v1/auth/register",
        json={"username": "dupe_name", "password": "long-enough-pw"},
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_register_validates_payload(client) -> None:
    bad_name = client.post("/api/v1/auth/register", json={"username": "a b", "password": "long-enough-pw"})
    short_pw = client.post("/api/v1/auth/register", json={"username": "valid_name", "password": "short"})

    assert bad_name.status_code == 422
    assert short_pw.status_code == 422


def test_login_and_me(client, register) -> None:
    account = register(client, "login_user")

    response = client.post(
        "/api/v1/auth/login",
        json={"username": "login_user", "password": "correct-horse-battery"},
    )
    assert response.status_code == status.HTTP_200_OK
    token = response.json()["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["id"] == account["id"]


def test_login_rejects_bad_credentials(client, register) -> None:
    register(client, "careful")

    wrong_pw = client.post("/api/v1/auth/login", json={"username": "careful", "password": "nope-nope"})
    unknown = client.post("/api/v1/auth/login", json={"username": "ghost", "password": "nope-nope"})

    assert wrong_pw.status_code == status.HTTP_401_UNAUTHORIZED
    assert unknown.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_requires_valid_token(client) -> None:
    missing = client.get("/api/v1/auth/me")
    garbage = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert missing.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}
    assert garbage.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_for_unknown_user(client, test_settings) -> None:
    token = create_access_token(uuid4(), test_settings)
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_register_rejects_password_over_bcrypt_limit(client) -> None:
    # 40 characters but 80 bytes once encoded.
    response = client.post("/api/v1/auth/register", json={"username": "accented", "password": "é" * 40})

    assert response.status_code == 422
