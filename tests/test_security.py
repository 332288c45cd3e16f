"""Tests for password hashing and access tokens."""

from uuid import uuid4

import pytest
from jose import JWTError, jwt

from snapshare.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_round_trip() -> None:
    stored = hash_password("s3cret-password")

    assert stored.startswith("$2b$")
    assert verify_password("s3cret-password", stored)
    assert not verify_password("wrong-password", stored)


def test_hashes_are_salted() -> None:
    assert hash_password("same-password") != hash_password("same-password")


@pytest.mark.parametrize("stored", ["", "plain", "$2b$12$tooshort"])
def test_malformed_hashes_never_verify(stored) -> None:
    assert not verify_password("anything", stored)


def test_token_round_trip(test_settings) -> None:
    user_id = uuid4()
    token = create_access_token(user_id, test_settings)

    assert decode_access_token(token, test_settings) == user_id


def test_token_signed_with_other_key_is_rejected(test_settings) -> None:
    token = create_access_token(uuid4(), test_settings)
    other = test_settings.model_copy(update={"secret_key": "another-key"})

    with pytest.raises(JWTError):
        decode_access_token(token, other)


def test_token_without_user_subject_is_rejected(test_settings) -> None:
    token = jwt.encode({"sub": "not-a-uuid"}, test_settings.secret_key, algorithm=test_settings.jwt_algorithm)

    with pytest.raises(JWTError):
        decode_access_token(token, test_settings)


def test_expired_token_is_rejected(test_settings) -> None:
    expired = test_settings.model_copy(update={"access_token_expire_minutes": -5})
    token = create_access_token(uuid4(), expired)

    with pytest.raises(JWTError):
        decode_access_token(token, test_settings)
