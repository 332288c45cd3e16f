"""Password hashing and access-token helpers."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import UUID

import bcrypt
from jose import JWTError, jwt

from snapshare.core.settings import Settings, settings as default_settings


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if ``password`` matches the stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or a password bcrypt refuses.
        return False


def create_access_token(user_id: UUID | str, settings: Settings | None = None) -> str:
    """Create JWT access token for user authentication."""
    config = settings or default_settings
    expire = datetime.now(UTC) + timedelta(minutes=config.access_token_expire_minutes)
    to_encode: dict[str, object] = {"sub": str(user_id), "exp": expire}
    encoded_jwt: str = jwt.encode(to_encode, config.secret_key, algorithm=config.jwt_algorithm)
    return encoded_jwt


def decode_access_token(token: str, settings: Settings | None = None) -> UUID:
    """Return the user id carried by a valid access token.

    Raises:
        JWTError: If the token is invalid, expired or carries no usable subject.
    """
    config = settings or default_settings
    payload = jwt.decode(token, config.secret_key, algorithms=[config.jwt_algorithm])
    subject = payload.get("sub")
    if subject is None:
        raise JWTError("Token has no subject")
    try:
        return UUID(subject)
    except ValueError as err:
        raise JWTError("Token subject is not a user id") from err
