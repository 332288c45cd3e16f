"""Shared API dependencies for authentication and store access."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from snapshare.core.security import decode_access_token
from snapshare.core.settings import Settings
from snapshare.repositories import SocialStore
from snapshare.schemas import UserRecord

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()


def get_store(request: Request) -> SocialStore:
    """Return the store constructed at application startup."""
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    """Return the settings the application was created with."""
    return request.app.state.settings


# Type aliases for store and settings dependencies
StoreDep = Annotated[SocialStore, Depends(get_store)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    store: StoreDep,
    settings: SettingsDep,
) -> UserRecord:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        store: Application store
        settings: Application settings holding the signing key

    Returns:
        The authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    try:
        user_id = decode_access_token(credentials.credentials, settings)
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    user = store.get_user(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[UserRecord, Depends(get_current_user)]
