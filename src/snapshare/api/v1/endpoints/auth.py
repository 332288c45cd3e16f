"""Authentication endpoints for the SnapShare API."""

from fastapi import APIRouter, HTTPException, status

from snapshare.api.v1.dependencies import CurrentUserDep, SettingsDep, StoreDep
from snapshare.core.security import create_access_token, hash_password, verify_password
from snapshare.schemas import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserRecord,
    UserResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: UserRecord, settings: SettingsDep) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id, settings),
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, store: StoreDep, settings: SettingsDep) -> TokenResponse:
    """Create an account and return an access token for it."""
    password_hash = hash_password(payload.password)
    user = store.create_user(payload.username, password_hash)
    return _token_response(user, settings)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, store: StoreDep, settings: SettingsDep) -> TokenResponse:
    """Exchange username and password for an access token."""
    user = store.get_user_by_username(payload.username)
    if user is None or not verify_password(payload.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    return _token_response(user, settings)


@router.get("/me", response_model=UserResponse)
def read_me(current_user: CurrentUserDep) -> UserRecord:
    """Return the authenticated user's profile."""
    return current_user
