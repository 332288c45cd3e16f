"""User-related Pydantic schemas."""

import re
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.]{3,32}$")


class UserRecord(BaseModel):
    """User as returned by the stores."""

    id: UUID
    username: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    follower_count: int = 0
    password_hash: str = Field(default="", exclude=True, repr=False)

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    """Public profile information; never carries credentials."""

    id: UUID
    username: str
    display_name: str | None
    bio: str | None
    avatar_url: str | None
    follower_count: int

    model_config = ConfigDict(from_attributes=True)


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    username: str = Field(..., description="3-32 letters, digits, '_' or '.'")
    password: str = Field(..., min_length=8, max_length=72)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate the username alphabet and length."""
        if not _USERNAME_PATTERN.match(v):
            raise ValueError("Username must be 3-32 characters of letters, digits, '_' or '.'")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """bcrypt only accepts up to 72 bytes."""
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return v


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    username: str
    password: str


class TokenResponse(BaseModel):
    """Response returned after successful login or registration."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserResponse


class ProfileUpdateRequest(BaseModel):
    """Schema for updating profile information.

    Omitted or empty values keep the current value.
    """

    display_name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=500)
    avatar_url: str | None = Field(None, max_length=2048)
