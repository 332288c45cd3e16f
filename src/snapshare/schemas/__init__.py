"""Pydantic schemas shared by the stores and the API."""

from .comment import CommentCreate, CommentRecord
from .notification import NotificationRecord, NotificationType
from .photo import PhotoCreate, PhotoRecord
from .relationship import ToggleResponse
from .user import (
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenResponse,
    UserRecord,
    UserResponse,
)

__all__ = [
    "CommentCreate", "CommentRecord",
    "NotificationRecord", "NotificationType",
    "PhotoCreate", "PhotoRecord",
    "ToggleResponse",
    "LoginRequest", "ProfileUpdateRequest", "RegisterRequest", "TokenResponse",
    "UserRecord", "UserResponse",
]
