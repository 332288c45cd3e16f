"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .comments import router as comments_router
from .notifications import router as notifications_router
from .photos import router as photos_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "comments_router",
    "notifications_router",
    "photos_router",
    "users_router",
]
