"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    comments_router,
    notifications_router,
    photos_router,
    users_router,
)
from .router import api_router

__all__ = [
    "api_router",
    "auth_router",
    "comments_router",
    "notifications_router",
    "photos_router",
    "users_router",
]
