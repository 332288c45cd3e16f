"""Versioned API router wiring for v1.

This module composes the version 1 API surface by including the sub-routers
that define their own endpoints. It contains no endpoint definitions.
"""
from __future__ import annotations

from typing import Final

from fastapi import APIRouter

from .endpoints import (
    auth_router,
    comments_router,
    notifications_router,
    photos_router,
    users_router,
)

# Single router for v1; sub-routers declare their own prefixes and tags
api_router: Final[APIRouter] = APIRouter(prefix="/api/v1")
api_router.include_router(auth_router)
api_router.include_router(photos_router)
api_router.include_router(comments_router)
api_router.include_router(users_router)
api_router.include_router(notifications_router)

__all__ = ["api_router"]
