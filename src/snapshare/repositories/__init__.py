"""Storage backends implementing the ``SocialStore`` contract."""
from __future__ import annotations

from snapshare.core.settings import Settings

from .base import SocialStore
from .memory_store import MemoryStore
from .sql_store import SqlStore

__all__ = ["MemoryStore", "SocialStore", "SqlStore", "build_store"]


def build_store(settings: Settings) -> SocialStore:
    """Construct the backend selected by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        return MemoryStore()
    return SqlStore.from_url(settings.database_url_sync, echo=settings.sql_debug)
