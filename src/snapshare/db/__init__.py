"""Database configuration and utilities."""

from .session import Base, create_db_engine, create_session_factory

__all__ = ["Base", "create_db_engine", "create_session_factory"]
