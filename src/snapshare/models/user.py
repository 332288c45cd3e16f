# src/snapshare/models/user.py
"""SQLAlchemy model for user accounts."""

from __future__ import annotations

import uuid

from sqlalchemy import Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from snapshare.db.session import Base


class User(Base):
    """Registered account with a denormalized follower counter."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Equals the number of active follows pointing at this user.
    follower_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
