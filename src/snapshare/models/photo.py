# src/snapshare/models/photo.py
"""SQLAlchemy model for uploaded photos."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from snapshare.db.session import Base
from snapshare.db.time import utcnow


class Photo(Base):
    """Photo owned by a user.

    ``like_count`` and ``comment_count`` are denormalized counters maintained
    by the stores in lockstep with the like and comment rows.
    """

    __tablename__ = "photos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    caption: Mapped[str | None] = mapped_column(Text, nullable=True)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    # Soft delete; deleted photos disappear from feeds and reject new likes.
    is_deleted: Mapped[bool] = mapped_column(default=False, nullable=False)
