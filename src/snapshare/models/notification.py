# src/snapshare/models/notification.py
"""SQLAlchemy model for notification records."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from snapshare.db.session import Base
from snapshare.db.time import utcnow


class Notification(Base):
    """Record telling ``user_id`` that ``actor_id`` did something."""

    __tablename__ = "notifications"
    __table_args__ = (
        CheckConstraint("type IN ('like', 'comment', 'follow')", name="ck_notifications_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    actor_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    photo_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    comment_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    read: Mapped[bool] = mapped_column(default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
