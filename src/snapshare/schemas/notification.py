"""Notification-related Pydantic schemas."""

from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from .common import UtcDatetime


class NotificationType(StrEnum):
    """Kinds of activity a notification can report."""

    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"


class NotificationRecord(BaseModel):
    """Notification as returned by the stores and the API."""

    id: UUID
    user_id: UUID
    actor_id: UUID
    type: NotificationType
    photo_id: UUID | None = None
    comment_id: UUID | None = None
    read: bool = False
    created_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)
