"""Activity notifications issued by the API layer.

The stores never create notifications on their own; request handlers call
``notify_activity`` after a successful like, follow or comment.
"""
from __future__ import annotations

import logging
from uuid import UUID

from snapshare.core.settings import Settings
from snapshare.repositories.base import SocialStore
from snapshare.schemas import NotificationRecord, NotificationType

logger = logging.getLogger(__name__)


def notify_activity(
    store: SocialStore,
    settings: Settings,
    *,
    recipient_id: UUID,
    actor_id: UUID,
    type: NotificationType,
    photo_id: UUID | None = None,
    comment_id: UUID | None = None,
) -> NotificationRecord | None:
    """Record a notification when enabled and the actor is not the recipient.

    Returns:
        The created notification, or None when nothing was recorded.
    """
    if not settings.notify_on_activity or recipient_id == actor_id:
        return None

    notification = store.create_notification(
        recipient_id,
        actor_id,
        type,
        photo_id=photo_id,
        comment_id=comment_id,
    )
    logger.debug("Recorded %s notification %s for %s", type.value, notification.id, recipient_id)
    return notification
