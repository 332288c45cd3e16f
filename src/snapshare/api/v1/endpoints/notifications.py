"""Notification endpoints for the SnapShare API."""

from collections.abc import Sequence
from uuid import UUID

from fastapi import APIRouter

from snapshare.api.v1.dependencies import CurrentUserDep, StoreDep
from snapshare.schemas import NotificationRecord

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationRecord])
def list_notifications(current_user: CurrentUserDep, store: StoreDep) -> Sequence[NotificationRecord]:
    """The caller's notifications, newest first."""
    return store.get_user_notifications(current_user.id)


@router.post("/read-all")
def mark_all_read(current_user: CurrentUserDep, store: StoreDep) -> dict[str, int]:
    """Mark every notification of the caller as read."""
    return {"updated": store.mark_all_notifications_as_read(current_user.id)}


@router.post("/{notification_id}/read", response_model=NotificationRecord)
def mark_read(
    notification_id: UUID,
    current_user: CurrentUserDep,
    store: StoreDep,
) -> NotificationRecord:
    """Mark one of the caller's notifications as read."""
    return store.mark_notification_as_read(notification_id, current_user.id)
