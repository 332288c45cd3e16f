"""Photo, like and comment endpoints for the SnapShare API."""

from collections.abc import Sequence
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from snapshare.api.v1.dependencies import CurrentUserDep, SettingsDep, StoreDep
from snapshare.schemas import (
    CommentCreate,
    CommentRecord,
    NotificationType,
    PhotoCreate,
    PhotoRecord,
    ToggleResponse,
    UserRecord,
    UserResponse,
)
from snapshare.services.notifications import notify_activity

router = APIRouter(prefix="/photos", tags=["photos"])


@router.get("/", response_model=list[PhotoRecord])
def list_photos(store: StoreDep) -> Sequence[PhotoRecord]:
    """List all photos ranked by owner popularity, engagement and recency."""
    return store.get_photos()


@router.get("/feed", response_model=list[PhotoRecord])
def get_feed(current_user: CurrentUserDep, store: StoreDep) -> Sequence[PhotoRecord]:
    """Photos from followed users and the caller, newest first."""
    return store.get_feed_photos(current_user.id)


@router.get("/user/{user_id}", response_model=list[PhotoRecord])
def list_user_photos(user_id: UUID, store: StoreDep) -> Sequence[PhotoRecord]:
    """Photos published by one user, newest first."""
    return store.get_user_photos(user_id)


@router.post("/", response_model=PhotoRecord, status_code=status.HTTP_201_CREATED)
def create_photo(
    payload: PhotoCreate,
    current_user: CurrentUserDep,
    store: StoreDep,
) -> PhotoRecord:
    """Publish a photo whose image has already been uploaded."""
    return store.create_photo(current_user.id, payload.image_url, payload.caption)


@router.get("/{photo_id}", response_model=PhotoRecord)
def get_photo(photo_id: UUID, store: StoreDep) -> PhotoRecord:
    """Get a specific photo by ID."""
    photo = store.get_photo(photo_id)
    if photo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found")
    return photo


@router.delete("/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_photo(photo_id: UUID, current_user: CurrentUserDep, store: StoreDep) -> None:
    """Soft-delete one of the caller's photos."""
    store.delete_photo(current_user.id, photo_id)


@router.post("/{photo_id}/like", response_model=ToggleResponse)
def toggle_like(
    photo_id: UUID,
    current_user: CurrentUserDep,
    store: StoreDep,
    settings: SettingsDep,
) -> ToggleResponse:
    """Like the photo, or remove the like if it is already active."""
    outcome = store.like_photo(current_user.id, photo_id)
    if outcome.transition is not None and outcome.transition.activated:
        photo = store.get_photo(photo_id)
        if photo is not None:
            notify_activity(
                store,
                settings,
                recipient_id=photo.user_id,
                actor_id=current_user.id,
                type=NotificationType.LIKE,
                photo_id=photo_id,
            )
    return ToggleResponse.from_outcome(outcome)


@router.get("/{photo_id}/likes", response_model=list[UserResponse])
def list_photo_likes(photo_id: UUID, store: StoreDep) -> Sequence[UserRecord]:
    """Users who currently like the photo."""
    return store.get_liked_users(photo_id)


@router.get("/{photo_id}/comments", response_model=list[CommentRecord])
def list_comments(photo_id: UUID, store: StoreDep) -> Sequence[CommentRecord]:
    """Comments on the photo, oldest first."""
    return store.get_photo_comments(photo_id)


@router.post(
    "/{photo_id}/comments",
    response_model=CommentRecord,
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    photo_id: UUID,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    store: StoreDep,
    settings: SettingsDep,
) -> CommentRecord:
    """Comment on a photo."""
    comment = store.create_comment(current_user.id, photo_id, payload.content)
    photo = store.get_photo(photo_id)
    if photo is not None:
        notify_activity(
            store,
            settings,
            recipient_id=photo.user_id,
            actor_id=current_user.id,
            type=NotificationType.COMMENT,
            photo_id=photo_id,
            comment_id=comment.id,
        )
    return comment
