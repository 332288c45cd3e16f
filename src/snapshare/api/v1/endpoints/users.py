"""User profile and follow endpoints for the SnapShare API."""

from collections.abc import Sequence
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from snapshare.api.v1.dependencies import CurrentUserDep, SettingsDep, StoreDep
from snapshare.schemas import (
    NotificationType,
    ProfileUpdateRequest,
    ToggleResponse,
    UserRecord,
    UserResponse,
)
from snapshare.services.notifications import notify_activity

router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/me/profile", response_model=UserResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    store: StoreDep,
) -> UserRecord:
    """Update the caller's bio, avatar or display name."""
    return store.update_user_profile(
        current_user.id,
        bio=payload.bio,
        avatar_url=payload.avatar_url,
        display_name=payload.display_name,
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: UUID, store: StoreDep) -> UserRecord:
    """Get a user's public profile."""
    user = store.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post("/{user_id}/follow", response_model=ToggleResponse)
def follow_user(
    user_id: UUID,
    current_user: CurrentUserDep,
    store: StoreDep,
    settings: SettingsDep,
) -> ToggleResponse:
    """Follow the user, or stop following if the follow is already active."""
    outcome = store.follow_user(current_user.id, user_id)
    if outcome.transition is not None and outcome.transition.activated:
        notify_activity(
            store,
            settings,
            recipient_id=user_id,
            actor_id=current_user.id,
            type=NotificationType.FOLLOW,
        )
    return ToggleResponse.from_outcome(outcome)


@router.post("/{user_id}/unfollow", response_model=ToggleResponse)
def unfollow_user(user_id: UUID, current_user: CurrentUserDep, store: StoreDep) -> ToggleResponse:
    """Stop following the user; a no-op when not following."""
    return ToggleResponse.from_outcome(store.unfollow_user(current_user.id, user_id))


@router.get("/{user_id}/following")
def is_following(user_id: UUID, current_user: CurrentUserDep, store: StoreDep) -> dict[str, bool]:
    """Whether the caller currently follows the user."""
    return {"is_following": store.is_following(current_user.id, user_id)}


@router.get("/{user_id}/followers", response_model=list[UserResponse])
def list_followers(user_id: UUID, store: StoreDep) -> Sequence[UserRecord]:
    """Users currently following the user."""
    return store.get_followers(user_id)
