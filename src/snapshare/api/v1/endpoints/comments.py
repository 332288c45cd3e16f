"""Comment-like endpoints for the SnapShare API."""

from collections.abc import Sequence
from uuid import UUID

from fastapi import APIRouter

from snapshare.api.v1.dependencies import CurrentUserDep, StoreDep
from snapshare.schemas import ToggleResponse, UserRecord, UserResponse

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("/{comment_id}/like", response_model=ToggleResponse)
def like_comment(comment_id: UUID, current_user: CurrentUserDep, store: StoreDep) -> ToggleResponse:
    """Like the comment, or remove the like if it is already active."""
    return ToggleResponse.from_outcome(store.like_comment(current_user.id, comment_id))


@router.post("/{comment_id}/unlike", response_model=ToggleResponse)
def unlike_comment(comment_id: UUID, current_user: CurrentUserDep, store: StoreDep) -> ToggleResponse:
    """Remove the caller's like; a no-op when there is none."""
    return ToggleResponse.from_outcome(store.unlike_comment(current_user.id, comment_id))


@router.get("/{comment_id}/likes", response_model=list[UserResponse])
def list_comment_likes(comment_id: UUID, store: StoreDep) -> Sequence[UserRecord]:
    """Users who currently like the comment."""
    return store.get_comment_likers(comment_id)
