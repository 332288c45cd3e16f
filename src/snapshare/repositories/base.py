"""Storage contract shared by the in-memory and SQL backends.

``SocialStore`` implements the public operations once on top of a small set of
backend primitives, so both backends run the same relationship state machine
and the same validation. Backends only decide how a transition and its counter
delta are applied atomically.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Final
from uuid import UUID

from snapshare.errors import ValidationError
from snapshare.schemas import (
    CommentRecord,
    NotificationRecord,
    NotificationType,
    PhotoRecord,
    UserRecord,
)
from snapshare.services.relationships import (
    RelationshipKind,
    RelationshipState,
    ToggleOutcome,
    Transition,
    plan_set,
    plan_toggle,
)

__all__ = ["COUNTER_FIELDS", "Planner", "SocialStore", "parse_id"]

logger = logging.getLogger(__name__)

Planner = Callable[[RelationshipState], Transition | None]

# Denormalized counters each entity exposes to ``adjust_counter``.
COUNTER_FIELDS: Final[dict[str, frozenset[str]]] = {
    "user": frozenset({"follower_count"}),
    "photo": frozenset({"like_count", "comment_count"}),
    "comment": frozenset({"like_count"}),
}


def parse_id(value: UUID | str, label: str = "id") -> UUID:
    """Return ``value`` as a UUID or raise ``ValidationError``."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"Malformed {label}: {value!r}")
    try:
        return UUID(value)
    except ValueError as err:
        raise ValidationError(f"Malformed {label}: {value!r}") from err


class SocialStore(ABC):
    """Entity store plus relationship toggle engine and counter synchronizer."""

    # --- Lifecycle ------------------------------------------------------------------
    def init(self) -> None:
        """Prepare the backend for use."""

    def close(self) -> None:
        """Release backend resources."""

    # --- Relationship toggles -------------------------------------------------------
    def toggle(
        self,
        kind: RelationshipKind,
        actor_id: UUID | str,
        target_id: UUID | str,
    ) -> ToggleOutcome:
        """Flip the (actor, target) relationship and its target counter."""
        return self._run(kind, actor_id, target_id, plan_toggle)

    def set_relationship(
        self,
        kind: RelationshipKind,
        actor_id: UUID | str,
        target_id: UUID | str,
        active: bool,
    ) -> ToggleOutcome:
        """Drive the relationship to ``active``, doing nothing if it is already there."""
        return self._run(kind, actor_id, target_id, lambda state: plan_set(state, active))

    def like_photo(self, actor_id: UUID | str, photo_id: UUID | str) -> ToggleOutcome:
        return self.toggle(RelationshipKind.LIKE, actor_id, photo_id)

    def follow_user(self, actor_id: UUID | str, target_user_id: UUID | str) -> ToggleOutcome:
        return self.toggle(RelationshipKind.FOLLOW, actor_id, target_user_id)

    def unfollow_user(self, actor_id: UUID | str, target_user_id: UUID | str) -> ToggleOutcome:
        return self.set_relationship(RelationshipKind.FOLLOW, actor_id, target_user_id, False)

    def like_comment(self, actor_id: UUID | str, comment_id: UUID | str) -> ToggleOutcome:
        return self.toggle(RelationshipKind.COMMENT_LIKE, actor_id, comment_id)

    def unlike_comment(self, actor_id: UUID | str, comment_id: UUID | str) -> ToggleOutcome:
        return self.set_relationship(RelationshipKind.COMMENT_LIKE, actor_id, comment_id, False)

    def relationship_state(
        self,
        kind: RelationshipKind,
        actor_id: UUID | str,
        target_id: UUID | str,
    ) -> RelationshipState:
        """Return the current state of the (actor, target) relationship."""
        return self._relationship_state(
            kind,
            parse_id(actor_id, "actor id"),
            parse_id(target_id, f"{kind.target_entity} id"),
        )

    def is_following(self, follower_id: UUID | str, following_id: UUID | str) -> bool:
        state = self.relationship_state(RelationshipKind.FOLLOW, follower_id, following_id)
        return state.is_active

    def _run(
        self,
        kind: RelationshipKind,
        actor_id: UUID | str,
        target_id: UUID | str,
        planner: Planner,
    ) -> ToggleOutcome:
        actor = parse_id(actor_id, "actor id")
        target = parse_id(target_id, f"{kind.target_entity} id")
        if kind is RelationshipKind.FOLLOW and actor == target:
            raise ValidationError("Users cannot follow themselves")

        outcome = self._apply_relationship(kind, actor, target, planner)
        if outcome.transition is not None:
            logger.debug(
                "%s %s -> %s: %s -> %s (%s=%d)",
                kind.label,
                actor,
                target,
                outcome.transition.from_state.value,
                outcome.transition.to_state.value,
                kind.counter_field,
                outcome.count,
            )
        return outcome

    # --- Counter synchronizer -------------------------------------------------------
    def adjust_counter(self, entity: str, entity_id: UUID | str, field: str, delta: int) -> int:
        """Atomically add ``delta`` to a denormalized counter, clamping at zero.

        Returns:
            The counter value after the adjustment.

        Raises:
            ValidationError: If the entity or field has no counter.
            NotFoundError: If the entity does not exist.
        """
        allowed = COUNTER_FIELDS.get(entity)
        if allowed is None or field not in allowed:
            raise ValidationError(f"{entity}.{field} is not a counter")
        return self._adjust_counter(entity, parse_id(entity_id, f"{entity} id"), field, delta)

    # --- Notifications --------------------------------------------------------------
    def create_notification(
        self,
        user_id: UUID | str,
        actor_id: UUID | str,
        type: NotificationType | str,
        photo_id: UUID | str | None = None,
        comment_id: UUID | str | None = None,
    ) -> NotificationRecord:
        """Insert a notification record; delivery is someone else's concern."""
        try:
            kind = NotificationType(type)
        except ValueError as err:
            raise ValidationError(f"Unknown notification type: {type!r}") from err

        photo = parse_id(photo_id, "photo id") if photo_id is not None else None
        comment = parse_id(comment_id, "comment id") if comment_id is not None else None
        if kind is NotificationType.FOLLOW and (photo or comment):
            raise ValidationError("Follow notifications do not reference photos or comments")
        if kind is NotificationType.LIKE and (photo is None or comment is not None):
            raise ValidationError("Like notifications reference exactly one photo")
        if kind is NotificationType.COMMENT and (photo is None or comment is None):
            raise ValidationError("Comment notifications reference a photo and a comment")

        return self._insert_notification(
            parse_id(user_id, "user id"),
            parse_id(actor_id, "actor id"),
            kind,
            photo,
            comment,
        )

    # --- Backend primitives ---------------------------------------------------------
    @abstractmethod
    def _apply_relationship(
        self,
        kind: RelationshipKind,
        actor_id: UUID,
        target_id: UUID,
        planner: Planner,
    ) -> ToggleOutcome:
        """Check existence, plan from the current state, then apply row and counter together."""

    @abstractmethod
    def _relationship_state(
        self,
        kind: RelationshipKind,
        actor_id: UUID,
        target_id: UUID,
    ) -> RelationshipState:
        ...

    @abstractmethod
    def _adjust_counter(self, entity: str, entity_id: UUID, field: str, delta: int) -> int:
        ...

    @abstractmethod
    def _insert_notification(
        self,
        user_id: UUID,
        actor_id: UUID,
        type: NotificationType,
        photo_id: UUID | None,
        comment_id: UUID | None,
    ) -> NotificationRecord:
        ...

    # --- Users ----------------------------------------------------------------------
    @abstractmethod
    def create_user(self, username: str, password_hash: str) -> UserRecord:
        """Insert a user; raises ``ConflictError`` for a taken username."""

    @abstractmethod
    def get_user(self, user_id: UUID | str) -> UserRecord | None:
        ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> UserRecord | None:
        ...

    @abstractmethod
    def update_user_profile(
        self,
        user_id: UUID | str,
        bio: str | None = None,
        avatar_url: str | None = None,
        display_name: str | None = None,
    ) -> UserRecord:
        """Update profile fields; empty values keep the previous value."""

    @abstractmethod
    def get_followers(self, user_id: UUID | str) -> Sequence[UserRecord]:
        """Users actively following ``user_id``."""

    @abstractmethod
    def get_liked_users(self, photo_id: UUID | str) -> Sequence[UserRecord]:
        """Users with an active like on ``photo_id``."""

    @abstractmethod
    def get_comment_likers(self, comment_id: UUID | str) -> Sequence[UserRecord]:
        """Users with an active like on ``comment_id``."""

    # --- Photos ---------------------------------------------------------------------
    @abstractmethod
    def create_photo(
        self,
        user_id: UUID | str,
        image_url: str,
        caption: str | None = None,
    ) -> PhotoRecord:
        ...

    @abstractmethod
    def get_photo(self, photo_id: UUID | str) -> PhotoRecord | None:
        """Return a non-deleted photo."""

    @abstractmethod
    def delete_photo(self, actor_id: UUID | str, photo_id: UUID | str) -> PhotoRecord:
        """Soft-delete a photo owned by ``actor_id``."""

    @abstractmethod
    def get_photos(self) -> Sequence[PhotoRecord]:
        """All visible photos ranked by owner popularity then engagement then recency."""

    @abstractmethod
    def get_user_photos(self, user_id: UUID | str) -> Sequence[PhotoRecord]:
        ...

    @abstractmethod
    def get_feed_photos(self, user_id: UUID | str) -> Sequence[PhotoRecord]:
        """Visible photos of followed users and the caller, newest first."""

    # --- Comments -------------------------------------------------------------------
    @abstractmethod
    def create_comment(
        self,
        user_id: UUID | str,
        photo_id: UUID | str,
        content: str,
    ) -> CommentRecord:
        """Insert a comment and bump the photo's ``comment_count``."""

    @abstractmethod
    def get_comment(self, comment_id: UUID | str) -> CommentRecord | None:
        ...

    @abstractmethod
    def get_photo_comments(self, photo_id: UUID | str) -> Sequence[CommentRecord]:
        """Comments on a photo, oldest first."""

    # --- Notification queries -------------------------------------------------------
    @abstractmethod
    def get_user_notifications(self, user_id: UUID | str) -> Sequence[NotificationRecord]:
        """Notifications addressed to ``user_id``, newest first."""

    @abstractmethod
    def mark_notification_as_read(
        self,
        notification_id: UUID | str,
        user_id: UUID | str,
    ) -> NotificationRecord:
        """Mark one of the recipient's notifications read."""

    @abstractmethod
    def mark_all_notifications_as_read(self, user_id: UUID | str) -> int:
        """Mark every notification of ``user_id`` read; returns how many changed."""
