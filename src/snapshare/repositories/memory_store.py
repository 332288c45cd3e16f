"""In-process table-backed store.

Tables are dictionaries of mutable dataclass records. Every mutation of a
counter or of a relationship row happens while holding the target entity's
lock, so concurrent toggles on the same photo, user or comment are serialized
and never lose an update.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock, RLock
from typing import Any
from uuid import UUID

from snapshare.db.time import utcnow
from snapshare.errors import ConflictError, NotFoundError, ValidationError
from snapshare.repositories.base import Planner, SocialStore, parse_id
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
    state_of,
)

__all__ = ["MemoryStore"]

logger = logging.getLogger(__name__)


def _newest_first(rows: list[Any]) -> list[Any]:
    """Sort rows by ``created_at`` descending; ties keep the later insert first."""
    return sorted(reversed(rows), key=lambda row: row.created_at, reverse=True)


@dataclass(slots=True)
class _UserRow:
    id: UUID
    username: str
    password_hash: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    follower_count: int = 0


@dataclass(slots=True)
class _PhotoRow:
    id: UUID
    user_id: UUID
    image_url: str
    caption: str | None
    like_count: int = 0
    comment_count: int = 0
    created_at: datetime = field(default_factory=utcnow)
    is_deleted: bool = False


@dataclass(slots=True)
class _CommentRow:
    id: UUID
    user_id: UUID
    photo_id: UUID
    content: str
    like_count: int = 0
    created_at: datetime = field(default_factory=utcnow)


@dataclass(slots=True)
class _RelationRow:
    id: UUID
    actor_id: UUID
    target_id: UUID
    is_deleted: bool = False


@dataclass(slots=True)
class _NotificationRow:
    id: UUID
    user_id: UUID
    actor_id: UUID
    type: NotificationType
    photo_id: UUID | None
    comment_id: UUID | None
    read: bool = False
    created_at: datetime = field(default_factory=utcnow)


class MemoryStore(SocialStore):
    """``SocialStore`` backed by dictionaries held in process memory."""

    def __init__(self) -> None:
        self._users: dict[UUID, _UserRow] = {}
        self._photos: dict[UUID, _PhotoRow] = {}
        self._comments: dict[UUID, _CommentRow] = {}
        self._notifications: dict[UUID, _NotificationRow] = {}
        # (actor_id, target_id) -> row; one row per pair for the lifetime of the store.
        self._relations: dict[RelationshipKind, dict[tuple[UUID, UUID], _RelationRow]] = {
            kind: {} for kind in RelationshipKind
        }
        self._entity_locks: dict[tuple[str, UUID], RLock] = {}
        self._registry_lock = Lock()
        self._write_lock = Lock()

    # --- Locking --------------------------------------------------------------------
    def _lock_for(self, entity: str, entity_id: UUID) -> RLock:
        key = (entity, entity_id)
        with self._registry_lock:
            lock = self._entity_locks.get(key)
            if lock is None:
                lock = self._entity_locks[key] = RLock()
            return lock

    def _table(self, entity: str) -> dict[UUID, Any]:
        if entity == "user":
            return self._users
        if entity == "photo":
            return self._photos
        if entity == "comment":
            return self._comments
        raise ValidationError(f"Unknown entity: {entity}")

    def _live_target(self, kind: RelationshipKind, target_id: UUID) -> object | None:
        row = self._table(kind.target_entity).get(target_id)
        if row is None or getattr(row, "is_deleted", False):
            return None
        if kind is RelationshipKind.COMMENT_LIKE:
            photo = self._photos.get(row.photo_id)
            if photo is None or photo.is_deleted:
                return None
        return row

    # --- Relationship primitives ----------------------------------------------------
    def _apply_relationship(
        self,
        kind: RelationshipKind,
        actor_id: UUID,
        target_id: UUID,
        planner: Planner,
    ) -> ToggleOutcome:
        if actor_id not in self._users:
            raise NotFoundError("user", actor_id)

        with self._lock_for(kind.target_entity, target_id):
            target = self._live_target(kind, target_id)
            if target is None:
                raise NotFoundError(kind.target_entity, target_id)

            rows = self._relations[kind]
            row = rows.get((actor_id, target_id))
            state = state_of(row.is_deleted if row is not None else None)
            transition = planner(state)
            if transition is None:
                count = getattr(target, kind.counter_field)
                return ToggleOutcome(kind, target_id, state, count)

            if row is None:
                rows[(actor_id, target_id)] = _RelationRow(uuid.uuid4(), actor_id, target_id)
            else:
                row.is_deleted = not transition.activated
            count = self._adjust_counter(
                kind.target_entity,
                target_id,
                kind.counter_field,
                transition.delta,
            )
            return ToggleOutcome(kind, target_id, transition.to_state, count, transition)

    def _relationship_state(
        self,
        kind: RelationshipKind,
        actor_id: UUID,
        target_id: UUID,
    ) -> RelationshipState:
        row = self._relations[kind].get((actor_id, target_id))
        return state_of(row.is_deleted if row is not None else None)

    def _adjust_counter(self, entity: str, entity_id: UUID, field: str, delta: int) -> int:
        with self._lock_for(entity, entity_id):
            row = self._table(entity).get(entity_id)
            if row is None:
                raise NotFoundError(entity, entity_id)
            current = getattr(row, field)
            updated = current + delta
            if updated < 0:
                logger.warning(
                    "Clamped %s.%s for %s at 0 (was %d, delta %d)",
                    entity,
                    field,
                    entity_id,
                    current,
                    delta,
                )
                updated = 0
            setattr(row, field, updated)
            return updated

    def _active_actors(self, kind: RelationshipKind, target_id: UUID) -> list[UserRecord]:
        actor_ids = [
            row.actor_id
            for row in list(self._relations[kind].values())
            if row.target_id == target_id and not row.is_deleted
        ]
        users = [self._users[actor_id] for actor_id in actor_ids if actor_id in self._users]
        return [UserRecord.model_validate(user) for user in sorted(users, key=lambda u: u.username)]

    # --- Users ----------------------------------------------------------------------
    def create_user(self, username: str, password_hash: str) -> UserRecord:
        with self._write_lock:
            if any(user.username == username for user in self._users.values()):
                raise ConflictError(f"Username already taken: {username}")
            user = _UserRow(id=uuid.uuid4(), username=username, password_hash=password_hash)
            self._users[user.id] = user
        return UserRecord.model_validate(user)

    def get_user(self, user_id: UUID | str) -> UserRecord | None:
        user = self._users.get(parse_id(user_id, "user id"))
        return UserRecord.model_validate(user) if user is not None else None

    def get_user_by_username(self, username: str) -> UserRecord | None:
        for user in list(self._users.values()):
            if user.username == username:
                return UserRecord.model_validate(user)
        return None

    def update_user_profile(
        self,
        user_id: UUID | str,
        bio: str | None = None,
        avatar_url: str | None = None,
        display_name: str | None = None,
    ) -> UserRecord:
        key = parse_id(user_id, "user id")
        with self._lock_for("user", key):
            user = self._users.get(key)
            if user is None:
                raise NotFoundError("user", key)
            user.bio = bio or user.bio
            user.avatar_url = avatar_url or user.avatar_url
            user.display_name = display_name or user.display_name
            return UserRecord.model_validate(user)

    def get_followers(self, user_id: UUID | str) -> Sequence[UserRecord]:
        return self._active_actors(RelationshipKind.FOLLOW, parse_id(user_id, "user id"))

    def get_liked_users(self, photo_id: UUID | str) -> Sequence[UserRecord]:
        return self._active_actors(RelationshipKind.LIKE, parse_id(photo_id, "photo id"))

    def get_comment_likers(self, comment_id: UUID | str) -> Sequence[UserRecord]:
        return self._active_actors(RelationshipKind.COMMENT_LIKE, parse_id(comment_id, "comment id"))

    # --- Photos ---------------------------------------------------------------------
    def create_photo(
        self,
        user_id: UUID | str,
        image_url: str,
        caption: str | None = None,
    ) -> PhotoRecord:
        owner = parse_id(user_id, "user id")
        if owner not in self._users:
            raise NotFoundError("user", owner)
        photo = _PhotoRow(id=uuid.uuid4(), user_id=owner, image_url=image_url, caption=caption or None)
        with self._write_lock:
            self._photos[photo.id] = photo
        return PhotoRecord.model_validate(photo)

    def get_photo(self, photo_id: UUID | str) -> PhotoRecord | None:
        photo = self._photos.get(parse_id(photo_id, "photo id"))
        if photo is None or photo.is_deleted:
            return None
        return PhotoRecord.model_validate(photo)

    def delete_photo(self, actor_id: UUID | str, photo_id: UUID | str) -> PhotoRecord:
        actor = parse_id(actor_id, "actor id")
        key = parse_id(photo_id, "photo id")
        with self._lock_for("photo", key):
            photo = self._photos.get(key)
            if photo is None or photo.is_deleted or photo.user_id != actor:
                raise NotFoundError("photo", key)
            photo.is_deleted = True
            return PhotoRecord.model_validate(photo)

    def _visible_photos(self) -> list[_PhotoRow]:
        return [photo for photo in list(self._photos.values()) if not photo.is_deleted]

    def get_photos(self) -> Sequence[PhotoRecord]:
        def rank(photo: _PhotoRow) -> tuple[int, int, int, datetime]:
            owner = self._users.get(photo.user_id)
            followers = owner.follower_count if owner is not None else 0
            return (followers, photo.like_count, photo.comment_count, photo.created_at)

        # Equal ranks list the most recently inserted photo first.
        ranked = sorted(reversed(self._visible_photos()), key=rank, reverse=True)
        return [PhotoRecord.model_validate(photo) for photo in ranked]

    def get_user_photos(self, user_id: UUID | str) -> Sequence[PhotoRecord]:
        owner = parse_id(user_id, "user id")
        photos = [photo for photo in self._visible_photos() if photo.user_id == owner]
        return [PhotoRecord.model_validate(photo) for photo in _newest_first(photos)]

    def get_feed_photos(self, user_id: UUID | str) -> Sequence[PhotoRecord]:
        viewer = parse_id(user_id, "user id")
        authors = {
            row.target_id
            for row in list(self._relations[RelationshipKind.FOLLOW].values())
            if row.actor_id == viewer and not row.is_deleted
        }
        authors.add(viewer)
        photos = [photo for photo in self._visible_photos() if photo.user_id in authors]
        return [PhotoRecord.model_validate(photo) for photo in _newest_first(photos)]

    # --- Comments -------------------------------------------------------------------
    def create_comment(
        self,
        user_id: UUID | str,
        photo_id: UUID | str,
        content: str,
    ) -> CommentRecord:
        author = parse_id(user_id, "user id")
        photo_key = parse_id(photo_id, "photo id")
        if author not in self._users:
            raise NotFoundError("user", author)

        with self._lock_for("photo", photo_key):
            photo = self._photos.get(photo_key)
            if photo is None or photo.is_deleted:
                raise NotFoundError("photo", photo_key)
            comment = _CommentRow(id=uuid.uuid4(), user_id=author, photo_id=photo_key, content=content)
            self._comments[comment.id] = comment
            self._adjust_counter("photo", photo_key, "comment_count", 1)
        return CommentRecord.model_validate(comment)

    def get_comment(self, comment_id: UUID | str) -> CommentRecord | None:
        comment = self._comments.get(parse_id(comment_id, "comment id"))
        return CommentRecord.model_validate(comment) if comment is not None else None

    def get_photo_comments(self, photo_id: UUID | str) -> Sequence[CommentRecord]:
        key = parse_id(photo_id, "photo id")
        comments = [c for c in list(self._comments.values()) if c.photo_id == key]
        comments.sort(key=lambda c: c.created_at)
        return [CommentRecord.model_validate(comment) for comment in comments]

    # --- Notifications --------------------------------------------------------------
    def _insert_notification(
        self,
        user_id: UUID,
        actor_id: UUID,
        type: NotificationType,
        photo_id: UUID | None,
        comment_id: UUID | None,
    ) -> NotificationRecord:
        notification = _NotificationRow(
            id=uuid.uuid4(),
            user_id=user_id,
            actor_id=actor_id,
            type=type,
            photo_id=photo_id,
            comment_id=comment_id,
        )
        with self._write_lock:
            self._notifications[notification.id] = notification
        return NotificationRecord.model_validate(notification)

    def get_user_notifications(self, user_id: UUID | str) -> Sequence[NotificationRecord]:
        recipient = parse_id(user_id, "user id")
        rows = [n for n in list(self._notifications.values()) if n.user_id == recipient]
        return [NotificationRecord.model_validate(row) for row in _newest_first(rows)]

    def mark_notification_as_read(
        self,
        notification_id: UUID | str,
        user_id: UUID | str,
    ) -> NotificationRecord:
        key = parse_id(notification_id, "notification id")
        recipient = parse_id(user_id, "user id")
        notification = self._notifications.get(key)
        if notification is None or notification.user_id != recipient:
            raise NotFoundError("notification", key)
        notification.read = True
        return NotificationRecord.model_validate(notification)

    def mark_all_notifications_as_read(self, user_id: UUID | str) -> int:
        recipient = parse_id(user_id, "user id")
        changed = 0
        with self._write_lock:
            for notification in self._notifications.values():
                if notification.user_id == recipient and not notification.read:
                    notification.read = True
                    changed += 1
        return changed
