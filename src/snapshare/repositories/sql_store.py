"""Relational store built on SQLAlchemy.

Each public operation runs in its own session and transaction. Toggles
row-lock their target first (``SELECT ... FOR UPDATE`` where the database
supports it), counter changes are single ``UPDATE ... SET n = n + delta``
statements, and relationship rows flip through a compare-and-set on
``is_deleted``. Concurrent toggles on one target never lose an update.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Final
from uuid import UUID

from sqlalchemy import case, func, or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from snapshare.db.session import create_db_engine, create_session_factory, create_tables
from snapshare.errors import ConflictError, NotFoundError
from snapshare.models import Comment, CommentLike, Follow, Like, Notification, Photo, User
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

__all__ = ["SqlStore"]

logger = logging.getLogger(__name__)

_MAX_TOGGLE_ATTEMPTS: Final[int] = 5

_ENTITY_MODELS: Final[dict[str, Any]] = {
    "user": User,
    "photo": Photo,
    "comment": Comment,
}

# kind -> (row model, actor column name, target column name)
_RELATION_TABLES: Final[dict[RelationshipKind, tuple[Any, str, str]]] = {
    RelationshipKind.LIKE: (Like, "user_id", "photo_id"),
    RelationshipKind.FOLLOW: (Follow, "follower_id", "following_id"),
    RelationshipKind.COMMENT_LIKE: (CommentLike, "user_id", "comment_id"),
}


class _StaleRelationship(Exception):
    """Another transaction changed the relationship row first."""


class SqlStore(SocialStore):
    """``SocialStore`` persisted through a SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory = create_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str, *, echo: bool = False) -> SqlStore:
        """Build a store with its own engine for ``database_url``."""
        return cls(create_db_engine(database_url, echo=echo))

    def init(self) -> None:
        create_tables(self.engine)

    def close(self) -> None:
        self.engine.dispose()

    # --- Relationship primitives ----------------------------------------------------
    @staticmethod
    def _pair_filter(kind: RelationshipKind, actor_id: UUID, target_id: UUID) -> tuple[Any, list[Any]]:
        model, actor_col, target_col = _RELATION_TABLES[kind]
        return model, [getattr(model, actor_col) == actor_id, getattr(model, target_col) == target_id]

    @staticmethod
    def _live_target(session: Session, kind: RelationshipKind, target_id: UUID) -> Any | None:
        """Load and row-lock the target, or return None if it is gone.

        The lock serializes toggles on one target, so concurrent first toggles
        of the same pair cannot both insert a row.
        """
        target = session.get(_ENTITY_MODELS[kind.target_entity], target_id, with_for_update=True)
        if target is None or getattr(target, "is_deleted", False):
            return None
        if kind is RelationshipKind.COMMENT_LIKE:
            photo = session.get(Photo, target.photo_id)
            if photo is None or photo.is_deleted:
                return None
        return target

    def _apply_relationship(
        self,
        kind: RelationshipKind,
        actor_id: UUID,
        target_id: UUID,
        planner: Planner,
    ) -> ToggleOutcome:
        for attempt in range(1, _MAX_TOGGLE_ATTEMPTS + 1):
            try:
                with self._session_factory.begin() as session:
                    return self._apply_once(session, kind, actor_id, target_id, planner)
            except _StaleRelationship:
                logger.info(
                    "Retrying %s %s -> %s after concurrent change (attempt %d)",
                    kind.label,
                    actor_id,
                    target_id,
                    attempt,
                )
        raise ConflictError(f"Could not apply {kind.label} for {target_id}; too much contention")

    def _apply_once(
        self,
        session: Session,
        kind: RelationshipKind,
        actor_id: UUID,
        target_id: UUID,
        planner: Planner,
    ) -> ToggleOutcome:
        if session.get(User, actor_id) is None:
            raise NotFoundError("user", actor_id)
        target = self._live_target(session, kind, target_id)
        if target is None:
            raise NotFoundError(kind.target_entity, target_id)

        model, conditions = self._pair_filter(kind, actor_id, target_id)
        row = session.execute(select(model).where(*conditions).limit(1)).scalars().first()
        state = state_of(row.is_deleted if row is not None else None)
        transition = planner(state)
        if transition is None:
            return ToggleOutcome(kind, target_id, state, getattr(target, kind.counter_field))

        if row is None:
            _, actor_col, target_col = _RELATION_TABLES[kind]
            session.add(model(**{actor_col: actor_id, target_col: target_id}))
            session.flush()
            # Backstop for databases without row locks.
            pairs = session.execute(
                select(func.count()).select_from(model).where(*conditions)
            ).scalar_one()
            if pairs > 1:
                raise _StaleRelationship
        else:
            result = session.execute(
                update(model)
                .where(model.id == row.id, model.is_deleted.is_(row.is_deleted))
                .values(is_deleted=not transition.activated)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise _StaleRelationship

        count = self._increment(session, kind.target_entity, target_id, kind.counter_field, transition.delta)
        return ToggleOutcome(kind, target_id, transition.to_state, count, transition)

    def _relationship_state(
        self,
        kind: RelationshipKind,
        actor_id: UUID,
        target_id: UUID,
    ) -> RelationshipState:
        model, conditions = self._pair_filter(kind, actor_id, target_id)
        with self._session_factory() as session:
            flag = session.execute(select(model.is_deleted).where(*conditions).limit(1)).scalar()
        return state_of(flag)

    @staticmethod
    def _increment(session: Session, entity: str, entity_id: UUID, field: str, delta: int) -> int:
        model = _ENTITY_MODELS[entity]
        column = getattr(model, field)
        result = session.execute(
            update(model)
            .where(model.id == entity_id)
            .values({field: case((column + delta < 0, 0), else_=column + delta)})
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise NotFoundError(entity, entity_id)
        return int(session.execute(select(column).where(model.id == entity_id)).scalar_one())

    def _adjust_counter(self, entity: str, entity_id: UUID, field: str, delta: int) -> int:
        with self._session_factory.begin() as session:
            return self._increment(session, entity, entity_id, field, delta)

    def _active_actors(self, kind: RelationshipKind, target_id: UUID) -> list[UserRecord]:
        model, actor_col, target_col = _RELATION_TABLES[kind]
        with self._session_factory() as session:
            users = session.execute(
                select(User)
                .join(model, getattr(model, actor_col) == User.id)
                .where(getattr(model, target_col) == target_id, model.is_deleted.is_(False))
                .order_by(User.username)
            ).scalars().all()
            return [UserRecord.model_validate(user) for user in users]

    # --- Users ----------------------------------------------------------------------
    def create_user(self, username: str, password_hash: str) -> UserRecord:
        try:
            with self._session_factory.begin() as session:
                existing = session.execute(
                    select(User.id).where(User.username == username)
                ).scalar()
                if existing is not None:
                    raise ConflictError(f"Username already taken: {username}")
                user = User(username=username, password_hash=password_hash, follower_count=0)
                session.add(user)
                session.flush()
                return UserRecord.model_validate(user)
        except IntegrityError as err:
            raise ConflictError(f"Username already taken: {username}") from err

    def get_user(self, user_id: UUID | str) -> UserRecord | None:
        key = parse_id(user_id, "user id")
        with self._session_factory() as session:
            user = session.get(User, key)
            return UserRecord.model_validate(user) if user is not None else None

    def get_user_by_username(self, username: str) -> UserRecord | None:
        with self._session_factory() as session:
            user = session.execute(select(User).where(User.username == username)).scalars().first()
            return UserRecord.model_validate(user) if user is not None else None

    def update_user_profile(
        self,
        user_id: UUID | str,
        bio: str | None = None,
        avatar_url: str | None = None,
        display_name: str | None = None,
    ) -> UserRecord:
        key = parse_id(user_id, "user id")
        with self._session_factory.begin() as session:
            user = session.get(User, key)
            if user is None:
                raise NotFoundError("user", key)
            user.bio = bio or user.bio
            user.avatar_url = avatar_url or user.avatar_url
            user.display_name = display_name or user.display_name
            session.flush()
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
        with self._session_factory.begin() as session:
            if session.get(User, owner) is None:
                raise NotFoundError("user", owner)
            photo = Photo(
                user_id=owner,
                image_url=image_url,
                caption=caption or None,
                like_count=0,
                comment_count=0,
                is_deleted=False,
            )
            session.add(photo)
            session.flush()
            return PhotoRecord.model_validate(photo)

    def get_photo(self, photo_id: UUID | str) -> PhotoRecord | None:
        key = parse_id(photo_id, "photo id")
        with self._session_factory() as session:
            photo = session.get(Photo, key)
            if photo is None or photo.is_deleted:
                return None
            return PhotoRecord.model_validate(photo)

    def delete_photo(self, actor_id: UUID | str, photo_id: UUID | str) -> PhotoRecord:
        actor = parse_id(actor_id, "actor id")
        key = parse_id(photo_id, "photo id")
        with self._session_factory.begin() as session:
            photo = session.get(Photo, key)
            if photo is None or photo.is_deleted or photo.user_id != actor:
                raise NotFoundError("photo", key)
            photo.is_deleted = True
            session.flush()
            return PhotoRecord.model_validate(photo)

    def _list_photos(self, stmt: Any) -> list[PhotoRecord]:
        with self._session_factory() as session:
            photos = session.execute(stmt).scalars().all()
            return [PhotoRecord.model_validate(photo) for photo in photos]

    def get_photos(self) -> Sequence[PhotoRecord]:
        return self._list_photos(
            select(Photo)
            .join(User, User.id == Photo.user_id)
            .where(Photo.is_deleted.is_(False))
            .order_by(
                User.follower_count.desc(),
                Photo.like_count.desc(),
                Photo.comment_count.desc(),
                Photo.created_at.desc(),
            )
        )

    def get_user_photos(self, user_id: UUID | str) -> Sequence[PhotoRecord]:
        owner = parse_id(user_id, "user id")
        return self._list_photos(
            select(Photo)
            .where(Photo.user_id == owner, Photo.is_deleted.is_(False))
            .order_by(Photo.created_at.desc())
        )

    def get_feed_photos(self, user_id: UUID | str) -> Sequence[PhotoRecord]:
        viewer = parse_id(user_id, "user id")
        followed = select(Follow.following_id).where(
            Follow.follower_id == viewer,
            Follow.is_deleted.is_(False),
        )
        return self._list_photos(
            select(Photo)
            .where(
                Photo.is_deleted.is_(False),
                or_(Photo.user_id.in_(followed), Photo.user_id == viewer),
            )
            .order_by(Photo.created_at.desc())
        )

    # --- Comments -------------------------------------------------------------------
    def create_comment(
        self,
        user_id: UUID | str,
        photo_id: UUID | str,
        content: str,
    ) -> CommentRecord:
        author = parse_id(user_id, "user id")
        photo_key = parse_id(photo_id, "photo id")
        with self._session_factory.begin() as session:
            if session.get(User, author) is None:
                raise NotFoundError("user", author)
            photo = session.get(Photo, photo_key)
            if photo is None or photo.is_deleted:
                raise NotFoundError("photo", photo_key)
            comment = Comment(user_id=author, photo_id=photo_key, content=content, like_count=0)
            session.add(comment)
            session.flush()
            self._increment(session, "photo", photo_key, "comment_count", 1)
            return CommentRecord.model_validate(comment)

    def get_comment(self, comment_id: UUID | str) -> CommentRecord | None:
        key = parse_id(comment_id, "comment id")
        with self._session_factory() as session:
            comment = session.get(Comment, key)
            return CommentRecord.model_validate(comment) if comment is not None else None

    def get_photo_comments(self, photo_id: UUID | str) -> Sequence[CommentRecord]:
        key = parse_id(photo_id, "photo id")
        with self._session_factory() as session:
            comments = session.execute(
                select(Comment).where(Comment.photo_id == key).order_by(Comment.created_at.asc())
            ).scalars().all()
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
        with self._session_factory.begin() as session:
            notification = Notification(
                user_id=user_id,
                actor_id=actor_id,
                type=type.value,
                photo_id=photo_id,
                comment_id=comment_id,
                read=False,
            )
            session.add(notification)
            session.flush()
            return NotificationRecord.model_validate(notification)

    def get_user_notifications(self, user_id: UUID | str) -> Sequence[NotificationRecord]:
        recipient = parse_id(user_id, "user id")
        with self._session_factory() as session:
            rows = session.execute(
                select(Notification)
                .where(Notification.user_id == recipient)
                .order_by(Notification.created_at.desc())
            ).scalars().all()
            return [NotificationRecord.model_validate(row) for row in rows]

    def mark_notification_as_read(
        self,
        notification_id: UUID | str,
        user_id: UUID | str,
    ) -> NotificationRecord:
        key = parse_id(notification_id, "notification id")
        recipient = parse_id(user_id, "user id")
        with self._session_factory.begin() as session:
            notification = session.get(Notification, key)
            if notification is None or notification.user_id != recipient:
                raise NotFoundError("notification", key)
            notification.read = True
            session.flush()
            return NotificationRecord.model_validate(notification)

    def mark_all_notifications_as_read(self, user_id: UUID | str) -> int:
        recipient = parse_id(user_id, "user id")
        with self._session_factory.begin() as session:
            result = session.execute(
                update(Notification)
                .where(Notification.user_id == recipient, Notification.read.is_(False))
                .values(read=True)
                .execution_options(synchronize_session=False)
            )
            return int(result.rowcount or 0)
