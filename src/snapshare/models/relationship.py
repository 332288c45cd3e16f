# src/snapshare/models/relationship.py
"""Relationship rows linking an actor to a target.

Rows are created on the first toggle-on and afterwards only flip
``is_deleted``; they are never physically removed. At most one row exists per
(actor, target) pair, which the stores enforce rather than the schema.
"""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from snapshare.db.session import Base


class Follow(Base):
    """``follower_id`` follows ``following_id``."""

    __tablename__ = "follows"
    __table_args__ = (Index("ix_follows_pair", "follower_id", "following_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    follower_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    following_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    is_deleted: Mapped[bool] = mapped_column(default=False, nullable=False)


class Like(Base):
    """``user_id`` likes photo ``photo_id``."""

    __tablename__ = "likes"
    __table_args__ = (Index("ix_likes_pair", "user_id", "photo_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    photo_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("photos.id"), nullable=False)
    is_deleted: Mapped[bool] = mapped_column(default=False, nullable=False)


class CommentLike(Base):
    """``user_id`` likes comment ``comment_id``."""

    __tablename__ = "comment_likes"
    __table_args__ = (Index("ix_comment_likes_pair", "user_id", "comment_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    comment_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("comments.id"),
        nullable=False,
    )
    is_deleted: Mapped[bool] = mapped_column(default=False, nullable=False)
