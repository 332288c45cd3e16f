"""SQLAlchemy models for the SnapShare application."""

from .comment import Comment
from .notification import Notification
from .photo import Photo
from .relationship import CommentLike, Follow, Like
from .user import User

__all__ = [
    "Comment",
    "CommentLike",
    "Follow",
    "Like",
    "Notification",
    "Photo",
    "User",
]
