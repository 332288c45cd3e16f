"""Comment-related Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .common import UtcDatetime


class CommentCreate(BaseModel):
    """Schema for creating a comment on a photo."""

    content: str = Field(..., min_length=1, max_length=2200)


class CommentRecord(BaseModel):
    """Comment as returned by the stores and the API."""

    id: UUID
    user_id: UUID
    photo_id: UUID
    content: str
    like_count: int
    created_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)
