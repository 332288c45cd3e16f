"""Photo-related Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .common import UtcDatetime


class PhotoCreate(BaseModel):
    """Schema for publishing a photo that has already been uploaded."""

    image_url: str = Field(..., min_length=1, max_length=2048)
    caption: str | None = Field(None, max_length=2200)


class PhotoRecord(BaseModel):
    """Photo as returned by the stores and the API."""

    id: UUID
    user_id: UUID
    image_url: str
    caption: str | None
    like_count: int
    comment_count: int
    created_at: UtcDatetime
    is_deleted: bool = False

    model_config = ConfigDict(from_attributes=True)
