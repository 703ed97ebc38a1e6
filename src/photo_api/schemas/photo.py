"""Pydantic schemas for photos.

Learn: These are output ("Read") schemas only. Create payloads are
checked field by field in photo_api.validation so that type, presence
and format problems are all reported together.
Output fields serialize under the public names (createdAt, UserId, User)
while the Python attributes stay snake_case to match the ORM models.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from photo_api.schemas.user import UserPublic


class PhotoBase(BaseModel):
    id: int
    title: str
    caption: Optional[str] = None
    image_url: str
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    model_config = {"from_attributes": True}


class PhotoRead(PhotoBase):
    """A photo as listed or created — owner as a bare id."""
    user_id: int = Field(serialization_alias="UserId")


class PhotoDetail(PhotoBase):
    """A single photo with its owner's public fields."""
    user: UserPublic = Field(serialization_alias="User")
