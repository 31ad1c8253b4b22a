"""Post, comment and interaction models."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from socialapi.models.validators import check_url


class Post(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    author_id: str
    content: str = Field(..., min_length=1, max_length=1000)
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("image_url")
    @classmethod
    def _image_url_is_url(cls, v: Optional[str]) -> Optional[str]:
        return check_url(v)


class Comment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    post_id: str
    author_id: str
    content: str = Field(..., min_length=1, max_length=500)
    created_at: Optional[datetime] = None


class Like(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    post_id: str
    created_at: Optional[datetime] = None


class Follow(BaseModel):
    """``user_id`` is the account being followed."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    follower_id: str
    created_at: Optional[datetime] = None
