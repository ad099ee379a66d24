"""Pydantic records for posts, likes and the create-post form."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import CAPTION_MAX_LENGTH


class PostAuthor(BaseModel):
    """Profile columns expanded onto a feed row."""

    username: str | None = None
    avatar_url: str | None = None


class Post(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    image_url: str
    caption: str | None = None
    created_at: datetime


class FeedPost(Post):
    """A post joined with its owning profile; ``profiles`` is absent for orphaned rows."""

    profiles: PostAuthor | None = None

    @property
    def author_name(self) -> str:
        if self.profiles and self.profiles.username:
            return self.profiles.username
        return "Unknown User"


class FeedResponse(BaseModel):
    items: list[FeedPost]


class PostDraft(BaseModel):
    """Create-post form input.

    The caption limit applies to the raw input; blank captions are stored as ``None``.
    """

    image_url: str = Field(..., max_length=2048)
    caption: str | None = Field(default=None, max_length=CAPTION_MAX_LENGTH)

    @field_validator("image_url")
    @classmethod
    def _require_image_url(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Please provide an image URL")
        return trimmed

    @field_validator("caption")
    @classmethod
    def _normalize_caption(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class LikeState(BaseModel):
    post_id: UUID
    count: int = 0
    liked: bool = False


__all__ = ["PostAuthor", "Post", "FeedPost", "FeedResponse", "PostDraft", "LikeState"]
