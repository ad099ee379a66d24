"""Schemas for profile records and the profile screen."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from .posts import Post


class Profile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    full_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None

    @field_validator("full_name", "bio", "avatar_url", mode="before")
    def clean_optional(cls, v):
        if v in ("", "None"):
            return None
        return v

    @property
    def initial(self) -> str:
        return self.username[:1].upper() or "U"


class ProfilePage(BaseModel):
    """Everything the profile screen renders; ``profile`` is ``None`` when no single row matched."""

    profile: Profile | None = None
    posts: list[Post]

    @property
    def post_count(self) -> int:
        return len(self.posts)


__all__ = ["Profile", "ProfilePage"]
