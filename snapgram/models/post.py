"""SQLAlchemy ORM models for posts and likes."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from snapgram.constants import CAPTION_MAX_LENGTH
from snapgram.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    __tablename__ = "posts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(String(2048), nullable=False)
    caption = Column(String(CAPTION_MAX_LENGTH), nullable=True)
    # Python-side default keeps sub-second ordering on SQLite.
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=_utcnow, nullable=False, index=True)

    author = relationship("Profile", back_populates="posts")
    likes = relationship("Like", back_populates="post", cascade="all, delete-orphan")


class Like(Base):
    __tablename__ = "likes"

    post_id = Column(UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=_utcnow, nullable=False)

    post = relationship("Post", back_populates="likes")


__all__ = ["Post", "Like"]
