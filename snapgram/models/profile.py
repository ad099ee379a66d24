"""SQLAlchemy ORM model for public profiles."""
from __future__ import annotations

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from snapgram.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    username = Column(String(32), unique=True, nullable=False, index=True)
    full_name = Column(String(150), nullable=True)
    bio = Column(String(500), nullable=True)
    avatar_url = Column(String(1024), nullable=True)

    user = relationship("User", back_populates="profile")
    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan")


__all__ = ["Profile"]
