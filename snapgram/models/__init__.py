"""Convenience exports for ORM models."""
from .post import Like, Post
from .profile import Profile
from .user import AuthSessionRecord, User

__all__ = [
    "AuthSessionRecord",
    "Like",
    "Post",
    "Profile",
    "User",
]
