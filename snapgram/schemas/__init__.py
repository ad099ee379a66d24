"""Convenience exports for schema layer."""
from .auth import AuthChange, AuthEvent, AuthSession, AuthUser, SignInRequest, SignUpRequest
from .posts import FeedPost, FeedResponse, LikeState, Post, PostAuthor, PostDraft
from .profiles import Profile, ProfilePage

__all__ = [
    "AuthChange",
    "AuthEvent",
    "AuthSession",
    "AuthUser",
    "SignInRequest",
    "SignUpRequest",
    "FeedPost",
    "FeedResponse",
    "LikeState",
    "Post",
    "PostAuthor",
    "PostDraft",
    "Profile",
    "ProfilePage",
]
