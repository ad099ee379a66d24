"""Project-wide constant values."""
from __future__ import annotations

CAPTION_MAX_LENGTH = 500

# Collections exposed by the managed backend.
PROFILES = "profiles"
POSTS = "posts"
LIKES = "likes"

AUTH_PATH = "/auth"
FEED_PATH = "/feed"

PLACEHOLDER_IMAGE = "/assets/img/placeholder.svg"

__all__ = [
    "CAPTION_MAX_LENGTH",
    "PROFILES",
    "POSTS",
    "LIKES",
    "AUTH_PATH",
    "FEED_PATH",
    "PLACEHOLDER_IMAGE",
]
