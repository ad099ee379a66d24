"""Queries behind the profile screen."""
from __future__ import annotations

import logging
from uuid import UUID

from ..backend import Backend, BackendError
from ..constants import POSTS, PROFILES
from ..schemas import Post, Profile, ProfilePage
from .feed_service import FEED_ORDER

logger = logging.getLogger(__name__)


def fetch_profile(backend: Backend, user_id: UUID) -> Profile | None:
    """Return the profile row of ``user_id`` when exactly one matches."""

    try:
        rows = backend.data.select(PROFILES, filters={"id": user_id})
    except BackendError as exc:
        logger.warning("Profile query for %s failed: %s", user_id, exc.message)
        return None
    if len(rows) != 1:
        return None
    return Profile.model_validate(rows[0])


def fetch_user_posts(backend: Backend, user_id: UUID) -> list[Post]:
    try:
        rows = backend.data.select(POSTS, filters={"user_id": user_id}, order=FEED_ORDER)
    except BackendError as exc:
        logger.warning("Post query for %s failed: %s", user_id, exc.message)
        return []
    return [Post.model_validate(row) for row in rows]


def load_profile_page(backend: Backend, user_id: UUID) -> ProfilePage:
    """Fetch the profile and, separately, the user's own posts."""

    return ProfilePage(profile=fetch_profile(backend, user_id), posts=fetch_user_posts(backend, user_id))


__all__ = ["fetch_profile", "fetch_user_posts", "load_profile_page"]
