"""Queries behind the feed screen."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status

from ..backend import Backend, BackendError, Order
from ..constants import POSTS, PROFILES
from ..schemas import FeedPost

logger = logging.getLogger(__name__)

FEED_ORDER = Order("created_at", descending=True)
AUTHOR_COLUMNS = ("username", "avatar_url")


def fetch_feed(backend: Backend) -> list[FeedPost]:
    """Return every post, newest first, with the owner's username and avatar expanded."""

    try:
        rows = backend.data.select(POSTS, order=FEED_ORDER, expand={PROFILES: AUTHOR_COLUMNS})
    except BackendError as exc:
        logger.warning("Feed query failed: %s", exc.message)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    return [FeedPost.model_validate(row) for row in rows]


__all__ = ["fetch_feed", "FEED_ORDER"]
