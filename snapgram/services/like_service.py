"""Like state and toggling for a single post card."""
from __future__ import annotations

import logging
from typing import Iterable
from uuid import UUID

from fastapi import HTTPException, status

from ..backend import Backend, BackendError
from ..constants import LIKES
from ..schemas import FeedPost, LikeState

logger = logging.getLogger(__name__)


def fetch_like_state(backend: Backend, post_id: UUID, viewer_id: UUID | None = None) -> LikeState:
    """Count the likes of ``post_id`` and test whether ``viewer_id`` is among them."""

    try:
        rows = backend.data.select(LIKES, filters={"post_id": post_id})
    except BackendError as exc:
        logger.warning("Like query for post %s failed: %s", post_id, exc.message)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc

    liked = viewer_id is not None and any(str(row.get("user_id")) == str(viewer_id) for row in rows)
    return LikeState(post_id=post_id, count=len(rows), liked=liked)


def fetch_like_states(backend: Backend, posts: Iterable[FeedPost], viewer_id: UUID | None) -> dict[UUID, LikeState]:
    """Fetch every card's like state on its own.

    A card whose query fails is left out, so it renders without a count until
    its own likes watch reports one.
    """

    states: dict[UUID, LikeState] = {}
    for post in posts:
        try:
            states[post.id] = fetch_like_state(backend, post.id, viewer_id)
        except HTTPException:
            continue
    return states


def toggle_like(backend: Backend, *, post_id: UUID, viewer_id: UUID | None) -> None:
    """Remove the viewer's like when present, add it otherwise.

    Nothing is returned: the new count reaches the card through the change
    notification that follows the mutation.
    """

    if viewer_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Please sign in to like posts")

    current = fetch_like_state(backend, post_id, viewer_id)
    if current.liked:
        try:
            backend.data.delete(LIKES, filters={"post_id": post_id, "user_id": viewer_id})
        except BackendError as exc:
            logger.warning("Removing like on %s failed: %s", post_id, exc.message)
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Error removing like") from exc
        return

    try:
        backend.data.insert(LIKES, {"post_id": post_id, "user_id": viewer_id})
    except BackendError as exc:
        logger.warning("Adding like on %s failed: %s", post_id, exc.message)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Error adding like") from exc


__all__ = ["fetch_like_state", "fetch_like_states", "toggle_like"]
