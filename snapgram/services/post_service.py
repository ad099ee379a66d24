"""Validation and persistence for the create-post form."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from pydantic import ValidationError

from ..backend import Backend, BackendError
from ..constants import CAPTION_MAX_LENGTH, POSTS
from ..schemas import Post, PostDraft

logger = logging.getLogger(__name__)


def _describe(error: dict) -> str:
    field = error["loc"][0] if error.get("loc") else None
    if field == "caption" and error.get("type") == "string_too_long":
        return f"Caption must be at most {CAPTION_MAX_LENGTH} characters"
    if field == "image_url" and error.get("type") == "value_error":
        return "Please provide an image URL"
    return str(error.get("msg", "Invalid input"))


def parse_post_draft(image_url: str | None, caption: str | None) -> PostDraft:
    """Validate raw form input before anything is sent to the backend."""

    try:
        return PostDraft(image_url=image_url or "", caption=caption)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=_describe(exc.errors()[0]),
        ) from exc


def create_post(backend: Backend, *, user_id: UUID, draft: PostDraft) -> Post:
    """Insert ``draft`` as a new post owned by ``user_id``."""

    try:
        row = backend.data.insert(
            POSTS,
            {"user_id": user_id, "image_url": draft.image_url, "caption": draft.caption},
        )
    except BackendError as exc:
        logger.warning("Creating post for %s failed: %s", user_id, exc.message)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc

    post = Post.model_validate(row)
    logger.info("User %s created post %s", user_id, post.id)
    return post


__all__ = ["parse_post_draft", "create_post"]
