"""Post and like API routes."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from ..backend import Backend
from ..schemas import AuthSession, FeedResponse, LikeState, Post, PostDraft
from ..services import (
    create_post,
    fetch_feed,
    fetch_like_state,
    get_backend,
    get_optional_session,
    toggle_like,
)

router = APIRouter(prefix="/api", tags=["posts"])

logger = logging.getLogger(__name__)


def get_current_session(session: AuthSession | None = Depends(get_optional_session)) -> AuthSession:
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return session


@router.get("/feed", response_model=FeedResponse)
def read_feed(
    _: AuthSession = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
) -> FeedResponse:
    return FeedResponse(items=fetch_feed(backend))


@router.post("/posts", response_model=Post, status_code=status.HTTP_201_CREATED)
def create_post_endpoint(
    payload: PostDraft,
    session: AuthSession = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
) -> Post:
    return create_post(backend, user_id=session.user.id, draft=payload)


@router.get("/posts/{post_id}/likes", response_model=LikeState)
def read_likes(
    post_id: UUID,
    session: AuthSession | None = Depends(get_optional_session),
    backend: Backend = Depends(get_backend),
) -> LikeState:
    return fetch_like_state(backend, post_id, session.user.id if session else None)


@router.post("/posts/{post_id}/like", status_code=status.HTTP_202_ACCEPTED)
def toggle_like_endpoint(
    post_id: UUID,
    session: AuthSession | None = Depends(get_optional_session),
    backend: Backend = Depends(get_backend),
) -> dict[str, str]:
    """Flip the viewer's like; the refreshed count arrives over the live socket."""

    toggle_like(backend, post_id=post_id, viewer_id=session.user.id if session else None)
    return {"status": "accepted"}


__all__ = ["router", "get_current_session"]
