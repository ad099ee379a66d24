"""Home/feed page surface."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse

from ...backend import Backend
from ...constants import FEED_PATH
from ...schemas import AuthSession, FeedPost
from ...services import fetch_feed, fetch_like_states, get_backend, require_session
from ..template_helpers import render_template

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(FEED_PATH, response_class=HTMLResponse)
def feed(
    request: Request,
    session: AuthSession = Depends(require_session),
    backend: Backend = Depends(get_backend),
) -> HTMLResponse:
    """Render every post newest first; the live socket keeps it current."""

    posts: list[FeedPost]
    try:
        posts = fetch_feed(backend)
    except HTTPException:
        posts = []

    return render_template(
        request,
        "feed.html",
        {
            "page_title": "Discover",
            "active_nav": FEED_PATH,
            "user": session.user,
            "posts": posts,
            "like_states": fetch_like_states(backend, posts, session.user.id),
        },
    )
