"""Create-post page."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ...backend import Backend
from ...constants import FEED_PATH
from ...schemas import AuthSession
from ...services import create_post, get_backend, parse_post_draft, require_session
from ..template_helpers import render_template, set_flash

router = APIRouter()


def _render_form(
    request: Request,
    session: AuthSession,
    *,
    image_url: str = "",
    caption: str = "",
    error: str | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    return render_template(
        request,
        "create_post.html",
        {
            "page_title": "Create New Post",
            "active_nav": "/create",
            "user": session.user,
            "image_url": image_url,
            "caption": caption,
            "error": error,
        },
        status_code=status_code,
    )


@router.get("/create", response_class=HTMLResponse)
def create_form(request: Request, session: AuthSession = Depends(require_session)) -> HTMLResponse:
    return _render_form(request, session)


@router.post("/create", response_class=HTMLResponse)
def submit_post(
    request: Request,
    image_url: str = Form(""),
    caption: str = Form(""),
    session: AuthSession = Depends(require_session),
    backend: Backend = Depends(get_backend),
):
    """Validate, insert and go back to the feed; failures keep the form populated."""

    try:
        draft = parse_post_draft(image_url, caption)
        create_post(backend, user_id=session.user.id, draft=draft)
    except HTTPException as exc:
        return _render_form(
            request,
            session,
            image_url=image_url,
            caption=caption,
            error=str(exc.detail),
            status_code=exc.status_code,
        )

    response = RedirectResponse(FEED_PATH, status_code=303)
    set_flash(response, "Post created successfully!")
    return response
