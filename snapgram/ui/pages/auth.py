"""Landing and authentication pages."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ...constants import AUTH_PATH, FEED_PATH
from ...schemas import AuthSession
from ...services import get_optional_session
from ..template_helpers import render_template

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def landing(request: Request, session: AuthSession | None = Depends(get_optional_session)) -> HTMLResponse:
    return render_template(
        request,
        "index.html",
        {
            "page_title": "Share your moments",
            "user": session.user if session else None,
            "get_started_href": FEED_PATH if session else AUTH_PATH,
        },
    )


@router.get(AUTH_PATH, response_class=HTMLResponse)
def auth_page(request: Request, session: AuthSession | None = Depends(get_optional_session)):
    if session is not None:
        return RedirectResponse(FEED_PATH, status_code=303)
    return render_template(
        request,
        "auth.html",
        {
            "page_title": "Sign in",
            "mode": request.query_params.get("mode", "sign-in"),
        },
    )
