from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ...backend import Backend
from ...schemas import AuthSession
from ...services import get_backend, load_profile_page, require_session
from ..template_helpers import render_template

router = APIRouter()


@router.get("/profile", response_class=HTMLResponse)
def profile(
    request: Request,
    session: AuthSession = Depends(require_session),
    backend: Backend = Depends(get_backend),
) -> HTMLResponse:
    page = load_profile_page(backend, session.user.id)
    return render_template(
        request,
        "profile.html",
        {
            "page_title": page.profile.username if page.profile else "Profile",
            "active_nav": "/profile",
            "user": session.user,
            "profile": page.profile,
            "posts": page.posts,
            "post_count": page.post_count,
        },
    )
