"""Profile API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..backend import Backend
from ..schemas import AuthSession, ProfilePage
from ..services import get_backend, load_profile_page
from .posts import get_current_session

router = APIRouter(prefix="/api", tags=["profiles"])


@router.get("/profile", response_model=ProfilePage)
def read_my_profile(
    session: AuthSession = Depends(get_current_session),
    backend: Backend = Depends(get_backend),
) -> ProfilePage:
    """The signed-in user's profile row and their own posts, newest first."""

    return load_profile_page(backend, session.user.id)


__all__ = ["router"]
