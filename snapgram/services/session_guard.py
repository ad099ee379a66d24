"""Session resolution shared by every protected screen."""
from __future__ import annotations

import logging

from fastapi import Depends, Request, Response
from starlette.requests import HTTPConnection

from ..backend import Backend, BackendError
from ..config import Settings
from ..constants import AUTH_PATH
from ..schemas import AuthSession

logger = logging.getLogger(__name__)

_UNSET = object()


class AuthRedirect(Exception):
    """Raised by the guard when a protected screen is opened without a session."""

    def __init__(self, location: str = AUTH_PATH) -> None:
        super().__init__(location)
        self.location = location


def get_backend(connection: HTTPConnection) -> Backend:
    return connection.app.state.backend


def get_app_settings(connection: HTTPConnection) -> Settings:
    return connection.app.state.settings


def resolve_session(connection: HTTPConnection, backend: Backend, settings: Settings) -> AuthSession | None:
    """Return the session behind the request cookie, reusing one the middleware already resolved."""

    cached = getattr(connection.state, "auth_session", _UNSET)
    if cached is not _UNSET:
        return cached
    token = connection.cookies.get(settings.session_cookie_name)
    try:
        session = backend.auth.get_session(token)
    except BackendError:
        logger.warning("Session lookup failed; treating request as signed out", exc_info=True)
        session = None
    connection.state.auth_session = session
    return session


def get_optional_session(
    request: Request,
    backend: Backend = Depends(get_backend),
    settings: Settings = Depends(get_app_settings),
) -> AuthSession | None:
    return resolve_session(request, backend, settings)


def require_session(session: AuthSession | None = Depends(get_optional_session)) -> AuthSession:
    """Guard dependency: redirect to the auth screen before any screen data is fetched."""

    if session is None:
        raise AuthRedirect()
    return session


def set_session_cookie(response: Response, session: AuthSession, settings: Settings) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        session.access_token,
        expires=session.expires_at,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(settings.session_cookie_name, path="/")


__all__ = [
    "AuthRedirect",
    "clear_session_cookie",
    "get_app_settings",
    "get_backend",
    "get_optional_session",
    "require_session",
    "resolve_session",
    "set_session_cookie",
]
