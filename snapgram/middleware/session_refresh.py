"""Middleware that keeps the session cookie fresh."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from ..backend import BackendError
from ..services.session_guard import clear_session_cookie, resolve_session, set_session_cookie

logger = logging.getLogger(__name__)


class SessionRefreshMiddleware(BaseHTTPMiddleware):
    """Resolve the session once per request and refresh it when close to expiry.

    The resolved session is left on ``request.state`` for the guard. A cookie
    that no longer maps to a session is cleared.
    """

    def __init__(self, app: ASGIApp, *, exempt_paths: Sequence[str] | None = None) -> None:
        super().__init__(app)
        self._exempt_paths = tuple(exempt_paths or ())

    def _should_skip(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self._exempt_paths)

    async def dispatch(self, request: Request, call_next) -> Response:
        if self._should_skip(request.url.path):
            return await call_next(request)

        settings = request.app.state.settings
        backend = request.app.state.backend
        token = request.cookies.get(settings.session_cookie_name)
        if not token:
            return await call_next(request)

        session = await asyncio.to_thread(resolve_session, request, backend, settings)
        refreshed = None
        margin = timedelta(minutes=settings.session_refresh_margin_minutes)
        if session is not None and session.expires_at - datetime.now(timezone.utc) <= margin:
            try:
                refreshed = await asyncio.to_thread(backend.auth.refresh_session, token)
            except BackendError as exc:
                logger.warning("Session refresh failed: %s", exc.message)
            else:
                request.state.auth_session = refreshed

        response = await call_next(request)

        cookie_prefix = f"{settings.session_cookie_name}=".encode()
        if any(
            name == b"set-cookie" and value.startswith(cookie_prefix) for name, value in response.headers.raw
        ):
            # The handler signed in or out; its cookie wins.
            return response
        if refreshed is not None:
            set_session_cookie(response, refreshed, settings)
        elif session is None:
            clear_session_cookie(response, settings)
        return response


__all__ = ["SessionRefreshMiddleware"]
