"""Middleware exports."""
from __future__ import annotations

from .session_refresh import SessionRefreshMiddleware

__all__ = ["SessionRefreshMiddleware"]
