"""Managed-backend contract and its adapters."""
from __future__ import annotations

import logging

from ..config import Settings
from ..security import MissingSecretError, require_secret
from .base import AuthAPI, Backend, BackendError, DataAPI, Order, RealtimeAPI, Row
from .changes import AuthStateHub, ChangeEvent, ChangeHub, ChangeType, Subscription
from .memory import MemoryBackend
from .sql import SqlBackend

logger = logging.getLogger(__name__)


def build_backend(settings: Settings) -> Backend:
    """Construct the backend selected by ``SNAPGRAM_BACKEND``."""

    if settings.backend == "memory":
        logger.info("Using in-memory backend; data is lost on restart")
        return MemoryBackend(expires_minutes=settings.jwt_expires_minutes)

    try:
        secret = require_secret("JWT_SECRET_KEY")
    except MissingSecretError as exc:
        raise RuntimeError(str(exc)) from exc
    return SqlBackend.from_url(
        settings.database_url,
        secret=secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_expires_minutes,
    )


__all__ = [
    "AuthAPI",
    "AuthStateHub",
    "Backend",
    "BackendError",
    "ChangeEvent",
    "ChangeHub",
    "ChangeType",
    "DataAPI",
    "MemoryBackend",
    "Order",
    "RealtimeAPI",
    "Row",
    "SqlBackend",
    "Subscription",
    "build_backend",
]
