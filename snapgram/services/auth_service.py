"""Sign-in, sign-up and sign-out flows over the backend's auth API."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status

from ..backend import Backend, BackendError
from ..schemas import AuthSession, SignInRequest, SignUpRequest

logger = logging.getLogger(__name__)

_CREDENTIAL_ERRORS = {"invalid_credentials"}


def sign_in(backend: Backend, payload: SignInRequest) -> AuthSession:
    try:
        session = backend.auth.sign_in_with_password(str(payload.email), payload.password)
    except BackendError as exc:
        code = status.HTTP_401_UNAUTHORIZED if exc.code in _CREDENTIAL_ERRORS else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=exc.message) from exc
    logger.info("User %s signed in", session.user.id)
    return session


def sign_up(backend: Backend, payload: SignUpRequest) -> AuthSession:
    try:
        return backend.auth.sign_up(
            str(payload.email),
            payload.password,
            username=payload.username,
            full_name=payload.full_name,
        )
    except BackendError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc


def sign_out(backend: Backend, session: AuthSession) -> None:
    try:
        backend.auth.sign_out(session.access_token)
    except BackendError as exc:
        logger.warning("Sign-out for %s failed: %s", session.user.id, exc.message)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Error signing out") from exc
    logger.info("User %s signed out", session.user.id)


__all__ = ["sign_in", "sign_up", "sign_out"]
