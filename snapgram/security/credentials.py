"""Password hashing and signed session tokens."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class TokenClaims:
    user_id: UUID
    session_id: UUID
    expires_at: datetime


def hash_password(password: str) -> str:
    """Hash a plain-text password using bcrypt."""

    return _pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify that ``password`` matches ``hashed_password``."""

    try:
        return _pwd_context.verify(password, hashed_password)
    except Exception:  # pragma: no cover - passlib internal errors are rare
        logger.exception("Password verification failed due to an unexpected error")
        return False


def create_access_token(
    user_id: UUID,
    session_id: UUID,
    *,
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = 60,
) -> tuple[str, datetime]:
    """Create a signed JWT for ``user_id`` bound to the ``session_id`` it refreshes under."""

    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=expires_minutes)
    payload = {"sub": str(user_id), "sid": str(session_id), "exp": expires_at, "iat": now}
    token = jwt.encode(payload, secret, algorithm=algorithm)
    # JWT timestamps are whole seconds.
    return token, expires_at.replace(microsecond=0)


def decode_access_token(token: str, *, secret: str, algorithm: str = "HS256") -> TokenClaims | None:
    """Decode and validate a JWT; ``None`` when it is malformed, forged or expired."""

    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError:
        return None

    try:
        return TokenClaims(
            user_id=UUID(payload["sub"]),
            session_id=UUID(payload["sid"]),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        return None


__all__ = ["TokenClaims", "hash_password", "verify_password", "create_access_token", "decode_access_token"]
