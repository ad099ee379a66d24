"""Signing-key lookup for session tokens."""
from __future__ import annotations

import os
from typing import Final, Mapping

__all__ = ["MissingSecretError", "require_secret", "is_placeholder", "MIN_SECRET_LENGTH"]

MIN_SECRET_LENGTH: Final[int] = 8

_TEMPLATE_VALUES: Final[frozenset[str]] = frozenset(
    {"changeme", "change-me", "placeholder", "example", "secret", "your-key-here", "xxx"}
)


class MissingSecretError(RuntimeError):
    """The signing key is unset, too short or still a template value."""


def is_placeholder(value: str | None) -> bool:
    return not value or not value.strip() or value.strip().lower() in _TEMPLATE_VALUES


def require_secret(
    name: str = "JWT_SECRET_KEY",
    *,
    environ: Mapping[str, str] | None = None,
    min_length: int = MIN_SECRET_LENGTH,
) -> str:
    """Return the trimmed value of ``name``; the value itself never appears in errors."""

    value = (os.environ if environ is None else environ).get(name)
    if is_placeholder(value):
        raise MissingSecretError(f"{name} must be set to a real signing key")
    secret = value.strip()
    if len(secret) < min_length:
        raise MissingSecretError(f"{name} must be at least {min_length} characters long")
    return secret
