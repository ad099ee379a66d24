"""Export page routers for composition."""
from __future__ import annotations

from . import auth, create, feed, profile

__all__ = [
    "auth",
    "create",
    "feed",
    "profile",
]
