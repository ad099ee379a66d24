"""Aggregate UI page routes into a single router."""
from __future__ import annotations

from fastapi import APIRouter

from .pages import auth, create, feed, profile

router = APIRouter(include_in_schema=False)

router.include_router(auth.router)
router.include_router(feed.router)
router.include_router(create.router)
router.include_router(profile.router)

__all__ = ["router"]
