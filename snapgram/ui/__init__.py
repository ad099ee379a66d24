"""Server-rendered screens."""
from .router import router

__all__ = ["router"]
