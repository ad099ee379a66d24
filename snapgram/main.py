"""Application entry point for the Snapgram web client."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Iterable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from .backend import Backend, build_backend
from .config import Settings, get_settings
from .middleware import SessionRefreshMiddleware
from .routers import auth_router, posts_router, profiles_router, realtime_router
from .services import AuthRedirect, LiveConnectionManager
from .ui import router as ui_router

logger = logging.getLogger(__name__)

UI_STATIC_ROOT = Path(__file__).resolve().parent / "ui" / "static"


def _cors_origins(settings: Settings) -> Iterable[str]:
    if settings.cors_origins:
        return [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
    return ["*"]


def create_app(backend: Backend | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the app around ``backend``; the configured adapter is used when none is given."""

    settings = settings or get_settings()
    backend = backend or build_backend(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            backend.startup()
        except Exception:
            logger.exception("Backend initialisation failed")
            raise
        logger.info("%s %s started with %s", settings.app_name, settings.api_version, type(backend).__name__)
        yield
        app.state.live.close_all()
        backend.shutdown()

    app = FastAPI(title=settings.app_name, version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.backend = backend
    app.state.live = LiveConnectionManager()

    app.add_middleware(SessionRefreshMiddleware, exempt_paths=["/assets"])
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(_cors_origins(settings)),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AuthRedirect)
    async def _redirect_to_auth(request: Request, exc: AuthRedirect) -> RedirectResponse:
        return RedirectResponse(exc.location, status_code=303)

    app.include_router(ui_router)
    app.include_router(auth_router)
    app.include_router(posts_router)
    app.include_router(profiles_router)
    app.include_router(realtime_router)

    @app.get("/api", tags=["system"])
    def api_info() -> dict[str, str]:
        return {"service": settings.app_name, "version": settings.api_version}

    @app.get("/health", tags=["system"])
    def healthcheck() -> dict[str, str | int]:
        return {"status": "ok", "live_connections": len(app.state.live)}

    app.mount("/assets", StaticFiles(directory=str(UI_STATIC_ROOT), check_dir=False), name="assets")
    return app


app = create_app()


__all__ = ["app", "create_app"]
