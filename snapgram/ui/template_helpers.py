"""Utilities for rendering UI templates with shared context and flash toasts."""
from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote

from fastapi import Request, Response
from fastapi.templating import Jinja2Templates

from ..constants import CAPTION_MAX_LENGTH, PLACEHOLDER_IMAGE
from . import components

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
FLASH_COOKIE = "snapgram_flash"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

_BASE_COMPONENTS = {
    "buttons": components.buttons,
    "cards": components.cards,
    "feedback": components.feedback,
    "forms": components.forms,
    "layout": components.layout,
}


def set_flash(response: Response, message: str, *, kind: str = "success") -> None:
    """Queue a toast shown by the next rendered page."""

    response.set_cookie(FLASH_COOKIE, quote(f"{kind}:{message}"), max_age=60, httponly=True, samesite="lax", path="/")


def pop_flash(request: Request) -> dict[str, str] | None:
    raw = request.cookies.get(FLASH_COOKIE)
    if not raw:
        return None
    kind, _, message = unquote(raw).partition(":")
    if not message:
        return None
    return {"kind": kind if kind in {"success", "error"} else "success", "message": message}


def render_template(
    request: Request,
    template_name: str,
    context: dict[str, Any] | None = None,
    *,
    status_code: int = 200,
):
    """Return a TemplateResponse with shared UI context."""

    flash = pop_flash(request)
    base_context: dict[str, Any] = {
        "app_name": request.app.state.settings.app_name,
        "components": _BASE_COMPONENTS,
        "active_nav": None,
        "page_title": "",
        "user": None,
        "caption_max_length": CAPTION_MAX_LENGTH,
        "placeholder_image": PLACEHOLDER_IMAGE,
        "flash": flash,
        "error": None,
    }
    if context:
        base_context.update(context)

    response = templates.TemplateResponse(request, template_name, base_context, status_code=status_code)
    if flash is not None:
        response.delete_cookie(FLASH_COOKIE, path="/")
    return response


__all__ = ["render_template", "set_flash", "pop_flash", "templates"]
