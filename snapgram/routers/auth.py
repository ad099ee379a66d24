"""Sign-in, sign-up and sign-out form handlers."""
from __future__ import annotations

from urllib.parse import urlparse

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from ..backend import Backend
from ..config import Settings
from ..constants import AUTH_PATH, FEED_PATH
from ..schemas import AuthSession, SignInRequest, SignUpRequest
from ..services import (
    clear_session_cookie,
    get_app_settings,
    get_backend,
    get_optional_session,
    set_session_cookie,
    sign_in,
    sign_out,
    sign_up,
)
from ..ui.template_helpers import render_template, set_flash

router = APIRouter(prefix="/auth", tags=["auth"])


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"{field}: {error.get('msg', 'invalid value')}" if field else str(error.get("msg"))


def _render_auth(request: Request, *, mode: str, error: str, status_code: int, values: dict[str, str]):
    return render_template(
        request,
        "auth.html",
        {"page_title": "Sign in", "mode": mode, "error": error, "values": values},
        status_code=status_code,
    )


def _signed_in(session: AuthSession, settings: Settings, message: str) -> RedirectResponse:
    response = RedirectResponse(FEED_PATH, status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, session, settings)
    set_flash(response, message)
    return response


@router.post("/sign-in")
def sign_in_endpoint(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    backend: Backend = Depends(get_backend),
    settings: Settings = Depends(get_app_settings),
):
    values = {"email": email}
    try:
        payload = SignInRequest(email=email, password=password)
        session = sign_in(backend, payload)
    except ValidationError as exc:
        return _render_auth(request, mode="sign-in", error=_first_error(exc), status_code=422, values=values)
    except HTTPException as exc:
        return _render_auth(request, mode="sign-in", error=str(exc.detail), status_code=exc.status_code, values=values)
    return _signed_in(session, settings, "Signed in successfully")


@router.post("/sign-up")
def sign_up_endpoint(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    username: str = Form(""),
    full_name: str = Form(""),
    backend: Backend = Depends(get_backend),
    settings: Settings = Depends(get_app_settings),
):
    values = {"email": email, "username": username, "full_name": full_name}
    try:
        payload = SignUpRequest(
            email=email,
            password=password,
            username=username.strip(),
            full_name=full_name.strip() or None,
        )
        session = sign_up(backend, payload)
    except ValidationError as exc:
        return _render_auth(request, mode="sign-up", error=_first_error(exc), status_code=422, values=values)
    except HTTPException as exc:
        return _render_auth(request, mode="sign-up", error=str(exc.detail), status_code=exc.status_code, values=values)
    return _signed_in(session, settings, "Account created successfully")


@router.post("/sign-out")
def sign_out_endpoint(
    request: Request,
    session: AuthSession | None = Depends(get_optional_session),
    backend: Backend = Depends(get_backend),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    """Navigation-bar action: end the session and report the outcome as a toast."""

    if session is None:
        return RedirectResponse(AUTH_PATH, status_code=status.HTTP_303_SEE_OTHER)

    try:
        sign_out(backend, session)
    except HTTPException as exc:
        referer = urlparse(request.headers.get("referer", ""))
        back = referer.path if referer.path.startswith("/") and not referer.path.startswith("//") else FEED_PATH
        response = RedirectResponse(back, status_code=status.HTTP_303_SEE_OTHER)
        set_flash(response, str(exc.detail), kind="error")
        return response

    response = RedirectResponse(AUTH_PATH, status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(response, settings)
    set_flash(response, "Signed out successfully")
    return response
