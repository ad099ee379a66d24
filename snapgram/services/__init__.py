"""Convenience exports for service layer."""
from .auth_service import sign_in, sign_out, sign_up
from .feed_service import fetch_feed
from .like_service import fetch_like_state, fetch_like_states, toggle_like
from .post_service import create_post, parse_post_draft
from .profile_service import fetch_profile, fetch_user_posts, load_profile_page
from .realtime import LiveConnection, LiveConnectionManager
from .session_guard import (
    AuthRedirect,
    clear_session_cookie,
    get_app_settings,
    get_backend,
    get_optional_session,
    require_session,
    resolve_session,
    set_session_cookie,
)

__all__ = [
    "sign_in",
    "sign_out",
    "sign_up",
    "fetch_feed",
    "fetch_like_state",
    "fetch_like_states",
    "toggle_like",
    "create_post",
    "parse_post_draft",
    "fetch_profile",
    "fetch_user_posts",
    "load_profile_page",
    "LiveConnection",
    "LiveConnectionManager",
    "AuthRedirect",
    "clear_session_cookie",
    "get_app_settings",
    "get_backend",
    "get_optional_session",
    "require_session",
    "resolve_session",
    "set_session_cookie",
]
