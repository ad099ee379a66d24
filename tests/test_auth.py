"""Session guard, auth forms, navigation bar and sign-out."""
from __future__ import annotations

import pytest

from snapgram.constants import PROFILES

COOKIE_NAME = "snapgram_session"
PASSWORD = "secret123"


@pytest.mark.parametrize("path", ["/feed", "/create", "/profile"])
def test_guarded_screens_redirect_without_fetching(client, backend, path):
    response = client.get(path, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/auth"
    assert backend.calls == []


def test_stale_cookie_redirects_and_is_cleared(client, backend):
    client.cookies.set(COOKIE_NAME, "not-a-real-token")

    response = client.get("/feed", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/auth"
    assert f"{COOKIE_NAME}=" in response.headers.get("set-cookie", "")
    assert backend.calls == []


def test_create_post_submission_without_session_redirects(client, backend):
    response = client.post(
        "/create",
        data={"image_url": "https://img.example.com/a.jpg", "caption": "x"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/auth"
    assert backend.calls == []


def test_landing_targets_auth_without_session(client):
    body = client.get("/").text

    assert 'href="/auth" data-get-started' in body
    assert "data-get-started" in body
    assert "data-nav-links" not in body
    assert "data-sign-out" not in body


def test_landing_targets_feed_with_session(client, make_user, login):
    login(make_user())

    body = client.get("/").text

    assert 'href="/feed" data-get-started' in body
    assert "data-nav-links" in body


def test_navbar_links_render_for_signed_in_user(client, make_user, login):
    login(make_user())

    body = client.get("/feed").text

    for href in ('href="/feed"', 'href="/create"', 'href="/profile"'):
        assert href in body
    assert 'action="/auth/sign-out"' in body
    assert "data-sign-out" in body


def test_auth_page_redirects_when_signed_in(client, make_user, login):
    login(make_user())

    response = client.get("/auth", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/feed"


def test_auth_page_shows_requested_form(client):
    assert "data-sign-in-form" in client.get("/auth").text
    assert "data-sign-up-form" in client.get("/auth?mode=sign-up").text


def test_sign_up_creates_profile_and_session(client, backend):
    response = client.post(
        "/auth/sign-up",
        data={"email": "new@example.com", "password": PASSWORD, "username": "new.user", "full_name": "New User"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/feed"
    assert COOKIE_NAME in response.headers["set-cookie"]
    assert "httponly" in response.headers["set-cookie"].lower()
    [profile] = backend.data.select(PROFILES, filters={"username": "new.user"})
    assert profile["full_name"] == "New User"

    feed = client.get("/feed")
    assert feed.status_code == 200
    assert "Account created successfully" in feed.text


def test_sign_up_rejects_invalid_username(client, backend):
    response = client.post(
        "/auth/sign-up",
        data={"email": "x@example.com", "password": PASSWORD, "username": "a b"},
        follow_redirects=False,
    )

    assert response.status_code == 422
    assert "data-form-error" in response.text
    assert backend.data.select(PROFILES) == []


def test_sign_up_rejects_taken_username(client, make_user):
    make_user("taken")

    response = client.post(
        "/auth/sign-up",
        data={"email": "other@example.com", "password": PASSWORD, "username": "taken"},
        follow_redirects=False,
    )

    assert response.status_code == 400
    assert "Username is already taken" in response.text


def test_failed_profile_insert_leaves_no_account_behind(client, backend):
    form = {"email": "eve@example.com", "password": PASSWORD, "username": "eve"}
    backend.fail_next("insert", PROFILES)

    failed = client.post("/auth/sign-up", data=form, follow_redirects=False)

    assert failed.status_code == 400
    assert backend.data.select(PROFILES) == []
    sign_in = client.post(
        "/auth/sign-in",
        data={"email": form["email"], "password": PASSWORD},
        follow_redirects=False,
    )
    assert sign_in.status_code == 401

    retry = client.post("/auth/sign-up", data=form, follow_redirects=False)
    assert retry.status_code == 303


def test_sign_in_with_valid_credentials(client, make_user):
    make_user("carol")

    response = client.post(
        "/auth/sign-in",
        data={"email": "carol@example.com", "password": PASSWORD},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/feed"
    assert client.get("/feed").status_code == 200


def test_sign_in_with_wrong_password(client, make_user):
    make_user("dave")

    response = client.post(
        "/auth/sign-in",
        data={"email": "dave@example.com", "password": "wrong-password"},
        follow_redirects=False,
    )

    assert response.status_code == 401
    assert "Invalid login credentials" in response.text
    assert 'value="dave@example.com"' in response.text


def test_sign_out_revokes_session(client, backend, make_user, login):
    session = login(make_user())

    response = client.post("/auth/sign-out", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/auth"
    assert backend.auth.get_session(session.access_token) is None

    client.cookies.set(COOKIE_NAME, session.access_token)
    assert client.get("/feed", follow_redirects=False).headers["location"] == "/auth"


def test_sign_out_flashes_success(client, make_user, login):
    login(make_user())

    response = client.post("/auth/sign-out")

    assert response.url.path == "/auth"
    assert "Signed out successfully" in response.text


def test_sign_out_failure_returns_to_referring_page(client, backend, make_user, login):
    session = login(make_user())
    backend.fail_next("sign_out")

    response = client.post(
        "/auth/sign-out",
        headers={"referer": "http://testserver/profile"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/profile"
    assert backend.auth.get_session(session.access_token) is not None

    page = client.get("/profile")
    assert "Error signing out" in page.text


def test_sign_out_without_session_goes_to_auth(client):
    response = client.post("/auth/sign-out", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/auth"
