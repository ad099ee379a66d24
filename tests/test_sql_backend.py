"""SQLAlchemy adapter against a throwaway SQLite database."""
from __future__ import annotations

import uuid
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from snapgram.backend import BackendError, ChangeType, Order, SqlBackend
from snapgram.constants import LIKES, POSTS, PROFILES
from snapgram.main import create_app
from snapgram.schemas import AuthEvent

SECRET = "sql-test-secret"


@pytest.fixture
def sql_backend(tmp_path) -> Iterator[SqlBackend]:
    backend = SqlBackend.from_url(f"sqlite+pysqlite:///{tmp_path / 'snapgram.db'}", secret=SECRET)
    backend.startup()
    yield backend
    backend.shutdown()


@pytest.fixture
def member(sql_backend):
    return sql_backend.auth.sign_up("jane@example.com", "secret123", username="jane", full_name="Jane Doe")


def test_sign_up_creates_profile(sql_backend, member):
    [profile] = sql_backend.data.select(PROFILES, filters={"id": member.user.id})

    assert profile["username"] == "jane"
    assert profile["full_name"] == "Jane Doe"
    assert sql_backend.auth.get_session(member.access_token) == member


def test_duplicate_registration_is_rejected(sql_backend, member):
    with pytest.raises(BackendError, match="User already registered"):
        sql_backend.auth.sign_up("JANE@example.com", "secret123", username="jane2")
    with pytest.raises(BackendError, match="Username is already taken"):
        sql_backend.auth.sign_up("other@example.com", "secret123", username="jane")


def test_sign_in_checks_password(sql_backend, member):
    session = sql_backend.auth.sign_in_with_password("jane@example.com", "secret123")

    assert session.user.id == member.user.id
    assert session.id != member.id
    with pytest.raises(BackendError) as excinfo:
        sql_backend.auth.sign_in_with_password("jane@example.com", "nope")
    assert excinfo.value.code == "invalid_credentials"


def test_tampered_token_has_no_session(sql_backend, member):
    assert sql_backend.auth.get_session(member.access_token + "x") is None
    assert sql_backend.auth.get_session(None) is None


def test_refresh_keeps_session_and_sign_out_revokes_it(sql_backend, member):
    events = []
    subscription = sql_backend.auth.on_auth_state_change(events.append)

    refreshed = sql_backend.auth.refresh_session(member.access_token)
    sql_backend.auth.sign_out(refreshed.access_token)
    sql_backend.auth.sign_out(refreshed.access_token)
    subscription.unsubscribe()

    assert refreshed.id == member.id
    assert [event.event for event in events] == [AuthEvent.TOKEN_REFRESHED, AuthEvent.SIGNED_OUT]
    assert sql_backend.auth.get_session(member.access_token) is None
    assert sql_backend.auth.get_session(refreshed.access_token) is None


def test_feed_query_orders_and_expands(sql_backend, member):
    first = sql_backend.data.insert(POSTS, {"user_id": member.user.id, "image_url": "https://img.example.com/1.jpg"})
    second = sql_backend.data.insert(
        POSTS, {"user_id": str(member.user.id), "image_url": "https://img.example.com/2.jpg", "caption": "two"}
    )

    rows = sql_backend.data.select(POSTS, order=Order("created_at", descending=True), expand={PROFILES: ("username",)})

    assert [row["id"] for row in rows] == [second["id"], first["id"]]
    assert rows[0]["profiles"] == {"username": "jane"}
    assert rows[1]["caption"] is None


def test_likes_are_unique_and_publish_changes(sql_backend, member):
    post = sql_backend.data.insert(POSTS, {"user_id": member.user.id, "image_url": "https://img.example.com/1.jpg"})
    events = []
    sql_backend.realtime.subscribe(LIKES, events.append, filter=("post_id", post["id"]))
    sql_backend.realtime.subscribe(LIKES, lambda event: None, filter=("post_id", uuid.uuid4()))

    sql_backend.data.insert(LIKES, {"post_id": post["id"], "user_id": member.user.id})
    with pytest.raises(BackendError) as excinfo:
        sql_backend.data.insert(LIKES, {"post_id": post["id"], "user_id": member.user.id})
    removed = sql_backend.data.delete(LIKES, filters={"post_id": post["id"], "user_id": member.user.id})

    assert excinfo.value.code == "23505"
    assert removed == 1
    assert [event.type for event in events] == [ChangeType.INSERT, ChangeType.DELETE]
    assert sql_backend.data.select(LIKES, filters={"post_id": post["id"]}) == []


def test_unknown_table_and_column_raise_backend_errors(sql_backend):
    with pytest.raises(BackendError):
        sql_backend.data.select("comments")
    with pytest.raises(BackendError):
        sql_backend.data.select(POSTS, filters={"title": "x"})
    with pytest.raises(BackendError):
        sql_backend.data.select(POSTS, filters={"id": "not-a-uuid"})
    with pytest.raises(BackendError):
        sql_backend.data.delete(POSTS, filters={})


def test_app_runs_on_sql_backend(sql_backend):
    with TestClient(create_app(backend=sql_backend)) as client:
        signed_up = client.post(
            "/auth/sign-up",
            data={"email": "kim@example.com", "password": "secret123", "username": "kim"},
            follow_redirects=False,
        )
        assert signed_up.status_code == 303

        created = client.post(
            "/create",
            data={"image_url": "https://img.example.com/sql.jpg", "caption": "from sqlite"},
        )
        assert created.status_code == 200
        assert "from sqlite" in created.text
        assert "kim" in created.text

        profile = client.get("/api/profile").json()
        assert profile["profile"]["username"] == "kim"
        assert len(profile["posts"]) == 1
