"""Profile screen and JSON profile."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from snapgram.constants import PROFILES


def test_profile_shows_identity_and_own_posts_only(client, make_user, login, add_post):
    session = login(make_user("erin", full_name="Erin Example"))
    other = make_user("frank")
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    add_post(session.user.id, image_url="https://img.example.com/first.jpg", created_at=base)
    add_post(session.user.id, image_url="https://img.example.com/second.jpg", created_at=base + timedelta(days=1))
    add_post(other.user.id, image_url="https://img.example.com/not-mine.jpg")

    response = client.get("/profile")

    assert response.status_code == 200
    body = response.text
    assert "erin" in body
    assert "Erin Example" in body
    assert "data-post-count>2<" in body
    assert "Your Posts" in body
    assert "grid-cols-3" in body
    assert "not-mine.jpg" not in body
    assert body.index("second.jpg") < body.index("first.jpg")


def test_profile_without_posts(client, make_user, login):
    login(make_user())

    body = client.get("/profile").text

    assert "data-post-count>0<" in body
    assert "No posts yet" in body
    assert "data-profile-grid" not in body


def test_missing_profile_row_uses_placeholders(client, backend, make_user, login):
    session = login(make_user("ghost"))
    backend.data.delete(PROFILES, filters={"id": session.user.id})

    body = client.get("/profile").text

    assert "Loading..." in body
    assert ">U</span>" in body


def test_api_profile(client, make_user, login, add_post):
    session = login(make_user("hana", full_name="Hana"))
    add_post(session.user.id, caption="mine")

    response = client.get("/api/profile")

    assert response.status_code == 200
    body = response.json()
    assert body["profile"]["username"] == "hana"
    assert body["profile"]["full_name"] == "Hana"
    assert [post["caption"] for post in body["posts"]] == ["mine"]


def test_api_profile_requires_session(client):
    assert client.get("/api/profile").status_code == 401
