"""Create-post form validation and submission."""
from __future__ import annotations

from snapgram.constants import POSTS


def _inserts(backend) -> list:
    return [call for call in backend.calls if call == ("insert", POSTS)]


def test_create_form_renders_counter_and_actions(client, make_user, login):
    login(make_user())

    response = client.get("/create")

    assert response.status_code == 200
    assert "Create New Post" in response.text
    assert 'data-char-counter="caption"' in response.text
    assert "0/500" in response.text
    assert "Share Post" in response.text
    assert 'href="/feed"' in response.text


def test_caption_of_exactly_500_characters_is_accepted(client, backend, make_user, login):
    session = login(make_user())
    caption = "a" * 500

    response = client.post(
        "/create",
        data={"image_url": "https://img.example.com/beach.jpg", "caption": caption},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/feed"
    rows = backend.data.select(POSTS, filters={"user_id": session.user.id})
    assert len(rows) == 1
    assert rows[0]["caption"] == caption
    assert rows[0]["image_url"] == "https://img.example.com/beach.jpg"


def test_caption_of_501_characters_is_rejected_before_any_insert(client, backend, make_user, login):
    login(make_user())

    response = client.post(
        "/create",
        data={"image_url": "https://img.example.com/beach.jpg", "caption": "a" * 501},
        follow_redirects=False,
    )

    assert response.status_code == 422
    assert "Caption must be at most 500 characters" in response.text
    assert _inserts(backend) == []


def test_blank_image_url_is_rejected_before_any_insert(client, backend, make_user, login):
    login(make_user())

    response = client.post("/create", data={"image_url": "   ", "caption": "hello"}, follow_redirects=False)

    assert response.status_code == 422
    assert "Please provide an image URL" in response.text
    assert _inserts(backend) == []


def test_image_url_is_trimmed_and_blank_caption_stored_as_null(client, backend, make_user, login):
    session = login(make_user())

    client.post(
        "/create",
        data={"image_url": "  https://img.example.com/x.png  ", "caption": "   "},
        follow_redirects=False,
    )

    [row] = backend.data.select(POSTS, filters={"user_id": session.user.id})
    assert row["image_url"] == "https://img.example.com/x.png"
    assert row["caption"] is None


def test_success_flashes_and_returns_to_feed(client, make_user, login):
    login(make_user())

    response = client.post(
        "/create",
        data={"image_url": "https://img.example.com/sunset.jpg", "caption": "Golden hour"},
    )

    assert response.status_code == 200
    assert response.url.path == "/feed"
    assert "Post created successfully!" in response.text
    assert "Golden hour" in response.text


def test_backend_failure_keeps_form_populated(client, backend, make_user, login):
    login(make_user())
    backend.fail_next("insert", POSTS, message="Storage quota exceeded")

    response = client.post(
        "/create",
        data={"image_url": "https://img.example.com/keep.jpg", "caption": "Keep me"},
        follow_redirects=False,
    )

    assert response.status_code == 502
    assert "Storage quota exceeded" in response.text
    assert 'value="https://img.example.com/keep.jpg"' in response.text
    assert "Keep me" in response.text
    assert backend.data.select(POSTS) == []


def test_json_endpoint_creates_post(client, backend, make_user, login):
    session = login(make_user())

    response = client.post("/api/posts", json={"image_url": "https://img.example.com/api.jpg", "caption": "via api"})

    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == str(session.user.id)
    assert body["caption"] == "via api"
    assert len(backend.data.select(POSTS)) == 1


def test_json_endpoint_requires_session(client, backend):
    response = client.post("/api/posts", json={"image_url": "https://img.example.com/api.jpg"})

    assert response.status_code == 401
    assert _inserts(backend) == []
