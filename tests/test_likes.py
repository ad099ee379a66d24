"""Like counting and toggling."""
from __future__ import annotations

import uuid

from snapgram.constants import LIKES


def _state(client, post_id) -> dict:
    response = client.get(f"/api/posts/{post_id}/likes")
    assert response.status_code == 200
    return response.json()


def test_single_like_counts_and_marks_viewer(client, make_user, login, add_post):
    viewer = login(make_user())
    post = add_post(viewer.user.id)

    response = client.post(f"/api/posts/{post['id']}/like")

    assert response.status_code == 202
    assert _state(client, post["id"]) == {"post_id": str(post["id"]), "count": 1, "liked": True}


def test_toggling_twice_restores_the_count(client, backend, make_user, login, add_post):
    viewer = login(make_user())
    other = make_user()
    post = add_post(other.user.id)
    backend.data.insert(LIKES, {"post_id": post["id"], "user_id": other.user.id})
    before = _state(client, post["id"])

    client.post(f"/api/posts/{post['id']}/like")
    middle = _state(client, post["id"])
    client.post(f"/api/posts/{post['id']}/like")
    after = _state(client, post["id"])

    assert before == {"post_id": str(post["id"]), "count": 1, "liked": False}
    assert middle["count"] == 2 and middle["liked"] is True
    assert after == before
    assert backend.data.select(LIKES, filters={"post_id": post["id"], "user_id": viewer.user.id}) == []


def test_like_state_for_another_viewer(client, backend, make_user, login, add_post):
    author = make_user()
    post = add_post(author.user.id)
    backend.data.insert(LIKES, {"post_id": post["id"], "user_id": author.user.id})
    login(make_user())

    assert _state(client, post["id"]) == {"post_id": str(post["id"]), "count": 1, "liked": False}


def test_anonymous_like_is_rejected_without_mutation(client, backend, make_user, add_post):
    post = add_post(make_user().user.id)

    response = client.post(f"/api/posts/{post['id']}/like")

    assert response.status_code == 401
    assert response.json()["detail"] == "Please sign in to like posts"
    assert ("insert", LIKES) not in backend.calls
    assert ("delete", LIKES) not in backend.calls


def test_anonymous_viewer_sees_count_but_not_liked(client, backend, make_user, add_post):
    author = make_user()
    post = add_post(author.user.id)
    backend.data.insert(LIKES, {"post_id": post["id"], "user_id": author.user.id})

    assert _state(client, post["id"]) == {"post_id": str(post["id"]), "count": 1, "liked": False}


def test_insert_failure_reports_error_adding_like(client, backend, make_user, login, add_post):
    viewer = login(make_user())
    post = add_post(viewer.user.id)
    backend.fail_next("insert", LIKES)

    response = client.post(f"/api/posts/{post['id']}/like")

    assert response.status_code == 502
    assert response.json()["detail"] == "Error adding like"
    assert _state(client, post["id"])["count"] == 0


def test_delete_failure_reports_error_removing_like(client, backend, make_user, login, add_post):
    viewer = login(make_user())
    post = add_post(viewer.user.id)
    backend.data.insert(LIKES, {"post_id": post["id"], "user_id": viewer.user.id})
    backend.fail_next("delete", LIKES)

    response = client.post(f"/api/posts/{post['id']}/like")

    assert response.status_code == 502
    assert response.json()["detail"] == "Error removing like"
    assert _state(client, post["id"]) == {"post_id": str(post["id"]), "count": 1, "liked": True}


def test_like_count_for_unknown_post_is_zero(client, make_user, login):
    login(make_user())
    missing = uuid.uuid4()

    assert _state(client, missing) == {"post_id": str(missing), "count": 0, "liked": False}


def test_malformed_post_id_is_rejected(client, make_user, login):
    login(make_user())

    response = client.post("/api/posts/not-a-uuid/like")

    assert response.status_code == 422
