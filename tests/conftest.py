"""Shared fixtures: an app wired to a fresh in-memory backend per test."""
from __future__ import annotations

import itertools
import os
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("SNAPGRAM_BACKEND", "memory")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from snapgram.backend import MemoryBackend  # noqa: E402
from snapgram.constants import POSTS  # noqa: E402
from snapgram.main import create_app  # noqa: E402
from snapgram.schemas import AuthSession  # noqa: E402

COOKIE_NAME = "snapgram_session"
PASSWORD = "secret123"


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def app(backend: MemoryBackend):
    return create_app(backend=backend)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(backend: MemoryBackend) -> Callable[..., AuthSession]:
    counter = itertools.count(1)

    def _make(username: str | None = None, *, full_name: str | None = None) -> AuthSession:
        name = username or f"member{next(counter)}"
        return backend.auth.sign_up(f"{name}@example.com", PASSWORD, username=name, full_name=full_name)

    return _make


@pytest.fixture
def login(client: TestClient) -> Callable[[AuthSession], AuthSession]:
    """Attach a session cookie to the test client."""

    def _login(session: AuthSession) -> AuthSession:
        client.cookies.set(COOKIE_NAME, session.access_token)
        return session

    return _login


@pytest.fixture
def add_post(backend: MemoryBackend) -> Callable[..., dict]:
    def _add(user_id, *, image_url: str = "https://img.example.com/photo.jpg", caption: str | None = None, **extra) -> dict:
        return backend.data.insert(POSTS, {"user_id": user_id, "image_url": image_url, "caption": caption, **extra})

    return _add
