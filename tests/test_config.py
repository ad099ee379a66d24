"""Settings and backend selection."""
from __future__ import annotations

import pytest

from snapgram.backend import MemoryBackend, SqlBackend, build_backend
from snapgram.config import Settings


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("APP_NAME", "Snapgram Staging")
    monkeypatch.setenv("SESSION_REFRESH_MARGIN_MINUTES", "5")
    monkeypatch.setenv("SESSION_COOKIE_SECURE", "true")

    settings = Settings()

    assert settings.app_name == "Snapgram Staging"
    assert settings.session_refresh_margin_minutes == 5
    assert settings.session_cookie_secure is True


def test_memory_backend_needs_no_secret(monkeypatch):
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

    backend = build_backend(Settings(SNAPGRAM_BACKEND="memory"))

    assert isinstance(backend, MemoryBackend)


@pytest.mark.parametrize("value", [None, "", "changeme", "secret", "short"])
def test_sql_backend_requires_real_secret(monkeypatch, value):
    if value is None:
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
    else:
        monkeypatch.setenv("JWT_SECRET_KEY", value)

    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        build_backend(Settings(SNAPGRAM_BACKEND="sql"))


def test_sql_backend_is_built_from_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("JWT_SECRET_KEY", "a-real-signing-key")

    backend = build_backend(Settings(SNAPGRAM_BACKEND="sql", DATABASE_URL=f"sqlite+pysqlite:///{tmp_path / 'cfg.db'}"))

    assert isinstance(backend, SqlBackend)
    backend.shutdown()


def test_health_and_api_info(client):
    assert client.get("/api").json() == {"service": "Snapgram", "version": "0.1.0"}
    assert client.get("/health").json() == {"status": "ok", "live_connections": 0}
