"""WebSocket endpoint that keeps mounted screens live."""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect

from ..backend import Backend
from ..constants import AUTH_PATH, LIKES, POSTS
from ..services import LiveConnection, fetch_feed, fetch_like_state, fetch_like_states, resolve_session
from ..ui.components import cards

router = APIRouter()
logger = logging.getLogger(__name__)

FEED_KEY = "feed"
FEED_LOADING = {"type": "loading", "target": "feed"}


def _likes_key(post_id: UUID) -> str:
    return f"likes:{post_id}"


def _feed_refresher(backend: Backend, connection: LiveConnection):
    def _refresh() -> dict[str, Any]:
        # Raises on a failed query; the client then restores its last render.
        posts = fetch_feed(backend)
        states = fetch_like_states(backend, posts, connection.viewer_id)
        return {
            "type": "render",
            "target": "feed",
            "html": str(cards.feed_items(posts, states)),
            "post_ids": [str(post.id) for post in posts],
        }

    return _refresh


def _likes_refresher(backend: Backend, connection: LiveConnection, post_id: UUID):
    def _refresh() -> dict[str, Any]:
        state = fetch_like_state(backend, post_id, connection.viewer_id)
        return {"type": "likes", "post_id": str(post_id), "count": state.count, "liked": state.liked}

    return _refresh


def _parse_post_id(payload: dict[str, Any]) -> UUID | None:
    try:
        return UUID(str(payload.get("post_id")))
    except ValueError:
        return None


def _handle(connection: LiveConnection, backend: Backend, payload: dict[str, Any]) -> dict[str, Any] | None:
    """Apply one client frame and return the acknowledgement, if any."""

    message_type = str(payload.get("type") or "").lower()
    view = str(payload.get("view") or "").lower()

    if message_type == "ping":
        return {"type": "pong"}

    if message_type == "watch" and view == "feed":
        connection.watch(FEED_KEY, POSTS, _feed_refresher(backend, connection), loading=FEED_LOADING)
        return {"type": "watching", "view": "feed"}

    if message_type == "watch" and view == "likes":
        post_id = _parse_post_id(payload)
        if post_id is None:
            return {"type": "error", "detail": "Invalid post id"}
        key = _likes_key(post_id)
        connection.watch(key, LIKES, _likes_refresher(backend, connection, post_id), filter=("post_id", post_id))
        if payload.get("refresh"):
            # Cards rendered without a count ask for their state right away.
            connection.signal(key)
        return {"type": "watching", "view": "likes", "post_id": str(post_id)}

    if message_type == "unwatch" and view == "feed":
        connection.unwatch(FEED_KEY)
        return {"type": "unwatched", "view": "feed"}

    if message_type == "unwatch" and view == "likes":
        post_id = _parse_post_id(payload)
        if post_id is None:
            return {"type": "error", "detail": "Invalid post id"}
        connection.unwatch(_likes_key(post_id))
        return {"type": "unwatched", "view": "likes", "post_id": str(post_id)}

    # Anything else is ignored but keeps the connection alive.
    return None


@router.websocket("/ws/live")
async def live_updates(websocket: WebSocket) -> None:
    """Multiplex the page's live views over one connection."""

    backend: Backend = websocket.app.state.backend
    settings = websocket.app.state.settings
    session = await asyncio.to_thread(resolve_session, websocket, backend, settings)

    await websocket.accept()
    if session is None:
        await websocket.send_json({"type": "navigate", "location": AUTH_PATH})
        await websocket.close()
        return

    async def _send(payload: dict[str, Any]) -> None:
        try:
            await websocket.send_json(payload)
        except (WebSocketDisconnect, RuntimeError):
            logger.debug("Live socket already closed; dropped %s", payload.get("type"))

    manager = websocket.app.state.live
    connection = manager.open(backend, _send)
    connection.follow_session(session)
    pump = asyncio.create_task(connection.run())
    logger.info("Live socket connected for user %s", session.user.id)

    try:
        await connection.send({"type": "ready"})
        while True:
            try:
                raw = await websocket.receive_text()
            except WebSocketDisconnect:
                break

            try:
                payload = json.loads(raw)
            except json.JSONDecodeError:
                payload = {"type": raw}
            if not isinstance(payload, dict):
                continue

            try:
                reply = _handle(connection, backend, payload)
            except HTTPException as exc:
                reply = {"type": "error", "detail": exc.detail}
            if reply is not None:
                await connection.send(reply)
    except Exception:
        logger.exception("Live socket failed")
    finally:
        manager.close(connection)
        pump.cancel()
        try:
            await pump
        except asyncio.CancelledError:
            pass
        logger.info("Live socket disconnected for user %s", session.user.id)


__all__ = ["router"]
