"""Live views: re-query on change notifications and push the result to a socket."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable
from uuid import UUID

from ..backend import Backend, Subscription
from ..constants import AUTH_PATH
from ..schemas import AuthChange, AuthEvent, AuthSession

logger = logging.getLogger(__name__)

Payload = dict[str, Any]
Sender = Callable[[Payload], Awaitable[None]]
Refresher = Callable[[], "Payload | None"]

SESSION_KEY = "session"


@dataclass
class _Watch:
    subscription: Subscription
    refresh: Refresher
    loading: Payload | None = None


class LiveConnection:
    """Every watch mounted by one browser page, multiplexed over one socket.

    Notifications may arrive from any thread. They are handed to the owning
    event loop, coalesced per watch and answered with a full re-query. Once
    :meth:`close` has run nothing else is sent.
    """

    def __init__(self, backend: Backend, send: Sender, *, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._backend = backend
        self._send = send
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._send_lock = asyncio.Lock()
        self._watches: dict[str, _Watch] = {}
        self._closed = False
        self.session: AuthSession | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def viewer_id(self) -> UUID | None:
        return self.session.user.id if self.session else None

    def watching(self) -> list[str]:
        return sorted(self._watches)

    def watch(
        self,
        key: str,
        table: str,
        refresh: Refresher,
        *,
        filter: tuple[str, Any] | None = None,
        loading: Payload | None = None,
    ) -> bool:
        """Subscribe ``key`` to changes of ``table``; ``False`` when already watched or closed."""

        if self._closed or key in self._watches:
            return False
        subscription = self._backend.realtime.subscribe(table, lambda event: self.signal(key), filter=filter)
        self._watches[key] = _Watch(subscription=subscription, refresh=refresh, loading=loading)
        return True

    def follow_session(self, session: AuthSession) -> None:
        """Track session changes: refreshed tokens update the identity, sign-out navigates away."""

        self.session = session

        def _on_change(change: AuthChange) -> None:
            if change.session_id != session.id:
                return
            if change.event is AuthEvent.SIGNED_OUT:
                self.signal(SESSION_KEY)
            elif change.session is not None:
                self.session = change.session

        subscription = self._backend.auth.on_auth_state_change(_on_change)
        self._watches[SESSION_KEY] = _Watch(
            subscription=subscription,
            refresh=lambda: {"type": "navigate", "location": AUTH_PATH},
        )

    def unwatch(self, key: str) -> bool:
        watch = self._watches.pop(key, None)
        if watch is None:
            return False
        watch.subscription.unsubscribe()
        return True

    def signal(self, key: str) -> None:
        """Mark ``key`` stale. Safe to call from any thread."""

        if self._closed:
            return
        try:
            self._loop.call_soon_threadsafe(self._enqueue, key)
        except RuntimeError:
            # Loop already shut down.
            logger.debug("Dropped live signal for %s", key)

    def _enqueue(self, key: str) -> None:
        if not self._closed:
            self._queue.put_nowait(key)

    async def send(self, payload: Payload) -> None:
        if self._closed:
            return
        async with self._send_lock:
            await self._send(payload)

    async def run(self) -> None:
        """Drain signals until closed, re-querying each stale watch once per burst."""

        while not self._closed:
            first = await self._queue.get()
            stale = [first]
            while not self._queue.empty():
                key = self._queue.get_nowait()
                if key not in stale:
                    stale.append(key)
            for key in stale:
                await self.refresh(key)

    async def refresh(self, key: str) -> None:
        watch = self._watches.get(key)
        if watch is None or self._closed:
            return
        if watch.loading is not None:
            await self.send(watch.loading)
        try:
            payload = await asyncio.to_thread(watch.refresh)
        except Exception:
            logger.warning("Live refresh of %s failed", key, exc_info=True)
            if watch.loading is not None and self._watches.get(key) is watch:
                # Ends the loading state; the client restores its last render.
                await self.send({"type": "loaded", "target": watch.loading.get("target"), "ok": False})
            return
        if payload is None or self._closed or self._watches.get(key) is not watch:
            return
        await self.send(payload)

    def close(self) -> None:
        """Release every subscription; later signals and refresh results are discarded."""

        if self._closed:
            return
        self._closed = True
        watches, self._watches = self._watches, {}
        for watch in watches.values():
            watch.subscription.unsubscribe()


class LiveConnectionManager:
    """Tracks open live connections so shutdown can release them."""

    def __init__(self) -> None:
        self._connections: set[LiveConnection] = set()

    def open(self, backend: Backend, send: Sender) -> LiveConnection:
        connection = LiveConnection(backend, send)
        self._connections.add(connection)
        return connection

    def close(self, connection: LiveConnection) -> None:
        connection.close()
        self._connections.discard(connection)

    def close_all(self) -> None:
        for connection in list(self._connections):
            self.close(connection)

    def __len__(self) -> int:
        return len(self._connections)


__all__ = ["LiveConnection", "LiveConnectionManager", "SESSION_KEY"]
