"""In-process fan-out of change and session notifications."""
from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Mapping, TypeVar

from ..schemas import AuthChange

logger = logging.getLogger(__name__)

E = TypeVar("E")


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    """A collection was mutated; ``record`` is the new row, or the old one for deletes."""

    table: str
    type: ChangeType
    record: Mapping[str, Any] = field(default_factory=dict)

    def matches(self, column: str, value: Any) -> bool:
        if column not in self.record:
            return False
        return str(self.record[column]) == str(value)


class Subscription:
    """Handle returned by every subscribe call; ``unsubscribe`` is idempotent."""

    def __init__(self, release: Callable[[], None]) -> None:
        self._release: Callable[[], None] | None = release
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._release is not None

    def unsubscribe(self) -> None:
        with self._lock:
            release, self._release = self._release, None
        if release is not None:
            release()


class _Listeners(Generic[E]):
    """Thread-safe callback registry; callbacks run outside the lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._callbacks: dict[int, tuple[Callable[[E], None], Callable[[E], bool]]] = {}

    def add(self, callback: Callable[[E], None], predicate: Callable[[E], bool]) -> Subscription:
        with self._lock:
            key = next(self._ids)
            self._callbacks[key] = (callback, predicate)

        def _release() -> None:
            with self._lock:
                self._callbacks.pop(key, None)

        return Subscription(_release)

    def __len__(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def dispatch(self, event: E) -> int:
        with self._lock:
            targets = list(self._callbacks.values())
        delivered = 0
        for callback, predicate in targets:
            if not predicate(event):
                continue
            try:
                callback(event)
            except Exception:
                logger.exception("Notification callback failed")
                continue
            delivered += 1
        return delivered


class ChangeHub:
    """Per-collection change channel shared by every subscriber of a backend."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tables: dict[str, _Listeners[ChangeEvent]] = {}

    def _listeners(self, table: str) -> _Listeners[ChangeEvent]:
        with self._lock:
            return self._tables.setdefault(table, _Listeners())

    def subscribe(
        self,
        table: str,
        callback: Callable[[ChangeEvent], None],
        *,
        filter: tuple[str, Any] | None = None,
    ) -> Subscription:
        if filter is None:
            predicate: Callable[[ChangeEvent], bool] = lambda event: True
        else:
            column, value = filter
            predicate = lambda event: event.matches(column, value)
        return self._listeners(table).add(callback, predicate)

    def publish(self, event: ChangeEvent) -> int:
        """Deliver ``event`` to matching subscribers and return how many were notified."""

        return self._listeners(event.table).dispatch(event)

    def subscriber_count(self, table: str | None = None) -> int:
        with self._lock:
            groups = list(self._tables.items())
        return sum(len(listeners) for name, listeners in groups if table is None or name == table)


class AuthStateHub:
    """Session-change notifications (sign-in, sign-out, token refresh)."""

    def __init__(self) -> None:
        self._listeners: _Listeners[AuthChange] = _Listeners()

    def subscribe(self, callback: Callable[[AuthChange], None]) -> Subscription:
        return self._listeners.add(callback, lambda change: True)

    def publish(self, change: AuthChange) -> int:
        return self._listeners.dispatch(change)

    def subscriber_count(self) -> int:
        return len(self._listeners)


__all__ = ["AuthStateHub", "ChangeEvent", "ChangeHub", "ChangeType", "Subscription"]
