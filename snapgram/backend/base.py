"""Contract of the managed backend the application delegates to.

The web layer never talks to storage directly: every screen goes through a
:class:`Backend` handle exposing three capability groups.

* ``auth`` - sessions, sign-in/up/out and session-change notifications.
* ``data`` - per-collection select/insert/delete with equality filters,
  ordering and relational expansion. Rows travel as plain dictionaries and
  failures surface as :class:`BackendError`.
* ``realtime`` - per-collection change subscriptions, optionally filtered by
  one equality predicate. Events are signals; handlers re-query.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol, Sequence

from ..schemas import AuthChange, AuthSession
from .changes import ChangeEvent, Subscription

Row = dict[str, Any]
Filter = tuple[str, Any]
Expansion = Mapping[str, Sequence[str]]


class BackendError(RuntimeError):
    """A backend call completed with a failure indicator and message."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


@dataclass(frozen=True)
class Order:
    column: str
    descending: bool = False


class AuthAPI(Protocol):
    def get_session(self, access_token: str | None) -> AuthSession | None: ...

    def refresh_session(self, access_token: str) -> AuthSession: ...

    def sign_in_with_password(self, email: str, password: str) -> AuthSession: ...

    def sign_up(self, email: str, password: str, *, username: str, full_name: str | None = None) -> AuthSession: ...

    def sign_out(self, access_token: str) -> None: ...

    def on_auth_state_change(self, callback: Callable[[AuthChange], None]) -> Subscription: ...


class DataAPI(Protocol):
    def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order: Order | None = None,
        expand: Expansion | None = None,
    ) -> list[Row]: ...

    def insert(self, table: str, row: Mapping[str, Any]) -> Row: ...

    def delete(self, table: str, *, filters: Mapping[str, Any]) -> int: ...


class RealtimeAPI(Protocol):
    def subscribe(
        self,
        table: str,
        callback: Callable[[ChangeEvent], None],
        *,
        filter: Filter | None = None,
    ) -> Subscription: ...


class Backend:
    """Injected client handle bundling the three capability groups."""

    name = "backend"

    def __init__(self, *, auth: AuthAPI, data: DataAPI, realtime: RealtimeAPI) -> None:
        self.auth = auth
        self.data = data
        self.realtime = realtime

    def startup(self) -> None:
        """Prepare resources before the application starts serving."""

    def shutdown(self) -> None:
        """Release resources when the application stops."""


__all__ = [
    "AuthAPI",
    "Backend",
    "BackendError",
    "DataAPI",
    "Expansion",
    "Filter",
    "Order",
    "RealtimeAPI",
    "Row",
]
