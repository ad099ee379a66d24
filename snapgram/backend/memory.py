"""In-memory adapter of the backend contract for demos and tests."""
from __future__ import annotations

import copy
import logging
import secrets
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping

from ..constants import LIKES, POSTS, PROFILES
from ..schemas import AuthChange, AuthEvent, AuthSession, AuthUser
from ..security import hash_password, verify_password
from .base import Backend, BackendError, Expansion, Order, Row
from .changes import AuthStateHub, ChangeEvent, ChangeHub, ChangeType, Subscription

logger = logging.getLogger(__name__)

_COLUMNS: dict[str, tuple[str, ...]] = {
    PROFILES: ("id", "username", "full_name", "bio", "avatar_url"),
    POSTS: ("id", "user_id", "image_url", "caption", "created_at"),
    LIKES: ("post_id", "user_id", "created_at"),
}
_REQUIRED: dict[str, tuple[str, ...]] = {
    PROFILES: ("id", "username"),
    POSTS: ("user_id", "image_url"),
    LIKES: ("post_id", "user_id"),
}
_UNIQUE: dict[str, tuple[tuple[str, ...], ...]] = {
    PROFILES: (("id",), ("username",)),
    POSTS: (("id",),),
    LIKES: (("post_id", "user_id"),),
}
# (table, expanded collection) -> (local column, remote column)
_EXPANSIONS: dict[tuple[str, str], tuple[str, str]] = {(POSTS, PROFILES): ("user_id", "id")}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _same(left: Any, right: Any) -> bool:
    return str(left) == str(right)


class FaultInjector:
    """Queue of one-shot failures keyed by ``(operation, table)``."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: list[tuple[str, str | None, str]] = []

    def fail_next(self, operation: str, table: str | None = None, *, message: str = "Simulated backend failure") -> None:
        with self._lock:
            self._pending.append((operation, table, message))

    def check(self, operation: str, table: str | None = None) -> None:
        with self._lock:
            for index, (op, target, message) in enumerate(self._pending):
                if op == operation and (target is None or target == table):
                    del self._pending[index]
                    break
            else:
                return
        raise BackendError(message)


class MemoryData:
    def __init__(self, hub: ChangeHub, faults: FaultInjector) -> None:
        self._hub = hub
        self._faults = faults
        self._lock = threading.RLock()
        self._tables: dict[str, list[Row]] = {name: [] for name in _COLUMNS}
        self.calls: list[tuple[str, str]] = []

    def _rows(self, table: str) -> list[Row]:
        rows = self._tables.get(table)
        if rows is None:
            raise BackendError(f'relation "{table}" does not exist', code="42P01")
        return rows

    def _check_columns(self, table: str, names: Any) -> None:
        for name in names:
            if name not in _COLUMNS[table]:
                raise BackendError(f'column {table}.{name} does not exist', code="42703")

    def _matching(self, table: str, filters: Mapping[str, Any]) -> list[Row]:
        rows = self._rows(table)
        self._check_columns(table, filters)
        return [row for row in rows if all(_same(row.get(k), v) for k, v in filters.items())]

    def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order: Order | None = None,
        expand: Expansion | None = None,
    ) -> list[Row]:
        self.calls.append(("select", table))
        self._faults.check("select", table)
        with self._lock:
            rows = [dict(row) for row in self._matching(table, filters or {})]
            if order is not None:
                self._check_columns(table, [order.column])
                rows.sort(key=lambda row: row[order.column], reverse=order.descending)
            for target, columns in (expand or {}).items():
                link = _EXPANSIONS.get((table, target))
                if link is None:
                    raise BackendError(f"Could not find a relationship between '{table}' and '{target}'", code="PGRST200")
                local, remote = link
                for row in rows:
                    related = next((r for r in self._rows(target) if _same(r.get(remote), row.get(local))), None)
                    if related is None:
                        row[target] = None
                    else:
                        row[target] = {name: related.get(name) for name in columns} if columns else dict(related)
            return copy.deepcopy(rows)

    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        self.calls.append(("insert", table))
        self._faults.check("insert", table)
        with self._lock:
            rows = self._rows(table)
            self._check_columns(table, row)
            for name in _REQUIRED[table]:
                if row.get(name) is None:
                    raise BackendError(f'null value in column "{name}" of relation "{table}"', code="23502")

            record: Row = {name: None for name in _COLUMNS[table]}
            if "id" in record:
                record["id"] = uuid.uuid4()
            if "created_at" in record:
                record["created_at"] = _utcnow()
            record.update(row)

            for columns in _UNIQUE[table]:
                if any(all(_same(existing.get(c), record.get(c)) for c in columns) for existing in rows):
                    raise BackendError(f'duplicate key value violates unique constraint on "{table}"', code="23505")
            rows.append(record)
            stored = dict(record)

        self._hub.publish(ChangeEvent(table=table, type=ChangeType.INSERT, record=stored))
        return stored

    def delete(self, table: str, *, filters: Mapping[str, Any]) -> int:
        self.calls.append(("delete", table))
        self._faults.check("delete", table)
        if not filters:
            raise BackendError("DELETE requires a WHERE clause", code="21000")
        with self._lock:
            removed = self._matching(table, filters)
            doomed = {id(row) for row in removed}
            self._tables[table] = [row for row in self._rows(table) if id(row) not in doomed]
        for record in removed:
            self._hub.publish(ChangeEvent(table=table, type=ChangeType.DELETE, record=dict(record)))
        return len(removed)


@dataclass
class _Account:
    id: uuid.UUID
    email: str
    hashed_password: str


@dataclass
class _Token:
    session_id: uuid.UUID
    user_id: uuid.UUID
    expires_at: datetime
    revoked: bool = False


class MemoryAuth:
    def __init__(
        self,
        data: MemoryData,
        states: AuthStateHub,
        faults: FaultInjector,
        *,
        expires_minutes: int = 60,
    ) -> None:
        self._data = data
        self._states = states
        self._faults = faults
        self._expires = timedelta(minutes=expires_minutes)
        self._lock = threading.Lock()
        self._accounts: dict[str, _Account] = {}
        self._tokens: dict[str, _Token] = {}

    def _issue(self, account: _Account, session_id: uuid.UUID) -> AuthSession:
        token = secrets.token_urlsafe(32)
        expires_at = _utcnow() + self._expires
        with self._lock:
            self._tokens[token] = _Token(session_id=session_id, user_id=account.id, expires_at=expires_at)
        return AuthSession(
            id=session_id,
            access_token=token,
            expires_at=expires_at,
            user=AuthUser(id=account.id, email=account.email),
        )

    def on_auth_state_change(self, callback: Callable[[AuthChange], None]) -> Subscription:
        return self._states.subscribe(callback)

    def sign_up(self, email: str, password: str, *, username: str, full_name: str | None = None) -> AuthSession:
        self._faults.check("sign_up")
        normalized_email = email.strip().lower()
        with self._lock:
            if normalized_email in self._accounts:
                raise BackendError("User already registered", code="user_already_exists")
        if self._data.select(PROFILES, filters={"username": username}):
            raise BackendError("Username is already taken", code="23505")

        account = _Account(id=uuid.uuid4(), email=normalized_email, hashed_password=hash_password(password))
        with self._lock:
            self._accounts[normalized_email] = account
        try:
            self._data.insert(
                PROFILES,
                {"id": account.id, "username": username, "full_name": (full_name or "").strip() or None},
            )
        except BackendError:
            with self._lock:
                self._accounts.pop(normalized_email, None)
            raise
        session = self._issue(account, uuid.uuid4())
        self._states.publish(AuthChange(event=AuthEvent.SIGNED_IN, session_id=session.id, session=session))
        return session

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        self._faults.check("sign_in")
        with self._lock:
            account = self._accounts.get(email.strip().lower())
        if account is None or not verify_password(password, account.hashed_password):
            raise BackendError("Invalid login credentials", code="invalid_credentials")
        session = self._issue(account, uuid.uuid4())
        self._states.publish(AuthChange(event=AuthEvent.SIGNED_IN, session_id=session.id, session=session))
        return session

    def get_session(self, access_token: str | None) -> AuthSession | None:
        if not access_token:
            return None
        with self._lock:
            token = self._tokens.get(access_token)
            if token is None or token.revoked or token.expires_at <= _utcnow():
                return None
            account = next((a for a in self._accounts.values() if a.id == token.user_id), None)
        if account is None:
            return None
        return AuthSession(
            id=token.session_id,
            access_token=access_token,
            expires_at=token.expires_at,
            user=AuthUser(id=account.id, email=account.email),
        )

    def refresh_session(self, access_token: str) -> AuthSession:
        self._faults.check("refresh_session")
        current = self.get_session(access_token)
        if current is None:
            raise BackendError("Invalid Refresh Token: Session Expired", code="session_expired")
        with self._lock:
            account = self._accounts[current.user.email]
        session = self._issue(account, current.id)
        self._states.publish(AuthChange(event=AuthEvent.TOKEN_REFRESHED, session_id=session.id, session=session))
        return session

    def sign_out(self, access_token: str) -> None:
        self._faults.check("sign_out")
        with self._lock:
            token = self._tokens.get(access_token)
            if token is None:
                raise BackendError("Session not found", code="session_not_found")
            if token.revoked:
                return
            # Every token issued under the session goes with it.
            for other in self._tokens.values():
                if other.session_id == token.session_id:
                    other.revoked = True
        self._states.publish(AuthChange(event=AuthEvent.SIGNED_OUT, session_id=token.session_id))

    def expire(self, access_token: str, *, at: datetime | None = None) -> None:
        """Move a token's expiry, e.g. into the refresh window."""

        with self._lock:
            self._tokens[access_token].expires_at = at or _utcnow()


class MemoryBackend(Backend):
    """Backend handle holding every collection in process memory."""

    name = "memory"

    def __init__(self, *, expires_minutes: int = 60) -> None:
        self.faults = FaultInjector()
        self.changes = ChangeHub()
        self.states = AuthStateHub()
        data = MemoryData(self.changes, self.faults)
        super().__init__(
            auth=MemoryAuth(data, self.states, self.faults, expires_minutes=expires_minutes),
            data=data,
            realtime=self.changes,
        )

    @property
    def calls(self) -> list[tuple[str, str]]:
        return self.data.calls

    def fail_next(self, operation: str, table: str | None = None, *, message: str = "Simulated backend failure") -> None:
        self.faults.fail_next(operation, table, message=message)


__all__ = ["FaultInjector", "MemoryAuth", "MemoryBackend", "MemoryData"]
