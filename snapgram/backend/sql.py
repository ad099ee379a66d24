"""SQLAlchemy-backed adapter of the backend contract."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from sqlalchemy import Column, select
from sqlalchemy import types as sqltypes
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from ..constants import LIKES, POSTS, PROFILES
from ..database import build_engine, build_session_factory, init_db
from ..models import AuthSessionRecord, Like, Post, Profile, User
from ..schemas import AuthChange, AuthEvent, AuthSession, AuthUser
from ..security import create_access_token, decode_access_token, hash_password, verify_password
from .base import Backend, BackendError, Expansion, Order, Row
from .changes import AuthStateHub, ChangeEvent, ChangeHub, ChangeType, Subscription

logger = logging.getLogger(__name__)

_TABLES: dict[str, type] = {PROFILES: Profile, POSTS: Post, LIKES: Like}

# (table, expanded collection) -> relationship attribute
_EXPANSIONS: dict[tuple[str, str], str] = {(POSTS, PROFILES): "author"}


def _serialize(obj: Any) -> Row:
    return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}


class SqlData:
    """Structured data access over the ORM models."""

    def __init__(self, session_factory: sessionmaker[Session], hub: ChangeHub) -> None:
        self._session_factory = session_factory
        self._hub = hub

    def _model(self, table: str) -> type:
        model = _TABLES.get(table)
        if model is None:
            raise BackendError(f'relation "{table}" does not exist', code="42P01")
        return model

    def _column(self, model: type, table: str, name: str) -> Column:
        column = model.__table__.columns.get(name)
        if column is None:
            raise BackendError(f'column {table}.{name} does not exist', code="42703")
        return column

    def _coerce(self, column: Column, value: Any) -> Any:
        if value is None or not isinstance(column.type, sqltypes.Uuid) or isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value))
        except ValueError as exc:
            raise BackendError(f'invalid input syntax for type uuid: "{value}"', code="22P02") from exc

    def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order: Order | None = None,
        expand: Expansion | None = None,
    ) -> list[Row]:
        model = self._model(table)
        statement = select(model)
        for name, value in (filters or {}).items():
            column = self._column(model, table, name)
            statement = statement.where(column == self._coerce(column, value))
        if order is not None:
            column = self._column(model, table, order.column)
            statement = statement.order_by(column.desc() if order.descending else column.asc())

        relations: dict[str, tuple[str, tuple[str, ...]]] = {}
        for target, columns in (expand or {}).items():
            attribute = _EXPANSIONS.get((table, target))
            if attribute is None:
                raise BackendError(f"Could not find a relationship between '{table}' and '{target}'", code="PGRST200")
            relations[target] = (attribute, tuple(columns))
            statement = statement.options(selectinload(getattr(model, attribute)))

        try:
            with self._session_factory() as db:
                rows: list[Row] = []
                for obj in db.scalars(statement).all():
                    row = _serialize(obj)
                    for target, (attribute, columns) in relations.items():
                        related = getattr(obj, attribute)
                        if related is None:
                            row[target] = None
                            continue
                        expanded = _serialize(related)
                        row[target] = {name: expanded.get(name) for name in columns} if columns else expanded
                    rows.append(row)
                return rows
        except SQLAlchemyError as exc:
            logger.warning("Select on %s failed", table, exc_info=True)
            raise BackendError(f"Failed to query {table}") from exc

    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        model = self._model(table)
        values = {name: self._coerce(self._column(model, table, name), value) for name, value in row.items()}

        try:
            with self._session_factory() as db:
                obj = model(**values)
                db.add(obj)
                db.commit()
                db.refresh(obj)
                record = _serialize(obj)
        except IntegrityError as exc:
            logger.warning("Insert into %s violated a constraint", table)
            raise BackendError(f'duplicate key value violates unique constraint on "{table}"', code="23505") from exc
        except SQLAlchemyError as exc:
            logger.warning("Insert into %s failed", table, exc_info=True)
            raise BackendError(f"Failed to insert into {table}") from exc

        self._hub.publish(ChangeEvent(table=table, type=ChangeType.INSERT, record=record))
        return record

    def delete(self, table: str, *, filters: Mapping[str, Any]) -> int:
        if not filters:
            raise BackendError("DELETE requires a WHERE clause", code="21000")
        model = self._model(table)
        statement = select(model)
        for name, value in filters.items():
            column = self._column(model, table, name)
            statement = statement.where(column == self._coerce(column, value))

        try:
            with self._session_factory() as db:
                removed = list(db.scalars(statement).all())
                records = [_serialize(obj) for obj in removed]
                for obj in removed:
                    db.delete(obj)
                db.commit()
        except SQLAlchemyError as exc:
            logger.warning("Delete from %s failed", table, exc_info=True)
            raise BackendError(f"Failed to delete from {table}") from exc

        for record in records:
            self._hub.publish(ChangeEvent(table=table, type=ChangeType.DELETE, record=record))
        return len(records)


class SqlAuth:
    """Email/password accounts with JWT access tokens bound to revocable sessions."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        states: AuthStateHub,
        changes: ChangeHub,
        secret: str,
        algorithm: str = "HS256",
        expires_minutes: int = 60,
    ) -> None:
        self._session_factory = session_factory
        self._states = states
        self._changes = changes
        self._secret = secret
        self._algorithm = algorithm
        self._expires_minutes = expires_minutes

    def _issue(self, user: User, session_id: uuid.UUID) -> AuthSession:
        token, expires_at = create_access_token(
            user.id,
            session_id,
            secret=self._secret,
            algorithm=self._algorithm,
            expires_minutes=self._expires_minutes,
        )
        return AuthSession(
            id=session_id,
            access_token=token,
            expires_at=expires_at,
            user=AuthUser(id=user.id, email=user.email),
        )

    def on_auth_state_change(self, callback: Callable[[AuthChange], None]) -> Subscription:
        return self._states.subscribe(callback)

    def sign_up(self, email: str, password: str, *, username: str, full_name: str | None = None) -> AuthSession:
        normalized_email = email.strip().lower()
        try:
            with self._session_factory() as db:
                if db.scalar(select(User).where(User.email == normalized_email)) is not None:
                    raise BackendError("User already registered", code="user_already_exists")
                if db.scalar(select(Profile).where(Profile.username == username)) is not None:
                    raise BackendError("Username is already taken", code="23505")

                user = User(email=normalized_email, hashed_password=hash_password(password))
                db.add(user)
                db.flush()
                # Every account gets its profile row at sign-up.
                profile = Profile(id=user.id, username=username, full_name=(full_name or "").strip() or None)
                record = AuthSessionRecord(user_id=user.id)
                db.add_all([profile, record])
                db.commit()
                profile_row = _serialize(profile)
                session = self._issue(user, record.id)
        except IntegrityError as exc:
            raise BackendError("User already registered", code="user_already_exists") from exc
        except SQLAlchemyError as exc:
            logger.exception("Failed to register user")
            raise BackendError("Unable to register user") from exc

        logger.info("Registered user %s", session.user.id)
        self._changes.publish(ChangeEvent(table=PROFILES, type=ChangeType.INSERT, record=profile_row))
        self._states.publish(AuthChange(event=AuthEvent.SIGNED_IN, session_id=session.id, session=session))
        return session

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        normalized_email = email.strip().lower()
        try:
            with self._session_factory() as db:
                user = db.scalar(select(User).where(User.email == normalized_email))
                if user is None or not verify_password(password, user.hashed_password):
                    raise BackendError("Invalid login credentials", code="invalid_credentials")
                record = AuthSessionRecord(user_id=user.id)
                db.add(record)
                db.commit()
                session = self._issue(user, record.id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to open session")
            raise BackendError("Unable to sign in") from exc

        self._states.publish(AuthChange(event=AuthEvent.SIGNED_IN, session_id=session.id, session=session))
        return session

    def get_session(self, access_token: str | None) -> AuthSession | None:
        if not access_token:
            return None
        claims = decode_access_token(access_token, secret=self._secret, algorithm=self._algorithm)
        if claims is None:
            return None
        try:
            with self._session_factory() as db:
                record = db.get(AuthSessionRecord, claims.session_id)
                if record is None or record.revoked_at is not None or record.user_id != claims.user_id:
                    return None
                user = db.get(User, claims.user_id)
        except SQLAlchemyError as exc:
            raise BackendError("Unable to load session") from exc
        if user is None:
            return None
        return AuthSession(
            id=claims.session_id,
            access_token=access_token,
            expires_at=claims.expires_at,
            user=AuthUser(id=user.id, email=user.email),
        )

    def refresh_session(self, access_token: str) -> AuthSession:
        current = self.get_session(access_token)
        if current is None:
            raise BackendError("Invalid Refresh Token: Session Expired", code="session_expired")
        try:
            with self._session_factory() as db:
                record = db.get(AuthSessionRecord, current.id)
                user = db.get(User, current.user.id)
                if record is None or user is None:
                    raise BackendError("Invalid Refresh Token: Session Not Found", code="session_not_found")
                record.refreshed_at = datetime.now(timezone.utc)
                db.commit()
                session = self._issue(user, record.id)
        except SQLAlchemyError as exc:
            raise BackendError("Unable to refresh session") from exc

        self._states.publish(AuthChange(event=AuthEvent.TOKEN_REFRESHED, session_id=session.id, session=session))
        return session

    def sign_out(self, access_token: str) -> None:
        claims = decode_access_token(access_token, secret=self._secret, algorithm=self._algorithm)
        if claims is None:
            raise BackendError("Invalid session", code="session_not_found")
        try:
            with self._session_factory() as db:
                record = db.get(AuthSessionRecord, claims.session_id)
                if record is None:
                    raise BackendError("Session not found", code="session_not_found")
                if record.revoked_at is not None:
                    return
                record.revoked_at = datetime.now(timezone.utc)
                db.commit()
        except SQLAlchemyError as exc:
            logger.warning("Failed to revoke session %s", claims.session_id, exc_info=True)
            raise BackendError("Unable to sign out") from exc

        logger.info("Session %s signed out", claims.session_id)
        self._states.publish(AuthChange(event=AuthEvent.SIGNED_OUT, session_id=claims.session_id))


class SqlBackend(Backend):
    """Backend handle over a SQLAlchemy engine with an in-process change hub."""

    name = "sql"

    def __init__(
        self,
        engine: Engine,
        *,
        secret: str,
        algorithm: str = "HS256",
        expires_minutes: int = 60,
    ) -> None:
        self.engine = engine
        self.session_factory = build_session_factory(engine)
        self.changes = ChangeHub()
        self.states = AuthStateHub()
        super().__init__(
            auth=SqlAuth(
                self.session_factory,
                states=self.states,
                changes=self.changes,
                secret=secret,
                algorithm=algorithm,
                expires_minutes=expires_minutes,
            ),
            data=SqlData(self.session_factory, self.changes),
            realtime=self.changes,
        )

    @classmethod
    def from_url(cls, database_url: str, **kwargs: Any) -> "SqlBackend":
        return cls(build_engine(database_url), **kwargs)

    def startup(self) -> None:
        init_db(self.engine)

    def shutdown(self) -> None:
        self.engine.dispose()


__all__ = ["SqlAuth", "SqlBackend", "SqlData"]
