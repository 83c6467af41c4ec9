"""
Session-based authentication backed by the remote store.

Admin access requires both a valid session and a row in `admin_users`.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional, Protocol

from content_backend.store import RemoteStore, StoreError

logger = logging.getLogger(__name__)

USERS_TABLE = "auth_users"
SESSIONS_TABLE = "auth_sessions"
ADMINS_TABLE = "admin_users"

MIN_PASSWORD_LENGTH = 6
DEFAULT_SESSION_TTL = timedelta(days=7)
DEFAULT_RECOVERY_TTL = timedelta(hours=1)
_PBKDF2_ITERATIONS = 260_000


class AuthError(Exception):
    """Raised when an authentication operation is refused or fails."""


class AuthEvent(Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
    USER_UPDATED = "USER_UPDATED"


@dataclass
class AuthSession:
    access_token: str
    user_id: str
    email: str
    recovery: bool = False


AuthListener = Callable[[AuthEvent, Optional[AuthSession]], None]


class Subscription:
    def __init__(self, listeners: list, listener: AuthListener):
        self._listeners = listeners
        self._listener = listener

    def unsubscribe(self) -> None:
        if self._listener in self._listeners:
            self._listeners.remove(self._listener)


class AuthClient(Protocol):
    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        ...

    def sign_out(self, access_token: str) -> None:
        ...

    def get_session(self, access_token: str) -> Optional[AuthSession]:
        ...

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        ...

    def request_password_reset(self, email: str) -> Optional[str]:
        ...

    def verify_recovery(self, recovery_token: str) -> AuthSession:
        ...

    def update_password(self, access_token: str, new_password: str) -> None:
        ...

    def is_admin(self, user_id: str) -> bool:
        ...


class RecoveryNotifier(Protocol):
    """Delivers a password recovery token to the account owner."""

    def send(self, email: str, recovery_token: str) -> None:
        ...


class LoggingRecoveryNotifier:
    """Development notifier: writes the recovery link to the log."""

    def __init__(self, reset_url: str):
        self.reset_url = reset_url

    def link_for(self, recovery_token: str) -> str:
        separator = "&" if "?" in self.reset_url else "?"
        return f"{self.reset_url}{separator}token={recovery_token}"

    def send(self, email: str, recovery_token: str) -> None:
        logger.info("Password recovery link for %s: %s", email, self.link_for(recovery_token))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value) -> Optional[datetime]:
    if isinstance(value, str) and value:
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        # SQLite hands back naive datetimes; they are written in UTC.
        return value.replace(tzinfo=timezone.utc)
    return value


def hash_password(password: str, salt: Optional[str] = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), _PBKDF2_ITERATIONS
    )
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt, _, _ = stored.partition("$")
    return hmac.compare_digest(hash_password(password, salt), stored)


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class StoreAuthClient:
    """Auth over the `auth_users`, `auth_sessions` and `admin_users` tables."""

    def __init__(
        self,
        store: RemoteStore,
        *,
        session_ttl: timedelta = DEFAULT_SESSION_TTL,
        recovery_ttl: timedelta = DEFAULT_RECOVERY_TTL,
    ):
        self.store = store
        self.session_ttl = session_ttl
        self.recovery_ttl = recovery_ttl
        self._listeners: list[AuthListener] = []

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self._listeners, listener)

    def _emit(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception("Auth listener failed for %s", event.value)

    def _find_user(self, email: str) -> Optional[dict]:
        try:
            return self.store.select_one(
                USERS_TABLE, filters={"email": _normalize_email(email)}
            )
        except StoreError as exc:
            raise AuthError(f"Authentication failed: {exc}") from exc

    def _open_session(self, user: dict, *, recovery: bool = False) -> AuthSession:
        session = AuthSession(
            access_token=secrets.token_urlsafe(32),
            user_id=user["id"],
            email=user["email"],
            recovery=recovery,
        )
        try:
            self.store.upsert(
                SESSIONS_TABLE,
                [
                    {
                        "access_token": session.access_token,
                        "user_id": session.user_id,
                        "email": session.email,
                        "recovery": recovery,
                        "created_at": _utcnow(),
                    }
                ],
                on_conflict="access_token",
            )
        except StoreError as exc:
            raise AuthError(f"Authentication failed: {exc}") from exc
        return session

    def create_user(self, email: str, password: str, *, admin: bool = False) -> str:
        """Creates (or resets the password of) a user and returns its id."""
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise AuthError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        existing = self._find_user(email)
        user_id = existing["id"] if existing else str(uuid.uuid4())
        try:
            self.store.upsert(
                USERS_TABLE,
                [
                    {
                        "id": user_id,
                        "email": _normalize_email(email),
                        "password_hash": hash_password(password),
                    }
                ],
                on_conflict="id",
            )
            if admin:
                self.store.upsert(
                    ADMINS_TABLE, [{"user_id": user_id}], on_conflict="user_id"
                )
        except StoreError as exc:
            raise AuthError(f"Failed to create user: {exc}") from exc
        return user_id

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        user = self._find_user(email)
        if not user or not verify_password(password or "", user["password_hash"]):
            raise AuthError("Invalid login credentials")
        session = self._open_session(user)
        logger.info("User %s signed in", session.user_id)
        self._emit(AuthEvent.SIGNED_IN, session)
        return session

    def sign_out(self, access_token: str) -> None:
        session = self.get_session(access_token)
        try:
            self.store.delete(SESSIONS_TABLE, filters={"access_token": access_token})
        except StoreError as exc:
            raise AuthError(f"Sign out failed: {exc}") from exc
        if session:
            self._emit(AuthEvent.SIGNED_OUT, None)

    def get_session(self, access_token: str) -> Optional[AuthSession]:
        if not access_token:
            return None
        try:
            row = self.store.select_one(
                SESSIONS_TABLE, filters={"access_token": access_token}
            )
        except StoreError as exc:
            logger.error("Failed to load session: %s", exc)
            return None
        if row is None:
            return None
        recovery = bool(row.get("recovery"))
        ttl = self.recovery_ttl if recovery else self.session_ttl
        created_at = _parse_timestamp(row.get("created_at"))
        if created_at is None or created_at + ttl < _utcnow():
            logger.info("Session for user %s expired", row["user_id"])
            self._drop_session(access_token)
            return None
        return AuthSession(
            access_token=row["access_token"],
            user_id=row["user_id"],
            email=row["email"],
            recovery=recovery,
        )

    def _drop_session(self, access_token: str) -> None:
        try:
            self.store.delete(SESSIONS_TABLE, filters={"access_token": access_token})
        except StoreError as exc:
            logger.error("Failed to delete expired session: %s", exc)

    def request_password_reset(self, email: str) -> Optional[str]:
        """
        Issues a one-time recovery token for the account, if it exists.

        Delivering the token is left to the caller (see RecoveryNotifier).
        """
        user = self._find_user(email)
        if not user:
            logger.info("Password reset requested for unknown account")
            return None
        # Only the newest recovery link stays valid.
        try:
            self.store.delete(
                SESSIONS_TABLE, filters={"user_id": user["id"], "recovery": True}
            )
        except StoreError as exc:
            raise AuthError(f"Password reset failed: {exc}") from exc
        return self._open_session(user, recovery=True).access_token

    def verify_recovery(self, recovery_token: str) -> AuthSession:
        session = self.get_session(recovery_token)
        if session is None or not session.recovery:
            raise AuthError("Recovery link is invalid or has expired")
        self._emit(AuthEvent.PASSWORD_RECOVERY, session)
        return session

    def update_password(self, access_token: str, new_password: str) -> None:
        if len(new_password or "") < MIN_PASSWORD_LENGTH:
            raise AuthError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        session = self.get_session(access_token)
        if session is None:
            raise AuthError("Auth session missing")
        try:
            self.store.upsert(
                USERS_TABLE,
                [{"id": session.user_id, "password_hash": hash_password(new_password)}],
                on_conflict="id",
            )
            if session.recovery:
                # Recovery tokens are single use.
                self.store.delete(
                    SESSIONS_TABLE, filters={"access_token": access_token}
                )
        except StoreError as exc:
            raise AuthError(f"Failed to update password: {exc}") from exc
        self._emit(AuthEvent.USER_UPDATED, session)

    def is_admin(self, user_id: str) -> bool:
        try:
            row = self.store.select_one(ADMINS_TABLE, filters={"user_id": user_id})
        except StoreError as exc:
            logger.error("Error verifying admin status: %s", exc)
            return False
        if row is None:
            logger.warning("Access denied: user %s is not in admin_users", user_id)
            return False
        return True
