# household_budget/services/session_manager.py
"""
Who is signed in.

SessionManager wraps the store's auth calls, keeps the current identity and
token in memory, and tells subscribers whenever the identity changes
(a new identity, or None after sign-out). The budget store is one such
subscriber; it reloads or resets itself on every notification.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, TypeVar

from household_budget.errors import AuthError, AuthErrorKind, RemoteError, ValidationError
from household_budget.models import Identity
from household_budget.remote import RemoteStore

logger = logging.getLogger("hb.auth")

IdentityListener = Callable[[Optional[Identity]], None]
T = TypeVar("T")


def _require(**values: str) -> None:
    missing = [name for name, v in values.items() if not (v or "").strip()]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")


class SessionManager:
    def __init__(self, remote: RemoteStore) -> None:
        self._remote = remote
        self._lock = threading.Lock()
        self._identity: Optional[Identity] = None
        self._token: Optional[str] = None
        self._listeners: List[IdentityListener] = []

    # ------------ state ------------

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def subscribe(self, listener: IdentityListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: IdentityListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set(self, identity: Optional[Identity], token: Optional[str]) -> None:
        with self._lock:
            self._identity = identity
            self._token = token
        for listener in list(self._listeners):
            listener(identity)

    def _call(self, fn: Callable[..., T], *args) -> T:
        """Run a store call; backend failures become AuthError(unknown)."""
        try:
            return fn(*args)
        except RemoteError as ex:
            logger.warning("Auth call %s failed: %s", fn.__name__, ex)
            raise AuthError(AuthErrorKind.unknown, str(ex)) from ex

    def _require_token(self) -> str:
        if self._token is None:
            raise AuthError(AuthErrorKind.not_authenticated, "No active session.")
        return self._token

    # ------------ operations ------------

    def sign_up(
        self, email: str, password: str, display_name: Optional[str] = None
    ) -> Identity:
        """Register a new identity. Does not sign in and creates no settings."""
        _require(email=email, password=password)
        identity = self._call(self._remote.create_account, email, password, display_name)
        logger.info("Signed up id=%s", identity.id)
        return identity

    def sign_in(self, email: str, password: str) -> Identity:
        _require(email=email, password=password)
        auth = self._call(self._remote.authenticate, email, password)
        logger.info("Signed in id=%s", auth.identity.id)
        self._set(auth.identity, auth.token)
        return auth.identity

    def sign_out(self) -> None:
        """
        End the session. The local identity is cleared even when the store
        call fails; an already expired or revoked token is not an error.
        """
        token = self._token
        try:
            if token is not None:
                self._call(self._remote.end_session, token)
        except AuthError as ex:
            if ex.kind is AuthErrorKind.unknown:
                raise
            logger.info("Session was already over (%s)", ex.kind.value)
        finally:
            self._set(None, None)

    def request_password_reset(self, email: str) -> None:
        _require(email=email)
        self._call(self._remote.send_password_reset, email)

    def update_email(self, new_email: str) -> Identity:
        token = self._require_token()
        _require(email=new_email)
        identity = self._call(self._remote.change_email, token, new_email)
        self._set(identity, token)
        return identity

    def update_password(self, new_password: str) -> None:
        token = self._require_token()
        _require(password=new_password)
        self._call(self._remote.change_password, token, new_password)
        logger.info("Password changed id=%s", self._identity.id if self._identity else None)


__all__ = ["SessionManager", "IdentityListener"]
