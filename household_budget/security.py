# household_budget/security.py
from __future__ import annotations

from typing import Optional

from fastapi.requests import Request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

from household_budget.errors import AuthError, AuthErrorKind

# Password hashing context (bcrypt by default)
_pwd = CryptContext(schemes=["bcrypt"], deprecated="auto")

_AUTH_SALT = "hb.auth"
_RESET_SALT = "hb.password-reset"
_WORKSPACE_KEY = "workspace_id"  # where the browser session keeps its handle


# ------------ Password helpers ------------


def hash_password(plain: str) -> str:
    """Return a secure hash for a plaintext password."""
    return _pwd.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plaintext password against a stored hash."""
    return _pwd.verify(plain, hashed)


# ------------ Auth tokens ------------


class TokenSigner:
    """
    Issues and checks signed, time-limited tokens carrying a session id.
    Two salts keep auth tokens and password-reset tokens apart.
    """

    def __init__(self, secret_key: str, max_age: int) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key)
        self.max_age = max_age

    def issue(self, session_id: str) -> str:
        return self._serializer.dumps(session_id, salt=_AUTH_SALT)

    def issue_reset(self, account_id: str) -> str:
        return self._serializer.dumps(account_id, salt=_RESET_SALT)

    def session_id(self, token: Optional[str]) -> str:
        if not token:
            raise AuthError(AuthErrorKind.not_authenticated, "No active session.")
        try:
            return self._serializer.loads(token, salt=_AUTH_SALT, max_age=self.max_age)
        except SignatureExpired as ex:
            raise AuthError(AuthErrorKind.session_expired, "Session expired.") from ex
        except BadSignature as ex:
            raise AuthError(AuthErrorKind.not_authenticated, "Invalid session.") from ex


# ------------ Browser session helpers ------------


def get_workspace_id_from_session(request: Request) -> Optional[str]:
    """
    Read the workspace handle from the browser session (if present).
    """
    try:
        wid = request.session.get(_WORKSPACE_KEY)  # set during /auth/signin
    except AssertionError:  # SessionMiddleware not installed
        wid = None
    return str(wid) if wid is not None else None


def remember_workspace(request: Request, workspace_id: str) -> None:
    request.session[_WORKSPACE_KEY] = workspace_id


def forget_workspace(request: Request) -> None:
    request.session.pop(_WORKSPACE_KEY, None)


__all__ = [
    "hash_password",
    "verify_password",
    "TokenSigner",
    "get_workspace_id_from_session",
    "remember_workspace",
    "forget_workspace",
]
