# household_budget/remote.py
"""
The backing store: authentication plus per-identity rows.

RemoteStore is the contract the session manager and the budget store talk to.
Every data call carries the caller's auth token; the store resolves it to an
identity and scopes reads and writes to that identity.

SqlRemoteStore implements the contract over any SQLAlchemy URL:
- settings live in one JSON document per identity (merge on update)
- expenses are rows, listed newest date first
- sessions are rows too, so signing out really revokes the token
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from household_budget.errors import AuthError, AuthErrorKind, RemoteError
from household_budget.models import (
    Account,
    AuthSession,
    AuthSessionRecord,
    Expense,
    ExpenseRecord,
    Identity,
    SettingsDocument,
    utcnow,
)
from household_budget.security import TokenSigner, hash_password, verify_password

logger = logging.getLogger("hb.remote")

# (email, reset_token) -> None; the real one sends a mail
Mailer = Callable[[str, str], None]

_EXPENSE_FIELDS = ("amount", "category_id", "buyer_id", "description", "date")


def log_mailer(email: str, token: str) -> None:
    logger.info("Password reset link issued for %s", email)


class RemoteStore(ABC):
    # ---- auth ----

    @abstractmethod
    def create_account(
        self, email: str, password: str, display_name: Optional[str] = None
    ) -> Identity: ...

    @abstractmethod
    def authenticate(self, email: str, password: str) -> AuthSession: ...

    @abstractmethod
    def end_session(self, token: str) -> None: ...

    @abstractmethod
    def send_password_reset(self, email: str) -> None: ...

    @abstractmethod
    def change_email(self, token: str, new_email: str) -> Identity: ...

    @abstractmethod
    def change_password(self, token: str, new_password: str) -> None: ...

    # ---- settings document ----

    @abstractmethod
    def fetch_settings(self, token: str) -> Optional[Dict[str, Any]]: ...

    @abstractmethod
    def upsert_settings(self, token: str, document: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    def merge_settings(self, token: str, fields: Dict[str, Any]) -> Dict[str, Any]: ...

    # ---- expenses ----

    @abstractmethod
    def insert_expense(self, token: str, fields: Dict[str, Any]) -> Expense: ...

    @abstractmethod
    def replace_expense(
        self, token: str, expense_id: str, fields: Dict[str, Any]
    ) -> Expense: ...

    @abstractmethod
    def delete_expense(self, token: str, expense_id: str) -> None: ...

    @abstractmethod
    def list_expenses(self, token: str) -> List[Expense]: ...


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _identity(account: Account) -> Identity:
    return Identity(
        id=account.id, email=account.email, display_name=account.display_name
    )


def _expense(record: ExpenseRecord) -> Expense:
    return Expense.model_validate(record, from_attributes=True)


class SqlRemoteStore(RemoteStore):
    def __init__(
        self,
        engine: Engine,
        *,
        secret_key: str,
        token_max_age: int = 3600,
        mailer: Mailer = log_mailer,
    ) -> None:
        self._engine = engine
        self._signer = TokenSigner(secret_key, token_max_age)
        self._mailer = mailer

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Open a DB session; driver/DB failures surface as RemoteError."""
        try:
            with Session(self._engine) as session:
                yield session
        except SQLAlchemyError as ex:
            logger.warning("Store call failed: %s", ex)
            raise RemoteError("The budget store is unavailable.") from ex

    def _account(self, session: Session, token: str) -> Account:
        """Resolve a token to its account or raise AuthError."""
        session_id = self._signer.session_id(token)
        record = session.get(AuthSessionRecord, session_id)
        if record is None or record.revoked_at is not None:
            raise AuthError(AuthErrorKind.not_authenticated, "Not signed in.")
        account = session.get(Account, record.account_id)
        if account is None:
            raise AuthError(AuthErrorKind.not_authenticated, "Account not found.")
        return account

    def _email_taken(self, session: Session, email: str) -> bool:
        return session.exec(select(Account).where(Account.email == email)).first() is not None

    # ------------ auth ------------

    def create_account(
        self, email: str, password: str, display_name: Optional[str] = None
    ) -> Identity:
        email = _normalize_email(email)
        with self._session() as session:
            if self._email_taken(session, email):
                raise AuthError(AuthErrorKind.email_taken, "This e-mail is already registered.")
            account = Account(
                id=uuid.uuid4().hex,
                email=email,
                hashed_password=hash_password(password),
                display_name=(display_name or "").strip() or None,
            )
            session.add(account)
            session.commit()
            session.refresh(account)
            logger.info("Account created id=%s", account.id)
            return _identity(account)

    def authenticate(self, email: str, password: str) -> AuthSession:
        email = _normalize_email(email)
        with self._session() as session:
            account = session.exec(select(Account).where(Account.email == email)).first()
            if not account or not verify_password(password, account.hashed_password):
                raise AuthError(
                    AuthErrorKind.invalid_credentials, "Invalid email or password."
                )
            record = AuthSessionRecord(id=uuid.uuid4().hex, account_id=account.id)
            session.add(record)
            session.commit()
            return AuthSession(identity=_identity(account), token=self._signer.issue(record.id))

    def end_session(self, token: str) -> None:
        session_id = self._signer.session_id(token)
        with self._session() as session:
            record = session.get(AuthSessionRecord, session_id)
            if record is not None and record.revoked_at is None:
                record.revoked_at = utcnow()
                session.add(record)
                session.commit()

    def send_password_reset(self, email: str) -> None:
        email = _normalize_email(email)
        with self._session() as session:
            account = session.exec(select(Account).where(Account.email == email)).first()
        # Unknown addresses get the same (silent) answer.
        if account is not None:
            self._mailer(account.email, self._signer.issue_reset(account.id))

    def change_email(self, token: str, new_email: str) -> Identity:
        new_email = _normalize_email(new_email)
        with self._session() as session:
            account = self._account(session, token)
            if new_email != account.email and self._email_taken(session, new_email):
                raise AuthError(AuthErrorKind.email_taken, "This e-mail is already registered.")
            account.email = new_email
            session.add(account)
            session.commit()
            session.refresh(account)
            return _identity(account)

    def change_password(self, token: str, new_password: str) -> None:
        with self._session() as session:
            account = self._account(session, token)
            account.hashed_password = hash_password(new_password)
            session.add(account)
            session.commit()

    # ------------ settings document ------------

    def fetch_settings(self, token: str) -> Optional[Dict[str, Any]]:
        with self._session() as session:
            account = self._account(session, token)
            row = session.get(SettingsDocument, account.id)
            return dict(row.document) if row else None

    def upsert_settings(self, token: str, document: Dict[str, Any]) -> Dict[str, Any]:
        with self._session() as session:
            account = self._account(session, token)
            row = session.get(SettingsDocument, account.id)
            if row is None:
                row = SettingsDocument(user_id=account.id)
            # assign a new dict so the JSON column is flagged dirty
            row.document = dict(document)
            row.updated_at = utcnow()
            session.add(row)
            session.commit()
            session.refresh(row)
            return dict(row.document)

    def merge_settings(self, token: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        with self._session() as session:
            account = self._account(session, token)
            row = session.get(SettingsDocument, account.id)
            if row is None:
                raise RemoteError("No settings stored for this account.")
            row.document = {**row.document, **fields}
            row.updated_at = utcnow()
            session.add(row)
            session.commit()
            session.refresh(row)
            return dict(row.document)

    # ------------ expenses ------------

    def insert_expense(self, token: str, fields: Dict[str, Any]) -> Expense:
        with self._session() as session:
            account = self._account(session, token)
            record = ExpenseRecord(
                id=uuid.uuid4().hex,
                user_id=account.id,
                **{k: fields.get(k) for k in _EXPENSE_FIELDS},
            )
            session.add(record)
            session.commit()
            session.refresh(record)
            return _expense(record)

    def _owned_expense(
        self, session: Session, account: Account, expense_id: str
    ) -> ExpenseRecord:
        record = session.exec(
            select(ExpenseRecord).where(
                ExpenseRecord.id == expense_id, ExpenseRecord.user_id == account.id
            )
        ).first()
        if record is None:
            raise RemoteError(f"Expense {expense_id} not found.")
        return record

    def replace_expense(
        self, token: str, expense_id: str, fields: Dict[str, Any]
    ) -> Expense:
        with self._session() as session:
            account = self._account(session, token)
            record = self._owned_expense(session, account, expense_id)
            for key in _EXPENSE_FIELDS:
                setattr(record, key, fields.get(key))
            session.add(record)
            session.commit()
            session.refresh(record)
            return _expense(record)

    def delete_expense(self, token: str, expense_id: str) -> None:
        with self._session() as session:
            account = self._account(session, token)
            record = self._owned_expense(session, account, expense_id)
            session.delete(record)
            session.commit()

    def list_expenses(self, token: str) -> List[Expense]:
        with self._session() as session:
            account = self._account(session, token)
            rows = session.exec(
                select(ExpenseRecord)
                .where(ExpenseRecord.user_id == account.id)
                .order_by(ExpenseRecord.date.desc(), ExpenseRecord.created_at.desc())
            ).all()
            return [_expense(r) for r in rows]


__all__ = ["RemoteStore", "SqlRemoteStore", "Mailer", "log_mailer"]
