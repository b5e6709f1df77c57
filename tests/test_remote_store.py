# tests/test_remote_store.py
from datetime import date

import pytest
from sqlmodel import SQLModel

from household_budget.db import make_engine
from household_budget.errors import AuthError, AuthErrorKind, RemoteError
from household_budget.models import AuthSessionRecord, ExpenseRecord, SavingsGoal, utcnow
from household_budget.remote import SqlRemoteStore


def _signed_in(remote, email):
    remote.create_account(email, "pw123456")
    return remote.authenticate(email, "pw123456").token


def _expense(amount, when, **extra):
    fields = {"amount": amount, "category_id": "food", "buyer_id": "1", "date": when}
    fields.update(extra)
    return fields


def test_rows_are_scoped_to_the_caller(remote):
    ana = _signed_in(remote, "ana@test.com")
    bo = _signed_in(remote, "bo@test.com")

    remote.upsert_settings(ana, {"currency": "€"})
    mine = remote.insert_expense(ana, _expense(10, date(2024, 3, 1)))

    assert remote.fetch_settings(bo) is None
    assert remote.list_expenses(bo) == []
    with pytest.raises(RemoteError):
        remote.delete_expense(bo, mine.id)
    assert [e.id for e in remote.list_expenses(ana)] == [mine.id]


def test_expenses_are_listed_newest_first(remote):
    token = _signed_in(remote, "ana@test.com")
    for day in (3, 12, 7):
        remote.insert_expense(token, _expense(day, date(2024, 3, day)))
    assert [e.date.day for e in remote.list_expenses(token)] == [12, 7, 3]


def test_replace_expense(remote):
    token = _signed_in(remote, "ana@test.com")
    e = remote.insert_expense(token, _expense(10, date(2024, 3, 1), description="bread"))
    updated = remote.replace_expense(token, e.id, _expense(11, date(2024, 3, 2)))
    assert (updated.id, updated.amount, updated.description) == (e.id, 11, None)
    with pytest.raises(RemoteError):
        remote.replace_expense(token, "missing", _expense(1, date(2024, 3, 2)))


def test_merge_settings_keeps_untouched_fields(remote):
    token = _signed_in(remote, "ana@test.com")
    with pytest.raises(RemoteError):
        remote.merge_settings(token, {"currency": "$"})

    remote.upsert_settings(token, {"currency": "€", "language": "fr"})
    merged = remote.merge_settings(token, {"currency": "$"})
    assert merged == {"currency": "$", "language": "fr"}
    assert remote.fetch_settings(token) == merged


def test_end_session_revokes_only_that_token(remote):
    remote.create_account("ana@test.com", "pw123456")
    first = remote.authenticate("ana@test.com", "pw123456").token
    second = remote.authenticate("ana@test.com", "pw123456").token

    remote.end_session(first)
    with pytest.raises(AuthError):
        remote.list_expenses(first)
    assert remote.list_expenses(second) == []


def test_tampered_and_expired_tokens(test_engine, remote):
    token = _signed_in(remote, "ana@test.com")
    with pytest.raises(AuthError) as exc:
        remote.list_expenses(token + "x")
    assert exc.value.kind is AuthErrorKind.not_authenticated

    stale = SqlRemoteStore(test_engine, secret_key="unit-test-secret", token_max_age=-1)
    with pytest.raises(AuthError) as exc:
        stale.list_expenses(token)
    assert exc.value.kind is AuthErrorKind.session_expired


def test_database_failures_surface_as_remote_error(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    SQLModel.metadata.drop_all(engine)  # no tables at all
    remote = SqlRemoteStore(engine, secret_key="unit-test-secret")
    with pytest.raises(RemoteError):
        remote.create_account("ana@test.com", "pw123456")
    engine.dispose()


def test_timestamps_are_timezone_aware():
    assert utcnow().utcoffset().total_seconds() == 0
    expense = ExpenseRecord(
        id="e", user_id="u", amount=1, category_id="food", buyer_id="1", date=date(2024, 3, 1)
    )
    goal = SavingsGoal(id="g", name="Bike", target_amount=300)
    session = AuthSessionRecord(id="s", account_id="u")
    for stamp in (expense.created_at, goal.created_at, session.created_at):
        assert stamp.tzinfo is not None
    assert session.revoked_at is None
