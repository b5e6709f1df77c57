# tests/conftest.py
# Test setup: temporary SQLite store per test, a fixed "today", and the app's
# remote-store dependency pointed at that store.

import os
import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure repo root on sys.path so "import household_budget" works
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# The app builds Settings on import of main, and they refuse empty/placeholder credentials.
os.environ.setdefault("STORE_KEY", "test-store-key-7f3a9c")
os.environ.setdefault("STORE_URL", "sqlite://")

from fastapi.testclient import TestClient  # noqa: E402

from household_budget.db import create_db_and_tables, make_engine  # noqa: E402
from household_budget.deps import get_remote  # noqa: E402
from household_budget.main import app as fastapi_app  # noqa: E402
from household_budget.remote import SqlRemoteStore  # noqa: E402
from household_budget.services.budget_store import BudgetStore, StoreState  # noqa: E402
from household_budget.services.session_manager import SessionManager  # noqa: E402
from household_budget.workspaces import WorkspaceRegistry  # noqa: E402

EMAIL = "ana@test.com"
PASSWORD = "pw123456"


@pytest.fixture()
def tmp_db_path(tmp_path: Path) -> Path:
    return tmp_path / "test_store.db"


@pytest.fixture()
def test_engine(tmp_db_path: Path):
    # File-based SQLite so multiple connections share the same DB
    engine = make_engine(f"sqlite:///{tmp_db_path}")
    create_db_and_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def outbox():
    """Password-reset mails the store 'sent': (email, token) pairs."""
    return []


@pytest.fixture()
def remote(test_engine, outbox):
    return SqlRemoteStore(
        test_engine,
        secret_key="unit-test-secret",
        token_max_age=3600,
        mailer=lambda email, token: outbox.append((email, token)),
    )


@pytest.fixture()
def today() -> date:
    return date(2024, 3, 20)


@pytest.fixture()
def sessions(remote):
    return SessionManager(remote)


@pytest.fixture()
def store(remote, sessions, today):
    s = BudgetStore(remote, clock=lambda: today)
    s.bind(sessions)
    return s


@pytest.fixture()
def ready_store(sessions, store):
    """A store loaded for a freshly registered account."""
    sessions.sign_up(EMAIL, PASSWORD, "Ana")
    sessions.sign_in(EMAIL, PASSWORD)
    assert store.state is StoreState.ready
    return store


@pytest.fixture()
def client(remote, today):
    # Override the app's store to use our test engine; fresh workspaces per test
    fastapi_app.dependency_overrides[get_remote] = lambda: remote
    fastapi_app.state.workspaces = WorkspaceRegistry(clock=lambda: today)
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()
