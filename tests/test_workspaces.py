# tests/test_workspaces.py
import pytest

from household_budget.errors import AuthError
from household_budget.services.budget_store import StoreState
from household_budget.workspaces import WorkspaceRegistry

EMAIL = "ana@test.com"
PASSWORD = "pw123456"


class FakeTimer:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture()
def timer():
    return FakeTimer()


@pytest.fixture()
def registry(timer, today):
    return WorkspaceRegistry(clock=lambda: today, max_idle=60, timer=timer)


def _signed_in(registry, remote):
    ws = registry.open(remote)
    ws.sessions.sign_in(EMAIL, PASSWORD)
    return ws


def test_open_get_close(registry, remote):
    ws = registry.open(remote)
    assert registry.get(ws.id) is ws
    assert registry.get(None) is None
    assert len(registry) == 1
    registry.close(ws.id)
    assert registry.get(ws.id) is None
    assert len(registry) == 0


def test_idle_workspace_is_signed_out_and_dropped(registry, remote, timer):
    remote.create_account(EMAIL, PASSWORD)
    ws = _signed_in(registry, remote)
    token = ws.sessions.token
    assert ws.store.state is StoreState.ready

    timer.now += 61
    assert registry.get(ws.id) is None
    assert len(registry) == 0
    assert ws.store.state is StoreState.uninitialized
    assert ws.store.settings is None
    with pytest.raises(AuthError):
        remote.fetch_settings(token)  # revoked on the store side too


def test_recently_used_workspace_survives(registry, remote, timer):
    remote.create_account(EMAIL, PASSWORD)
    active = _signed_in(registry, remote)
    abandoned = registry.open(remote)

    timer.now += 40
    assert registry.get(active.id) is active  # refreshes last_seen
    timer.now += 40
    registry.open(remote)  # eviction also runs on open

    assert registry.get(active.id) is active
    assert registry.get(abandoned.id) is None
    assert len(registry) == 2
