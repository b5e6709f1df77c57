"""
One workspace per browser session: a SessionManager plus the BudgetStore
bound to it. The browser session cookie only carries the workspace id; the
budget data itself stays in this process and is dropped on sign-out.

A workspace nobody touched for ``max_idle`` seconds (the browser session's
own lifetime) is signed out and dropped the next time the registry is used,
so abandoned cookies do not keep budgets in memory.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional

from household_budget.errors import AuthError
from household_budget.remote import RemoteStore
from household_budget.services.budget_store import BudgetStore
from household_budget.services.session_manager import SessionManager

logger = logging.getLogger("hb.auth")

DEFAULT_MAX_IDLE = 1800  # seconds; matches the session cookie's max_age


@dataclass
class Workspace:
    id: str
    sessions: SessionManager
    store: BudgetStore
    last_seen: float = field(default=0.0)


class WorkspaceRegistry:
    def __init__(
        self,
        clock: Callable[[], date] = date.today,
        *,
        max_idle: float = DEFAULT_MAX_IDLE,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._max_idle = max_idle
        self._timer = timer
        self._lock = threading.Lock()
        self._workspaces: Dict[str, Workspace] = {}

    def open(self, remote: RemoteStore) -> Workspace:
        self.evict_idle()
        sessions = SessionManager(remote)
        store = BudgetStore(remote, clock=self._clock)
        store.bind(sessions)
        workspace = Workspace(
            id=uuid.uuid4().hex, sessions=sessions, store=store, last_seen=self._timer()
        )
        with self._lock:
            self._workspaces[workspace.id] = workspace
        return workspace

    def get(self, workspace_id: Optional[str]) -> Optional[Workspace]:
        self.evict_idle()
        if not workspace_id:
            return None
        with self._lock:
            workspace = self._workspaces.get(workspace_id)
            if workspace is not None:
                workspace.last_seen = self._timer()
            return workspace

    def close(self, workspace_id: str) -> None:
        with self._lock:
            self._workspaces.pop(workspace_id, None)

    def evict_idle(self) -> int:
        """Sign out and drop every workspace idle longer than ``max_idle``."""
        cutoff = self._timer() - self._max_idle
        with self._lock:
            idle: List[Workspace] = [
                ws for ws in self._workspaces.values() if ws.last_seen < cutoff
            ]
            for ws in idle:
                del self._workspaces[ws.id]

        # store calls happen outside the registry lock
        for ws in idle:
            logger.info("Dropping idle workspace %s", ws.id)
            try:
                ws.sessions.sign_out()  # clears the identity; the store resets itself
            except AuthError as ex:
                logger.warning("Could not end the session of workspace %s: %s", ws.id, ex)
        return len(idle)

    def __len__(self) -> int:
        with self._lock:
            return len(self._workspaces)
