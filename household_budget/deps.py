# household_budget/deps.py
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status

from household_budget.errors import BudgetError, NotReadyError, RemoteError
from household_budget.flash import flash
from household_budget.remote import RemoteStore
from household_budget.security import get_workspace_id_from_session
from household_budget.services.budget_store import BudgetStore
from household_budget.workspaces import Workspace, WorkspaceRegistry


def get_remote(request: Request) -> RemoteStore:
    """The backing store; tests override this dependency."""
    return request.app.state.remote


def get_registry(request: Request) -> WorkspaceRegistry:
    return request.app.state.workspaces


def current_workspace(request: Request) -> Optional[Workspace]:
    return get_registry(request).get(get_workspace_id_from_session(request))


def require_workspace(request: Request) -> Workspace:
    """
    The signed-in workspace of this browser session, or 401.
    Usage (inside route):  ws: Workspace = Depends(require_workspace)
    """
    ws = current_workspace(request)
    if ws is None or ws.sessions.identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please sign in to continue.",
        )
    request.state.user_id = ws.sessions.identity.id  # for the request log
    return ws


def respond(request: Request, store: BudgetStore, ok: bool, success_key: str) -> Dict[str, Any]:
    """
    Turn a mutation's True/False into a JSON answer plus a notice.
    Failures carry the translated reason with the same status the app-wide
    handlers use: 400 rejected input, 502 store failure, 503 not loaded.
    """
    if ok:
        message = store.translate(success_key)
        flash(request, message, "success")
        return {"ok": True, "message": message}

    error = store.last_error
    key = getattr(error, "code", None) or "operation_failed"
    message = store.translate(key)
    flash(request, message, "warning")
    raise HTTPException(status_code=failure_status(error), detail=message)


def failure_status(error: Optional[BudgetError]) -> int:
    if isinstance(error, RemoteError):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(error, NotReadyError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_400_BAD_REQUEST
