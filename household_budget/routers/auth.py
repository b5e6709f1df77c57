# household_budget/routers/auth.py
# Sign up / in / out, password reset and profile updates.
# Signing in opens (or reuses) the browser session's workspace, which loads
# the budget; signing out closes it and drops the in-memory budget.

from fastapi import APIRouter, Depends, Request, status

from household_budget.deps import current_workspace, get_registry, get_remote, require_workspace
from household_budget.errors import AuthError, NotReadyError
from household_budget.flash import flash
from household_budget.i18n import translate
from household_budget.remote import RemoteStore
from household_budget.schemas import EmailIn, PasswordIn, SignInIn, SignUpIn
from household_budget.security import forget_workspace, remember_workspace
from household_budget.services.budget_store import StoreState
from household_budget.services.session_manager import SessionManager
from household_budget.workspaces import Workspace

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(body: SignUpIn, remote: RemoteStore = Depends(get_remote)):
    # Registration only; the settings document is created on first sign-in.
    identity = SessionManager(remote).sign_up(body.email, body.password, body.display_name)
    return {"ok": True, "identity": identity, "message": translate("account_created")}


@router.post("/signin")
def signin(
    body: SignInIn, request: Request, remote: RemoteStore = Depends(get_remote)
):
    registry = get_registry(request)
    ws = current_workspace(request)
    fresh = ws is None
    if fresh:
        ws = registry.open(remote)
    try:
        identity = ws.sessions.sign_in(body.email, body.password)
    except AuthError:
        if fresh:
            registry.close(ws.id)
        raise

    remember_workspace(request, ws.id)
    if ws.store.state is not StoreState.ready:
        # Signed in, but the budget did not load; POST /auth/reload retries.
        raise ws.store.last_error or NotReadyError("Budget data is not loaded.")
    message = ws.store.translate("signed_in")
    flash(request, message, "success")
    return {
        "ok": True,
        "identity": identity,
        "state": ws.store.state,
        "message": message,
    }


@router.post("/reload")
def reload(ws: Workspace = Depends(require_workspace)):
    """Load the budget again for the signed-in identity."""
    if not ws.store.reload():
        raise ws.store.last_error
    return {"ok": True, "state": ws.store.state}


@router.post("/signout")
def signout(request: Request):
    ws = current_workspace(request)
    forget_workspace(request)
    if ws is not None:
        try:
            ws.sessions.sign_out()
        finally:
            get_registry(request).close(ws.id)
    flash(request, translate("signed_out"), "info")
    return {"ok": True}


@router.post("/password-reset")
def password_reset(body: EmailIn, remote: RemoteStore = Depends(get_remote)):
    SessionManager(remote).request_password_reset(body.email)
    return {"ok": True, "message": translate("reset_sent")}


@router.post("/email")
def update_email(body: EmailIn, ws: Workspace = Depends(require_workspace)):
    identity = ws.sessions.update_email(body.email)
    return {"ok": True, "identity": identity}


@router.post("/password")
def update_password(body: PasswordIn, ws: Workspace = Depends(require_workspace)):
    ws.sessions.update_password(body.password)
    return {"ok": True}
