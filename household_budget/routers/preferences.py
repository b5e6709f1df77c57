# household_budget/routers/preferences.py
from fastapi import APIRouter, Depends, Request

from household_budget.deps import require_workspace, respond
from household_budget.i18n import CURRENCY_OPTIONS, LANGUAGE_OPTIONS
from household_budget.schemas import PreferencesIn
from household_budget.workspaces import Workspace

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("")
def get_preferences(ws: Workspace = Depends(require_workspace)):
    settings = ws.store.ready_settings()
    return {
        "language": settings.language,
        "currency": settings.currency,
        "language_options": LANGUAGE_OPTIONS,
        "currency_options": CURRENCY_OPTIONS,
    }


@router.put("")
def update_preferences(
    body: PreferencesIn, request: Request, ws: Workspace = Depends(require_workspace)
):
    store = ws.store
    ok = True
    if body.language is not None:
        ok = store.set_language(body.language)
    if ok and body.currency is not None:
        ok = store.set_currency(body.currency)
    # translated with the language that was just saved
    return respond(request, store, ok, "preferences_saved")
