# household_budget/routers/budget.py
# Purpose: category budgets, buyers with their incomes, and categories.
# Every write goes through the workspace's BudgetStore; answers carry a
# translated message and the same text is queued as a notice.

from fastapi import APIRouter, Depends, Request, status

from household_budget.deps import require_workspace, respond
from household_budget.schemas import AmountIn, CategoryIn, NameIn
from household_budget.workspaces import Workspace

router = APIRouter(prefix="/budget", tags=["budget"])


@router.get("")
def budget_overview(ws: Workspace = Depends(require_workspace)):
    """Budget page: income per buyer, category budgets vs. this month's spending."""
    store = ws.store
    settings = store.ready_settings()  # 503 until the budget has loaded
    return {
        "income": store.total_income,
        "buyer_incomes": settings.buyer_incomes,
        "buyers": settings.buyers,
        "categories": settings.categories,
        "budgets": settings.budgets,
        "summary": store.budget_summary(),
    }


@router.put("/{category_id}")
def update_budget(
    category_id: str,
    body: AmountIn,
    request: Request,
    ws: Workspace = Depends(require_workspace),
):
    ok = ws.store.update_budget(category_id, body.amount)
    return respond(request, ws.store, ok, "budget_updated")


# ---------- buyers ----------


@router.post("/buyers", status_code=status.HTTP_201_CREATED)
def add_buyer(body: NameIn, request: Request, ws: Workspace = Depends(require_workspace)):
    ok = ws.store.add_buyer(body.name)
    return respond(request, ws.store, ok, "buyer_added")


@router.put("/buyers/{buyer_id}")
def update_buyer(
    buyer_id: str, body: NameIn, request: Request, ws: Workspace = Depends(require_workspace)
):
    ok = ws.store.update_buyer(buyer_id, body.name)
    return respond(request, ws.store, ok, "buyer_updated")


@router.delete("/buyers/{buyer_id}")
def remove_buyer(buyer_id: str, request: Request, ws: Workspace = Depends(require_workspace)):
    ok = ws.store.remove_buyer(buyer_id)
    return respond(request, ws.store, ok, "buyer_removed")


@router.put("/buyers/{buyer_id}/income")
def update_buyer_income(
    buyer_id: str, body: AmountIn, request: Request, ws: Workspace = Depends(require_workspace)
):
    ok = ws.store.update_buyer_income(buyer_id, body.amount)
    return respond(request, ws.store, ok, "income_updated")


# ---------- categories ----------


@router.post("/categories", status_code=status.HTTP_201_CREATED)
def add_category(
    body: CategoryIn, request: Request, ws: Workspace = Depends(require_workspace)
):
    ok = ws.store.add_category(body.name, body.icon, body.color)
    return respond(request, ws.store, ok, "category_added")


@router.put("/categories/{category_id}")
def rename_category(
    category_id: str, body: NameIn, request: Request, ws: Workspace = Depends(require_workspace)
):
    ok = ws.store.rename_category(category_id, body.name)
    return respond(request, ws.store, ok, "category_updated")


@router.delete("/categories/{category_id}")
def remove_category(
    category_id: str, request: Request, ws: Workspace = Depends(require_workspace)
):
    ok = ws.store.remove_category(category_id)
    return respond(request, ws.store, ok, "category_removed")
