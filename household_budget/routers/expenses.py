# household_budget/routers/expenses.py
from typing import Optional

from fastapi import APIRouter, Depends, Request, status

from household_budget.deps import require_workspace, respond
from household_budget.schemas import ExpenseIn
from household_budget.workspaces import Workspace

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("")
def list_expenses(
    category_id: Optional[str] = None,
    buyer_id: Optional[str] = None,
    ws: Workspace = Depends(require_workspace),
):
    """All expenses, newest first, optionally filtered by category and/or buyer."""
    return {"expenses": ws.store.filter_expenses(category_id, buyer_id)}


@router.get("/month")
def month_expenses(ws: Workspace = Depends(require_workspace)):
    store = ws.store
    total = store.total_expenses_this_month()
    return {
        "expenses": store.current_month_expenses(),
        "total": total,
        "total_formatted": store.format_amount(total),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def add_expense(
    body: ExpenseIn, request: Request, ws: Workspace = Depends(require_workspace)
):
    ok = ws.store.add_expense(
        body.amount, body.category_id, body.buyer_id, body.description, body.date
    )
    return respond(request, ws.store, ok, "expense_added")


@router.put("/{expense_id}")
def update_expense(
    expense_id: str,
    body: ExpenseIn,
    request: Request,
    ws: Workspace = Depends(require_workspace),
):
    ok = ws.store.update_expense(
        expense_id, body.amount, body.category_id, body.buyer_id, body.description, body.date
    )
    return respond(request, ws.store, ok, "expense_updated")


@router.delete("/{expense_id}")
def delete_expense(
    expense_id: str, request: Request, ws: Workspace = Depends(require_workspace)
):
    ok = ws.store.delete_expense(expense_id)
    return respond(request, ws.store, ok, "expense_deleted")
