# household_budget/routers/reports.py
from fastapi import APIRouter, Depends

from household_budget.deps import require_workspace
from household_budget.periods import parse_period
from household_budget.services.reports import total_expenses
from household_budget.workspaces import Workspace

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/dashboard")
def dashboard(ws: Workspace = Depends(require_workspace)):
    """This month at a glance: income vs. spending and the category split."""
    store = ws.store
    summary = store.month_summary()
    return {
        **summary,
        "spent_formatted": store.format_amount(summary["spent"]),
        "remaining_formatted": store.format_amount(summary["remaining"]),
        "by_category": store.expenses_by_category(),
        "by_buyer": store.expenses_by_buyer(),
        "quote": store.quote(),
    }


@router.get("")
def period_report(period: str = "month", ws: Workspace = Depends(require_workspace)):
    """Spending over a week, month or year, split by category; buyer split for the month."""
    store = ws.store
    period = parse_period(period)
    total = total_expenses(store.expenses_in_period(period))
    income = store.total_income
    return {
        "period": period,
        "total": total,
        "income": income,
        "balance": income - total,
        "categories": store.category_report(period),
        "buyers": store.buyer_shares(),
    }
