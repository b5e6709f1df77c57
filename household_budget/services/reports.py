# household_budget/services/reports.py
"""
Derived views over the in-memory snapshot.

Everything here is a pure function of (expenses, settings, today): no store
calls and no caching, so results always follow the live expense list.

Breakdown policy: every known category/buyer appears (at 0.0 when it has no
spending), plus any id that expenses still reference.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from household_budget.models import Buyer, Category, Expense, SavingsGoal, UserSettings
from household_budget.periods import month_bounds, period_start

WARNING_THRESHOLD = 80.0  # percent of a category budget
DANGER_THRESHOLD = 100.0
RECENT_COUNT = 5


def _newest_first(expenses: Iterable[Expense]) -> List[Expense]:
    return sorted(expenses, key=lambda e: e.date, reverse=True)


def _percent(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def _breakdown(
    expenses: Iterable[Expense], known_ids: Iterable[str], key: Callable[[Expense], str]
) -> Dict[str, float]:
    totals = {k: 0.0 for k in known_ids}
    for e in expenses:
        k = key(e)
        totals[k] = totals.get(k, 0.0) + e.amount
    return totals


# ---------- Month views ----------


def current_month_expenses(expenses: Iterable[Expense], today: date) -> List[Expense]:
    """Expenses dated within today's month (first and last day included)."""
    first, last = month_bounds(today)
    return _newest_first(e for e in expenses if first <= e.date <= last)


def total_expenses(expenses: Iterable[Expense]) -> float:
    return sum(e.amount for e in expenses)


def expenses_by_category(
    expenses: Iterable[Expense], categories: Sequence[Category], today: date
) -> Dict[str, float]:
    return _breakdown(
        current_month_expenses(expenses, today),
        (c.id for c in categories),
        lambda e: e.category_id,
    )


def expenses_by_buyer(
    expenses: Iterable[Expense], buyers: Sequence[Buyer], today: date
) -> Dict[str, float]:
    return _breakdown(
        current_month_expenses(expenses, today),
        (b.id for b in buyers),
        lambda e: e.buyer_id,
    )


# ---------- Lookups / formatting ----------


def format_amount(value: float, currency: str) -> str:
    return f"{value:.2f} {currency}"


def category_name(categories: Sequence[Category], category_id: str) -> str:
    """Name of a category, or "" for a dangling id."""
    for c in categories:
        if c.id == category_id:
            return c.name
    return ""


def buyer_name(buyers: Sequence[Buyer], buyer_id: str) -> str:
    """Name of a buyer, or "" once the buyer has been removed."""
    for b in buyers:
        if b.id == buyer_id:
            return b.name
    return ""


def filter_expenses(
    expenses: Iterable[Expense],
    category_id: Optional[str] = None,
    buyer_id: Optional[str] = None,
) -> List[Expense]:
    return _newest_first(
        e
        for e in expenses
        if (not category_id or e.category_id == category_id)
        and (not buyer_id or e.buyer_id == buyer_id)
    )


# ---------- Budget page ----------


def budget_status(budget: float, spent: float) -> str:
    """'safe' / 'warning' (>= 80%) / 'danger' (>= 100%); no budget is 'safe'."""
    pct = _percent(spent, budget)
    if pct >= DANGER_THRESHOLD:
        return "danger"
    if pct >= WARNING_THRESHOLD:
        return "warning"
    return "safe"


def budget_summary(
    settings: UserSettings, expenses: Iterable[Expense], today: date
) -> Dict[str, Any]:
    spent_by_cat = expenses_by_category(expenses, settings.categories, today)
    lines = []
    for c in settings.categories:
        budget = settings.budgets.get(c.id, 0.0)
        spent = spent_by_cat.get(c.id, 0.0)
        lines.append(
            {
                "category_id": c.id,
                "budget": budget,
                "spent": spent,
                "percentage": min(_percent(spent, budget), 100.0),
                "status": budget_status(budget, spent),
            }
        )
    total_budget = sum(settings.budgets.values())
    total_spent = sum(spent_by_cat.values())
    return {
        "total_budget": total_budget,
        "total_spent": total_spent,
        "remaining": total_budget - total_spent,
        "lines": lines,
    }


# ---------- Dashboard ----------


def month_summary(
    settings: UserSettings, expenses: Iterable[Expense], today: date
) -> Dict[str, Any]:
    month = current_month_expenses(expenses, today)
    spent = total_expenses(month)
    income = settings.total_income
    return {
        "income": income,
        "spent": spent,
        "remaining": income - spent,
        "progress": min(_percent(spent, income), 100.0),
        "daily_average": spent / today.day,
        "recent": month[:RECENT_COUNT],
    }


# ---------- Reports ----------


def expenses_in_period(
    expenses: Iterable[Expense], period: str, today: date
) -> List[Expense]:
    start = period_start(period, today)
    return _newest_first(e for e in expenses if e.date >= start)


def category_report(
    expenses: Iterable[Expense], categories: Sequence[Category], period: str, today: date
) -> List[Dict[str, Any]]:
    selected = expenses_in_period(expenses, period, today)
    total = total_expenses(selected)
    totals = _breakdown(selected, (c.id for c in categories), lambda e: e.category_id)
    by_id = {c.id: c for c in categories}
    rows = []
    for cat_id, amount in totals.items():
        cat = by_id.get(cat_id)
        rows.append(
            {
                "category_id": cat_id,
                "name": cat.name if cat else "",
                "icon": cat.icon if cat else "",
                "color": cat.color if cat else "",
                "amount": amount,
                "share": _percent(amount, total),
            }
        )
    return rows


def buyer_shares(
    expenses: Iterable[Expense], buyers: Sequence[Buyer], today: date
) -> List[Dict[str, Any]]:
    totals = expenses_by_buyer(expenses, buyers, today)
    month_total = sum(totals.values())
    return [
        {
            "buyer_id": buyer_id,
            "name": buyer_name(buyers, buyer_id),
            "amount": amount,
            "percentage": _percent(amount, month_total),
        }
        for buyer_id, amount in totals.items()
    ]


# ---------- Savings ----------


def savings_summary(goals: Sequence[SavingsGoal]) -> Dict[str, float]:
    saved = sum(g.current_amount for g in goals)
    target = sum(g.target_amount for g in goals)
    return {
        "total_saved": saved,
        "total_target": target,
        "percentage": _percent(saved, target),
    }
