# tests/test_reports.py
from datetime import date

import pytest

from household_budget.models import Buyer, Expense, SavingsGoal, default_settings
from household_budget.services import reports

TODAY = date(2024, 3, 20)


def exp(amount, day, category_id="food", buyer_id="1", month=3):
    return Expense(
        id=f"e{amount}-{month}-{day}",
        user_id="u",
        amount=amount,
        category_id=category_id,
        buyer_id=buyer_id,
        date=date(2024, month, day),
    )


def test_current_month_bounds_and_order():
    items = [exp(1, 29, month=2), exp(2, 1), exp(3, 31), exp(4, 1, month=4), exp(5, 15)]
    month = reports.current_month_expenses(items, TODAY)
    assert [e.amount for e in month] == [3, 5, 2]
    assert reports.total_expenses(month) == 10
    assert reports.total_expenses([]) == 0


def test_breakdowns_include_known_and_dangling_ids():
    settings = default_settings()
    items = [exp(10, 2), exp(4, 3, "bills", "2"), exp(6, 4, "gone", "9")]

    by_cat = reports.expenses_by_category(items, settings.categories, TODAY)
    assert by_cat["food"] == 10 and by_cat["bills"] == 4 and by_cat["gone"] == 6
    assert by_cat["health"] == 0.0

    by_buyer = reports.expenses_by_buyer(items, settings.buyers, TODAY)
    assert by_buyer == {"1": 10, "2": 4, "9": 6}


def test_format_amount():
    assert reports.format_amount(42.5, "€") == "42.50 €"
    assert reports.format_amount(0, "$") == "0.00 $"
    assert reports.format_amount(1234.567, "£") == "1234.57 £"


def test_lookups_fall_back_to_empty_name():
    settings = default_settings()
    assert reports.category_name(settings.categories, "transport") == "Transport"
    assert reports.category_name(settings.categories, "nope") == ""
    assert reports.buyer_name(settings.buyers, "2") == "Partner"
    assert reports.buyer_name(settings.buyers, "9") == ""


@pytest.mark.parametrize(
    "budget, spent, expected",
    [(100, 0, "safe"), (100, 79.99, "safe"), (100, 80, "warning"), (100, 100, "danger"),
     (100, 250, "danger"), (0, 50, "safe")],
)
def test_budget_status_thresholds(budget, spent, expected):
    assert reports.budget_status(budget, spent) == expected


def test_budget_summary_lines():
    settings = default_settings().model_copy(update={"budgets": {"food": 50.0}})
    items = [exp(75, 2)]
    summary = reports.budget_summary(settings, items, TODAY)
    food = next(line for line in summary["lines"] if line["category_id"] == "food")
    assert food["percentage"] == 100.0  # capped
    assert food["status"] == "danger"
    assert summary["total_budget"] == 50
    assert summary["remaining"] == -25
    assert len(summary["lines"]) == len(settings.categories)


def test_month_summary():
    settings = default_settings().model_copy(update={"buyer_incomes": {"1": 1500.0, "2": 500.0}})
    items = [exp(a, d) for a, d in ((10, 1), (20, 2), (30, 3), (40, 4), (50, 5), (60, 6))]
    summary = reports.month_summary(settings, items, TODAY)
    assert summary["income"] == 2000
    assert summary["spent"] == 210
    assert summary["remaining"] == 1790
    assert summary["progress"] == pytest.approx(10.5)
    assert summary["daily_average"] == pytest.approx(210 / 20)
    assert [e.amount for e in summary["recent"]] == [60, 50, 40, 30, 20]


def test_month_summary_without_income():
    summary = reports.month_summary(default_settings(), [exp(10, 2)], TODAY)
    assert summary["progress"] == 0.0
    assert summary["remaining"] == -10


@pytest.mark.parametrize(
    "period, expected",
    [("week", [30]), ("month", [30, 20]), ("year", [30, 20, 10]), ("decade", [30, 20])],
)
def test_expenses_in_period(period, expected):
    items = [exp(10, 5, month=1), exp(20, 2), exp(30, 15)]
    assert [e.amount for e in reports.expenses_in_period(items, period, TODAY)] == expected


def test_category_report_shares():
    settings = default_settings()
    items = [exp(30, 2), exp(10, 3, "bills")]
    rows = {r["category_id"]: r for r in reports.category_report(items, settings.categories, "month", TODAY)}
    assert rows["food"]["share"] == 75.0
    assert rows["bills"]["share"] == 25.0
    assert rows["food"]["name"] == "Alimentation"
    assert rows["other"]["amount"] == 0.0


def test_buyer_shares():
    buyers = [Buyer(id="1", name="Me"), Buyer(id="2", name="Partner")]
    shares = reports.buyer_shares([exp(30, 2), exp(10, 3, buyer_id="2")], buyers, TODAY)
    assert [(s["name"], s["percentage"]) for s in shares] == [("Me", 75.0), ("Partner", 25.0)]


def test_filter_expenses():
    items = [exp(1, 1), exp(2, 2, "bills"), exp(3, 3, "food", "2")]
    assert [e.amount for e in reports.filter_expenses(items)] == [3, 2, 1]
    assert [e.amount for e in reports.filter_expenses(items, "food")] == [3, 1]
    assert [e.amount for e in reports.filter_expenses(items, "food", "2")] == [3]


def test_savings_summary():
    goals = [
        SavingsGoal(id="a", name="Trip", target_amount=1000, current_amount=1100),
        SavingsGoal(id="b", name="Car", target_amount=3000, current_amount=900),
    ]
    assert goals[0].completed and not goals[1].completed
    summary = reports.savings_summary(goals)
    assert summary == {"total_saved": 2000, "total_target": 4000, "percentage": 50.0}
    assert reports.savings_summary([])["percentage"] == 0.0
