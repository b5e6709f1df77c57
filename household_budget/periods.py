# household_budget/periods.py
"""
Helpers for working with calendar periods.

Definitions
- report period: "week" (last 7 days), "month" (since the 1st), "year" (since Jan 1st)

Public API:
- month_bounds(date) -> (first_day, last_day)
- period_start(period, today) -> date
- parse_period(str) -> str
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Tuple

__all__ = [
    "PERIODS",
    "month_bounds",
    "period_start",
    "parse_period",
]

PERIODS = ("week", "month", "year")


# ---------- Months ----------


def month_bounds(d: date) -> Tuple[date, date]:
    """First and last day (both inclusive) of the month containing ``d``."""
    last = calendar.monthrange(d.year, d.month)[1]
    return d.replace(day=1), d.replace(day=last)


# ---------- Report periods ----------


def parse_period(period: str) -> str:
    """Normalize a report period name; unknown values fall back to 'month'."""
    p = (period or "").strip().lower()
    return p if p in PERIODS else "month"


def period_start(period: str, today: date) -> date:
    """
    First date (inclusive) covered by a report period.
    - week: seven days back from today
    - month: first day of the current month
    - year: January 1st of the current year
    """
    p = parse_period(period)
    if p == "week":
        return today - timedelta(days=7)
    if p == "year":
        return today.replace(month=1, day=1)
    return today.replace(day=1)
