# household_budget/services/budget_store.py
"""
The signed-in household's budget, held in memory.

Lifecycle (per identity): uninitialized -> loading -> ready, and back to
uninitialized on sign-out or when another identity signs in.

Mutations follow one recipe: validate -> call the store -> apply the store's
answer to the snapshot. Nothing changes locally when the store call fails.
All mutations of one BudgetStore go through a single lock, so two quick
income edits cannot lose each other's update. A call that finishes after the
identity went away is dropped (generation counter).

Return values: mutations return True/False. A False comes with
``last_error`` (ValidationError, RemoteError or NotReadyError).
AuthError is raised instead: the caller has to sign in again.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from household_budget.errors import (
    BudgetError,
    NotReadyError,
    RemoteError,
    ValidationError,
)
from household_budget.i18n import quote_of_the_day, translate
from household_budget.models import (
    Buyer,
    Category,
    Expense,
    Identity,
    Language,
    SavingsGoal,
    UserSettings,
    default_settings,
)
from household_budget.remote import RemoteStore
from household_budget.services import reports
from household_budget.services.session_manager import SessionManager

logger = logging.getLogger("hb.store")

DateLike = Union[date, str, None]


class StoreState(str, Enum):
    uninitialized = "uninitialized"
    loading = "loading"
    ready = "ready"


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def _amount(value: Any, field: str, *, allow_zero: bool = False) -> float:
    """Coerce a money amount; reject missing, non-numeric and (non-)positive."""
    if value is None or value == "":
        raise ValidationError(f"{field} is required")
    try:
        amount = float(value)
    except (TypeError, ValueError) as ex:
        raise ValidationError(f"{field} must be a number") from ex
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(f"{field} must be {'>= 0' if allow_zero else '> 0'}")
    return amount


def _text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required")
    return text


def _date(value: DateLike, today: date) -> date:
    if value is None or value == "":
        return today
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))  # expects YYYY-MM-DD
    except ValueError as ex:
        raise ValidationError("date must be YYYY-MM-DD") from ex


def _fields(settings: UserSettings, **changes: Any) -> Dict[str, Any]:
    """
    JSON-ready document fields for ``changes``. Touching buyer_incomes always
    carries the recomputed total_income along.
    """
    dumped = settings.model_copy(update=changes).model_dump(mode="json")
    keys = set(changes)
    if "buyer_incomes" in keys:
        keys.add("total_income")
    return {k: dumped[k] for k in keys}


class BudgetStore:
    def __init__(
        self, remote: RemoteStore, *, clock: Callable[[], date] = date.today
    ) -> None:
        self._remote = remote
        self._clock = clock
        self._sessions: Optional[SessionManager] = None
        self._write_lock = threading.RLock()  # one mutation at a time
        self._state_lock = threading.Lock()  # guards snapshot swaps
        self._generation = 0
        self._token: Optional[str] = None
        self.identity: Optional[Identity] = None
        self.state = StoreState.uninitialized
        self.settings: Optional[UserSettings] = None
        self.expenses: List[Expense] = []
        self.last_error: Optional[BudgetError] = None

    # ------------ lifecycle ------------

    def bind(self, sessions: SessionManager) -> None:
        """Follow ``sessions``: reload on a new identity, reset on sign-out."""
        self._sessions = sessions
        sessions.subscribe(self._on_identity_change)

    def _on_identity_change(self, identity: Optional[Identity]) -> None:
        if identity is None:
            self.reset()
        elif (
            self.state is StoreState.ready
            and self.identity is not None
            and identity.id == self.identity.id
        ):
            self.identity = identity  # same account, e.g. new e-mail
        else:
            self.load(identity, self._sessions.token if self._sessions else None)

    def reset(self) -> None:
        with self._state_lock:
            self._generation += 1
            self._token = None
            self.identity = None
            self.state = StoreState.uninitialized
            self.settings = None
            self.expenses = []
            self.last_error = None

    def load(self, identity: Identity, token: Optional[str]) -> bool:
        """Fetch (or create) the settings document, then the expense list."""
        with self._state_lock:
            self._generation += 1
            generation = self._generation
            self._token = token
            self.identity = identity
            self.state = StoreState.loading
            self.settings = None
            self.expenses = []
        try:
            document = self._remote.fetch_settings(token)
            if document is None:
                logger.info("No settings for id=%s; seeding defaults", identity.id)
                document = self._remote.upsert_settings(
                    token, default_settings().model_dump(mode="json")
                )
            settings = UserSettings.model_validate(document)
            expenses = self._remote.list_expenses(token)
        except RemoteError as ex:
            logger.warning("Loading id=%s failed: %s", identity.id, ex)
            with self._state_lock:
                if generation == self._generation:
                    self.state = StoreState.uninitialized
                    self.last_error = ex
            return False

        with self._state_lock:
            if generation != self._generation:
                logger.info("Dropping load result for a closed session")
                return False
            self.settings = settings
            self.expenses = expenses
            self.state = StoreState.ready
            self.last_error = None
        logger.info("Loaded id=%s (%d expenses)", identity.id, len(expenses))
        return True

    def reload(self) -> bool:
        """Load again for the signed-in identity, e.g. after a failed load."""
        sessions = self._sessions
        if sessions is None or sessions.identity is None:
            self.last_error = NotReadyError("Nobody is signed in.")
            return False
        return self.load(sessions.identity, sessions.token)

    def reload_expenses(self) -> bool:
        return self._mutate(lambda token, _: self._fetch_expenses(token))

    # ------------ mutation plumbing ------------

    def _snapshot(self) -> Tuple[int, str, UserSettings]:
        with self._state_lock:
            if self.state is not StoreState.ready or self.settings is None:
                raise NotReadyError("Budget data is not loaded.")
            return self._generation, self._token, self.settings

    def _mutate(
        self, operation: Callable[[str, UserSettings], Callable[[], None]]
    ) -> bool:
        """
        Run one mutation under the write lock. ``operation`` validates, calls
        the store and returns the function that applies the result locally.
        """
        with self._write_lock:
            try:
                generation, token, settings = self._snapshot()
                apply = operation(token, settings)
            except (ValidationError, NotReadyError) as ex:
                logger.info("Mutation rejected: %s", ex)
                self.last_error = ex
                return False
            except RemoteError as ex:
                logger.warning("Mutation failed: %s", ex)
                self.last_error = ex
                return False

            with self._state_lock:
                if generation != self._generation:
                    logger.info("Dropping mutation result for a closed session")
                    return False
                apply()
                self.last_error = None
            return True

    def _update_settings(
        self, build: Callable[[UserSettings], Dict[str, Any]]
    ) -> bool:
        def operation(token: str, settings: UserSettings) -> Callable[[], None]:
            document = self._remote.merge_settings(token, build(settings))
            fresh = UserSettings.model_validate(document)
            return lambda: setattr(self, "settings", fresh)

        return self._mutate(operation)

    def _fetch_expenses(self, token: str) -> Callable[[], None]:
        expenses = self._remote.list_expenses(token)
        return lambda: setattr(self, "expenses", expenses)

    @staticmethod
    def _find(items: List[Any], item_id: str, what: str) -> Any:
        for item in items:
            if item.id == item_id:
                return item
        raise ValidationError(f"Unknown {what}: {item_id}")

    def _expense_fields(
        self,
        settings: UserSettings,
        amount: Any,
        category_id: Optional[str],
        buyer_id: Optional[str],
        description: Optional[str],
        when: DateLike,
    ) -> Dict[str, Any]:
        amount = _amount(amount, "amount")
        category_id = _text(category_id, "category_id")
        buyer_id = _text(buyer_id, "buyer_id")
        self._find(settings.categories, category_id, "category")
        self._find(settings.buyers, buyer_id, "buyer")
        return {
            "amount": amount,
            "category_id": category_id,
            "buyer_id": buyer_id,
            "description": (description or "").strip() or None,
            "date": _date(when, self._clock()),
        }

    # ------------ expenses ------------

    def add_expense(
        self,
        amount: Any,
        category_id: Optional[str],
        buyer_id: Optional[str],
        description: Optional[str] = None,
        date: DateLike = None,
    ) -> bool:
        """Insert an expense, then reload the list so ids/timestamps come from the store."""

        def operation(token: str, settings: UserSettings) -> Callable[[], None]:
            fields = self._expense_fields(
                settings, amount, category_id, buyer_id, description, date
            )
            created = self._remote.insert_expense(token, fields)
            logger.info("Expense %s added", created.id)
            return self._fetch_expenses(token)

        return self._mutate(operation)

    def update_expense(
        self,
        expense_id: str,
        amount: Any,
        category_id: Optional[str],
        buyer_id: Optional[str],
        description: Optional[str] = None,
        date: DateLike = None,
    ) -> bool:
        """Replace every field of an existing expense."""

        def operation(token: str, settings: UserSettings) -> Callable[[], None]:
            fields = self._expense_fields(
                settings, amount, category_id, buyer_id, description, date
            )
            updated = self._remote.replace_expense(token, _text(expense_id, "id"), fields)

            def apply() -> None:
                rest = [e for e in self.expenses if e.id != updated.id]
                self.expenses = sorted(rest + [updated], key=lambda e: e.date, reverse=True)

            return apply

        return self._mutate(operation)

    def delete_expense(self, expense_id: str) -> bool:
        def operation(token: str, settings: UserSettings) -> Callable[[], None]:
            self._remote.delete_expense(token, _text(expense_id, "id"))

            def apply() -> None:
                self.expenses = [e for e in self.expenses if e.id != expense_id]

            return apply

        return self._mutate(operation)

    # ------------ budgets ------------

    def update_budget(self, category_id: str, amount: Any) -> bool:
        def build(s: UserSettings) -> Dict[str, Any]:
            cat_id = _text(category_id, "category_id")
            value = _amount(amount, "amount", allow_zero=True)
            return _fields(s, budgets={**s.budgets, cat_id: value})

        return self._update_settings(build)

    # ------------ buyers & incomes ------------

    def add_buyer(self, name: str) -> bool:
        def build(s: UserSettings) -> Dict[str, Any]:
            buyer = Buyer(id=_new_id(), name=_text(name, "name"))
            return _fields(
                s,
                buyers=s.buyers + [buyer],
                buyer_incomes={**s.buyer_incomes, buyer.id: 0.0},
            )

        return self._update_settings(build)

    def update_buyer(self, buyer_id: str, name: str) -> bool:
        def build(s: UserSettings) -> Dict[str, Any]:
            self._find(s.buyers, buyer_id, "buyer")
            new_name = _text(name, "name")
            buyers = [
                b.model_copy(update={"name": new_name}) if b.id == buyer_id else b
                for b in s.buyers
            ]
            return _fields(s, buyers=buyers)

        return self._update_settings(build)

    def remove_buyer(self, buyer_id: str) -> bool:
        """Drop a buyer and its income; the last buyer can never be removed."""

        def build(s: UserSettings) -> Dict[str, Any]:
            self._find(s.buyers, buyer_id, "buyer")
            if len(s.buyers) <= 1:
                logger.warning("Refusing to remove the last buyer %s", buyer_id)
                raise ValidationError("At least one buyer is required.", code="last_buyer")
            incomes = {k: v for k, v in s.buyer_incomes.items() if k != buyer_id}
            return _fields(
                s,
                buyers=[b for b in s.buyers if b.id != buyer_id],
                buyer_incomes=incomes,
            )

        return self._update_settings(build)

    def update_buyer_income(self, buyer_id: str, amount: Any) -> bool:
        def build(s: UserSettings) -> Dict[str, Any]:
            self._find(s.buyers, buyer_id, "buyer")
            value = _amount(amount, "amount", allow_zero=True)
            return _fields(s, buyer_incomes={**s.buyer_incomes, buyer_id: value})

        return self._update_settings(build)

    # ------------ categories ------------

    def add_category(
        self, name: str, icon: Optional[str] = None, color: Optional[str] = None
    ) -> bool:
        def build(s: UserSettings) -> Dict[str, Any]:
            extra = {k: v for k, v in (("icon", icon), ("color", color)) if v}
            category = Category(id=_new_id(), name=_text(name, "name"), **extra)
            return _fields(s, categories=s.categories + [category])

        return self._update_settings(build)

    def rename_category(self, category_id: str, name: str) -> bool:
        def build(s: UserSettings) -> Dict[str, Any]:
            self._find(s.categories, category_id, "category")
            new_name = _text(name, "name")
            categories = [
                c.model_copy(update={"name": new_name}) if c.id == category_id else c
                for c in s.categories
            ]
            return _fields(s, categories=categories)

        return self._update_settings(build)

    def remove_category(self, category_id: str) -> bool:
        """Refused while any expense still points at the category."""

        def build(s: UserSettings) -> Dict[str, Any]:
            self._find(s.categories, category_id, "category")
            if any(e.category_id == category_id for e in self.expenses):
                raise ValidationError(
                    f"Category {category_id} is used by expenses.", code="category_in_use"
                )
            return _fields(
                s,
                categories=[c for c in s.categories if c.id != category_id],
                budgets={k: v for k, v in s.budgets.items() if k != category_id},
            )

        return self._update_settings(build)

    # ------------ savings ------------

    def add_savings_goal(
        self, name: str, target_amount: Any, description: Optional[str] = None
    ) -> bool:
        def build(s: UserSettings) -> Dict[str, Any]:
            goal = SavingsGoal(
                id=_new_id(),
                name=_text(name, "name"),
                description=(description or "").strip() or None,
                target_amount=_amount(target_amount, "target_amount"),
                current_amount=0.0,
            )
            return _fields(s, savings_goals=s.savings_goals + [goal])

        return self._update_settings(build)

    def update_savings_goal(self, goal_id: str, increment: Any) -> bool:
        """Add ``increment`` to the goal; overshooting the target is allowed."""

        def build(s: UserSettings) -> Dict[str, Any]:
            goal = self._find(s.savings_goals, goal_id, "savings goal")
            step = _amount(increment, "amount")
            goals = [
                g.model_copy(update={"current_amount": goal.current_amount + step})
                if g.id == goal_id
                else g
                for g in s.savings_goals
            ]
            return _fields(s, savings_goals=goals)

        return self._update_settings(build)

    def remove_savings_goal(self, goal_id: str) -> bool:
        def build(s: UserSettings) -> Dict[str, Any]:
            self._find(s.savings_goals, goal_id, "savings goal")
            return _fields(
                s, savings_goals=[g for g in s.savings_goals if g.id != goal_id]
            )

        return self._update_settings(build)

    # ------------ preferences ------------

    def set_language(self, code: Union[Language, str]) -> bool:
        def build(s: UserSettings) -> Dict[str, Any]:
            try:
                language = Language(code)
            except ValueError as ex:
                raise ValidationError(f"Unsupported language: {code}") from ex
            return _fields(s, language=language)

        return self._update_settings(build)

    def set_currency(self, symbol: str) -> bool:
        def build(s: UserSettings) -> Dict[str, Any]:
            return _fields(s, currency=_text(symbol, "currency"))

        return self._update_settings(build)

    # ------------ derived views ------------

    def ready_settings(self) -> UserSettings:
        """The loaded settings; NotReadyError while signed out, loading or after a failed load."""
        settings = self.settings
        if settings is None:
            raise NotReadyError("Budget data is not loaded.")
        return settings

    def _loaded_expenses(self) -> List[Expense]:
        self.ready_settings()
        return self.expenses

    @property
    def today(self) -> date:
        return self._clock()

    @property
    def language(self) -> Language:
        return self.settings.language if self.settings else Language.fr

    @property
    def currency(self) -> str:
        return self.settings.currency if self.settings else "€"

    @property
    def total_income(self) -> float:
        return self.ready_settings().total_income

    def current_month_expenses(self) -> List[Expense]:
        return reports.current_month_expenses(self._loaded_expenses(), self.today)

    def total_expenses_this_month(self) -> float:
        return reports.total_expenses(self.current_month_expenses())

    def expenses_by_category(self) -> Dict[str, float]:
        return reports.expenses_by_category(
            self.expenses, self.ready_settings().categories, self.today
        )

    def expenses_by_buyer(self) -> Dict[str, float]:
        return reports.expenses_by_buyer(
            self.expenses, self.ready_settings().buyers, self.today
        )

    def format_amount(self, value: float) -> str:
        return reports.format_amount(value, self.currency)

    def category_name(self, category_id: str) -> str:
        return reports.category_name(self.ready_settings().categories, category_id)

    def buyer_name(self, buyer_id: str) -> str:
        return reports.buyer_name(self.ready_settings().buyers, buyer_id)

    def translate(self, key: str) -> str:
        return translate(key, self.language)

    def quote(self) -> str:
        return quote_of_the_day(self.today, self.language)

    def filter_expenses(
        self, category_id: Optional[str] = None, buyer_id: Optional[str] = None
    ) -> List[Expense]:
        return reports.filter_expenses(self._loaded_expenses(), category_id, buyer_id)

    def budget_status(self, category_id: str) -> str:
        settings = self.ready_settings()
        spent = self.expenses_by_category().get(category_id, 0.0)
        return reports.budget_status(settings.budgets.get(category_id, 0.0), spent)

    def budget_summary(self) -> Dict[str, Any]:
        return reports.budget_summary(self.ready_settings(), self.expenses, self.today)

    def month_summary(self) -> Dict[str, Any]:
        return reports.month_summary(self.ready_settings(), self.expenses, self.today)

    def expenses_in_period(self, period: str) -> List[Expense]:
        return reports.expenses_in_period(self._loaded_expenses(), period, self.today)

    def category_report(self, period: str) -> List[Dict[str, Any]]:
        return reports.category_report(
            self.expenses, self.ready_settings().categories, period, self.today
        )

    def buyer_shares(self) -> List[Dict[str, Any]]:
        return reports.buyer_shares(
            self.expenses, self.ready_settings().buyers, self.today
        )

    def savings_summary(self) -> Dict[str, float]:
        return reports.savings_summary(self.ready_settings().savings_goals)


__all__ = ["BudgetStore", "StoreState"]
