# household_budget/models.py
import datetime as dt  # expense dates + timestamps
from enum import Enum  # small enums for clarity
from typing import Any, Dict, List, Optional  # nullable fields

from pydantic import BaseModel, computed_field
from pydantic import Field as ModelField
from sqlalchemy import JSON, Column, DateTime
from sqlmodel import (
    Field,  # column definitions
    SQLModel,  # ORM base
    UniqueConstraint,  # one account per e-mail
)


def utcnow() -> dt.datetime:
    """Timezone-aware "now" for every stored timestamp."""
    return dt.datetime.now(dt.timezone.utc)


# ---------- Backing store tables ----------


class Account(SQLModel, table=True):  # an Identity on the store side
    id: str = Field(primary_key=True)  # opaque uuid hex
    email: str = Field(index=True)
    hashed_password: str  # never plaintext
    display_name: Optional[str] = None
    created_at: dt.datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    __table_args__ = (UniqueConstraint("email", name="uq_account_email"),)


class SettingsDocument(SQLModel, table=True):
    """One JSON document per identity; merged field-by-field on update."""

    __tablename__ = "settings_document"
    user_id: str = Field(primary_key=True, foreign_key="account.id")
    document: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    updated_at: dt.datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class ExpenseRecord(SQLModel, table=True):
    __tablename__ = "expense"
    id: str = Field(primary_key=True)  # generated by the store on insert
    user_id: str = Field(index=True, foreign_key="account.id")  # owner
    amount: float
    category_id: str = Field(index=True)
    buyer_id: str = Field(index=True)
    description: Optional[str] = None
    date: dt.date = Field(index=True)  # calendar date of the expense
    created_at: dt.datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class AuthSessionRecord(SQLModel, table=True):
    """A signed-in session on the store side; revoked on sign-out."""

    __tablename__ = "auth_session"
    id: str = Field(primary_key=True)
    account_id: str = Field(index=True, foreign_key="account.id")
    created_at: dt.datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    revoked_at: Optional[dt.datetime] = Field(default=None, sa_type=DateTime(timezone=True))


# ---------- Domain types (what the budget store holds in memory) ----------


class Language(str, Enum):
    fr = "fr"
    en = "en"
    es = "es"


class Identity(BaseModel):
    id: str
    email: str
    display_name: Optional[str] = None


class Category(BaseModel):
    id: str
    name: str
    icon: str = "📦"
    color: str = "#E6D5C3"


class Buyer(BaseModel):
    id: str
    name: str


class SavingsGoal(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    target_amount: float
    current_amount: float = 0.0
    created_at: dt.datetime = ModelField(default_factory=utcnow)

    @computed_field  # derived, never stored on its own
    @property
    def completed(self) -> bool:
        return self.current_amount >= self.target_amount


class Expense(BaseModel):
    id: str
    user_id: str
    amount: float
    category_id: str
    buyer_id: str
    description: Optional[str] = None
    date: dt.date
    created_at: Optional[dt.datetime] = None


class UserSettings(BaseModel):
    language: Language = Language.fr
    currency: str = "€"
    buyer_incomes: Dict[str, float] = ModelField(default_factory=dict)
    categories: List[Category] = ModelField(default_factory=list)
    buyers: List[Buyer] = ModelField(default_factory=list)
    budgets: Dict[str, float] = ModelField(default_factory=dict)
    savings_goals: List[SavingsGoal] = ModelField(default_factory=list)

    @computed_field  # always the sum of buyer incomes
    @property
    def total_income(self) -> float:
        return sum(self.buyer_incomes.values())


# Seeded when an identity loads for the first time.
DEFAULT_CATEGORIES = [
    Category(id="food", name="Alimentation", icon="🍽️", color="#E07A5F"),
    Category(id="transport", name="Transport", icon="🚗", color="#9CAF88"),
    Category(id="housing", name="Logement", icon="🏠", color="#D2B48C"),
    Category(id="entertainment", name="Loisirs", icon="🎭", color="#C8860D"),
    Category(id="health", name="Santé", icon="🏥", color="#8B4513"),
    Category(id="shopping", name="Achats", icon="🛍️", color="#F2E7D5"),
    Category(id="bills", name="Factures", icon="📋", color="#5D4037"),
    Category(id="other", name="Autres", icon="📦", color="#E6D5C3"),
]


def default_settings() -> UserSettings:
    return UserSettings(
        language=Language.fr,
        currency="€",
        categories=[c.model_copy() for c in DEFAULT_CATEGORIES],
        buyers=[Buyer(id="1", name="Me"), Buyer(id="2", name="Partner")],
        buyer_incomes={"1": 0.0, "2": 0.0},
        budgets={},
        savings_goals=[],
    )


class AuthSession(BaseModel):
    identity: Identity
    token: str
