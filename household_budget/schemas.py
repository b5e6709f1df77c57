# household_budget/schemas.py
"""Request bodies of the JSON API."""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field


class SignUpIn(BaseModel):
    email: str
    password: str
    display_name: Optional[str] = Field(None, description="Shown in the UI greeting")


class SignInIn(BaseModel):
    email: str
    password: str


class EmailIn(BaseModel):
    email: str


class PasswordIn(BaseModel):
    password: str


class ExpenseIn(BaseModel):
    # Optional on purpose: the store reports missing fields itself
    amount: Optional[float] = Field(None, description="Amount, e.g. 42.50")
    category_id: Optional[str] = None
    buyer_id: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.date] = Field(None, description="Defaults to today")


class AmountIn(BaseModel):
    amount: float


class NameIn(BaseModel):
    name: str


class CategoryIn(BaseModel):
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None


class SavingsGoalIn(BaseModel):
    name: str
    target_amount: float
    description: Optional[str] = None


class PreferencesIn(BaseModel):
    language: Optional[str] = None
    currency: Optional[str] = None
