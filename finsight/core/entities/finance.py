"""Finance entities read by the insight pipeline: transactions, budgets, settings."""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class Currency(str, Enum):
    """Supported display currencies."""

    GBP = "GBP"
    INR = "INR"


class BudgetPeriod(str, Enum):
    """How a budget's spending window is determined."""

    MONTHLY = "monthly"
    CUSTOM = "custom"


class Transaction(BaseModel):
    """A single expense recorded by the user."""

    id: str
    user_id: str
    date: date
    amount: Decimal = Field(gt=0)
    category: str
    merchant: str | None = None
    notes: str | None = None


class TransactionFilters(BaseModel):
    """Optional filters for transaction queries. All bounds are inclusive."""

    start_date: date | None = None
    end_date: date | None = None
    category: str | None = None
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None
    merchant: str | None = None


class Budget(BaseModel):
    """
    Spending limit for a period.

    Monthly budgets track the current calendar month; custom budgets
    use their own period_start/period_end. A missing category means
    the budget covers all spending.
    """

    id: str
    user_id: str
    name: str
    amount: Decimal = Field(gt=0)
    period_type: BudgetPeriod = BudgetPeriod.MONTHLY
    period_start: date | None = None
    period_end: date | None = None
    category: str | None = None


class BudgetProgress(BaseModel):
    """Spending measured against a budget."""

    budget: Budget
    current_spending: Decimal = Decimal("0")
    percentage: float = 0.0
    remaining: Decimal = Decimal("0")


class UserSettings(BaseModel):
    """Per-user preferences."""

    user_id: str
    currency: Currency = Currency.GBP
