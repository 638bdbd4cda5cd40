import math
from datetime import date, datetime
from typing import Annotated, Literal, Optional, get_args

from pydantic import BaseModel, BeforeValidator, computed_field, field_validator

from .services.normalizer import (
    ISO_DATE_RE,
    MONTH_RE,
    from_cents,
    parse_amount,
    parse_date,
    sanitize_text,
    to_cents,
)

TransactionCategory = Literal[
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Groceries",
    "Gas",
    "Insurance",
    "Investment",
    "Salary",
    "Freelance",
    "Business",
    "Other",
]
TRANSACTION_CATEGORIES: tuple[str, ...] = get_args(TransactionCategory)

TransactionType = Literal["income", "expense"]

MAX_TRANSACTION_AMOUNT = 1_000_000
MAX_BUDGET_AMOUNT = 100_000
DESCRIPTION_MIN_LEN = 3
DESCRIPTION_MAX_LEN = 200


# ─────────────────────────────────────────────────────────────────────────────
# Shared field checks
# ─────────────────────────────────────────────────────────────────────────────


def _coerce_amount(value):
    if isinstance(value, str):
        try:
            return parse_amount(value)
        except ValueError:
            raise ValueError("Amount must be a positive number")
    return value


AmountInput = Annotated[float, BeforeValidator(_coerce_amount)]


def _check_amount(value: float, limit: int, label: str) -> float:
    """Reject non-finite amounts and anything that rounds to less than one cent."""
    if not math.isfinite(value):
        raise ValueError(f"{label} must be a finite number")
    if value <= 0 or to_cents(value) < 1:
        raise ValueError(f"{label} must be a positive number")
    if value > limit:
        raise ValueError(f"{label} cannot exceed {limit:,}")
    return value


def _check_date(value: str) -> str:
    """Normalise to YYYY-MM-DD and keep within one year either side of today."""
    iso = parse_date(value)
    if not ISO_DATE_RE.match(iso):
        raise ValueError("Invalid date format")
    try:
        parsed = date.fromisoformat(iso)
    except ValueError:
        raise ValueError("Invalid date format")

    today = date.today()
    if parsed < _shift_years(today, -1):
        raise ValueError("Date cannot be more than 1 year ago")
    if parsed > _shift_years(today, 1):
        raise ValueError("Date cannot be more than 1 year in the future")
    return iso


def _shift_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:  # Feb 29 → Feb 28
        return d.replace(year=d.year + years, day=28)


def _check_description(value: str) -> str:
    text = sanitize_text(value)
    if len(text) < DESCRIPTION_MIN_LEN:
        raise ValueError(f"Description must be at least {DESCRIPTION_MIN_LEN} characters")
    if len(text) > DESCRIPTION_MAX_LEN:
        raise ValueError(f"Description cannot exceed {DESCRIPTION_MAX_LEN} characters")
    return text


# ─────────────────────────────────────────────────────────────────────────────
# Health / meta
# ─────────────────────────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    status: str
    version: str
    database: bool


class SeedResponse(BaseModel):
    inserted: int
    count: int


# ─────────────────────────────────────────────────────────────────────────────
# Transactions
# ─────────────────────────────────────────────────────────────────────────────


class TransactionCreate(BaseModel):
    amount: AmountInput
    date: str
    description: str
    category: TransactionCategory
    type: TransactionType

    @field_validator("amount")
    @classmethod
    def _amount_in_range(cls, v: float) -> float:
        return _check_amount(v, MAX_TRANSACTION_AMOUNT, "Amount")

    @field_validator("date")
    @classmethod
    def _date_in_window(cls, v: str) -> str:
        return _check_date(v)

    @field_validator("description")
    @classmethod
    def _clean_description(cls, v: str) -> str:
        return _check_description(v)


class TransactionUpdate(BaseModel):
    """Partial update — only the fields present in the request body change."""

    amount: Optional[AmountInput] = None
    date: Optional[str] = None
    description: Optional[str] = None
    category: Optional[TransactionCategory] = None
    type: Optional[TransactionType] = None

    @field_validator("amount")
    @classmethod
    def _amount_in_range(cls, v: Optional[float]) -> Optional[float]:
        return v if v is None else _check_amount(v, MAX_TRANSACTION_AMOUNT, "Amount")

    @field_validator("date")
    @classmethod
    def _date_in_window(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _check_date(v)

    @field_validator("description")
    @classmethod
    def _clean_description(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _check_description(v)


class TransactionSchema(BaseModel):
    model_config = {"from_attributes": True}
    id: int
    amount_cents: int
    date: str
    description: str
    category: str
    type: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def amount(self) -> float:
        return from_cents(self.amount_cents)


# ─────────────────────────────────────────────────────────────────────────────
# Budgets
# ─────────────────────────────────────────────────────────────────────────────


class BudgetCreate(BaseModel):
    category: TransactionCategory
    amount: AmountInput
    month: str

    @field_validator("amount")
    @classmethod
    def _amount_in_range(cls, v: float) -> float:
        return _check_amount(v, MAX_BUDGET_AMOUNT, "Budget amount")

    @field_validator("month")
    @classmethod
    def _month_in_range(cls, v: str) -> str:
        if not MONTH_RE.match(v):
            raise ValueError("Month must be in YYYY-MM format")
        year, month = int(v[:4]), int(v[5:7])
        current_year = date.today().year
        if year < current_year - 1 or year > current_year + 2:
            raise ValueError("Year must be within reasonable range")
        if month < 1 or month > 12:
            raise ValueError("Invalid month")
        return v


class BudgetSchema(BaseModel):
    model_config = {"from_attributes": True}
    id: int
    category: str
    amount_cents: int
    month: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def amount(self) -> float:
        return from_cents(self.amount_cents)


# ─────────────────────────────────────────────────────────────────────────────
# Analytics
# ─────────────────────────────────────────────────────────────────────────────


class CategorySummarySchema(BaseModel):
    category: str
    amount: float
    count: int
    percentage: float


class MonthlyExpenseSchema(BaseModel):
    month: str
    amount: float
    count: int


class BudgetComparisonSchema(BaseModel):
    category: str
    budgeted: float
    actual: float
    remaining: float
    percentage: float


class DashboardStatsSchema(BaseModel):
    total_income: float
    total_expenses: float
    net_amount: float
    transaction_count: int
    top_categories: list[CategorySummarySchema]
    recent_transactions: list[TransactionSchema]


class InsightSchema(BaseModel):
    kind: Literal["warning", "success", "tip", "info"]
    title: str
    description: str
