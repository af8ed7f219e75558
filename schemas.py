from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from aggregation import BudgetStatus, InsightType
from categories import normalize_category
from config import get_settings
from formatting import cents_to_decimal, parse_amount, to_cents
from models import TransactionType


def _configured_category(value: object) -> str:
    return normalize_category(value, get_settings().categories)


def _amount_from_text(value: object) -> object:
    if isinstance(value, str):
        return cents_to_decimal(parse_amount(value))
    return value


Amount = Annotated[
    Decimal,
    Field(gt=0, max_digits=12, decimal_places=2),
    BeforeValidator(_amount_from_text),
]
CategoryName = Annotated[str, BeforeValidator(_configured_category)]


class TransactionIn(BaseModel):
    amount: Amount
    date: date
    description: str = Field(..., min_length=1, max_length=200)
    category: CategoryName = "other"
    type: TransactionType = TransactionType.expense

    @field_validator("description", mode="before")
    @classmethod
    def _strip_description(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def amount_cents(self) -> int:
        return to_cents(self.amount)


class BudgetIn(BaseModel):
    category: CategoryName
    amount: Amount
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1970, le=3000)

    @property
    def amount_cents(self) -> int:
        return to_cents(self.amount)


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    amount_cents: int
    date: date
    description: str
    category: str
    type: TransactionType
    created_at: datetime
    updated_at: datetime


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class TransactionPage(BaseModel):
    data: list[TransactionOut]
    pagination: Pagination


class BudgetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category: str
    amount_cents: int
    month: int
    year: int
    created_at: datetime
    updated_at: datetime


class PeriodOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    slug: str
    start: date
    end: date


class BudgetComparisonOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    budget_amount_cents: int
    actual_amount_cents: int
    difference_cents: int
    percentage_used: float
    status: BudgetStatus


class SpendingInsightOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: InsightType
    category: str
    message: str
    amount_cents: Optional[int] = None
    percentage: Optional[float] = None


class BudgetOverviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_budget_cents: int
    total_actual_cents: int
    total_variance_cents: int
    over_budget_count: int
    warning_count: int
    average_usage: float


class BudgetReportOut(BaseModel):
    period: PeriodOut
    comparisons: list[BudgetComparisonOut]
    insights: list[SpendingInsightOut]
    overview: BudgetOverviewOut


class CategorySummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    amount_cents: int
    percentage: float
    color: str


class DashboardSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_expenses_cents: int
    total_income_cents: int
    net_amount_cents: int
    category_breakdown: list[CategorySummaryOut]
    recent_transactions: list[TransactionOut]


class MonthlyExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month_key: str
    amount_cents: int
    transaction_count: int


class HealthOut(BaseModel):
    status: Literal["healthy", "unhealthy"]
    database: Literal["connected", "disconnected"]
    timestamp: datetime
    error: Optional[str] = None
