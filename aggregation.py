from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Optional, Sequence

from categories import FALLBACK_CATEGORY
from formatting import format_amount
from models import Budget, Transaction, TransactionType


CATEGORY_PALETTE = (
    "#3b82f6",
    "#ef4444",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#06b6d4",
    "#84cc16",
    "#f97316",
)

OVER_BUDGET_PERCENT = 100
WARNING_PERCENT = 90
WELL_UNDER_RATIO = 0.5
RECENT_TRANSACTIONS_LIMIT = 5


class BudgetStatus(str, Enum):
    under = "under"
    on_track = "on-track"
    over = "over"


class InsightType(str, Enum):
    warning = "warning"
    success = "success"
    info = "info"


@dataclass(frozen=True)
class BudgetComparison:
    category: str
    budget_amount_cents: int
    actual_amount_cents: int
    difference_cents: int
    percentage_used: float
    status: BudgetStatus


@dataclass(frozen=True)
class SpendingInsight:
    type: InsightType
    category: str
    message: str
    amount_cents: Optional[int] = None
    percentage: Optional[float] = None


@dataclass(frozen=True)
class CategorySummary:
    category: str
    amount_cents: int
    percentage: float
    color: str


@dataclass(frozen=True)
class DashboardSummary:
    total_expenses_cents: int
    total_income_cents: int
    net_amount_cents: int
    category_breakdown: list[CategorySummary]
    recent_transactions: list[Transaction]


@dataclass(frozen=True)
class BudgetOverview:
    total_budget_cents: int
    total_actual_cents: int
    total_variance_cents: int
    over_budget_count: int
    warning_count: int
    average_usage: float


@dataclass(frozen=True)
class BudgetReport:
    start: date
    end: date
    comparisons: list[BudgetComparison]
    insights: list[SpendingInsight]
    overview: BudgetOverview


@dataclass(frozen=True)
class MonthlyExpense:
    month_key: str  # "YYYY-MM"
    amount_cents: int
    transaction_count: int = 0


def _calendar_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _category_key(value: object) -> str:
    if isinstance(value, Enum):
        value = value.value
    return str(value) if value else FALLBACK_CATEGORY


def _percent(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return part * 100 / whole


def group_by_category(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> dict[str, int]:
    """Sum ``amount_cents`` per category for one transaction type.

    ``start`` and ``end`` bound a closed range compared at calendar-date
    granularity. Keys keep the order in which categories were first seen.
    """
    lower = _calendar_date(start) if start is not None else None
    upper = _calendar_date(end) if end is not None else None
    totals: dict[str, int] = {}
    for txn in transactions:
        if txn.type != transaction_type:
            continue
        txn_date = _calendar_date(txn.date)
        if lower is not None and txn_date < lower:
            continue
        if upper is not None and txn_date > upper:
            continue
        key = _category_key(txn.category)
        totals[key] = totals.get(key, 0) + txn.amount_cents
    return totals


def spending_for_category(
    transactions: Iterable[Transaction], category: str, start: date, end: date
) -> int:
    totals = group_by_category(
        transactions, TransactionType.expense, start=start, end=end
    )
    return totals.get(_category_key(category), 0)


def budget_status(percentage_used: float) -> BudgetStatus:
    if percentage_used > OVER_BUDGET_PERCENT:
        return BudgetStatus.over
    if percentage_used >= WARNING_PERCENT:
        return BudgetStatus.on_track
    return BudgetStatus.under


def compare_budget(budget: Budget, actual_amount_cents: int) -> BudgetComparison:
    percentage = _percent(actual_amount_cents, budget.amount_cents)
    return BudgetComparison(
        category=_category_key(budget.category),
        budget_amount_cents=budget.amount_cents,
        actual_amount_cents=actual_amount_cents,
        difference_cents=budget.amount_cents - actual_amount_cents,
        percentage_used=percentage,
        status=budget_status(percentage),
    )


def compare_budgets(
    budgets: Sequence[Budget],
    transactions: Iterable[Transaction],
    start: date,
    end: date,
) -> list[BudgetComparison]:
    actual_by_category = group_by_category(
        transactions, TransactionType.expense, start=start, end=end
    )
    comparisons: list[BudgetComparison] = []
    for budget in budgets:
        actual = actual_by_category.get(_category_key(budget.category), 0)
        comparisons.append(compare_budget(budget, actual))
    return comparisons


def sort_comparisons(
    comparisons: Sequence[BudgetComparison], by: str = "budget"
) -> list[BudgetComparison]:
    if by == "actual":
        return sorted(comparisons, key=lambda c: c.actual_amount_cents, reverse=True)
    return sorted(comparisons, key=lambda c: c.budget_amount_cents, reverse=True)


def insight_for(comparison: BudgetComparison) -> Optional[SpendingInsight]:
    category = comparison.category
    if comparison.status == BudgetStatus.over:
        overspent = abs(comparison.difference_cents)
        return SpendingInsight(
            type=InsightType.warning,
            category=category,
            message=(
                f"You've exceeded your {category} budget by {format_amount(overspent)}"
            ),
            amount_cents=overspent,
            percentage=comparison.percentage_used,
        )
    if comparison.status == BudgetStatus.on_track:
        return SpendingInsight(
            type=InsightType.info,
            category=category,
            message=f"You're close to your {category} budget limit",
            percentage=comparison.percentage_used,
        )
    well_under = comparison.budget_amount_cents * WELL_UNDER_RATIO
    if comparison.difference_cents > well_under:
        return SpendingInsight(
            type=InsightType.success,
            category=category,
            message=f"Great job! You're well under your {category} budget",
            amount_cents=comparison.difference_cents,
        )
    return None


def generate_insights(
    comparisons: Iterable[BudgetComparison],
) -> list[SpendingInsight]:
    insights: list[SpendingInsight] = []
    for comparison in comparisons:
        insight = insight_for(comparison)
        if insight is not None:
            insights.append(insight)
    return insights


def summarize_comparisons(
    comparisons: Sequence[BudgetComparison],
) -> BudgetOverview:
    total_budget = sum(c.budget_amount_cents for c in comparisons)
    total_actual = sum(c.actual_amount_cents for c in comparisons)
    average = (
        sum(c.percentage_used for c in comparisons) / len(comparisons)
        if comparisons
        else 0
    )
    return BudgetOverview(
        total_budget_cents=total_budget,
        total_actual_cents=total_actual,
        total_variance_cents=total_actual - total_budget,
        over_budget_count=sum(
            1 for c in comparisons if c.status == BudgetStatus.over
        ),
        warning_count=sum(
            1 for c in comparisons if c.status == BudgetStatus.on_track
        ),
        average_usage=average,
    )


def compute_budget_comparison(
    transactions: Iterable[Transaction],
    budgets: Sequence[Budget],
    period_start: date,
    period_end: date,
) -> BudgetReport:
    comparisons = compare_budgets(budgets, transactions, period_start, period_end)
    return BudgetReport(
        start=period_start,
        end=period_end,
        comparisons=comparisons,
        insights=generate_insights(comparisons),
        overview=summarize_comparisons(comparisons),
    )


def color_for_index(index: int) -> str:
    return CATEGORY_PALETTE[index % len(CATEGORY_PALETTE)]


def summarize_dashboard(
    transactions: Sequence[Transaction],
    *,
    recent: Optional[Sequence[Transaction]] = None,
    recent_limit: int = RECENT_TRANSACTIONS_LIMIT,
) -> DashboardSummary:
    expenses_by_category = group_by_category(transactions, TransactionType.expense)
    total_expenses = sum(expenses_by_category.values())
    total_income = sum(
        group_by_category(transactions, TransactionType.income).values()
    )

    breakdown = [
        CategorySummary(
            category=category,
            amount_cents=amount,
            percentage=_percent(amount, total_expenses),
            color=color_for_index(index),
        )
        for index, (category, amount) in enumerate(expenses_by_category.items())
    ]
    breakdown.sort(key=lambda item: item.amount_cents, reverse=True)

    newest_first = transactions if recent is None else recent
    return DashboardSummary(
        total_expenses_cents=total_expenses,
        total_income_cents=total_income,
        net_amount_cents=total_income - total_expenses,
        category_breakdown=breakdown,
        recent_transactions=list(newest_first[: max(recent_limit, 0)]),
    )


compute_dashboard_summary = summarize_dashboard


def monthly_expense_totals(
    transactions: Iterable[Transaction], *, year: Optional[int] = None
) -> list[MonthlyExpense]:
    totals: dict[str, int] = {}
    counts: dict[str, int] = {}
    for txn in transactions:
        if txn.type != TransactionType.expense:
            continue
        txn_date = _calendar_date(txn.date)
        if year is not None and txn_date.year != year:
            continue
        key = f"{txn_date.year:04d}-{txn_date.month:02d}"
        totals[key] = totals.get(key, 0) + txn.amount_cents
        counts[key] = counts.get(key, 0) + 1
    return [
        MonthlyExpense(
            month_key=key, amount_cents=totals[key], transaction_count=counts[key]
        )
        for key in sorted(totals)
    ]
