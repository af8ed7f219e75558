from datetime import date

import pytest

from aggregation import (
    CATEGORY_PALETTE,
    color_for_index,
    monthly_expense_totals,
    summarize_dashboard,
)
from models import Transaction, TransactionType


def _txn(
    category: str,
    amount_cents: int,
    type: TransactionType = TransactionType.expense,
    on: date = date(2025, 1, 15),
) -> Transaction:
    return Transaction(
        date=on,
        type=type,
        amount_cents=amount_cents,
        category=category,
        description="entry",
    )


def test_dashboard_totals_and_sorted_breakdown() -> None:
    txns = [
        _txn("food", 10_000),
        _txn("transportation", 5_000),
        _txn("other", 100_000, TransactionType.income),
    ]
    summary = summarize_dashboard(txns)

    assert summary.total_expenses_cents == 15_000
    assert summary.total_income_cents == 100_000
    assert summary.net_amount_cents == 85_000

    breakdown = summary.category_breakdown
    assert [b.category for b in breakdown] == ["food", "transportation"]
    assert [b.amount_cents for b in breakdown] == [10_000, 5_000]
    assert breakdown[0].percentage == pytest.approx(66.666, abs=0.01)
    assert breakdown[1].percentage == pytest.approx(33.333, abs=0.01)


def test_breakdown_colors_follow_first_seen_order_not_rank() -> None:
    txns = [_txn("utilities", 1_000), _txn("food", 9_000)]
    breakdown = summarize_dashboard(txns).category_breakdown
    assert [b.category for b in breakdown] == ["food", "utilities"]
    assert breakdown[0].color == CATEGORY_PALETTE[1]
    assert breakdown[1].color == CATEGORY_PALETTE[0]


def test_breakdown_percentages_sum_to_hundred() -> None:
    txns = [_txn(name, 333 * (i + 1)) for i, name in enumerate(["a", "b", "c"])]
    total = sum(b.percentage for b in summarize_dashboard(txns).category_breakdown)
    assert total == pytest.approx(100)


def test_dashboard_without_expenses() -> None:
    summary = summarize_dashboard([_txn("other", 5_000, TransactionType.income)])
    assert summary.total_expenses_cents == 0
    assert summary.net_amount_cents == 5_000
    assert summary.category_breakdown == []
    assert sum(b.percentage for b in summary.category_breakdown) == 0


def test_dashboard_empty_input() -> None:
    summary = summarize_dashboard([])
    assert summary.total_expenses_cents == 0
    assert summary.total_income_cents == 0
    assert summary.recent_transactions == []


def test_recent_transactions_take_head_of_newest_first_list() -> None:
    txns = [_txn("food", 100 + i) for i in range(8)]
    summary = summarize_dashboard(txns)
    assert summary.recent_transactions == txns[:5]

    assert summarize_dashboard(txns, recent_limit=2).recent_transactions == txns[:2]
    supplied = [txns[7]]
    assert summarize_dashboard(txns, recent=supplied).recent_transactions == supplied


def test_palette_cycles() -> None:
    assert color_for_index(0) == "#3b82f6"
    assert color_for_index(len(CATEGORY_PALETTE)) == color_for_index(0)
    assert color_for_index(9) == "#ef4444"


def test_monthly_expense_totals_sorted_by_month() -> None:
    txns = [
        _txn("food", 1_000, on=date(2025, 3, 2)),
        _txn("food", 2_000, on=date(2024, 12, 30)),
        _txn("shopping", 500, on=date(2025, 3, 20)),
        _txn("other", 9_999, TransactionType.income, on=date(2025, 3, 1)),
    ]
    series = monthly_expense_totals(txns)
    assert [(m.month_key, m.amount_cents) for m in series] == [
        ("2024-12", 2_000),
        ("2025-03", 1_500),
    ]
    assert series[1].transaction_count == 2

    only_2025 = monthly_expense_totals(txns, year=2025)
    assert [m.month_key for m in only_2025] == ["2025-03"]
