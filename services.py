from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select, tuple_
from sqlalchemy.orm import Session

from aggregation import (
    BudgetReport,
    DashboardSummary,
    MonthlyExpense,
    compute_budget_comparison,
    monthly_expense_totals,
    summarize_dashboard,
)
from config import get_settings
from models import Budget, Transaction, TransactionType
from periods import Period, budget_months, month_period
from schemas import BudgetIn, TransactionIn


logger = logging.getLogger(__name__)


def _newest_first(stmt):
    return stmt.order_by(
        Transaction.date.desc(), Transaction.created_at.desc(), Transaction.id.desc()
    )


class TransactionService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, data: TransactionIn) -> Transaction:
        txn = Transaction(
            date=data.date,
            type=data.type,
            amount_cents=data.amount_cents,
            category=data.category,
            description=data.description,
        )
        self.session.add(txn)
        self.session.commit()
        self.session.refresh(txn)
        logger.info(
            f"transaction_create: id={txn.id} type={txn.type.value} "
            f"category={txn.category} amount_cents={txn.amount_cents}"
        )
        return txn

    def get(self, transaction_id: int) -> Transaction:
        txn = self.session.get(Transaction, transaction_id)
        if not txn:
            raise ValueError("Transaction not found")
        return txn

    def update(self, transaction_id: int, data: TransactionIn) -> Transaction:
        txn = self.get(transaction_id)
        txn.date = data.date
        txn.type = data.type
        txn.amount_cents = data.amount_cents
        txn.category = data.category
        txn.description = data.description
        txn.updated_at = datetime.utcnow()
        self.session.commit()
        self.session.refresh(txn)
        logger.info(f"transaction_update: id={txn.id}")
        return txn

    def delete(self, transaction_id: int) -> None:
        txn = self.get(transaction_id)
        self.session.delete(txn)
        self.session.commit()
        logger.info(f"transaction_delete: id={transaction_id}")

    def count(self) -> int:
        stmt = select(func.count(Transaction.id))
        return int(self.session.execute(stmt).scalar_one() or 0)

    def list(self, page: int = 1, limit: int = 50) -> tuple[list[Transaction], int]:
        stmt = _newest_first(select(Transaction))
        stmt = stmt.offset((page - 1) * limit).limit(limit)
        return list(self.session.scalars(stmt).all()), self.count()

    def recent(self, limit: int = 5) -> list[Transaction]:
        stmt = _newest_first(select(Transaction)).limit(limit)
        return list(self.session.scalars(stmt).all())

    def all(self) -> list[Transaction]:
        return list(self.session.scalars(_newest_first(select(Transaction))).all())

    def for_period(
        self, period: Period, transaction_type: Optional[TransactionType] = None
    ) -> list[Transaction]:
        stmt = select(Transaction).where(
            Transaction.date.between(period.start, period.end)
        )
        if transaction_type:
            stmt = stmt.where(Transaction.type == transaction_type)
        return list(self.session.scalars(_newest_first(stmt)).all())


class BudgetService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list(
        self, *, year: Optional[int] = None, month: Optional[int] = None
    ) -> list[Budget]:
        stmt = select(Budget).order_by(
            Budget.category.asc(), Budget.year.asc(), Budget.month.asc()
        )
        if year is not None:
            stmt = stmt.where(Budget.year == year)
        if month is not None:
            stmt = stmt.where(Budget.month == month)
        return list(self.session.scalars(stmt).all())

    def get(self, budget_id: int) -> Budget:
        budget = self.session.get(Budget, budget_id)
        if not budget:
            raise ValueError("Budget not found")
        return budget

    def _find(self, category: str, year: int, month: int) -> Optional[Budget]:
        return self.session.scalar(
            select(Budget).where(
                Budget.category == category,
                Budget.year == year,
                Budget.month == month,
            )
        )

    def upsert(self, data: BudgetIn) -> Budget:
        existing = self._find(data.category, data.year, data.month)
        if existing:
            existing.amount_cents = data.amount_cents
            existing.updated_at = datetime.utcnow()
            self.session.commit()
            self.session.refresh(existing)
            logger.info(
                f"budget_upsert: id={existing.id} category={existing.category} "
                f"year={existing.year} month={existing.month} action=update"
            )
            return existing

        budget = Budget(
            category=data.category,
            amount_cents=data.amount_cents,
            year=data.year,
            month=data.month,
        )
        self.session.add(budget)
        self.session.commit()
        self.session.refresh(budget)
        logger.info(
            f"budget_upsert: id={budget.id} category={budget.category} "
            f"year={budget.year} month={budget.month} action=create"
        )
        return budget

    def update(self, budget_id: int, data: BudgetIn) -> Budget:
        budget = self.get(budget_id)
        clash = self._find(data.category, data.year, data.month)
        if clash and clash.id != budget.id:
            raise ValueError("A budget for this category and month already exists")
        budget.category = data.category
        budget.amount_cents = data.amount_cents
        budget.year = data.year
        budget.month = data.month
        budget.updated_at = datetime.utcnow()
        self.session.commit()
        self.session.refresh(budget)
        logger.info(f"budget_update: id={budget.id}")
        return budget

    def delete(self, budget_id: int) -> None:
        budget = self.get(budget_id)
        self.session.delete(budget)
        self.session.commit()
        logger.info(f"budget_delete: id={budget_id}")

    def for_period(self, period: Period) -> list[Budget]:
        months = budget_months(period)
        stmt = (
            select(Budget)
            .where(tuple_(Budget.year, Budget.month).in_(months))
            .order_by(Budget.category.asc(), Budget.year.asc(), Budget.month.asc())
        )
        rows = self.session.scalars(stmt).all()
        if len(months) == 1:
            return list(rows)

        # Several months: one combined ceiling per category.
        combined: dict[str, int] = {}
        for row in rows:
            combined[row.category] = combined.get(row.category, 0) + row.amount_cents
        return [
            Budget(
                category=category,
                amount_cents=amount,
                year=period.start.year,
                month=period.start.month,
            )
            for category, amount in combined.items()
        ]

    def comparison_for_period(self, period: Period) -> BudgetReport:
        budgets = self.for_period(period)
        transactions = TransactionService(self.session).for_period(
            period, TransactionType.expense
        )
        report = compute_budget_comparison(
            transactions, budgets, period.start, period.end
        )
        logger.info(
            f"budget_comparison: period={period.slug} start={period.start} "
            f"end={period.end} budgets={len(budgets)} insights={len(report.insights)}"
        )
        return report

    def comparison_for_month(self, year: int, month: int) -> BudgetReport:
        return self.comparison_for_period(month_period(year, month))


class DashboardService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.transactions = TransactionService(session)

    def summary(self, recent_limit: Optional[int] = None) -> DashboardSummary:
        if recent_limit is None:
            recent_limit = get_settings().recent_limit
        return summarize_dashboard(self.transactions.all(), recent_limit=recent_limit)

    def monthly_expenses(self, year: Optional[int] = None) -> list[MonthlyExpense]:
        return monthly_expense_totals(self.transactions.all(), year=year)


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
