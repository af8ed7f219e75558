import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import get_settings
from database import SessionLocal, init_db, ping
from periods import Period, custom_period, month_period, resolve_period
from schemas import (
    BudgetComparisonOut,
    BudgetIn,
    BudgetOut,
    BudgetOverviewOut,
    BudgetReportOut,
    DashboardSummaryOut,
    HealthOut,
    MonthlyExpenseOut,
    Pagination,
    PeriodOut,
    SpendingInsightOut,
    TransactionIn,
    TransactionOut,
    TransactionPage,
)
from services import BudgetService, DashboardService, TransactionService, page_count


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Finance Tracker")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_today() -> date:
    return datetime.now(ZoneInfo(get_settings().timezone)).date()


@app.on_event("startup")
def startup_event():
    init_db()
    logger.info("startup: database schema ready")


def _int_param(request: Request, name: str) -> Optional[int]:
    raw = request.query_params.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid {name}") from exc


def period_from_request(request: Request, today: date) -> Period:
    month = _int_param(request, "month")
    year = _int_param(request, "year")
    if month is not None or year is not None:
        if month is None or year is None:
            raise HTTPException(
                status_code=400, detail="Month and year are required together"
            )
        if not 1 <= month <= 12:
            raise HTTPException(
                status_code=400, detail="Month must be between 1 and 12"
            )
        if not 1970 <= year <= 3000:
            raise HTTPException(
                status_code=400, detail="Year must be between 1970 and 3000"
            )
        return month_period(year, month)

    slug = request.query_params.get("period")
    if slug == "custom":
        start = request.query_params.get("start")
        end = request.query_params.get("end")
        if not start or not end:
            raise HTTPException(
                status_code=400, detail="Custom period requires start and end dates"
            )
        try:
            return custom_period(start, end)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    return resolve_period(slug, today=today)


@app.get("/api/health", response_model=HealthOut)
def health(db: Session = Depends(get_db)):
    try:
        ping(db)
    except SQLAlchemyError as exc:
        logger.error(f"health_check: status=unhealthy error={exc}")
        body = HealthOut(
            status="unhealthy",
            database="disconnected",
            timestamp=datetime.utcnow(),
            error=str(exc),
        )
        return JSONResponse(status_code=500, content=body.model_dump(mode="json"))
    return HealthOut(
        status="healthy", database="connected", timestamp=datetime.utcnow()
    )


@app.get("/api/transactions", response_model=TransactionPage)
def list_transactions(request: Request, db: Session = Depends(get_db)):
    page = max(_int_param(request, "page") or 1, 1)
    limit = min(max(_int_param(request, "limit") or 50, 1), 100)
    items, total = TransactionService(db).list(page=page, limit=limit)
    return TransactionPage(
        data=[TransactionOut.model_validate(txn) for txn in items],
        pagination=Pagination(
            total=total, page=page, limit=limit, pages=page_count(total, limit)
        ),
    )


@app.post("/api/transactions", response_model=TransactionOut, status_code=201)
def create_transaction(data: TransactionIn, db: Session = Depends(get_db)):
    return TransactionService(db).create(data)


@app.get("/api/transactions/{transaction_id}", response_model=TransactionOut)
def get_transaction(transaction_id: int, db: Session = Depends(get_db)):
    try:
        return TransactionService(db).get(transaction_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.put("/api/transactions/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    transaction_id: int, data: TransactionIn, db: Session = Depends(get_db)
):
    try:
        return TransactionService(db).update(transaction_id, data)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.delete("/api/transactions/{transaction_id}")
def delete_transaction(transaction_id: int, db: Session = Depends(get_db)):
    try:
        TransactionService(db).delete(transaction_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"message": "Transaction deleted successfully"}


@app.get("/api/budgets", response_model=list[BudgetOut])
def list_budgets(request: Request, db: Session = Depends(get_db)):
    year = _int_param(request, "year")
    month = _int_param(request, "month")
    return BudgetService(db).list(year=year, month=month)


@app.post("/api/budgets", response_model=BudgetOut)
def upsert_budget(data: BudgetIn, db: Session = Depends(get_db)):
    return BudgetService(db).upsert(data)


@app.get("/api/budgets/comparison", response_model=BudgetReportOut)
def budget_comparison(
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    period = period_from_request(request, today)
    report = BudgetService(db).comparison_for_period(period)
    return BudgetReportOut(
        period=PeriodOut.model_validate(period),
        comparisons=[BudgetComparisonOut.model_validate(c) for c in report.comparisons],
        insights=[SpendingInsightOut.model_validate(i) for i in report.insights],
        overview=BudgetOverviewOut.model_validate(report.overview),
    )


@app.put("/api/budgets/{budget_id}", response_model=BudgetOut)
def update_budget(budget_id: int, data: BudgetIn, db: Session = Depends(get_db)):
    service = BudgetService(db)
    try:
        service.get(budget_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    try:
        return service.update(budget_id, data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.delete("/api/budgets/{budget_id}")
def delete_budget(budget_id: int, db: Session = Depends(get_db)):
    try:
        BudgetService(db).delete(budget_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"message": "Budget deleted successfully"}


@app.get("/api/dashboard", response_model=DashboardSummaryOut)
def dashboard(db: Session = Depends(get_db)):
    summary = DashboardService(db).summary()
    return DashboardSummaryOut.model_validate(summary)


@app.get("/api/expenses/monthly", response_model=list[MonthlyExpenseOut])
def monthly_expenses(request: Request, db: Session = Depends(get_db)):
    year = _int_param(request, "year")
    series = DashboardService(db).monthly_expenses(year)
    return [MonthlyExpenseOut.model_validate(item) for item in series]


def main():
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    main()
