"""Analytics router — category summary, monthly series, budget comparison,
dashboard stats and insights.

Each endpoint loads a snapshot from the record store and hands it to the pure
functions in ``services.analytics`` / ``services.insights``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import (
    BudgetComparisonSchema,
    CategorySummarySchema,
    DashboardStatsSchema,
    InsightSchema,
    MonthlyExpenseSchema,
)
from ..services import analytics, store
from ..services.insights import generate_insights
from ..services.normalizer import ISO_DATE_RE, MONTH_RE

router = APIRouter(prefix="/analytics", tags=["analytics"])


def require_month(value: str, param: str) -> None:
    if not MONTH_RE.match(value):
        raise HTTPException(status_code=422, detail=f"{param} must be YYYY-MM, got {value!r}")


def _require_date(value: str, param: str) -> None:
    if not ISO_DATE_RE.match(value):
        raise HTTPException(status_code=422, detail=f"{param} must be YYYY-MM-DD, got {value!r}")


@router.get(
    "/categories",
    response_model=list[CategorySummarySchema],
    summary="Expense totals and share per category",
)
def category_summary(
    start_date: Optional[str] = Query(None, description="Inclusive start date YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="Inclusive end date YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    if start_date:
        _require_date(start_date, "start_date")
    if end_date:
        _require_date(end_date, "end_date")
    txns = store.list_transactions(db, start_date=start_date, end_date=end_date, type_="expense")
    return analytics.category_summary(txns, start_date, end_date)


@router.get("/monthly", response_model=list[MonthlyExpenseSchema], summary="Expense totals per month")
def monthly_expenses(db: Session = Depends(get_db)):
    return analytics.monthly_expenses(store.list_transactions(db, type_="expense"))


@router.get(
    "/budget-comparison",
    response_model=list[BudgetComparisonSchema],
    summary="Budgeted vs actual spend for each budget in a month",
)
def budget_comparison(
    month: str = Query(..., description="Month in YYYY-MM format"),
    db: Session = Depends(get_db),
):
    require_month(month, "month")
    budgets = store.list_budgets(db, month)
    txns = store.list_transactions(
        db, start_date=f"{month}-01", end_date=f"{month}-31", type_="expense"
    )
    return analytics.budget_comparison(budgets, txns, month)


@router.get("/dashboard", response_model=DashboardStatsSchema, summary="Dashboard summary")
def dashboard(db: Session = Depends(get_db)):
    return analytics.dashboard_stats(store.list_transactions(db))


@router.get("/insights", response_model=list[InsightSchema], summary="Heuristic spending insights")
def insights(db: Session = Depends(get_db)):
    txns = store.list_transactions(db)
    return generate_insights(
        analytics.dashboard_stats(txns),
        analytics.category_summary(txns),
        analytics.monthly_expenses(txns),
    )
