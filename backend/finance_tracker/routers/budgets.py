from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import BudgetCreate, BudgetSchema
from ..services import store
from ..services.normalizer import to_cents
from .analytics import require_month

router = APIRouter(prefix="/budgets", tags=["budgets"])


@router.get("/", response_model=list[BudgetSchema], summary="List budgets, optionally for one month")
def list_budgets(
    month: Optional[str] = Query(default=None, description="Month in YYYY-MM format"),
    db: Session = Depends(get_db),
):
    if month is not None:
        require_month(month, "month")
    return store.list_budgets(db, month)


@router.post(
    "/",
    response_model=BudgetSchema,
    status_code=201,
    summary="Create or update the budget for a category and month",
)
def upsert_budget(payload: BudgetCreate, db: Session = Depends(get_db)):
    budget_id = store.upsert_budget(db, payload.category, payload.month, to_cents(payload.amount))
    return store.get_budget(db, budget_id)


@router.delete("/{budget_id}", status_code=204, summary="Delete a budget")
def delete_budget(budget_id: int, db: Session = Depends(get_db)):
    if not store.delete_budget(db, budget_id):
        raise HTTPException(status_code=404, detail="Budget not found")
