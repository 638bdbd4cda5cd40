from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import TransactionCreate, TransactionSchema, TransactionUpdate
from ..services import store
from ..services.normalizer import to_cents

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _values_from_payload(data: dict) -> dict:
    """Map request fields onto model columns (amount → amount_cents)."""
    values = {k: v for k, v in data.items() if k != "amount"}
    if data.get("amount") is not None:
        values["amount_cents"] = to_cents(data["amount"])
    return values


@router.get("/", response_model=list[TransactionSchema], summary="List transactions, newest first")
def list_transactions(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return store.list_transactions(db, limit=limit, offset=offset)


@router.post("/", response_model=TransactionSchema, status_code=201, summary="Record a transaction")
def create_transaction(payload: TransactionCreate, db: Session = Depends(get_db)):
    return store.insert_transaction(db, _values_from_payload(payload.model_dump()))


@router.get("/{tx_id}", response_model=TransactionSchema, summary="Fetch one transaction")
def get_transaction(tx_id: int, db: Session = Depends(get_db)):
    tx = store.get_transaction(db, tx_id)
    if not tx:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return tx


@router.put("/{tx_id}", response_model=TransactionSchema, summary="Partially update a transaction")
def update_transaction(tx_id: int, body: TransactionUpdate, db: Session = Depends(get_db)):
    """Only fields present (and non-null) in the body are changed."""
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    tx = store.update_transaction(db, tx_id, _values_from_payload(changes))
    if not tx:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return tx


@router.delete("/{tx_id}", status_code=204, summary="Permanently delete a transaction")
def delete_transaction(tx_id: int, db: Session = Depends(get_db)):
    if not store.delete_transaction(db, tx_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
