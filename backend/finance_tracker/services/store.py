"""Record store — transaction and budget persistence.

Every function takes the request's Session; nothing here catches database
errors, they propagate to the caller unchanged.
"""

import functools
import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from ..models import Budget, Transaction

logger = logging.getLogger(__name__)

SLOW_QUERY_SECONDS = 1.0

_UPDATABLE_FIELDS = ("amount_cents", "date", "description", "category", "type")


def _timed(fn):
    """Log store calls that take longer than SLOW_QUERY_SECONDS."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        started = time.perf_counter()
        try:
            return fn(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - started
            if elapsed > SLOW_QUERY_SECONDS:
                logger.warning("Slow query: %s took %.0fms", fn.__name__, elapsed * 1000)
            else:
                logger.debug("%s took %.1fms", fn.__name__, elapsed * 1000)

    return wrapper


# ── Transactions ──────────────────────────────────────────────────────────────


@_timed
def list_transactions(
    db: Session,
    limit: Optional[int] = None,
    offset: int = 0,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    type_: Optional[str] = None,
    category: Optional[str] = None,
) -> list[Transaction]:
    """Newest first: date desc, then created_at desc."""
    query = db.query(Transaction)
    if start_date is not None:
        query = query.filter(Transaction.date >= start_date)
    if end_date is not None:
        query = query.filter(Transaction.date <= end_date)
    if type_ is not None:
        query = query.filter(Transaction.type == type_)
    if category is not None:
        query = query.filter(Transaction.category == category)

    query = query.order_by(
        Transaction.date.desc(), Transaction.created_at.desc(), Transaction.id.desc()
    )
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


@_timed
def count_transactions(db: Session) -> int:
    return db.query(func.count(Transaction.id)).scalar() or 0


@_timed
def get_transaction(db: Session, tx_id: int) -> Optional[Transaction]:
    return db.get(Transaction, tx_id)


@_timed
def insert_transaction(db: Session, values: dict[str, Any]) -> Transaction:
    tx = Transaction(**values)
    db.add(tx)
    db.commit()
    db.refresh(tx)
    return tx


@_timed
def update_transaction(db: Session, tx_id: int, changes: dict[str, Any]) -> Optional[Transaction]:
    """Apply only the supplied fields. Returns None when the id is unknown."""
    tx = db.get(Transaction, tx_id)
    if not tx:
        return None
    for key, value in changes.items():
        if key not in _UPDATABLE_FIELDS:
            raise KeyError(f"{key!r} is not an updatable transaction field")
        setattr(tx, key, value)
    tx.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(tx)
    return tx


@_timed
def delete_transaction(db: Session, tx_id: int) -> bool:
    tx = db.get(Transaction, tx_id)
    if not tx:
        return False
    db.delete(tx)
    db.commit()
    logger.info("Deleted transaction %s", tx_id)
    return True


# ── Budgets ───────────────────────────────────────────────────────────────────


@_timed
def list_budgets(db: Session, month: Optional[str] = None) -> list[Budget]:
    query = db.query(Budget)
    if month is not None:
        query = query.filter(Budget.month == month)
    return query.order_by(Budget.category, Budget.id).all()


@_timed
def get_budget(db: Session, budget_id: int) -> Optional[Budget]:
    return db.get(Budget, budget_id)


@_timed
def upsert_budget(db: Session, category: str, month: str, amount_cents: int) -> int:
    """Create or update the budget keyed by (category, month); returns its id.

    A single INSERT … ON CONFLICT statement against the unique
    (category, month) constraint, so two concurrent upserts of the same key
    still leave exactly one row.
    """
    now = datetime.now(timezone.utc)
    stmt = sqlite_insert(Budget).values(
        category=category,
        month=month,
        amount_cents=amount_cents,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Budget.category, Budget.month],
        set_={"amount_cents": stmt.excluded.amount_cents, "updated_at": now},
    ).returning(Budget.id)
    budget_id = db.execute(stmt).scalar_one()
    db.commit()
    logger.info("Upserted budget %s for %s/%s", budget_id, category, month)
    return budget_id


@_timed
def delete_budget(db: Session, budget_id: int) -> bool:
    budget = db.get(Budget, budget_id)
    if not budget:
        return False
    db.delete(budget)
    db.commit()
    return True
