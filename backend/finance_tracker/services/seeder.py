"""Database seeder — idempotent sample transactions for a fresh install."""

import calendar
import logging
from datetime import date

from sqlalchemy.orm import Session

from ..models import Transaction
from . import store

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Sample data  (date, description, category, type, amount)
#
# Source dates span two months (Jan → Feb 2024) and are shifted to the month
# before the current one and the current month, so the dashboard always shows
# recent activity.
# ─────────────────────────────────────────────────────────────────────────────

_SAMPLE_TRANSACTIONS: list[tuple[str, str, str, str, int]] = [
    ("2024-01-15", "Salary",           "Salary",            "income",  500000),
    ("2024-01-16", "Grocery shopping", "Food & Dining",     "expense", 120000),
    ("2024-01-17", "Electricity bill", "Bills & Utilities", "expense",  80000),
    ("2024-01-18", "Freelance work",   "Freelance",         "income",  200000),
    ("2024-01-20", "Shopping",         "Shopping",          "expense", 150000),
    ("2024-01-22", "Fuel",             "Transportation",    "expense",  60000),
    ("2024-02-01", "Bonus",            "Salary",            "income",  300000),
    ("2024-02-03", "Restaurant",       "Food & Dining",     "expense",  90000),
    ("2024-02-05", "Internet bill",    "Bills & Utilities", "expense", 120000),
    ("2024-02-10", "Rent",             "Bills & Utilities", "expense", 250000),
]


def _months_ago(n: int) -> tuple[int, int]:
    today = date.today()
    year, month = today.year, today.month - n
    while month <= 0:
        month += 12
        year -= 1
    return year, month


def _shift_date(dt: str) -> str:
    """Shift a hardcoded 2024 sample date to its rolling equivalent."""
    src = {"2024-01": _months_ago(1), "2024-02": _months_ago(0)}
    if dt[:7] not in src:
        return dt
    year, month = src[dt[:7]]
    day = min(int(dt[8:10]), calendar.monthrange(year, month)[1])
    return f"{year}-{month:02d}-{day:02d}"


def seed_sample_transactions(db: Session) -> int:
    """Insert the sample transactions when the table is empty.

    Idempotent — returns 0 and does nothing if any transaction exists.
    """
    if store.count_transactions(db) > 0:
        return 0

    db.add_all([
        Transaction(
            date=_shift_date(dt),
            description=desc,
            category=category,
            type=tx_type,
            amount_cents=cents,
        )
        for dt, desc, category, tx_type, cents in _SAMPLE_TRANSACTIONS
    ])
    db.commit()
    logger.info("Seeded %d sample transactions", len(_SAMPLE_TRANSACTIONS))
    return len(_SAMPLE_TRANSACTIONS)
