"""Analytics aggregation: category summaries, monthly series, budget
comparisons and dashboard statistics.

All functions are pure — they take already-loaded records and never touch the
database.  Sums are accumulated in integer cents and only converted to a
2-decimal amount on output, so repeated calls over the same input return
identical results.  Every ratio with a zero denominator resolves to 0.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Optional

from ..models import Budget, Transaction
from .normalizer import from_cents

TOP_CATEGORY_LIMIT = 5
RECENT_TRANSACTION_LIMIT = 5


def _percentage(part_cents: int, whole_cents: int) -> float:
    return (part_cents / whole_cents) * 100 if whole_cents > 0 else 0.0


def _expenses(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in transactions if t.type == "expense"]


# ── Category summary ──────────────────────────────────────────────────────────


def category_summary(
    transactions: Iterable[Transaction],
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> list[dict]:
    """Expense totals per category, largest first.

    Date bounds are inclusive and compared as ISO strings.  Categories with
    equal totals keep the order in which they were first seen.
    """
    cat_map: dict[str, dict] = {}
    for t in _expenses(transactions):
        if start_date is not None and t.date < start_date:
            continue
        if end_date is not None and t.date > end_date:
            continue
        if t.category not in cat_map:
            cat_map[t.category] = {"category": t.category, "_cents": 0, "count": 0}
        cat_map[t.category]["_cents"] += t.amount_cents
        cat_map[t.category]["count"] += 1

    total_cents = sum(v["_cents"] for v in cat_map.values())

    # sorted() is stable, so ties stay in discovery order
    groups = sorted(cat_map.values(), key=lambda v: v["_cents"], reverse=True)
    return [
        {
            "category": v["category"],
            "amount": from_cents(v["_cents"]),
            "count": v["count"],
            "percentage": _percentage(v["_cents"], total_cents),
        }
        for v in groups
    ]


# ── Monthly series ────────────────────────────────────────────────────────────


def monthly_expenses(transactions: Iterable[Transaction]) -> list[dict]:
    """Expense totals per YYYY-MM, oldest first.  Malformed dates are skipped."""
    month_map: dict[str, dict] = {}
    for t in _expenses(transactions):
        if not t.date or len(t.date) < 7:
            continue
        mo = t.date[:7]
        if mo not in month_map:
            month_map[mo] = {"_cents": 0, "count": 0}
        month_map[mo]["_cents"] += t.amount_cents
        month_map[mo]["count"] += 1

    return [
        {
            "month": mo,
            "amount": from_cents(month_map[mo]["_cents"]),
            "count": month_map[mo]["count"],
        }
        for mo in sorted(month_map)
    ]


# ── Budget vs actual ──────────────────────────────────────────────────────────


def budget_comparison(
    budgets: Iterable[Budget],
    transactions: Iterable[Transaction],
    month: str,
) -> list[dict]:
    """One row per budget set for ``month``; unbudgeted categories are omitted.

    The month window is the literal string range ``{month}-01`` to
    ``{month}-31`` for every month.  No shorter month has a day-31 date, so
    the lexicographic range still covers exactly that month.
    """
    start, end = f"{month}-01", f"{month}-31"

    actual_map: dict[str, int] = {}
    for t in _expenses(transactions):
        if start <= t.date <= end:
            actual_map[t.category] = actual_map.get(t.category, 0) + t.amount_cents

    rows = []
    for b in budgets:
        if b.month != month:
            continue
        actual_cents = actual_map.get(b.category, 0)
        rows.append({
            "category": b.category,
            "budgeted": from_cents(b.amount_cents),
            "actual": from_cents(actual_cents),
            "remaining": from_cents(b.amount_cents - actual_cents),
            "percentage": _percentage(actual_cents, b.amount_cents),
        })
    return rows


# ── Dashboard ─────────────────────────────────────────────────────────────────


def _created_key(t: Transaction) -> float:
    created: Optional[datetime] = t.created_at
    return created.timestamp() if created is not None else 0.0


def recent_transactions(
    transactions: Iterable[Transaction], limit: int = RECENT_TRANSACTION_LIMIT
) -> list[Transaction]:
    """Most recent first by (date desc, created_at desc)."""
    ordered = sorted(transactions, key=lambda t: (t.date, _created_key(t)), reverse=True)
    return ordered[:limit]


def dashboard_stats(transactions: Sequence[Transaction]) -> dict:
    income_cents = expense_cents = 0
    income_count = expense_count = 0
    for t in transactions:
        if t.type == "income":
            income_cents += t.amount_cents
            income_count += 1
        elif t.type == "expense":
            expense_cents += t.amount_cents
            expense_count += 1

    return {
        "total_income": from_cents(income_cents),
        "total_expenses": from_cents(expense_cents),
        "net_amount": from_cents(income_cents - expense_cents),
        "transaction_count": income_count + expense_count,
        "top_categories": category_summary(transactions)[:TOP_CATEGORY_LIMIT],
        "recent_transactions": recent_transactions(transactions),
    }
