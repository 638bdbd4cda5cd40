"""Rule-based spending insights over the aggregated dashboard views."""

from typing import Optional

# ── Constants ─────────────────────────────────────────────────────────────────

MAX_INSIGHTS = 6

_CONCENTRATION_PCT = 40        # warn if the top category exceeds this share
_FOOD_CATEGORY = "Food & Dining"
_FOOD_PCT = 25
_MOM_INCREASE_PCT = 20         # month-over-month increase that warrants a warning
_MOM_DECREASE_PCT = -10
_SMALL_TX_AVERAGE = 1000       # display-currency units (≈ $20 in INR)
_GOOD_SAVINGS_PCT = 20
_LOW_SAVINGS_PCT = 10

CURRENCY_SYMBOL = "₹"


def format_currency(amount: float) -> str:
    """Rupee amount with Indian digit grouping: ₹12,34,567.50."""
    sign = "-" if amount < 0 else ""
    whole, frac = f"{abs(amount):.2f}".split(".")
    head, tail = whole[:-3], whole[-3:]
    groups = []
    while head:
        groups.insert(0, head[-2:])
        head = head[:-2]
    grouped = ",".join(groups + [tail])
    return f"{sign}{CURRENCY_SYMBOL}{grouped}.{frac}"


def _insight(kind: str, title: str, description: str) -> dict:
    return {"kind": kind, "title": title, "description": description}


# ── Rules ─────────────────────────────────────────────────────────────────────
# Each rule returns one insight or None.


def _net_flow(stats: dict) -> Optional[dict]:
    net = stats["net_amount"]
    if net < 0:
        return _insight(
            "warning",
            "Spending Exceeds Income",
            f"You're spending {format_currency(abs(net))} more than you earn. "
            "Consider reviewing your expenses.",
        )
    if net > 0:
        return _insight(
            "success",
            "Positive Cash Flow",
            f"Great job! You have a surplus of {format_currency(net)}. "
            "Consider investing or saving this amount.",
        )
    return None


def _category_concentration(categories: list[dict]) -> Optional[dict]:
    if not categories:
        return None
    top = categories[0]
    if top["percentage"] > _CONCENTRATION_PCT:
        return _insight(
            "warning",
            "High Concentration in One Category",
            f"{top['category']} accounts for {top['percentage']:.1f}% of your expenses. "
            "Consider diversifying your spending.",
        )
    return None


def _food_share(categories: list[dict]) -> Optional[dict]:
    food = next((c for c in categories if c["category"] == _FOOD_CATEGORY), None)
    if food and food["percentage"] > _FOOD_PCT:
        return _insight(
            "tip",
            "High Food Expenses",
            f"Food & Dining is {food['percentage']:.1f}% of your expenses. "
            "Try meal planning or cooking at home to save money.",
        )
    return None


def _month_over_month(monthly: list[dict]) -> Optional[dict]:
    if len(monthly) < 2:
        return None
    last, previous = monthly[-1], monthly[-2]
    if previous["amount"] == 0:
        return None
    change_pct = (last["amount"] - previous["amount"]) / previous["amount"] * 100
    if change_pct > _MOM_INCREASE_PCT:
        return _insight(
            "warning",
            "Spending Increased Significantly",
            f"Your expenses increased by {change_pct:.1f}% compared to last month. "
            "Review recent purchases.",
        )
    if change_pct < _MOM_DECREASE_PCT:
        return _insight(
            "success",
            "Spending Decreased",
            f"Great! Your expenses decreased by {abs(change_pct):.1f}% compared to last month.",
        )
    return None


def _small_transactions(stats: dict) -> Optional[dict]:
    count = stats["transaction_count"]
    if count <= 0:
        return None
    average = stats["total_expenses"] / count
    if average < _SMALL_TX_AVERAGE:
        return _insight(
            "tip",
            "Many Small Transactions",
            f"You have many small transactions (avg {format_currency(average)}). "
            "Consider bundling purchases to reduce fees.",
        )
    return None


def _savings_rate(stats: dict) -> Optional[dict]:
    income = stats["total_income"]
    if income <= 0:
        return None
    rate = stats["net_amount"] / income * 100
    if rate >= _GOOD_SAVINGS_PCT:
        return _insight(
            "success",
            "Excellent Savings Rate",
            f"You're saving {rate:.1f}% of your income. Keep up the great work!",
        )
    if 0 < rate < _LOW_SAVINGS_PCT:
        return _insight(
            "tip",
            "Low Savings Rate",
            f"You're saving {rate:.1f}% of your income. "
            "Aim for at least 20% for better financial health.",
        )
    return None


FALLBACK_INSIGHT = _insight(
    "info",
    "Start Tracking More Transactions",
    "Add more transactions to get personalized insights about your spending patterns.",
)


def generate_insights(stats: dict, categories: list[dict], monthly: list[dict]) -> list[dict]:
    """Evaluate every rule in order and return at most MAX_INSIGHTS insights.

    ``stats`` is a dashboard_stats() result, ``categories`` the all-time
    category_summary() and ``monthly`` the monthly_expenses() series.
    """
    candidates = [
        _net_flow(stats),
        _category_concentration(categories),
        _food_share(categories),
        _month_over_month(monthly),
        _small_transactions(stats),
        _savings_rate(stats),
    ]
    insights = [i for i in candidates if i is not None]
    if not insights:
        insights.append(dict(FALLBACK_INSIGHT))
    return insights[:MAX_INSIGHTS]
