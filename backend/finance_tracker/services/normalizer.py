"""Normalization utilities shared by the request schemas and the seeder.

Covers:
  - Date parsing (common format variants, ISO output)
  - Amount parsing (plain numbers and currency-formatted strings)
  - Decimal amount → integer minor units
  - Free-text sanitising
"""

import decimal
import re
from datetime import datetime

# ─────────────────────────────────────────────────────────────────────────────
# Date parsing
# ─────────────────────────────────────────────────────────────────────────────

_DATE_FORMATS = [
    "%Y-%m-%d",             # 2026-01-15
    "%m/%d/%Y",             # 01/15/2026
    "%d-%b-%Y",             # 15-Jan-2026
    "%d %b %Y",             # 15 Jan 2026
    "%b %d, %Y",            # Jan 15, 2026
    "%B %d, %Y",            # January 15, 2026
    "%Y-%m-%dT%H:%M:%S",    # 2026-01-15T12:00:00
    "%Y-%m-%dT%H:%M:%S.%f", # 2026-01-15T12:00:00.000000
]

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def parse_date(value: str) -> str:
    """Return ISO date string YYYY-MM-DD; falls back to the stripped raw value."""
    v = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(v, fmt).strftime("%Y-%m-%d")
        except ValueError:
            continue
    return v


# ─────────────────────────────────────────────────────────────────────────────
# Amount parsing
# ─────────────────────────────────────────────────────────────────────────────

# Matches European thousands separator: 1.234,56
_EUROPEAN_RE = re.compile(r"^-?\d{1,3}(\.\d{3})*(,\d{1,2})$")


def parse_amount(value: str) -> float:
    """Parse an amount typed into a form field.

    Handles:
      42.99  |  -42.99  |  (42.99)  |  $1,234.56  |  ₹1,234.56
      £1.234,56 (European)  |  1 234.56 (space thousands)
    """
    v = value.strip()
    if not v:
        raise ValueError("empty amount string")

    negative = v.startswith("(") and v.endswith(")")
    if negative:
        v = v[1:-1]

    v = v.lstrip("$€£¥₹").strip()
    v = v.replace(" ", "")

    if _EUROPEAN_RE.match(v):
        v = v.replace(".", "").replace(",", ".")
    else:
        v = re.sub(r",(?=\d{3}(?:[,.]|$))", "", v)
        v = v.replace(",", ".")

    amount = float(v)
    return -amount if negative else amount


def to_cents(amount: float) -> int:
    """Convert a decimal amount to integer minor units (ROUND_HALF_UP)."""
    return int(
        (decimal.Decimal(str(amount)) * 100).quantize(
            decimal.Decimal("1"), rounding=decimal.ROUND_HALF_UP
        )
    )


def from_cents(cents: int) -> float:
    return round(cents / 100, 2)


# ─────────────────────────────────────────────────────────────────────────────
# Text
# ─────────────────────────────────────────────────────────────────────────────


def sanitize_text(value: str) -> str:
    """Trim and drop angle brackets so stored text can't carry markup."""
    return re.sub(r"[<>]", "", value.strip())
