"""Display formatting for report values (GBP / en-GB conventions)."""

from __future__ import annotations

import math
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

CURRENCY_SYMBOLS: dict[str, str] = {
    "GBP": "£",
    "EUR": "€",
    "USD": "$",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if not math.isfinite(value):
        return 0
    if abs(value) >= 2**53:
        # beyond float's integer precision there is nothing left to round
        return int(value)
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_number(value: float) -> str:
    """Whole number with thousands separators: 1500 -> '1,500'."""
    return f"{round_half_up(value):,}"


def format_decimal(value: float) -> str:
    """Shortest display for an input like 7.8 or 15 (no trailing '.0')."""
    if not math.isfinite(value):
        return "0"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def format_currency(amount: float, currency: str = "GBP") -> str:
    """127500 -> '£127,500'; -1234.5 -> '-£1,235'."""
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    rounded = round_half_up(amount)
    if rounded < 0:
        return f"-{symbol}{abs(rounded):,}"
    return f"{symbol}{rounded:,}"


def format_percentage(value: float) -> str:
    """370.33 -> '370' (no decimals, no sign)."""
    return str(round_half_up(value))


def format_long_date(value: Optional[date] = None) -> str:
    """18 October 2026 style date, today by default."""
    value = value or date.today()
    return f"{value.day} {value:%B %Y}"


def format_payback(payback_months: Optional[int]) -> str:
    if payback_months is None:
        return "No payback"
    if payback_months == 1:
        return "1 month"
    return f"{payback_months} months"


def apportion_percentages(parts: Sequence[float], total: int = 100) -> list[int]:
    """Integer shares of `total` proportional to `parts`, summing exactly to it.

    Largest-remainder method: floor every share, then hand the leftover
    units to the shares with the biggest fractional parts (earlier parts
    win ties). All zeros when there is nothing to apportion.
    """
    clean = [p if math.isfinite(p) and p > 0 else 0.0 for p in parts]
    whole = sum(clean)
    if whole <= 0:
        return [0] * len(clean)

    exact = [p / whole * total for p in clean]
    floors = [math.floor(x) for x in exact]
    leftover = total - sum(floors)

    by_remainder = sorted(
        range(len(exact)), key=lambda i: (exact[i] - floors[i], -i), reverse=True
    )
    for i in by_remainder[:leftover]:
        floors[i] += 1
    return floors
