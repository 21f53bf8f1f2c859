"""Display helpers for durations, prices and stop counts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "PLN": "zł",
    "THB": "฿",
    "INR": "₹",
    "KRW": "₩",
}


def format_duration(minutes: int) -> str:
    """``125`` -> ``"2h 5m"``, ``60`` -> ``"1h"``, ``45`` -> ``"45m"``."""
    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_price(amount: float, currency: str) -> str:
    """Whole-unit price with a currency symbol, e.g. ``"$1,234"``.

    Unknown currencies are prefixed with their ISO code instead.
    """
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    code = (currency or "").upper()
    sign = "-" if rounded < 0 else ""
    digits = f"{abs(rounded):,.0f}"
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code} {digits}".strip()
    return f"{sign}{symbol}{digits}"


def format_stops(count: int) -> str:
    if count == 0:
        return "Direct"
    if count == 1:
        return "1 stop"
    return f"{count} stops"


def format_region(region: str) -> str:
    """``"NORTH_AMERICA"`` -> ``"north america"``."""
    return str(getattr(region, "value", region)).lower().replace("_", " ")


def calculate_savings(original: float, current: float) -> int:
    """Percentage saved going from *original* to *current* price."""
    if original <= 0:
        return 0
    ratio = Decimal(str((original - current) / original * 100))
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


__all__ = [
    "format_duration",
    "format_price",
    "format_stops",
    "format_region",
    "calculate_savings",
    "truncate",
]
