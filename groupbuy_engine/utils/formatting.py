"""
Display formatting for money and discount rates.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


def format_currency(value: Decimal | float | None, currency_code: str = "USD") -> str:
    """Format an amount as e.g. ``$1,234.50``; ``None`` renders as ``N/A``."""
    if value is None:
        return "N/A"
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    symbol = _CURRENCY_SYMBOLS.get(currency_code.upper())
    sign = "-" if amount < 0 else ""
    if symbol is None:
        return f"{sign}{abs(amount):,.2f} {currency_code.upper()}"
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_percent(fraction: Decimal | float, places: int = 1) -> str:
    """Render a fraction as a whole-number percent: 0.125 -> ``12.5%``."""
    pct = (Decimal(str(fraction)) * 100).quantize(
        Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP
    )
    text = f"{pct:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text}%"
