from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from taxcalc.core.amounts import MONEY_CONTEXT, to_decimal

CURRENCY_SYMBOLS = {
    "USD": "$",
    "INR": "₹",
}


def _group_thousands(digits: str) -> str:
    return f"{int(digits):,}"


def _group_indian(digits: str) -> str:
    # 12,34,56,789: last three digits, then pairs.
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount: Decimal | float | int, currency: str = "USD") -> str:
    """Whole-unit currency string, e.g. ``$1,234`` or ``₹12,34,567``."""
    code = currency.upper()
    value = to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP, context=MONEY_CONTEXT)
    sign = "-" if value < 0 else ""
    digits = str(abs(value))
    grouped = _group_indian(digits) if code == "INR" else _group_thousands(digits)
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code} {grouped}"
    return f"{sign}{symbol}{grouped}"


def format_percentage(rate: Decimal | float | int) -> str:
    value = to_decimal(rate).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP, context=MONEY_CONTEXT)
    return f"{value}%"


def format_result(result) -> dict[str, str]:
    """Render a ``CalculationResult``'s money and rate figures for display."""
    rendered: dict[str, str] = {}
    for name, value in result.figures().items():
        if name.endswith("_rate"):
            rendered[name] = format_percentage(value)
        else:
            rendered[name] = format_currency(value, result.currency)
    return rendered


__all__ = ["format_currency", "format_percentage", "format_result"]
