from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation, localcontext
from typing import Any

D = Decimal

ZERO = D("0")
CENT = D("0.01")

# Every finite float fits comfortably; anything larger is treated as garbage input.
MAX_MAGNITUDE_EXPONENT = 400
MONEY_CONTEXT = Context(prec=1000, rounding=ROUND_HALF_UP)

NUM_SUFFIXES = {
    "k": D("1000"),
    "m": D("1000000"),
    "b": D("1000000000"),
    "l": D("100000"),
    "cr": D("10000000"),
}

_STRIP_CHARS = ("$", "₹", "€", "£", ",", " ", "_", " ")


def parse_number(text: str) -> Decimal:
    """Parse a user-typed amount such as ``"$1,250"``, ``"12.5k"`` or ``"8L"``.

    Raises ``ValueError`` when the text is not a number.
    """
    cleaned = text.strip().lower()
    if not cleaned:
        raise ValueError("Please enter a number.")
    multiplier = D("1")
    for suffix in sorted(NUM_SUFFIXES, key=len, reverse=True):
        if cleaned.endswith(suffix):
            multiplier = NUM_SUFFIXES[suffix]
            cleaned = cleaned[: -len(suffix)]
            break
    for char in _STRIP_CHARS:
        cleaned = cleaned.replace(char, "")
    cleaned = cleaned.replace("−", "-").replace("–", "-")
    if cleaned in {"", "-", ".", "+"}:
        raise ValueError("Please enter a number.")
    try:
        number = D(cleaned)
    except InvalidOperation as exc:
        raise ValueError(f"Could not understand number '{text}'.") from exc
    if number.is_finite() and number.adjusted() > MAX_MAGNITUDE_EXPONENT:
        raise ValueError(f"Number '{text}' is too large.")
    with localcontext(MONEY_CONTEXT):
        return number * multiplier


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError("Booleans are not amounts.")
    if isinstance(value, float):
        return D(str(value))
    if isinstance(value, int):
        return D(value)
    if isinstance(value, str):
        return parse_number(value)
    raise ValueError(f"Unsupported amount type {type(value).__name__}")


def coerce_amount(value: Any) -> Decimal:
    """Best-effort conversion of user input to a non-negative amount.

    Empty, non-numeric, non-finite and negative values all become ``0``.
    """
    if value is None:
        return ZERO
    try:
        amount = to_decimal(value)
    except (ValueError, TypeError, ArithmeticError):
        return ZERO
    if not amount.is_finite():
        return ZERO
    if amount <= ZERO:
        return ZERO
    if amount.adjusted() > MAX_MAGNITUDE_EXPONENT:
        return ZERO
    return amount


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP, context=MONEY_CONTEXT)


__all__ = [
    "CENT",
    "MONEY_CONTEXT",
    "NUM_SUFFIXES",
    "ZERO",
    "coerce_amount",
    "parse_number",
    "round_cents",
    "to_decimal",
]
