from __future__ import annotations

from decimal import Decimal
from typing import Iterable, NamedTuple, Sequence

from taxcalc.core.amounts import ZERO, round_cents

D = Decimal

ONE = D("1")
HUNDRED = D("100")


class BracketError(ValueError):
    pass


class TaxBracket(NamedTuple):
    lower: D
    upper: D | None
    rate: D

    def contains(self, amount: D) -> bool:
        return amount > self.lower and (self.upper is None or amount <= self.upper)


def as_brackets(rows: Iterable[TaxBracket | tuple[D, D | None, D]]) -> tuple[TaxBracket, ...]:
    return tuple(TaxBracket(D(lower), None if upper is None else D(upper), D(rate)) for lower, upper, rate in rows)


def calculate_progressive_tax(
    brackets: Iterable[TaxBracket | tuple[D, D | None, D]],
    taxable_income: D,
) -> D:
    remaining = max(ZERO, taxable_income)
    tax = ZERO
    for lower, upper, rate in brackets:
        if remaining <= ZERO:
            break
        span = remaining if upper is None else upper - lower
        taxable_at_bracket = min(remaining, span)
        tax += taxable_at_bracket * rate
        remaining -= taxable_at_bracket
    return round_cents(tax)


def marginal_rate(brackets: Iterable[TaxBracket | tuple[D, D | None, D]], taxable_income: D) -> D:
    """Percentage rate of the bracket holding the last unit of taxable income."""
    if taxable_income <= ZERO:
        return ZERO
    for bracket in brackets:
        if TaxBracket(*bracket).contains(taxable_income):
            return round_cents(bracket[2] * HUNDRED)
    return ZERO


def bracket_problems(brackets: Sequence[TaxBracket]) -> list[str]:
    problems: list[str] = []
    if not brackets:
        return ["no brackets defined"]
    if brackets[0].lower != ZERO:
        problems.append(f"first bracket starts at {brackets[0].lower}, expected 0")
    previous: TaxBracket | None = None
    for index, bracket in enumerate(brackets):
        if not ZERO <= bracket.rate <= ONE:
            problems.append(f"bracket {index} rate {bracket.rate} outside [0, 1]")
        if bracket.upper is not None and bracket.upper <= bracket.lower:
            problems.append(f"bracket {index} upper bound {bracket.upper} not above lower bound {bracket.lower}")
        if previous is not None:
            if previous.upper is None:
                problems.append(f"bracket {index - 1} is unbounded but is not the last bracket")
            elif bracket.lower != previous.upper:
                problems.append(
                    f"bracket {index} starts at {bracket.lower}, expected {previous.upper} (gap or overlap)"
                )
            if bracket.rate < previous.rate:
                problems.append(f"bracket {index} rate {bracket.rate} lower than previous rate {previous.rate}")
        previous = bracket
    if brackets[-1].upper is not None:
        problems.append(f"final bracket is capped at {brackets[-1].upper}, expected unbounded")
    return problems


def validate_brackets(brackets: Sequence[TaxBracket]) -> tuple[TaxBracket, ...]:
    problems = bracket_problems(brackets)
    if problems:
        raise BracketError("; ".join(problems))
    return tuple(brackets)


__all__ = [
    "BracketError",
    "TaxBracket",
    "as_brackets",
    "bracket_problems",
    "calculate_progressive_tax",
    "marginal_rate",
    "validate_brackets",
]
