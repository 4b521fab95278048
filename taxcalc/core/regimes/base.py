from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal

from taxcalc.core.amounts import ZERO
from taxcalc.core.brackets import ONE, TaxBracket, bracket_problems

D = Decimal

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[\s\-]+")
_YEAR = re.compile(r"\d{4}")


class RegimeTableError(ValueError):
    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("Invalid regime table: " + "; ".join(self.problems))


class RegimeNotFoundError(KeyError):
    pass


def normalize_regime(value: str | None) -> str | None:
    if value is None:
        return None
    text = _CAMEL_BOUNDARY.sub(r"\1_\2", str(value).strip())
    text = _SEPARATORS.sub("_", text.lower()).strip("_")
    return text or None


def normalize_tax_year(value: str | int | None) -> str | None:
    if value is None:
        return None
    match = _YEAR.search(str(value))
    return match.group(0) if match else None


@dataclass(frozen=True)
class RebateRule:
    income_threshold: D
    rebate_cap: D

    def rebate_for(self, gross_income: D, base_tax: D) -> D:
        if gross_income <= self.income_threshold:
            return min(base_tax, self.rebate_cap)
        return ZERO


@dataclass(frozen=True)
class RegimeConfig:
    regime: str
    tax_year: str
    jurisdiction: str
    label: str
    currency: str
    brackets: tuple[TaxBracket, ...]
    standard_deduction: D
    allows_itemized: bool
    rebate: RebateRule | None = None
    cess_rate: D = ZERO

    @property
    def key(self) -> tuple[str, str]:
        return self.regime, self.tax_year

    def problems(self) -> list[str]:
        prefix = f"{self.regime}/{self.tax_year}"
        issues = [f"{prefix}: {problem}" for problem in bracket_problems(self.brackets)]
        if self.standard_deduction < ZERO:
            issues.append(f"{prefix}: negative standard deduction {self.standard_deduction}")
        if not ZERO <= self.cess_rate <= ONE:
            issues.append(f"{prefix}: cess rate {self.cess_rate} outside [0, 1]")
        if self.rebate is not None:
            if self.rebate.income_threshold < ZERO or self.rebate.rebate_cap < ZERO:
                issues.append(f"{prefix}: rebate threshold and cap must be non-negative")
        if normalize_regime(self.regime) != self.regime:
            issues.append(f"{prefix}: regime key is not normalized")
        if normalize_tax_year(self.tax_year) != self.tax_year:
            issues.append(f"{prefix}: tax year must be a four digit year")
        return issues


def regime_config(
    regime: str,
    tax_year: str | int,
    *,
    jurisdiction: str,
    label: str,
    currency: str,
    brackets: tuple[TaxBracket, ...],
    standard_deduction: D,
    allows_itemized: bool,
    rebate: RebateRule | None = None,
    cess_rate: D = ZERO,
) -> RegimeConfig:
    return RegimeConfig(
        regime=regime,
        tax_year=str(tax_year),
        jurisdiction=jurisdiction,
        label=label,
        currency=currency,
        brackets=brackets,
        standard_deduction=standard_deduction,
        allows_itemized=allows_itemized,
        rebate=rebate,
        cess_rate=cess_rate,
    )
