from __future__ import annotations

from decimal import Decimal
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from taxcalc.core.amounts import ZERO, coerce_amount

Resolution = Literal["exact", "nearest_year", "default"]


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class CalculationInput(BaseModel):
    gross_income: Decimal = Field(
        ZERO,
        description="Annual gross income",
        validation_alias=AliasChoices("gross_income", "grossIncome", "income"),
    )
    deductions: Decimal = Field(
        ZERO,
        description="Itemized deductions; ignored by flat-deduction regimes",
        validation_alias=AliasChoices("deductions", "other_deductions", "otherDeductions"),
    )
    regime: str | None = Field(
        None,
        description="Regime or filing status key, e.g. 'new', 'old', 'single', 'marriedJoint'",
        validation_alias=AliasChoices("regime", "filing_status", "filingStatus"),
    )
    tax_year: str | None = Field(
        None,
        description="Tax year such as '2025' or '2025-26'",
        validation_alias=AliasChoices("tax_year", "taxYear", "year"),
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    _coerce_amounts = field_validator("gross_income", "deductions", mode="before")(coerce_amount)
    _coerce_keys = field_validator("regime", "tax_year", mode="before")(_optional_text)


class CalculationResult(BaseModel):
    gross_income: Decimal
    standard_deduction: Decimal
    other_deductions: Decimal
    taxable_income: Decimal
    base_tax: Decimal
    rebate_applied: Decimal
    cess_amount: Decimal
    total_tax: Decimal
    effective_rate: Decimal
    marginal_rate: Decimal
    after_tax_income: Decimal
    regime: str
    tax_year: str
    currency: str
    resolution: Resolution

    model_config = ConfigDict(frozen=True)

    @classmethod
    def empty(cls, regime: str, tax_year: str, currency: str, resolution: Resolution) -> "CalculationResult":
        zero = Decimal("0.00")
        return cls(
            gross_income=zero,
            standard_deduction=zero,
            other_deductions=zero,
            taxable_income=zero,
            base_tax=zero,
            rebate_applied=zero,
            cess_amount=zero,
            total_tax=zero,
            effective_rate=zero,
            marginal_rate=zero,
            after_tax_income=zero,
            regime=regime,
            tax_year=tax_year,
            currency=currency,
            resolution=resolution,
        )

    def figures(self) -> dict[str, Decimal]:
        return self.model_dump(exclude={"regime", "tax_year", "currency", "resolution"})


__all__ = ["CalculationInput", "CalculationResult", "Resolution"]
