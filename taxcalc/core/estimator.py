from __future__ import annotations

import logging
from decimal import localcontext
from typing import Any

from taxcalc.core.amounts import MONEY_CONTEXT, ZERO, round_cents
from taxcalc.core.brackets import HUNDRED, calculate_progressive_tax, marginal_rate
from taxcalc.core.models import CalculationInput, CalculationResult
from taxcalc.core.regimes import RegimeTable, get_regime_table

logger = logging.getLogger("taxcalc.estimator")


def compute(input_: CalculationInput, table: RegimeTable | None = None) -> CalculationResult:
    """Estimate the tax owed for one set of inputs.

    Pure: the same input against the same table always yields the same result,
    and no numeric input makes it raise. Income at or below zero produces the
    empty result for the resolved regime.
    """
    if table is None:
        table = get_regime_table()
    config, resolution = table.resolve(input_.regime, input_.tax_year)
    gross = input_.gross_income

    if gross <= ZERO:
        return CalculationResult.empty(config.regime, config.tax_year, config.currency, resolution)

    with localcontext(MONEY_CONTEXT):
        standard_deduction = config.standard_deduction
        other_deductions = input_.deductions if config.allows_itemized else ZERO
        taxable = max(ZERO, gross - standard_deduction - other_deductions)

        base_tax = calculate_progressive_tax(config.brackets, taxable)
        rebate = config.rebate.rebate_for(gross, base_tax) if config.rebate else ZERO
        after_rebate = base_tax - rebate
        cess = round_cents(after_rebate * config.cess_rate)
        total = after_rebate + cess

        effective = round_cents(total / gross * HUNDRED) if total > ZERO else ZERO
        result = CalculationResult(
            gross_income=round_cents(gross),
            standard_deduction=round_cents(standard_deduction),
            other_deductions=round_cents(other_deductions),
            taxable_income=round_cents(taxable),
            base_tax=base_tax,
            rebate_applied=round_cents(rebate),
            cess_amount=cess,
            total_tax=round_cents(total),
            effective_rate=round_cents(effective),
            marginal_rate=marginal_rate(config.brackets, taxable),
            after_tax_income=round_cents(gross - total),
            regime=config.regime,
            tax_year=config.tax_year,
            currency=config.currency,
            resolution=resolution,
        )

    logger.debug(
        "Computed %s/%s (%s): taxable=%s total=%s",
        config.regime,
        config.tax_year,
        resolution,
        result.taxable_income,
        result.total_tax,
    )
    return result


def estimate(
    gross_income: Any,
    deductions: Any = None,
    regime: str | None = None,
    tax_year: str | int | None = None,
    table: RegimeTable | None = None,
) -> CalculationResult:
    payload = CalculationInput(
        gross_income=gross_income,
        deductions=deductions,
        regime=regime,
        tax_year=tax_year,
    )
    return compute(payload, table=table)


__all__ = ["compute", "estimate"]
