from __future__ import annotations

from decimal import Decimal

from taxcalc.core.brackets import as_brackets, validate_brackets
from taxcalc.core.regimes.base import RebateRule, RegimeConfig, regime_config

D = Decimal

JURISDICTION = "IN"
CURRENCY = "INR"
HEALTH_EDUCATION_CESS = D("0.04")

# Old regime slabs have not moved since FY 2014-15.
OLD_BRACKETS = validate_brackets(as_brackets([
    (D("0"),       D("250000"),  D("0")),
    (D("250000"),  D("500000"),  D("0.05")),
    (D("500000"),  D("1000000"), D("0.20")),
    (D("1000000"), None,         D("0.30")),
]))
OLD_STANDARD_DEDUCTION = D("50000")
OLD_REBATE = RebateRule(income_threshold=D("500000"), rebate_cap=D("12500"))

# ------------------------------ 2023 ---------------------------------
NEW_BRACKETS_2023 = validate_brackets(as_brackets([
    (D("0"),       D("300000"),  D("0")),
    (D("300000"),  D("600000"),  D("0.05")),
    (D("600000"),  D("900000"),  D("0.10")),
    (D("900000"),  D("1200000"), D("0.15")),
    (D("1200000"), D("1500000"), D("0.20")),
    (D("1500000"), None,         D("0.30")),
]))
NEW_STANDARD_DEDUCTION_2023 = D("50000")
NEW_REBATE_2023 = RebateRule(income_threshold=D("700000"), rebate_cap=D("25000"))

# ------------------------------ 2024 ---------------------------------
NEW_BRACKETS_2024 = validate_brackets(as_brackets([
    (D("0"),       D("300000"),  D("0")),
    (D("300000"),  D("700000"),  D("0.05")),
    (D("700000"),  D("1000000"), D("0.10")),
    (D("1000000"), D("1200000"), D("0.15")),
    (D("1200000"), D("1500000"), D("0.20")),
    (D("1500000"), None,         D("0.30")),
]))
NEW_STANDARD_DEDUCTION_2024 = D("75000")
NEW_REBATE_2024 = RebateRule(income_threshold=D("700000"), rebate_cap=D("25000"))

# ------------------------------ 2025 ---------------------------------
NEW_BRACKETS_2025 = validate_brackets(as_brackets([
    (D("0"),       D("400000"),  D("0")),
    (D("400000"),  D("800000"),  D("0.05")),
    (D("800000"),  D("1200000"), D("0.10")),
    (D("1200000"), D("1600000"), D("0.15")),
    (D("1600000"), D("2000000"), D("0.20")),
    (D("2000000"), D("2400000"), D("0.25")),
    (D("2400000"), None,         D("0.30")),
]))
NEW_STANDARD_DEDUCTION_2025 = D("75000")
NEW_REBATE_2025 = RebateRule(income_threshold=D("800000"), rebate_cap=D("60000"))


def _new(year: int, brackets, standard_deduction: D, rebate: RebateRule) -> RegimeConfig:
    return regime_config(
        "new",
        year,
        jurisdiction=JURISDICTION,
        label="India new regime (flat deduction)",
        currency=CURRENCY,
        brackets=brackets,
        standard_deduction=standard_deduction,
        allows_itemized=False,
        rebate=rebate,
        cess_rate=HEALTH_EDUCATION_CESS,
    )


def _old(year: int) -> RegimeConfig:
    return regime_config(
        "old",
        year,
        jurisdiction=JURISDICTION,
        label="India old regime (itemized deductions)",
        currency=CURRENCY,
        brackets=OLD_BRACKETS,
        standard_deduction=OLD_STANDARD_DEDUCTION,
        allows_itemized=True,
        rebate=OLD_REBATE,
        cess_rate=HEALTH_EDUCATION_CESS,
    )


CONFIGS: tuple[RegimeConfig, ...] = (
    _new(2023, NEW_BRACKETS_2023, NEW_STANDARD_DEDUCTION_2023, NEW_REBATE_2023),
    _new(2024, NEW_BRACKETS_2024, NEW_STANDARD_DEDUCTION_2024, NEW_REBATE_2024),
    _new(2025, NEW_BRACKETS_2025, NEW_STANDARD_DEDUCTION_2025, NEW_REBATE_2025),
    _old(2023),
    _old(2024),
    _old(2025),
)
