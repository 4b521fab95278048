from __future__ import annotations

from decimal import Decimal

from taxcalc.core.brackets import TaxBracket, as_brackets, validate_brackets
from taxcalc.core.regimes.base import RegimeConfig, regime_config

D = Decimal

JURISDICTION = "US"
CURRENCY = "USD"

FEDERAL_RATES = (D("0.10"), D("0.12"), D("0.22"), D("0.24"), D("0.32"), D("0.35"), D("0.37"))

FILING_STATUS_LABELS = {
    "single": "Single",
    "married_joint": "Married Filing Jointly",
    "married_separate": "Married Filing Separately",
    "head_of_household": "Head of Household",
}


def _from_thresholds(*thresholds: str) -> tuple[TaxBracket, ...]:
    bounds = [D("0"), *(D(t) for t in thresholds), None]
    return validate_brackets(
        as_brackets((bounds[i], bounds[i + 1], rate) for i, rate in enumerate(FEDERAL_RATES))
    )


# ------------------------------ 2023 ---------------------------------
BRACKETS_2023 = {
    "single": _from_thresholds("11000", "44725", "95375", "182100", "231250", "578125"),
    "married_joint": _from_thresholds("22000", "89450", "190750", "364200", "462500", "693750"),
    "married_separate": _from_thresholds("11000", "44725", "95375", "182100", "231250", "346875"),
    "head_of_household": _from_thresholds("15700", "59850", "95350", "182100", "231250", "578100"),
}
STANDARD_DEDUCTION_2023 = {
    "single": D("13850"),
    "married_joint": D("27700"),
    "married_separate": D("13850"),
    "head_of_household": D("20800"),
}

# ------------------------------ 2024 ---------------------------------
BRACKETS_2024 = {
    "single": _from_thresholds("11600", "47150", "100525", "191950", "243725", "609350"),
    "married_joint": _from_thresholds("23200", "94300", "201050", "383900", "487450", "731200"),
    "married_separate": _from_thresholds("11600", "47150", "100525", "191950", "243725", "365600"),
    "head_of_household": _from_thresholds("16550", "63100", "100500", "191950", "243700", "609350"),
}
STANDARD_DEDUCTION_2024 = {
    "single": D("14600"),
    "married_joint": D("29200"),
    "married_separate": D("14600"),
    "head_of_household": D("21900"),
}


def _configs_for_year(year: int, brackets: dict, deductions: dict) -> list[RegimeConfig]:
    return [
        regime_config(
            status,
            year,
            jurisdiction=JURISDICTION,
            label=f"US federal, {label}",
            currency=CURRENCY,
            brackets=brackets[status],
            standard_deduction=deductions[status],
            allows_itemized=True,
        )
        for status, label in FILING_STATUS_LABELS.items()
    ]


CONFIGS: tuple[RegimeConfig, ...] = (
    *_configs_for_year(2023, BRACKETS_2023, STANDARD_DEDUCTION_2023),
    *_configs_for_year(2024, BRACKETS_2024, STANDARD_DEDUCTION_2024),
)
