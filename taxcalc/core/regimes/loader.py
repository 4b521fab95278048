from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from taxcalc.core.brackets import TaxBracket
from taxcalc.core.regimes.base import (
    RebateRule,
    RegimeConfig,
    RegimeTableError,
    normalize_regime,
    normalize_tax_year,
)

logger = logging.getLogger("taxcalc.regimes")


class BracketRow(BaseModel):
    lower: Decimal = Field(..., ge=0)
    upper: Decimal | None = None
    rate: Decimal

    model_config = ConfigDict(extra="forbid")


class RebateRow(BaseModel):
    income_threshold: Decimal
    rebate_cap: Decimal

    model_config = ConfigDict(extra="forbid")


class RegimeRow(BaseModel):
    regime: str
    tax_year: str | int
    jurisdiction: str
    label: str | None = None
    currency: str
    standard_deduction: Decimal = Decimal("0")
    allows_itemized: bool = True
    cess_rate: Decimal = Decimal("0")
    rebate: RebateRow | None = None
    brackets: list[BracketRow]

    model_config = ConfigDict(extra="forbid")

    def to_config(self) -> RegimeConfig:
        regime = normalize_regime(self.regime) or self.regime
        tax_year = normalize_tax_year(self.tax_year) or str(self.tax_year)
        rebate = None
        if self.rebate is not None:
            rebate = RebateRule(self.rebate.income_threshold, self.rebate.rebate_cap)
        return RegimeConfig(
            regime=regime,
            tax_year=tax_year,
            jurisdiction=self.jurisdiction.upper(),
            label=self.label or f"{self.jurisdiction.upper()} {regime}",
            currency=self.currency.upper(),
            brackets=tuple(TaxBracket(row.lower, row.upper, row.rate) for row in self.brackets),
            standard_deduction=self.standard_deduction,
            allows_itemized=self.allows_itemized,
            rebate=rebate,
            cess_rate=self.cess_rate,
        )


class RegimeTableFile(BaseModel):
    regimes: list[RegimeRow]

    model_config = ConfigDict(extra="forbid")


def load_regime_configs(path: str | Path) -> tuple[RegimeConfig, ...]:
    """Read a JSON regime table. Structural problems raise ``RegimeTableError``."""
    source = Path(path)
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RegimeTableError([f"cannot read {source}: {exc}"]) from exc
    except json.JSONDecodeError as exc:
        raise RegimeTableError([f"{source} is not valid JSON: {exc}"]) from exc
    try:
        parsed = RegimeTableFile.model_validate(payload)
    except ValidationError as exc:
        problems = [
            f"{source}: {'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        raise RegimeTableError(problems) from exc
    configs = tuple(row.to_config() for row in parsed.regimes)
    logger.info("Loaded %s regime configs from %s", len(configs), source)
    return configs


__all__ = ["RegimeTableFile", "load_regime_configs"]
