from __future__ import annotations

import hashlib
import logging
from collections import defaultdict
from functools import lru_cache
from typing import Iterable

from taxcalc.config import Settings, get_settings
from taxcalc.core.models import Resolution
from taxcalc.core.regimes import india, us
from taxcalc.core.regimes.base import (
    RebateRule,
    RegimeConfig,
    RegimeNotFoundError,
    RegimeTableError,
    normalize_regime,
    normalize_tax_year,
)
from taxcalc.core.regimes.loader import load_regime_configs

logger = logging.getLogger("taxcalc.regimes")

BUILTIN_CONFIGS: tuple[RegimeConfig, ...] = (*india.CONFIGS, *us.CONFIGS)


class RegimeTable:
    """Immutable lookup of regime configs keyed by ``(regime, tax_year)``.

    ``resolve`` never fails once the table validated: an exact match wins, then
    the nearest configured year for the same regime (ties go to the later year,
    an unreadable year picks the latest one), then the table default.
    """

    def __init__(self, configs: Iterable[RegimeConfig], default_regime: str, default_tax_year: str):
        self._configs: dict[tuple[str, str], RegimeConfig] = {}
        self._duplicates: list[tuple[str, str]] = []
        for config in configs:
            if config.key in self._configs:
                self._duplicates.append(config.key)
            self._configs[config.key] = config
        self.default_key = (
            normalize_regime(default_regime) or default_regime,
            normalize_tax_year(default_tax_year) or default_tax_year,
        )

    def __len__(self) -> int:
        return len(self._configs)

    def __contains__(self, key: object) -> bool:
        return key in self._configs

    @property
    def default(self) -> RegimeConfig:
        return self.get(*self.default_key)

    def configs(self) -> list[RegimeConfig]:
        return [self._configs[key] for key in sorted(self._configs)]

    def regimes(self) -> list[str]:
        return sorted({regime for regime, _ in self._configs})

    def years(self, regime: str) -> list[str]:
        key = normalize_regime(regime)
        return sorted(year for name, year in self._configs if name == key)

    def get(self, regime: str, tax_year: str | int) -> RegimeConfig:
        key = (normalize_regime(regime) or "", normalize_tax_year(tax_year) or "")
        try:
            return self._configs[key]
        except KeyError as exc:
            raise RegimeNotFoundError(f"No regime config registered for {key[0]!r} in {key[1]!r}") from exc

    def resolve(self, regime: str | None, tax_year: str | int | None) -> tuple[RegimeConfig, Resolution]:
        name = normalize_regime(regime) or self.default_key[0]
        year = normalize_tax_year(tax_year) if tax_year is not None else self.default_key[1]

        if year is not None and (name, year) in self._configs:
            return self._configs[(name, year)], "exact"

        candidates = self.years(name)
        if candidates:
            if year is None:
                chosen = candidates[-1]
            else:
                target = int(year)
                chosen = min(candidates, key=lambda c: (abs(int(c) - target), -int(c)))
            logger.info("No %s config for %r; using nearest year %s", name, tax_year, chosen)
            return self._configs[(name, chosen)], "nearest_year"

        logger.info(
            "Unknown regime %r for %r; using default %s/%s",
            regime,
            tax_year,
            *self.default_key,
        )
        return self.default, "default"

    def coverage_gaps(self) -> list[tuple[str, str, str]]:
        """Return ``(jurisdiction, regime, year)`` combinations missing a config."""
        regimes_by_jurisdiction: dict[str, set[str]] = defaultdict(set)
        years_by_jurisdiction: dict[str, set[str]] = defaultdict(set)
        for config in self._configs.values():
            regimes_by_jurisdiction[config.jurisdiction].add(config.regime)
            years_by_jurisdiction[config.jurisdiction].add(config.tax_year)
        gaps = []
        for jurisdiction in sorted(regimes_by_jurisdiction):
            for regime in sorted(regimes_by_jurisdiction[jurisdiction]):
                for year in sorted(years_by_jurisdiction[jurisdiction]):
                    if (regime, year) not in self._configs:
                        gaps.append((jurisdiction, regime, year))
        return gaps

    def problems(self) -> list[str]:
        issues: list[str] = []
        for config in self.configs():
            issues.extend(config.problems())
        for regime, year in self._duplicates:
            issues.append(f"{regime}/{year}: defined more than once")
        regime_owners: dict[str, set[str]] = defaultdict(set)
        for config in self._configs.values():
            regime_owners[config.regime].add(config.jurisdiction)
        for regime, owners in sorted(regime_owners.items()):
            if len(owners) > 1:
                issues.append(f"{regime}: claimed by several jurisdictions {sorted(owners)}")
        for jurisdiction, regime, year in self.coverage_gaps():
            issues.append(f"{regime}/{year}: missing config for {jurisdiction} tax year {year}")
        if self.default_key not in self._configs:
            issues.append(f"default config {self.default_key[0]}/{self.default_key[1]} is not defined")
        return issues

    def validate(self) -> "RegimeTable":
        issues = self.problems()
        if issues:
            raise RegimeTableError(issues)
        return self

    def digest(self) -> str:
        payload = "\n".join(repr(config) for config in self.configs())
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:12]


def build_regime_table(settings: Settings | None = None, path: str | None = None) -> RegimeTable:
    settings = settings or get_settings()
    source = path or settings.regime_table_path
    configs = load_regime_configs(source) if source else BUILTIN_CONFIGS
    table = RegimeTable(configs, settings.default_regime, settings.default_tax_year).validate()
    logger.debug(
        "Regime table ready: configs=%s default=%s/%s digest=%s",
        len(table),
        *table.default_key,
        table.digest(),
    )
    return table


@lru_cache(maxsize=1)
def get_regime_table() -> RegimeTable:
    return build_regime_table()


__all__ = [
    "BUILTIN_CONFIGS",
    "RebateRule",
    "RegimeConfig",
    "RegimeNotFoundError",
    "RegimeTable",
    "RegimeTableError",
    "build_regime_table",
    "get_regime_table",
    "normalize_regime",
    "normalize_tax_year",
]
