from __future__ import annotations

import logging
from typing import Any, Callable

from taxcalc.core.estimator import compute
from taxcalc.core.models import CalculationInput, CalculationResult
from taxcalc.core.regimes import RegimeTable

logger = logging.getLogger("taxcalc.session")

Listener = Callable[[CalculationResult], None]

_FIELDS = ("gross_income", "deductions", "regime", "tax_year")


class EstimatorSession:
    """Holds the fields a form is editing and the latest estimate for them.

    Every ``update`` recomputes when the coerced input changed and hands the new
    result to each listener. The last update always wins.
    """

    def __init__(self, table: RegimeTable | None = None, **fields: Any):
        self._table = table
        self._fields: dict[str, Any] = {name: None for name in _FIELDS}
        self._listeners: list[Listener] = []
        self._input: CalculationInput | None = None
        self.latest: CalculationResult | None = None
        if fields:
            self.update(**fields)

    @property
    def input(self) -> CalculationInput | None:
        return self._input

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        if self.latest is not None:
            listener(self.latest)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **fields: Any) -> CalculationResult:
        unknown = set(fields) - set(_FIELDS)
        if unknown:
            raise TypeError(f"Unknown estimator fields: {sorted(unknown)}")
        merged = {**self._fields, **fields}
        candidate = CalculationInput(**merged)
        self._fields = merged
        if self.latest is not None and candidate == self._input:
            return self.latest
        self._input = candidate
        self.latest = compute(candidate, table=self._table)
        logger.debug("Session recomputed: total_tax=%s", self.latest.total_tax)
        for listener in list(self._listeners):
            listener(self.latest)
        return self.latest


__all__ = ["EstimatorSession"]
